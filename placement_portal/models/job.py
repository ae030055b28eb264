from typing import List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, field_validator
from .base import MongoBaseModel, PyObjectId, as_utc


class Salary(BaseModel):
    min: float
    max: float
    currency: str = "INR"


class Job(MongoBaseModel):
    company_id: PyObjectId
    title: str
    description: str = ""
    requirements: List[str] = []
    skills: List[str] = []
    location: str = ""
    job_type: Literal["Full-time", "Part-time", "Internship", "Contract"] = "Full-time"
    salary: Optional[Salary] = None
    allowed_colleges: List[PyObjectId] = []
    allowed_streams: List[str] = []
    min_cgpa: float = 0
    application_deadline: datetime
    is_active: bool = True
    created_at: Optional[datetime] = None

    @field_validator("application_deadline")
    @classmethod
    def normalize_deadline(cls, v):
        return as_utc(v)
