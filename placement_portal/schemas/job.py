from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional
from datetime import datetime

from bson import ObjectId

JobType = Literal["Full-time", "Part-time", "Internship", "Contract"]


def check_college_ids(values):
    # a malformed id must not shrink the list: empty means open to all colleges
    if values is not None:
        for value in values:
            if not ObjectId.is_valid(value):
                raise ValueError("Invalid college ID")
    return values


class SalaryRange(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)
    currency: str = "INR"

    @model_validator(mode="after")
    def check_range(self):
        if self.max < self.min:
            raise ValueError("Salary max must not be below min")
        return self


# 1. Input: What the company sends
class JobCreate(BaseModel):
    title: str = Field(min_length=2)
    description: str = Field(min_length=20)
    requirements: List[str] = []
    skills: List[str] = Field(min_length=1)
    location: str = Field(min_length=2)
    job_type: JobType
    salary: Optional[SalaryRange] = None
    allowed_colleges: List[str] = []
    allowed_streams: List[str] = Field(min_length=1)
    min_cgpa: float = Field(ge=0, le=10)
    application_deadline: datetime

    @field_validator("allowed_colleges")
    @classmethod
    def valid_college_ids(cls, v):
        return check_college_ids(v)


# 2. Input: Update existing job (omit a field to keep it; only salary may be cleared)
class JobUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = Field(default=None, min_length=20)
    requirements: Optional[List[str]] = None
    skills: Optional[List[str]] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=2)
    job_type: Optional[JobType] = None
    salary: Optional[SalaryRange] = None
    allowed_colleges: Optional[List[str]] = None
    allowed_streams: Optional[List[str]] = Field(default=None, min_length=1)
    min_cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    application_deadline: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator(
        "title", "description", "requirements", "skills", "location", "job_type",
        "allowed_colleges", "allowed_streams", "min_cgpa", "application_deadline", "is_active"
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("allowed_colleges")
    @classmethod
    def valid_college_ids(cls, v):
        return check_college_ids(v)
