from typing import List, Optional
from datetime import datetime
from .base import MongoBaseModel, PyObjectId


class Student(MongoBaseModel):
    email: str
    first_name: str = ""
    last_name: str = ""
    college_id: PyObjectId
    roll_number: str = ""
    stream: str
    graduation_year: Optional[int] = None
    cgpa: float
    phone: str = ""
    skills: List[str] = []
    resume_url: Optional[str] = None
    is_email_verified: bool = False
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
