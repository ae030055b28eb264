from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional

Stream = Literal[
    "Computer Science",
    "Information Technology",
    "Electronics",
    "Mechanical",
    "Civil",
    "Electrical",
    "Chemical",
    "Biotechnology",
    "Other",
]


# 1. Input: Admin/college creates a student
class StudentCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=2)
    last_name: str = Field(min_length=2)
    college_id: str = Field(min_length=1)
    roll_number: str = Field(min_length=1)
    stream: Stream
    graduation_year: int = Field(ge=2020, le=2030)
    cgpa: float = Field(ge=0, le=10)
    phone: str = Field(min_length=10)
    skills: List[str] = []


# 2. Input: Admin edits a student (password untouched)
class StudentUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, min_length=2)
    last_name: Optional[str] = Field(default=None, min_length=2)
    college_id: Optional[str] = None
    roll_number: Optional[str] = None
    stream: Optional[Stream] = None
    graduation_year: Optional[int] = Field(default=None, ge=2020, le=2030)
    cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    phone: Optional[str] = Field(default=None, min_length=10)
    skills: Optional[List[str]] = None


# 3. Input: Student edits own profile (no email, college or password)
class StudentProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=2)
    last_name: Optional[str] = Field(default=None, min_length=2)
    roll_number: Optional[str] = None
    stream: Optional[Stream] = None
    graduation_year: Optional[int] = Field(default=None, ge=2020, le=2030)
    cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    phone: Optional[str] = Field(default=None, min_length=10)
    skills: Optional[List[str]] = None
