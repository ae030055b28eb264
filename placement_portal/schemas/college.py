from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class CollegeCreate(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2)
    phone: str = Field(min_length=10)
    established_year: int = Field(ge=1800)

    @field_validator("established_year")
    @classmethod
    def not_in_future(cls, v):
        if v > datetime.utcnow().year:
            raise ValueError("Established year cannot be in the future")
        return v


class CollegeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, min_length=5)
    city: Optional[str] = Field(default=None, min_length=2)
    state: Optional[str] = Field(default=None, min_length=2)
    phone: Optional[str] = Field(default=None, min_length=10)
    established_year: Optional[int] = Field(default=None, ge=1800)
