from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Literal, Optional

from placement_portal.schemas.student import StudentCreate

Role = Literal["admin", "college", "company", "student"]


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    role: str
    user_id: str


class CompanySignUp(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)
    website: Optional[str] = None
    industry: str = Field(min_length=2)
    size: Literal["1-10", "11-50", "51-200", "201-500", "501-1000", "1000+"]
    description: Optional[str] = None
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    state: str = Field(min_length=2)
    phone: str = Field(min_length=10)

    @field_validator("website")
    @classmethod
    def validate_website(cls, v):
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Invalid URL")
        return v or None


class StudentSignUp(StudentCreate):
    pass


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr
    role: Role


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=6)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)
