from pydantic import BaseModel, Field
from typing import Literal, Optional


# 1. Input: Create Application
class ApplicationCreate(BaseModel):
    job_id: str = Field(min_length=1)
    cover_letter: Optional[str] = None


# 2. Input: Update Status
class ApplicationStatusUpdate(BaseModel):
    status: Literal["applied", "shortlisted", "rejected", "hired"]
