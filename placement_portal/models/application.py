from typing import Literal, Optional
from datetime import datetime
from .base import MongoBaseModel, PyObjectId

APPLICATION_STATUSES = ("applied", "shortlisted", "rejected", "hired")


class Application(MongoBaseModel):
    job_id: PyObjectId
    student_id: PyObjectId
    status: Literal["applied", "shortlisted", "rejected", "hired"] = "applied"
    applied_at: datetime
    status_updated_at: datetime
    cover_letter: Optional[str] = None
