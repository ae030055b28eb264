from typing import Optional
from .base import MongoBaseModel


class Company(MongoBaseModel):
    name: str
    email: str
    website: Optional[str] = None
    industry: str = ""
    size: str = "1-10"
    description: Optional[str] = None
    city: str = ""
    is_approved: bool = False
