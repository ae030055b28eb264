"""
Unit tests for request schemas and document serialization.
"""

from datetime import datetime, timedelta

import pytest
from bson import ObjectId
from pydantic import ValidationError

from placement_portal.schemas.auth import CompanySignUp
from placement_portal.schemas.college import CollegeCreate
from placement_portal.schemas.common import serialize_document
from placement_portal.schemas.job import JobCreate, SalaryRange
from placement_portal.schemas.student import StudentCreate

COLLEGE = {
    "name": "MIT Engineering College",
    "email": "mit@example.com",
    "password": "secret123",
    "address": "123 College Street",
    "city": "Chennai",
    "state": "Tamil Nadu",
    "phone": "9876543210",
    "established_year": 1949,
}


def test_serialize_document():
    oid = ObjectId()
    college_oid = ObjectId()
    stamp = datetime(2026, 3, 1, 12, 0)

    result = serialize_document([{
        "_id": oid,
        "password": "hash",
        "college": {"_id": college_oid, "name": "MIT"},
        "skills": ["Python"],
        "created_at": stamp,
    }])

    assert result == [{
        "id": str(oid),
        "college": {"id": str(college_oid), "name": "MIT"},
        "skills": ["Python"],
        "created_at": "2026-03-01T12:00:00",
    }]


def test_salary_max_below_min_rejected():
    with pytest.raises(ValidationError):
        SalaryRange(min=500000, max=300000)


def test_job_requires_skills():
    with pytest.raises(ValidationError):
        JobCreate(
            title="Backend Engineer",
            description="Build APIs for the placement portal",
            skills=[],
            location="Chennai",
            job_type="Full-time",
            allowed_streams=["Computer Science"],
            min_cgpa=7,
            application_deadline=datetime.utcnow() + timedelta(days=3),
        )


def test_student_cgpa_bounds():
    data = {
        "email": "asha@example.com",
        "password": "secret123",
        "first_name": "Asha",
        "last_name": "Rao",
        "college_id": str(ObjectId()),
        "roll_number": "CS001",
        "stream": "Computer Science",
        "graduation_year": 2026,
        "cgpa": 10.5,
        "phone": "9876543210",
    }
    with pytest.raises(ValidationError):
        StudentCreate(**data)

    data["cgpa"] = 10
    assert StudentCreate(**data).cgpa == 10


def test_college_year_cannot_be_in_future():
    CollegeCreate(**COLLEGE)
    with pytest.raises(ValidationError):
        CollegeCreate(**{**COLLEGE, "established_year": datetime.utcnow().year + 1})


def test_company_website_must_be_url():
    data = {
        "name": "TechCorp",
        "email": "hr@techcorp.com",
        "password": "secret123",
        "industry": "Information Technology",
        "size": "51-200",
        "address": "42 Tech Park",
        "city": "Chennai",
        "state": "Tamil Nadu",
        "phone": "9876543210",
    }
    assert CompanySignUp(**data, website="").website is None
    with pytest.raises(ValidationError):
        CompanySignUp(**data, website="techcorp.com")
