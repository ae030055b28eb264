"""
Unit tests for account creation and cascading deletes, using mocked Motor collections.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from placement_portal.exceptions import ConflictError, NotFoundError, ValidationError
from placement_portal.schemas.student import StudentCreate
from placement_portal.services.accounts import (
    create_student_account,
    delete_company_account,
    delete_student_account,
)


def make_student(college_id):
    return StudentCreate(
        email="Asha@Example.com",
        password="secret123",
        first_name="Asha",
        last_name="Rao",
        college_id=college_id,
        roll_number="CS001",
        stream="Computer Science",
        graduation_year=2026,
        cgpa=8.2,
        phone="9876543210",
    )


def make_db(college=None, existing_student=None):
    db = MagicMock()
    db.colleges.find_one = AsyncMock(return_value=college)
    db.students.find_one = AsyncMock(return_value=existing_student)
    db.students.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    return db


class TestCreateStudentAccount:

    def test_creates_verified_student(self):
        college_id = ObjectId()
        db = make_db(college={"_id": college_id})

        document = asyncio.run(create_student_account(db, make_student(str(college_id))))

        assert document["email"] == "asha@example.com"
        assert document["college_id"] == college_id
        assert document["is_email_verified"] is True
        assert document["password"] != "secret123"
        assert "_id" in document
        db.students.insert_one.assert_awaited_once()

    def test_invalid_college_id(self):
        with pytest.raises(ValidationError):
            asyncio.run(create_student_account(make_db(), make_student("not-an-id")))

    def test_missing_college(self):
        with pytest.raises(NotFoundError):
            asyncio.run(create_student_account(make_db(college=None), make_student(str(ObjectId()))))

    def test_duplicate_email(self):
        college_id = ObjectId()
        db = make_db(college={"_id": college_id}, existing_student={"_id": ObjectId()})

        with pytest.raises(ConflictError):
            asyncio.run(create_student_account(db, make_student(str(college_id))))

        db.students.insert_one.assert_not_awaited()

    def test_duplicate_key_on_insert(self):
        college_id = ObjectId()
        db = make_db(college={"_id": college_id})
        db.students.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000"))

        with pytest.raises(ConflictError):
            asyncio.run(create_student_account(db, make_student(str(college_id))))


class TestCascadingDeletes:

    def test_delete_student_removes_applications(self):
        student_oid = ObjectId()
        db = MagicMock()
        db.students.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        db.applications.delete_many = AsyncMock(return_value=MagicMock(deleted_count=3))

        assert asyncio.run(delete_student_account(db, student_oid)) is True
        db.applications.delete_many.assert_awaited_once_with({"student_id": student_oid})

    def test_delete_missing_student(self):
        db = MagicMock()
        db.students.delete_one = AsyncMock(return_value=MagicMock(deleted_count=0))
        db.applications.delete_many = AsyncMock()

        assert asyncio.run(delete_student_account(db, ObjectId())) is False
        db.applications.delete_many.assert_not_awaited()

    def test_delete_company_removes_jobs_and_applications(self):
        company_oid = ObjectId()
        job_ids = [ObjectId(), ObjectId()]
        db = MagicMock()
        db.companies.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        db.jobs.distinct = AsyncMock(return_value=job_ids)
        db.jobs.delete_many = AsyncMock()
        db.applications.delete_many = AsyncMock(return_value=MagicMock(deleted_count=5))

        assert asyncio.run(delete_company_account(db, company_oid)) is True
        db.applications.delete_many.assert_awaited_once_with({"job_id": {"$in": job_ids}})
        db.jobs.delete_many.assert_awaited_once_with({"company_id": company_oid})
