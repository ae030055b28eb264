import logging
from datetime import datetime

from pymongo.errors import DuplicateKeyError

from placement_portal.exceptions import ConflictError, NotFoundError, ValidationError
from placement_portal.models.base import to_object_id
from placement_portal.utils.security import get_password_hash

logger = logging.getLogger(__name__)


async def create_student_account(db, student, verified: bool = True) -> dict:
    """Insert a student created by an admin or college; returns the stored document."""
    college_oid = to_object_id(student.college_id)
    if college_oid is None:
        raise ValidationError("Invalid college ID")
    if not await db.colleges.find_one({"_id": college_oid}):
        raise NotFoundError("College not found")

    email = student.email.lower()
    if await db.students.find_one({"email": email}):
        raise ConflictError("Student with this email already exists")
    if await db.students.find_one({"college_id": college_oid, "roll_number": student.roll_number}):
        raise ConflictError("Roll number already exists for this college")

    now = datetime.utcnow()
    document = student.model_dump()
    document.update({
        "email": email,
        "password": get_password_hash(student.password),
        "college_id": college_oid,
        "is_email_verified": verified,
        "role": "student",
        "created_at": now,
        "updated_at": now
    })

    try:
        result = await db.students.insert_one(document)
    except DuplicateKeyError:
        raise ConflictError("Student with this email or roll number already exists")

    document["_id"] = result.inserted_id
    logger.info(f"Created student {result.inserted_id} for college {college_oid}")
    return document


async def delete_student_account(db, student_oid) -> bool:
    """Delete a student and cascade to their applications."""
    result = await db.students.delete_one({"_id": student_oid})
    if result.deleted_count == 0:
        return False
    applications = await db.applications.delete_many({"student_id": student_oid})
    logger.info(f"Deleted student {student_oid} and {applications.deleted_count} applications")
    return True


async def delete_company_account(db, company_oid) -> bool:
    """Delete a company with its jobs and the applications to them."""
    result = await db.companies.delete_one({"_id": company_oid})
    if result.deleted_count == 0:
        return False
    job_ids = await db.jobs.distinct("_id", {"company_id": company_oid})
    applications = await db.applications.delete_many({"job_id": {"$in": job_ids}})
    await db.jobs.delete_many({"company_id": company_oid})
    logger.info(
        f"Deleted company {company_oid}, {len(job_ids)} jobs and {applications.deleted_count} applications"
    )
    return True
