# ========================================
# placement_portal/routes/college.py
# ========================================

import logging

from fastapi import APIRouter, Depends

from placement_portal.database import get_db
from placement_portal.schemas.common import serialize_document
from placement_portal.schemas.student import StudentCreate
from placement_portal.services.accounts import create_student_account
from placement_portal.services.ports import Notifier
from placement_portal.utils.auth import college_required
from placement_portal.utils.email import get_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/college", tags=["College"])


# ✅ 1. MY STUDENTS
@router.get("/students")
async def list_students(current_user: dict = Depends(college_required)):
    db = get_db()
    students = await db.students.find(
        {"college_id": current_user["_id"]},
        {"password": 0}
    ).sort("roll_number", 1).to_list(None)
    return {"students": serialize_document(students)}


# ✅ 2. ADD A STUDENT (always to this college)
@router.post("/students", status_code=201)
async def create_student(
    student: StudentCreate,
    current_user: dict = Depends(college_required),
    notifier: Notifier = Depends(get_notifier)
):
    db = get_db()
    student = student.model_copy(update={"college_id": str(current_user["_id"])})

    document = await create_student_account(db, student)
    notifier.notify(document["email"], "welcome", {
        "name": f"{student.first_name} {student.last_name}",
        "role": "student"
    })

    return {"message": "Student created successfully", "student": serialize_document(document)}


# ✅ 3. PLACEMENTS OF MY STUDENTS
@router.get("/placements")
async def list_placements(current_user: dict = Depends(college_required)):
    db = get_db()

    student_ids = await db.students.distinct("_id", {"college_id": current_user["_id"]})

    placements = await db.applications.aggregate([
        {"$match": {"student_id": {"$in": student_ids}, "status": "hired"}},
        {"$lookup": {"from": "students", "localField": "student_id", "foreignField": "_id", "as": "student"}},
        {"$unwind": "$student"},
        {"$lookup": {"from": "jobs", "localField": "job_id", "foreignField": "_id", "as": "job"}},
        {"$unwind": "$job"},
        {"$lookup": {"from": "companies", "localField": "job.company_id", "foreignField": "_id", "as": "company"}},
        {"$unwind": {"path": "$company", "preserveNullAndEmptyArrays": True}},
        {"$project": {
            "_id": 1,
            "student_id": 1,
            "student_name": {"$concat": ["$student.first_name", " ", "$student.last_name"]},
            "student_email": "$student.email",
            "roll_number": "$student.roll_number",
            "stream": "$student.stream",
            "job_title": "$job.title",
            "company_name": "$company.name",
            "hired_at": "$status_updated_at"
        }},
        {"$sort": {"hired_at": -1}}
    ]).to_list(None)

    return {"placements": serialize_document(placements), "total": len(placements)}
