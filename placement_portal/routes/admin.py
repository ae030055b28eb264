# ========================================
# placement_portal/routes/admin.py
# ========================================

import logging
from datetime import datetime, timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from placement_portal.database import get_db
from placement_portal.models.base import to_object_id
from placement_portal.schemas.college import CollegeCreate, CollegeUpdate
from placement_portal.schemas.common import serialize_document
from placement_portal.schemas.student import StudentCreate, StudentUpdate
from placement_portal.services.accounts import (
    create_student_account,
    delete_company_account,
    delete_student_account
)
from placement_portal.services.ports import Notifier
from placement_portal.utils.auth import admin_required
from placement_portal.utils.email import get_notifier
from placement_portal.utils.security import get_password_hash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _object_id(value: str, label: str):
    oid = to_object_id(value)
    if oid is None:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID")
    return oid


# ===========================
# COLLEGES
# ===========================

# ✅ 1. LIST COLLEGES
@router.get("/colleges")
async def list_colleges(current_user: dict = Depends(admin_required)):
    db = get_db()
    colleges = await db.colleges.find({}, {"password": 0}).sort("created_at", -1).to_list(None)
    for college in colleges:
        college["student_count"] = await db.students.count_documents({"college_id": college["_id"]})
    return {"colleges": serialize_document(colleges)}


# ✅ 2. CREATE COLLEGE
@router.post("/colleges", status_code=201)
async def create_college(
    college: CollegeCreate,
    current_user: dict = Depends(admin_required),
    notifier: Notifier = Depends(get_notifier)
):
    db = get_db()

    email = college.email.lower()
    if await db.colleges.find_one({"email": email}):
        raise HTTPException(status_code=400, detail="College with this email already exists")

    now = datetime.utcnow()
    document = college.model_dump()
    document.update({
        "email": email,
        "password": get_password_hash(college.password),
        "role": "college",
        "created_at": now,
        "updated_at": now
    })
    try:
        result = await db.colleges.insert_one(document)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="College with this email already exists")

    notifier.notify(email, "welcome", {"name": college.name, "role": "college"})
    document["_id"] = result.inserted_id

    return {"message": "College created successfully", "college": serialize_document(document)}


# ✅ 3. GET COLLEGE
@router.get("/colleges/{college_id}")
async def get_college(college_id: str, current_user: dict = Depends(admin_required)):
    db = get_db()
    college = await db.colleges.find_one({"_id": _object_id(college_id, "college")}, {"password": 0})
    if not college:
        raise HTTPException(status_code=404, detail="College not found")
    return {"college": serialize_document(college)}


# ✅ 4. UPDATE COLLEGE
@router.put("/colleges/{college_id}")
async def update_college(college_id: str, college_update: CollegeUpdate, current_user: dict = Depends(admin_required)):
    db = get_db()

    update_data = college_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No changes provided")
    if "email" in update_data:
        update_data["email"] = update_data["email"].lower()
    update_data["updated_at"] = datetime.utcnow()

    try:
        college = await db.colleges.find_one_and_update(
            {"_id": _object_id(college_id, "college")},
            {"$set": update_data},
            projection={"password": 0},
            return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="College with this email already exists")
    if not college:
        raise HTTPException(status_code=404, detail="College not found")

    return {"message": "College updated successfully", "college": serialize_document(college)}


# ✅ 5. DELETE COLLEGE (only when no students remain)
@router.delete("/colleges/{college_id}")
async def delete_college(college_id: str, current_user: dict = Depends(admin_required)):
    db = get_db()
    oid = _object_id(college_id, "college")

    enrolled = await db.students.count_documents({"college_id": oid})
    if enrolled:
        raise HTTPException(
            status_code=400,
            detail=f"College still has {enrolled} students. Remove them first."
        )

    result = await db.colleges.delete_one({"_id": oid})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="College not found")

    return {"message": "College deleted successfully"}


# ===========================
# COMPANIES
# ===========================

# ✅ 6. LIST COMPANIES
@router.get("/companies")
async def list_companies(
    filter: Optional[Literal["pending", "approved"]] = Query(None, description="pending or approved"),
    current_user: dict = Depends(admin_required)
):
    db = get_db()

    query = {}
    if filter == "pending":
        query["is_approved"] = False
    elif filter == "approved":
        query["is_approved"] = True

    companies = await db.companies.find(query, {"password": 0}).sort("created_at", -1).to_list(None)
    return {"companies": serialize_document(companies)}


# ✅ 7. APPROVE COMPANY
@router.patch("/companies/{company_id}/approve")
async def approve_company(company_id: str, current_user: dict = Depends(admin_required)):
    db = get_db()

    company = await db.companies.find_one_and_update(
        {"_id": _object_id(company_id, "company")},
        {"$set": {"is_approved": True, "updated_at": datetime.utcnow()}},
        projection={"password": 0},
        return_document=ReturnDocument.AFTER
    )
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")

    logger.info(f"Admin {current_user['_id']} approved company {company_id}")
    return {"message": "Company approved successfully", "company": serialize_document(company)}


# ✅ 8. DELETE COMPANY (jobs and applications too)
@router.delete("/companies/{company_id}")
async def delete_company(company_id: str, current_user: dict = Depends(admin_required)):
    db = get_db()
    if not await delete_company_account(db, _object_id(company_id, "company")):
        raise HTTPException(status_code=404, detail="Company not found")
    return {"message": "Company deleted successfully"}


# ===========================
# STUDENTS
# ===========================

# ✅ 9. LIST STUDENTS
@router.get("/students")
async def list_students(
    college_id: Optional[str] = Query(None, description="Filter by college"),
    current_user: dict = Depends(admin_required)
):
    db = get_db()

    match = {}
    if college_id:
        match["college_id"] = _object_id(college_id, "college")

    students = await db.students.aggregate([
        {"$match": match},
        {"$lookup": {"from": "colleges", "localField": "college_id", "foreignField": "_id", "as": "college"}},
        {"$unwind": {"path": "$college", "preserveNullAndEmptyArrays": True}},
        {"$project": {"password": 0, "college.password": 0, "college.address": 0, "college.phone": 0}},
        {"$sort": {"created_at": -1}}
    ]).to_list(None)

    return {"students": serialize_document(students)}


# ✅ 10. CREATE STUDENT
@router.post("/students", status_code=201)
async def create_student(
    student: StudentCreate,
    current_user: dict = Depends(admin_required),
    notifier: Notifier = Depends(get_notifier)
):
    db = get_db()
    document = await create_student_account(db, student)
    notifier.notify(document["email"], "welcome", {
        "name": f"{student.first_name} {student.last_name}",
        "role": "student"
    })
    return {"message": "Student created successfully", "student": serialize_document(document)}


# ✅ 11. GET STUDENT
@router.get("/students/{student_id}")
async def get_student(student_id: str, current_user: dict = Depends(admin_required)):
    db = get_db()
    student = await db.students.find_one({"_id": _object_id(student_id, "student")}, {"password": 0})
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    return {"student": serialize_document(student)}


# ✅ 12. UPDATE STUDENT
@router.put("/students/{student_id}")
async def update_student(student_id: str, student_update: StudentUpdate, current_user: dict = Depends(admin_required)):
    db = get_db()

    update_data = student_update.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No changes provided")
    if "college_id" in update_data:
        update_data["college_id"] = _object_id(update_data["college_id"], "college")
        if not await db.colleges.find_one({"_id": update_data["college_id"]}):
            raise HTTPException(status_code=404, detail="College not found")
    if "email" in update_data:
        update_data["email"] = update_data["email"].lower()
    update_data["updated_at"] = datetime.utcnow()

    try:
        student = await db.students.find_one_and_update(
            {"_id": _object_id(student_id, "student")},
            {"$set": update_data},
            projection={"password": 0},
            return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email or roll number already in use")
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    return {"message": "Student updated successfully", "student": serialize_document(student)}


# ✅ 13. DELETE STUDENT (and applications)
@router.delete("/students/{student_id}")
async def delete_student(student_id: str, current_user: dict = Depends(admin_required)):
    db = get_db()
    if not await delete_student_account(db, _object_id(student_id, "student")):
        raise HTTPException(status_code=404, detail="Student not found")
    return {"message": "Student deleted successfully"}


# ===========================
# ANALYTICS
# ===========================

# ✅ 14. PLATFORM ANALYTICS
@router.get("/analytics")
async def get_analytics(current_user: dict = Depends(admin_required)):
    db = get_db()

    total_students = await db.students.count_documents({})
    total_companies = await db.companies.count_documents({"is_approved": True})
    total_colleges = await db.colleges.count_documents({})
    total_jobs = await db.jobs.count_documents({})
    total_applications = await db.applications.count_documents({})
    total_placements = await db.applications.count_documents({"status": "hired"})
    pending_approvals = await db.companies.count_documents({"is_approved": False})

    placements_per_college = await db.applications.aggregate([
        {"$match": {"status": "hired"}},
        {"$lookup": {"from": "students", "localField": "student_id", "foreignField": "_id", "as": "student"}},
        {"$unwind": "$student"},
        {"$lookup": {"from": "colleges", "localField": "student.college_id", "foreignField": "_id", "as": "college"}},
        {"$unwind": "$college"},
        {"$group": {"_id": "$college._id", "college_name": {"$first": "$college.name"}, "placements": {"$sum": 1}}},
        {"$sort": {"placements": -1}}
    ]).to_list(None)

    status_distribution = await db.applications.aggregate([
        {"$group": {"_id": "$status", "count": {"$sum": 1}}}
    ]).to_list(None)

    stream_distribution = await db.students.aggregate([
        {"$group": {"_id": "$stream", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}}
    ]).to_list(None)

    top_companies = await db.jobs.aggregate([
        {"$lookup": {"from": "companies", "localField": "company_id", "foreignField": "_id", "as": "company"}},
        {"$unwind": "$company"},
        {"$group": {"_id": "$company._id", "company_name": {"$first": "$company.name"}, "job_count": {"$sum": 1}}},
        {"$sort": {"job_count": -1}},
        {"$limit": 5}
    ]).to_list(None)

    six_months_ago = datetime.utcnow() - timedelta(days=182)
    monthly_trend = await db.applications.aggregate([
        {"$match": {"applied_at": {"$gte": six_months_ago}}},
        {"$group": {
            "_id": {"year": {"$year": "$applied_at"}, "month": {"$month": "$applied_at"}},
            "count": {"$sum": 1}
        }},
        {"$sort": {"_id.year": 1, "_id.month": 1}}
    ]).to_list(None)

    return serialize_document({
        "total_students": total_students,
        "total_companies": total_companies,
        "total_colleges": total_colleges,
        "total_jobs": total_jobs,
        "total_applications": total_applications,
        "total_placements": total_placements,
        "pending_approvals": pending_approvals,
        "placements_per_college": placements_per_college,
        "application_status_distribution": {row["_id"]: row["count"] for row in status_distribution},
        "stream_distribution": stream_distribution,
        "top_companies_by_jobs": top_companies,
        "monthly_application_trend": [
            {"year": row["_id"]["year"], "month": row["_id"]["month"], "count": row["count"]}
            for row in monthly_trend
        ]
    })
