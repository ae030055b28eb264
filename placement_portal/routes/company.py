# ========================================
# placement_portal/routes/company.py
# ========================================

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo import ReturnDocument

from placement_portal.database import get_db, get_store
from placement_portal.models.application import APPLICATION_STATUSES
from placement_portal.models.base import as_utc, to_object_id, to_object_ids
from placement_portal.schemas.application import ApplicationStatusUpdate
from placement_portal.schemas.common import serialize_document
from placement_portal.schemas.job import JobCreate, JobUpdate
from placement_portal.services.placement import change_application_status, post_job
from placement_portal.services.ports import Notifier, PlacementStore
from placement_portal.utils.auth import company_required
from placement_portal.utils.email import get_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company", tags=["Company"])


def _job_object_id(job_id: str):
    oid = to_object_id(job_id)
    if oid is None:
        raise HTTPException(status_code=400, detail="Invalid job ID")
    return oid


# ===========================
# JOBS
# ===========================

# ✅ 1. LIST MY JOBS
@router.get("/jobs")
async def list_my_jobs(current_user: dict = Depends(company_required)):
    db = get_db()

    jobs = await db.jobs.find({"company_id": current_user["_id"]}).sort("created_at", -1).to_list(None)

    for job in jobs:
        job["application_count"] = await db.applications.count_documents({"job_id": job["_id"]})

    return {"jobs": serialize_document(jobs)}


# ✅ 2. POST A JOB (notifies matching students)
@router.post("/jobs", status_code=201)
async def create_job(
    job: JobCreate,
    current_user: dict = Depends(company_required),
    store: PlacementStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier)
):
    created, notified = await post_job(
        store,
        notifier,
        company_id=str(current_user["_id"]),
        job_data=job.model_dump(),
        now=datetime.utcnow()
    )

    return {
        "message": "Job created successfully",
        "job": created.model_dump(mode="json"),
        "notified_students": notified
    }


# ✅ 3. GET ONE OF MY JOBS
@router.get("/jobs/{job_id}")
async def get_job(job_id: str, current_user: dict = Depends(company_required)):
    db = get_db()

    job = await db.jobs.find_one({"_id": _job_object_id(job_id), "company_id": current_user["_id"]})
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    job["application_count"] = await db.applications.count_documents({"job_id": job["_id"]})
    return {"job": serialize_document(job)}


# ✅ 4. UPDATE A JOB (partial; PUT kept for older clients)
@router.api_route("/jobs/{job_id}", methods=["PATCH", "PUT"])
async def update_job(job_id: str, job_update: JobUpdate, current_user: dict = Depends(company_required)):
    db = get_db()

    update_data = job_update.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No changes provided")

    if "allowed_colleges" in update_data:
        update_data["allowed_colleges"] = to_object_ids(update_data["allowed_colleges"])
    if update_data.get("application_deadline"):
        update_data["application_deadline"] = as_utc(update_data["application_deadline"])
    update_data["updated_at"] = datetime.utcnow()

    job = await db.jobs.find_one_and_update(
        {"_id": _job_object_id(job_id), "company_id": current_user["_id"]},
        {"$set": update_data},
        return_document=ReturnDocument.AFTER
    )
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return {"message": "Job updated successfully", "job": serialize_document(job)}


# ✅ 5. DELETE A JOB (and its applications)
@router.delete("/jobs/{job_id}")
async def delete_job(job_id: str, current_user: dict = Depends(company_required)):
    db = get_db()

    job = await db.jobs.find_one_and_delete({"_id": _job_object_id(job_id), "company_id": current_user["_id"]})
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    result = await db.applications.delete_many({"job_id": job["_id"]})
    logger.info(f"Deleted job {job_id} and {result.deleted_count} applications")

    return {"message": "Job deleted successfully", "deleted_applications": result.deleted_count}


# ===========================
# APPLICATIONS
# ===========================

# ✅ 6. APPLICATIONS TO MY JOBS
@router.get("/applications")
async def list_applications(
    job_id: Optional[str] = Query(None, description="Filter by specific job"),
    status: Optional[str] = Query(None, description="Filter by status"),
    current_user: dict = Depends(company_required)
):
    db = get_db()

    job_ids = await db.jobs.distinct("_id", {"company_id": current_user["_id"]})
    match = {"job_id": {"$in": job_ids}}

    if job_id:
        oid = _job_object_id(job_id)
        if oid not in job_ids:
            raise HTTPException(status_code=403, detail="Not authorized to view this job's applications")
        match["job_id"] = oid

    if status:
        if status not in APPLICATION_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
        match["status"] = status

    applications = await db.applications.aggregate([
        {"$match": match},
        {"$lookup": {"from": "students", "localField": "student_id", "foreignField": "_id", "as": "student"}},
        {"$unwind": "$student"},
        {"$lookup": {"from": "jobs", "localField": "job_id", "foreignField": "_id", "as": "job"}},
        {"$unwind": "$job"},
        {"$project": {
            "job_id": 1, "student_id": 1, "status": 1, "applied_at": 1,
            "status_updated_at": 1, "cover_letter": 1,
            "job.title": 1,
            "student.first_name": 1, "student.last_name": 1, "student.email": 1,
            "student.phone": 1, "student.cgpa": 1, "student.stream": 1,
            "student.skills": 1, "student.resume_url": 1
        }},
        {"$sort": {"applied_at": -1}}
    ]).to_list(None)

    return {"applications": serialize_document(applications)}


# ✅ 7. CHANGE APPLICATION STATUS
@router.patch("/applications/{application_id}/status")
async def update_application_status(
    application_id: str,
    status_update: ApplicationStatusUpdate,
    current_user: dict = Depends(company_required),
    store: PlacementStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier)
):
    application = await change_application_status(
        store,
        notifier,
        application_id=application_id,
        new_status=status_update.status,
        company_id=str(current_user["_id"]),
        now=datetime.utcnow()
    )

    return {
        "message": "Application status updated successfully",
        "application": application.model_dump(mode="json")
    }
