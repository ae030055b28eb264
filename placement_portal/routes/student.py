# ========================================
# placement_portal/routes/student.py
# ========================================

import io
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import StreamingResponse
from gridfs.errors import NoFile
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from placement_portal.database import get_db, get_fs_bucket, get_store
from placement_portal.exceptions import ConflictError
from placement_portal.models.base import to_object_id
from placement_portal.schemas.application import ApplicationCreate
from placement_portal.schemas.common import serialize_document
from placement_portal.schemas.student import StudentProfileUpdate
from placement_portal.services.placement import apply_to_job, list_eligible_jobs
from placement_portal.services.ports import Notifier, PlacementStore
from placement_portal.utils.auth import get_current_user, student_required
from placement_portal.utils.email import get_notifier
from placement_portal.utils.file_upload import read_upload, store_resume, validate_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student", tags=["Student"])


# ✅ 1. GET MY PROFILE
@router.get("/profile")
async def get_profile(current_user: dict = Depends(student_required)):
    return {"student": serialize_document(current_user)}


# ✅ 2. UPDATE MY PROFILE
@router.put("/profile")
async def update_profile(
    profile_data: StudentProfileUpdate,
    current_user: dict = Depends(student_required)
):
    """Update own profile. Email, college and password are not editable here."""
    db = get_db()

    update_data = profile_data.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        return {"message": "No changes provided"}

    update_data["updated_at"] = datetime.utcnow()
    try:
        student = await db.students.find_one_and_update(
            {"_id": current_user["_id"]},
            {"$set": update_data},
            projection={"password": 0},
            return_document=ReturnDocument.AFTER
        )
    except DuplicateKeyError:
        raise ConflictError("Roll number already exists for this college")

    return {"message": "Profile updated successfully", "student": serialize_document(student)}


# ✅ 3. JOBS I AM ELIGIBLE FOR (best match first)
@router.get("/jobs")
async def get_eligible_jobs(
    current_user: dict = Depends(student_required),
    store: PlacementStore = Depends(get_store)
):
    ranked = await list_eligible_jobs(store, str(current_user["_id"]), datetime.utcnow())

    companies = {}
    jobs = []
    for job, score in ranked:
        if job.company_id not in companies:
            company = await store.get_company(job.company_id)
            companies[job.company_id] = (
                {"id": company.id, "name": company.name, "industry": company.industry, "city": company.city}
                if company else None
            )
        jobs.append({
            **job.model_dump(mode="json"),
            "company": companies[job.company_id],
            "match_score": score
        })

    return {"jobs": jobs}


# ✅ 4. APPLY FOR JOB
@router.post("/applications", status_code=201)
async def apply(
    application: ApplicationCreate,
    current_user: dict = Depends(student_required),
    store: PlacementStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier)
):
    """Submit an application. Eligibility and duplicates are checked on every call."""
    created = await apply_to_job(
        store,
        notifier,
        job_id=application.job_id,
        student_id=str(current_user["_id"]),
        cover_letter=application.cover_letter,
        now=datetime.utcnow()
    )

    return {
        "message": "Application submitted successfully",
        "application": created.model_dump(mode="json")
    }


# ✅ 5. MY APPLICATIONS
@router.get("/applications")
async def get_my_applications(current_user: dict = Depends(student_required)):
    db = get_db()

    applications = await db.applications.aggregate([
        {"$match": {"student_id": current_user["_id"]}},
        {"$lookup": {"from": "jobs", "localField": "job_id", "foreignField": "_id", "as": "job"}},
        {"$unwind": "$job"},
        {"$lookup": {"from": "companies", "localField": "job.company_id", "foreignField": "_id", "as": "company"}},
        {"$unwind": {"path": "$company", "preserveNullAndEmptyArrays": True}},
        {"$project": {
            "job_id": 1, "status": 1, "applied_at": 1, "status_updated_at": 1, "cover_letter": 1,
            "job.title": 1, "job.location": 1, "job.job_type": 1,
            "company.name": 1, "company.industry": 1
        }},
        {"$sort": {"applied_at": -1}}
    ]).to_list(None)

    return {"applications": serialize_document(applications)}


# ✅ 6. UPLOAD RESUME (PDF, stored in GridFS)
@router.post("/resume")
async def upload_resume(
    resume: UploadFile = File(...),
    current_user: dict = Depends(student_required)
):
    contents = await read_upload(resume)
    validate_resume(contents, resume.content_type)

    db = get_db()
    fs_bucket = get_fs_bucket()

    previous = current_user.get("resume_file_id")
    file_id = await store_resume(fs_bucket, current_user, resume.filename, contents)
    resume_url = f"/student/resume/{file_id}"

    await db.students.update_one(
        {"_id": current_user["_id"]},
        {"$set": {"resume_file_id": file_id, "resume_url": resume_url, "updated_at": datetime.utcnow()}}
    )

    if previous:
        try:
            await fs_bucket.delete(previous)
        except NoFile:
            logger.warning(f"Previous resume {previous} already gone")

    return {"message": "Resume uploaded successfully", "resume_url": resume_url}


# ✅ 7. DOWNLOAD RESUME
@router.get("/resume/{file_id}")
async def download_resume(file_id: str, current_user: dict = Depends(get_current_user)):
    """Students can fetch their own resume; companies, colleges and admins any resume."""
    oid = to_object_id(file_id)
    if oid is None:
        raise HTTPException(status_code=400, detail="Invalid resume ID")

    if current_user["role"] == "student" and current_user.get("resume_file_id") != oid:
        raise HTTPException(status_code=403, detail="Access denied")

    fs_bucket = get_fs_bucket()
    try:
        grid_out = await fs_bucket.open_download_stream(oid)
    except NoFile:
        raise HTTPException(status_code=404, detail="Resume not found")
    contents = await grid_out.read()

    return StreamingResponse(
        io.BytesIO(contents),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="resume-{file_id}.pdf"'}
    )
