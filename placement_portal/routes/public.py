# ========================================
# placement_portal/routes/public.py
# ========================================

from datetime import datetime

from fastapi import APIRouter

from placement_portal.database import get_db
from placement_portal.schemas.common import serialize_document

router = APIRouter(tags=["Public"])


# ✅ 1. OPEN JOBS (no sign in)
@router.get("/jobs/public")
async def list_public_jobs():
    db = get_db()

    jobs = await db.jobs.aggregate([
        {"$match": {"is_active": True, "application_deadline": {"$gte": datetime.utcnow()}}},
        {"$lookup": {"from": "companies", "localField": "company_id", "foreignField": "_id", "as": "company"}},
        {"$unwind": {"path": "$company", "preserveNullAndEmptyArrays": True}},
        {"$project": {
            "title": 1, "description": 1, "skills": 1, "location": 1, "job_type": 1,
            "salary": 1, "allowed_streams": 1, "min_cgpa": 1, "application_deadline": 1,
            "created_at": 1,
            "company._id": 1, "company.name": 1, "company.industry": 1,
            "company.city": 1, "company.website": 1
        }},
        {"$sort": {"created_at": -1}}
    ]).to_list(None)

    return {"jobs": serialize_document(jobs)}


# ✅ 2. COLLEGES (for the signup form)
@router.get("/colleges")
async def list_colleges():
    db = get_db()
    colleges = await db.colleges.find({}, {"name": 1, "city": 1, "state": 1}).sort("name", 1).to_list(None)
    return {"colleges": serialize_document(colleges)}
