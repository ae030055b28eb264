import logging
from datetime import datetime
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from placement_portal.exceptions import ConflictError, NotFoundError
from placement_portal.models.application import Application
from placement_portal.models.base import as_utc, to_object_id, to_object_ids
from placement_portal.models.company import Company
from placement_portal.models.job import Job
from placement_portal.models.student import Student
from placement_portal.services.ports import PlacementStore

logger = logging.getLogger(__name__)


class MongoPlacementStore(PlacementStore):
    """PlacementStore backed by a Motor database handle."""

    def __init__(self, db):
        self.db = db

    async def _find_by_id(self, collection, document_id, model):
        oid = to_object_id(document_id)
        if oid is None:
            return None
        document = await collection.find_one({"_id": oid}, {"password": 0})
        return model.from_mongo(document)

    async def get_job(self, job_id):
        return await self._find_by_id(self.db.jobs, job_id, Job)

    async def get_student(self, student_id):
        return await self._find_by_id(self.db.students, student_id, Student)

    async def get_company(self, company_id):
        return await self._find_by_id(self.db.companies, company_id, Company)

    async def get_application(self, application_id):
        return await self._find_by_id(self.db.applications, application_id, Application)

    async def find_application(self, job_id, student_id) -> Optional[Application]:
        document = await self.db.applications.find_one({
            "job_id": to_object_id(job_id),
            "student_id": to_object_id(student_id)
        })
        return Application.from_mongo(document)

    async def insert_application(self, job_id, student_id, cover_letter, now: datetime) -> Application:
        document = {
            "job_id": to_object_id(job_id),
            "student_id": to_object_id(student_id),
            "status": "applied",
            "cover_letter": cover_letter,
            "applied_at": now,
            "status_updated_at": now,
            "created_at": now,
            "updated_at": now
        }
        try:
            result = await self.db.applications.insert_one(document)
        except DuplicateKeyError:
            raise ConflictError("You have already applied for this job")

        document["_id"] = result.inserted_id
        return Application.from_mongo(document)

    async def set_application_status(self, application_id, status, now: datetime) -> Application:
        document = await self.db.applications.find_one_and_update(
            {"_id": to_object_id(application_id)},
            {"$set": {"status": status, "status_updated_at": now, "updated_at": now}},
            return_document=ReturnDocument.AFTER
        )
        if document is None:
            raise NotFoundError("Application not found")
        return Application.from_mongo(document)

    async def insert_job(self, company_id, job_data: dict, now: datetime) -> Job:
        document = dict(job_data)
        document["company_id"] = to_object_id(company_id)
        document["allowed_colleges"] = to_object_ids(document.get("allowed_colleges") or [])
        document["application_deadline"] = as_utc(document["application_deadline"])
        document.setdefault("is_active", True)
        document["created_at"] = now
        document["updated_at"] = now

        result = await self.db.jobs.insert_one(document)
        document["_id"] = result.inserted_id
        return Job.from_mongo(document)

    async def find_notification_candidates(self, job: Job) -> List[Student]:
        query = {
            "stream": {"$in": job.allowed_streams},
            "cgpa": {"$gte": job.min_cgpa}
        }
        if job.allowed_colleges:
            query["college_id"] = {"$in": [to_object_id(c) for c in job.allowed_colleges]}

        documents = await self.db.students.find(query, {"password": 0}).to_list(None)
        return [Student.from_mongo(d) for d in documents]

    async def list_open_jobs(self, now: datetime) -> List[Job]:
        documents = await self.db.jobs.find({
            "is_active": True,
            "application_deadline": {"$gte": now}
        }).sort("created_at", -1).to_list(None)
        return [Job.from_mongo(d) for d in documents]
