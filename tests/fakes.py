"""
In-memory stand-ins for the PlacementStore and Notifier ports.
"""

from datetime import datetime, timedelta

from bson import ObjectId

from placement_portal.exceptions import ConflictError, NotFoundError
from placement_portal.models.application import Application
from placement_portal.models.company import Company
from placement_portal.models.job import Job
from placement_portal.models.student import Student
from placement_portal.services.ports import Notifier, PlacementStore

NOW = datetime(2026, 3, 1, 12, 0, 0)


def new_id():
    return str(ObjectId())


class InMemoryPlacementStore(PlacementStore):

    def __init__(self):
        self.jobs = {}
        self.students = {}
        self.companies = {}
        self.applications = {}

    # helpers for building fixtures

    def add_company(self, **fields):
        data = {"name": "TechCorp", "email": "hr@techcorp.com", "is_approved": True}
        data.update(fields)
        company = Company(id=new_id(), **data)
        self.companies[company.id] = company
        return company

    def add_student(self, **fields):
        data = {
            "email": "asha@example.com",
            "first_name": "Asha",
            "last_name": "Rao",
            "college_id": new_id(),
            "stream": "Computer Science",
            "cgpa": 7.0,
            "skills": ["Python", "React"],
        }
        data.update(fields)
        student = Student(id=new_id(), **data)
        self.students[student.id] = student
        return student

    def add_job(self, company_id, **fields):
        data = {
            "company_id": company_id,
            "title": "Backend Engineer",
            "skills": ["Python", "MongoDB"],
            "location": "Chennai",
            "allowed_streams": ["Computer Science"],
            "min_cgpa": 7.0,
            "application_deadline": NOW + timedelta(days=7),
            "created_at": NOW,
        }
        data.update(fields)
        job = Job(id=new_id(), **data)
        self.jobs[job.id] = job
        return job

    # PlacementStore

    async def get_job(self, job_id):
        return self.jobs.get(str(job_id))

    async def get_student(self, student_id):
        return self.students.get(str(student_id))

    async def get_company(self, company_id):
        return self.companies.get(str(company_id))

    async def get_application(self, application_id):
        return self.applications.get(str(application_id))

    async def find_application(self, job_id, student_id):
        for application in self.applications.values():
            if application.job_id == str(job_id) and application.student_id == str(student_id):
                return application
        return None

    async def insert_application(self, job_id, student_id, cover_letter, now):
        if await self.find_application(job_id, student_id) is not None:
            raise ConflictError("You have already applied for this job")
        application = Application(
            id=new_id(),
            job_id=job_id,
            student_id=student_id,
            cover_letter=cover_letter,
            applied_at=now,
            status_updated_at=now,
        )
        self.applications[application.id] = application
        return application

    async def set_application_status(self, application_id, status, now):
        application = self.applications.get(str(application_id))
        if application is None:
            raise NotFoundError("Application not found")
        updated = application.model_copy(update={"status": status, "status_updated_at": now})
        self.applications[updated.id] = updated
        return updated

    async def insert_job(self, company_id, job_data, now):
        job = Job(id=new_id(), company_id=company_id, created_at=now, **job_data)
        self.jobs[job.id] = job
        return job

    async def find_notification_candidates(self, job):
        return [
            s for s in self.students.values()
            if s.stream in job.allowed_streams
            and s.cgpa >= job.min_cgpa
            and (not job.allowed_colleges or s.college_id in job.allowed_colleges)
        ]

    async def list_open_jobs(self, now):
        open_jobs = [j for j in self.jobs.values() if j.is_active and j.application_deadline >= now]
        return sorted(open_jobs, key=lambda j: j.created_at, reverse=True)


class RecordingNotifier(Notifier):

    def __init__(self):
        self.sent = []

    def notify(self, recipient, template_kind, template_data):
        self.sent.append((recipient, template_kind, template_data))

    def kinds(self):
        return [kind for _, kind, _ in self.sent]
