"""
Placement operations: applying, changing application status, posting jobs
and building a student's job feed.

Each operation receives its store and notifier explicitly. Notifications are
dispatched after the write has succeeded and never affect the result.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from placement_portal.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from placement_portal.models.application import Application
from placement_portal.models.job import Job
from placement_portal.services.eligibility import ensure_eligible, is_eligible
from placement_portal.services.matching import qualifies_for_notification, rank_jobs
from placement_portal.services.ports import Notifier, PlacementStore
from placement_portal.services.status import strict_transitions_enabled, validate_transition

logger = logging.getLogger(__name__)


async def apply_to_job(
    store: PlacementStore,
    notifier: Notifier,
    job_id: str,
    student_id: str,
    cover_letter: Optional[str],
    now: datetime,
) -> Application:
    """Create an application after re-checking eligibility and uniqueness.

    Raises NotFoundError, EligibilityError or ConflictError. The unique
    (job, student) index is the final guard against concurrent applies.
    """
    student = await store.get_student(student_id)
    if student is None:
        raise NotFoundError("Student not found")

    job = await store.get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")

    ensure_eligible(job, student, now)

    if await store.find_application(job_id, student_id) is not None:
        raise ConflictError("You have already applied for this job")

    application = await store.insert_application(job_id, student_id, cover_letter, now)
    logger.info(f"Student {student_id} applied to job {job_id} ({application.id})")

    company = await store.get_company(job.company_id)
    if company is not None:
        notifier.notify(company.email, "new_application", {
            "company_name": company.name,
            "student_name": student.full_name,
            "job_title": job.title
        })

    return application


async def change_application_status(
    store: PlacementStore,
    notifier: Notifier,
    application_id: str,
    new_status: str,
    company_id: str,
    now: datetime,
    strict: Optional[bool] = None,
) -> Application:
    """Overwrite an application's status on behalf of the owning company.

    Any status may replace any other unless strict transitions are on.
    Every write stamps status_updated_at and notifies the student.
    """
    application = await store.get_application(application_id)
    if application is None:
        raise NotFoundError("Application not found")

    job = await store.get_job(application.job_id)
    if job is None:
        raise NotFoundError("Job not found")

    if str(job.company_id) != str(company_id):
        raise PermissionDeniedError("You can only update applications for your own jobs")

    if strict is None:
        strict = strict_transitions_enabled()
    validate_transition(application.status, new_status, strict=strict)

    old_status = application.status
    updated = await store.set_application_status(application_id, new_status, now)
    logger.info(f"Application {application_id} status {old_status} -> {new_status}")

    student = await store.get_student(application.student_id)
    if student is not None:
        company = await store.get_company(company_id)
        notifier.notify(student.email, "application_status_change", {
            "student_name": student.full_name,
            "job_title": job.title,
            "company_name": company.name if company else "Company",
            "status": new_status
        })

    return updated


async def post_job(
    store: PlacementStore,
    notifier: Notifier,
    company_id: str,
    job_data: dict,
    now: datetime,
) -> Tuple[Job, int]:
    """Store a job for an approved company and email the students it suits.

    Returns the created job and the number of students notified.
    """
    company = await store.get_company(company_id)
    if company is None:
        raise NotFoundError("Company not found")
    if not company.is_approved:
        raise PermissionDeniedError("Your company is not yet approved by admin")

    if not job_data.get("skills"):
        raise ValidationError("At least one skill is required")

    job = await store.insert_job(company_id, job_data, now)
    logger.info(f"Company {company_id} posted job {job.id} '{job.title}'")

    candidates = await store.find_notification_candidates(job)
    notified = 0
    for student in candidates:
        if not qualifies_for_notification(job.skills, student.skills):
            continue
        notifier.notify(student.email, "job_posted", {
            "student_name": student.full_name,
            "job_title": job.title,
            "company_name": company.name,
            "location": job.location
        })
        notified += 1

    logger.info(f"Job {job.id}: notified {notified} of {len(candidates)} candidate students")
    return job, notified


async def list_eligible_jobs(store: PlacementStore, student_id: str, now: datetime) -> List[Tuple[Job, int]]:
    """Open jobs the student may apply to, paired with match scores, best first."""
    student = await store.get_student(student_id)
    if student is None:
        raise NotFoundError("Student not found")

    jobs = await store.list_open_jobs(now)
    eligible = [job for job in jobs if is_eligible(job, student, now)]
    return rank_jobs(eligible, student.skills)
