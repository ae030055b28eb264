"""
Eligibility rules deciding whether a student may view or apply to a job.

The checks run in a fixed order and the first failing one is reported,
so an inactive job is always reported as inactive whatever else is wrong.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from placement_portal.exceptions import EligibilityError
from placement_portal.models.base import as_utc
from placement_portal.models.job import Job
from placement_portal.models.student import Student


class EligibilityReason(str, Enum):
    INACTIVE_JOB = "InactiveJob"
    DEADLINE_PASSED = "DeadlinePassed"
    CGPA_TOO_LOW = "CgpaTooLow"
    STREAM_NOT_ALLOWED = "StreamNotAllowed"
    COLLEGE_NOT_ALLOWED = "CollegeNotAllowed"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    EligibilityReason.INACTIVE_JOB: "This job is no longer active",
    EligibilityReason.DEADLINE_PASSED: "Application deadline has passed",
    EligibilityReason.CGPA_TOO_LOW: "You do not meet the minimum CGPA requirement",
    EligibilityReason.STREAM_NOT_ALLOWED: "Your stream is not eligible for this job",
    EligibilityReason.COLLEGE_NOT_ALLOWED: "Your college is not eligible for this job",
}


def check_eligibility(job: Job, student: Student, now: datetime) -> Optional[EligibilityReason]:
    """Return the first rule the student fails, or None if eligible."""
    if not job.is_active:
        return EligibilityReason.INACTIVE_JOB

    if as_utc(now) > as_utc(job.application_deadline):
        return EligibilityReason.DEADLINE_PASSED

    if student.cgpa < job.min_cgpa:
        return EligibilityReason.CGPA_TOO_LOW

    if student.stream not in job.allowed_streams:
        return EligibilityReason.STREAM_NOT_ALLOWED

    if job.allowed_colleges and str(student.college_id) not in {str(c) for c in job.allowed_colleges}:
        return EligibilityReason.COLLEGE_NOT_ALLOWED

    return None


def is_eligible(job: Job, student: Student, now: datetime) -> bool:
    return check_eligibility(job, student, now) is None


def ensure_eligible(job: Job, student: Student, now: datetime) -> None:
    reason = check_eligibility(job, student, now)
    if reason is not None:
        raise EligibilityError(reason)
