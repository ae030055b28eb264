"""
Unit tests for the eligibility rules.
"""

from datetime import datetime, timedelta, timezone

import pytest

from placement_portal.exceptions import EligibilityError
from placement_portal.models.job import Job
from placement_portal.models.student import Student
from placement_portal.services.eligibility import (
    EligibilityReason,
    check_eligibility,
    ensure_eligible,
    is_eligible,
)

NOW = datetime(2026, 3, 1, 12, 0, 0)
COLLEGE_A = "65f000000000000000000001"
COLLEGE_B = "65f000000000000000000002"


def make_job(**fields):
    data = {
        "company_id": "65f0000000000000000000aa",
        "title": "Backend Engineer",
        "skills": ["Python"],
        "allowed_streams": ["Computer Science"],
        "min_cgpa": 7.0,
        "application_deadline": NOW + timedelta(days=1),
    }
    data.update(fields)
    return Job(**data)


def make_student(**fields):
    data = {
        "email": "asha@example.com",
        "college_id": COLLEGE_A,
        "stream": "Computer Science",
        "cgpa": 7.0,
    }
    data.update(fields)
    return Student(**data)


class TestCheckEligibility:

    def test_matching_student_is_eligible(self):
        assert check_eligibility(make_job(), make_student(), NOW) is None
        assert is_eligible(make_job(), make_student(), NOW)

    def test_cgpa_equal_to_minimum_passes(self):
        assert is_eligible(make_job(min_cgpa=7.0), make_student(cgpa=7.0), NOW)

    def test_cgpa_below_minimum_fails(self):
        reason = check_eligibility(make_job(min_cgpa=7.0), make_student(cgpa=6.99), NOW)
        assert reason == EligibilityReason.CGPA_TOO_LOW

    def test_inactive_job_reported_first(self):
        """Every other rule fails too, but InactiveJob wins."""
        job = make_job(
            is_active=False,
            application_deadline=NOW - timedelta(days=1),
            min_cgpa=9.5,
            allowed_streams=["Civil"],
            allowed_colleges=[COLLEGE_B],
        )
        assert check_eligibility(job, make_student(), NOW) == EligibilityReason.INACTIVE_JOB

    def test_deadline_passed(self):
        job = make_job(application_deadline=NOW - timedelta(seconds=1))
        assert check_eligibility(job, make_student(), NOW) == EligibilityReason.DEADLINE_PASSED

    def test_deadline_equal_to_now_is_open(self):
        assert is_eligible(make_job(application_deadline=NOW), make_student(), NOW)

    def test_deadline_checked_before_cgpa(self):
        job = make_job(application_deadline=NOW - timedelta(days=1), min_cgpa=9.0)
        assert check_eligibility(job, make_student(cgpa=5.0), NOW) == EligibilityReason.DEADLINE_PASSED

    def test_aware_deadline_is_compared_in_utc(self):
        # 17:00 at +05:30 is 11:30 UTC, already past
        deadline = datetime(2026, 3, 1, 17, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        job = make_job(application_deadline=deadline)
        assert check_eligibility(job, make_student(), NOW) == EligibilityReason.DEADLINE_PASSED

    def test_stream_not_allowed(self):
        reason = check_eligibility(make_job(), make_student(stream="Mechanical"), NOW)
        assert reason == EligibilityReason.STREAM_NOT_ALLOWED

    def test_empty_allowed_colleges_means_any_college(self):
        job = make_job(allowed_colleges=[])
        assert is_eligible(job, make_student(college_id=COLLEGE_B), NOW)

    def test_college_not_in_allowed_list(self):
        job = make_job(allowed_colleges=[COLLEGE_A])
        reason = check_eligibility(job, make_student(college_id=COLLEGE_B), NOW)
        assert reason == EligibilityReason.COLLEGE_NOT_ALLOWED

    def test_college_in_allowed_list(self):
        job = make_job(allowed_colleges=[COLLEGE_B, COLLEGE_A])
        assert is_eligible(job, make_student(college_id=COLLEGE_A), NOW)


class TestEnsureEligible:

    def test_raises_with_reason_and_message(self):
        with pytest.raises(EligibilityError) as excinfo:
            ensure_eligible(make_job(min_cgpa=8.0), make_student(cgpa=7.5), NOW)

        assert excinfo.value.reason == EligibilityReason.CGPA_TOO_LOW
        assert excinfo.value.message == "You do not meet the minimum CGPA requirement"
        assert excinfo.value.status_code == 400

    def test_passes_silently_when_eligible(self):
        assert ensure_eligible(make_job(), make_student(), NOW) is None

    def test_reason_values_are_stable_strings(self):
        assert EligibilityReason.INACTIVE_JOB.value == "InactiveJob"
        assert EligibilityReason.COLLEGE_NOT_ALLOWED.value == "CollegeNotAllowed"
