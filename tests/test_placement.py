"""
Unit tests for the placement operations against the in-memory store.
"""

import asyncio
from datetime import timedelta

import pytest

from placement_portal.exceptions import (
    ConflictError,
    EligibilityError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from placement_portal.services.eligibility import EligibilityReason
from placement_portal.services.placement import (
    apply_to_job,
    change_application_status,
    list_eligible_jobs,
    post_job,
)
from tests.fakes import NOW, new_id


def job_payload(**fields):
    data = {
        "title": "Frontend Engineer",
        "description": "Build the campus portal user interface",
        "skills": ["React", "TypeScript", "CSS"],
        "location": "Bengaluru",
        "job_type": "Full-time",
        "allowed_streams": ["Computer Science"],
        "min_cgpa": 7.0,
        "application_deadline": NOW + timedelta(days=14),
    }
    data.update(fields)
    return data


class TestApplyToJob:

    def test_creates_application_and_notifies_company(self, store, notifier, company, student, job):
        application = asyncio.run(apply_to_job(store, notifier, job.id, student.id, "Hello", NOW))

        assert application.status == "applied"
        assert application.applied_at == NOW
        assert application.status_updated_at == NOW
        assert application.cover_letter == "Hello"
        assert notifier.sent == [(company.email, "new_application", {
            "company_name": company.name,
            "student_name": "Asha Rao",
            "job_title": job.title,
        })]

    def test_second_apply_conflicts(self, store, notifier, student, job):
        asyncio.run(apply_to_job(store, notifier, job.id, student.id, None, NOW))

        with pytest.raises(ConflictError):
            asyncio.run(apply_to_job(store, notifier, job.id, student.id, None, NOW))

        assert len(store.applications) == 1
        assert notifier.kinds() == ["new_application"]

    def test_ineligible_student_rejected_with_reason(self, store, notifier, company):
        job = store.add_job(company.id, min_cgpa=8.0)
        student = store.add_student(cgpa=7.9)

        with pytest.raises(EligibilityError) as excinfo:
            asyncio.run(apply_to_job(store, notifier, job.id, student.id, None, NOW))

        assert excinfo.value.reason == EligibilityReason.CGPA_TOO_LOW
        assert store.applications == {}
        assert notifier.sent == []

    def test_inactive_job_rejected(self, store, notifier, company, student):
        job = store.add_job(company.id, is_active=False)

        with pytest.raises(EligibilityError) as excinfo:
            asyncio.run(apply_to_job(store, notifier, job.id, student.id, None, NOW))

        assert excinfo.value.reason == EligibilityReason.INACTIVE_JOB

    def test_missing_job(self, store, notifier, student):
        with pytest.raises(NotFoundError):
            asyncio.run(apply_to_job(store, notifier, new_id(), student.id, None, NOW))

    def test_missing_student(self, store, notifier, job):
        with pytest.raises(NotFoundError):
            asyncio.run(apply_to_job(store, notifier, job.id, new_id(), None, NOW))


class TestChangeApplicationStatus:

    def _apply(self, store, notifier, job, student):
        application = asyncio.run(apply_to_job(store, notifier, job.id, student.id, None, NOW))
        notifier.sent.clear()
        return application

    def test_updates_status_and_notifies_student(self, store, notifier, company, student, job):
        application = self._apply(store, notifier, job, student)
        later = NOW + timedelta(hours=2)

        updated = asyncio.run(change_application_status(
            store, notifier, application.id, "shortlisted", company.id, later, strict=False
        ))

        assert updated.status == "shortlisted"
        assert updated.status_updated_at == later
        assert updated.applied_at == NOW
        assert notifier.sent == [(student.email, "application_status_change", {
            "student_name": "Asha Rao",
            "job_title": job.title,
            "company_name": company.name,
            "status": "shortlisted",
        })]

    def test_any_status_may_overwrite_any_other(self, store, notifier, company, student, job):
        application = self._apply(store, notifier, job, student)

        for status in ("hired", "applied", "rejected", "shortlisted"):
            updated = asyncio.run(change_application_status(
                store, notifier, application.id, status, company.id, NOW, strict=False
            ))
            assert updated.status == status

    def test_same_status_still_notifies(self, store, notifier, company, student, job):
        application = self._apply(store, notifier, job, student)

        asyncio.run(change_application_status(
            store, notifier, application.id, "applied", company.id, NOW, strict=False
        ))

        assert notifier.kinds() == ["application_status_change"]

    def test_strict_mode_rejects_backward_move(self, store, notifier, company, student, job):
        application = self._apply(store, notifier, job, student)
        asyncio.run(change_application_status(
            store, notifier, application.id, "hired", company.id, NOW, strict=True
        ))

        with pytest.raises(ValidationError):
            asyncio.run(change_application_status(
                store, notifier, application.id, "applied", company.id, NOW, strict=True
            ))

        assert store.applications[application.id].status == "hired"

    def test_invalid_status_rejected(self, store, notifier, company, student, job):
        application = self._apply(store, notifier, job, student)

        with pytest.raises(ValidationError):
            asyncio.run(change_application_status(
                store, notifier, application.id, "withdrawn", company.id, NOW, strict=False
            ))

        assert notifier.sent == []

    def test_other_company_denied(self, store, notifier, student, job):
        application = self._apply(store, notifier, job, student)
        other = store.add_company(name="Other", email="hr@other.com")

        with pytest.raises(PermissionDeniedError):
            asyncio.run(change_application_status(
                store, notifier, application.id, "hired", other.id, NOW, strict=False
            ))

        assert store.applications[application.id].status == "applied"

    def test_missing_application(self, store, notifier, company):
        with pytest.raises(NotFoundError):
            asyncio.run(change_application_status(
                store, notifier, new_id(), "hired", company.id, NOW, strict=False
            ))


class TestPostJob:

    def test_notifies_only_matching_candidates(self, store, notifier, company):
        store.add_student(email="match@example.com", skills=["React.js", "CSS"])
        store.add_student(email="noskills@example.com", skills=[])
        store.add_student(email="weak@example.com", skills=["React"])
        store.add_student(email="lowcgpa@example.com", skills=["React", "CSS"], cgpa=6.0)
        store.add_student(email="civil@example.com", skills=["React", "CSS"], stream="Civil")

        job, notified = asyncio.run(post_job(store, notifier, company.id, job_payload(), NOW))

        recipients = sorted(recipient for recipient, _, _ in notifier.sent)
        assert recipients == ["match@example.com", "noskills@example.com"]
        assert notified == 2
        assert set(notifier.kinds()) == {"job_posted"}
        assert job.id in store.jobs
        assert job.created_at == NOW

    def test_restricted_colleges_limit_candidates(self, store, notifier, company):
        college = new_id()
        store.add_student(email="in@example.com", college_id=college, skills=[])
        store.add_student(email="out@example.com", skills=[])

        _, notified = asyncio.run(post_job(
            store, notifier, company.id, job_payload(allowed_colleges=[college]), NOW
        ))

        assert notified == 1
        assert notifier.sent[0][0] == "in@example.com"

    def test_job_posted_payload(self, store, notifier, company):
        store.add_student(skills=[])

        job, _ = asyncio.run(post_job(store, notifier, company.id, job_payload(), NOW))

        assert notifier.sent[0][2] == {
            "student_name": "Asha Rao",
            "job_title": job.title,
            "company_name": company.name,
            "location": "Bengaluru",
        }

    def test_unapproved_company_denied(self, store, notifier):
        pending = store.add_company(is_approved=False)

        with pytest.raises(PermissionDeniedError):
            asyncio.run(post_job(store, notifier, pending.id, job_payload(), NOW))

        assert store.jobs == {}

    def test_empty_skills_rejected(self, store, notifier, company):
        with pytest.raises(ValidationError):
            asyncio.run(post_job(store, notifier, company.id, job_payload(skills=[]), NOW))

    def test_missing_company(self, store, notifier):
        with pytest.raises(NotFoundError):
            asyncio.run(post_job(store, notifier, new_id(), job_payload(), NOW))


class TestListEligibleJobs:

    def test_filters_and_ranks(self, store, company):
        student = store.add_student(skills=["Python", "MongoDB"])
        partial = store.add_job(company.id, title="Partial", skills=["Python", "Rust"])
        full = store.add_job(company.id, title="Full", skills=["Python", "MongoDB"])
        store.add_job(company.id, title="Closed", application_deadline=NOW - timedelta(days=1))
        store.add_job(company.id, title="Civil only", allowed_streams=["Civil"])

        ranked = asyncio.run(list_eligible_jobs(store, student.id, NOW))

        assert [(job.title, score) for job, score in ranked] == [("Full", 100), ("Partial", 50)]
        assert {job.id for job, _ in ranked} == {partial.id, full.id}

    def test_missing_student(self, store):
        with pytest.raises(NotFoundError):
            asyncio.run(list_eligible_jobs(store, new_id(), NOW))
