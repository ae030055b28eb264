"""
Collaborator interfaces the placement operations are given explicitly.

PlacementStore hides the document database; Notifier hides email delivery.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from placement_portal.models.application import Application
from placement_portal.models.company import Company
from placement_portal.models.job import Job
from placement_portal.models.student import Student


class PlacementStore(ABC):

    @abstractmethod
    async def get_job(self, job_id: str) -> Optional[Job]:
        ...

    @abstractmethod
    async def get_student(self, student_id: str) -> Optional[Student]:
        ...

    @abstractmethod
    async def get_company(self, company_id: str) -> Optional[Company]:
        ...

    @abstractmethod
    async def get_application(self, application_id: str) -> Optional[Application]:
        ...

    @abstractmethod
    async def find_application(self, job_id: str, student_id: str) -> Optional[Application]:
        ...

    @abstractmethod
    async def insert_application(
        self, job_id: str, student_id: str, cover_letter: Optional[str], now: datetime
    ) -> Application:
        """Store a new application; raise ConflictError if the pair already exists."""

    @abstractmethod
    async def set_application_status(self, application_id: str, status: str, now: datetime) -> Application:
        ...

    @abstractmethod
    async def insert_job(self, company_id: str, job_data: dict, now: datetime) -> Job:
        ...

    @abstractmethod
    async def find_notification_candidates(self, job: Job) -> List[Student]:
        """Students whose stream, CGPA and college fit the job."""

    @abstractmethod
    async def list_open_jobs(self, now: datetime) -> List[Job]:
        """Active jobs whose deadline has not passed, newest first."""


class Notifier(ABC):

    @abstractmethod
    def notify(self, recipient: str, template_kind: str, template_data: dict) -> None:
        """Dispatch a message without waiting for it. Must never raise."""
