"""
Pytest fixtures shared by the unit tests.
"""

import pytest

from tests.fakes import InMemoryPlacementStore, RecordingNotifier


@pytest.fixture
def store():
    return InMemoryPlacementStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def company(store):
    return store.add_company()


@pytest.fixture
def student(store):
    return store.add_student()


@pytest.fixture
def job(store, company):
    return store.add_job(company.id)
