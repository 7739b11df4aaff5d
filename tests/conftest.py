'''
Pytest configuration for the School Portal Core.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any code is imported.
2. Explicit sessions for an admin, a teacher and a student.
3. A mocked SchoolApiClient standing in for the school backend.
4. Service instances wired to that mock.
5. A FastAPI TestClient whose school client dependency is overridden.
'''
import os

# Must happen before the settings object is created on first import
os.environ["TEST_MODE"] = "True"

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from school_portal.main import app
from school_portal.common.config import settings
from school_portal.models import fees as fee_models
from school_portal.models import timetable as timetable_models
from school_portal.models.enums import UserRole
from school_portal.models.user import Session
from school_portal.services.school_api import SchoolApiClient, get_school_api
from school_portal.services.security import JWTHandler
from school_portal.services.fee_service import FeeOverviewService, FeeAssignmentService
from school_portal.services.assignment_workflows import AssignmentWorkflow
from school_portal.services.timetable_service import TimetableService

from tests.constants import (
    TEST_ADMIN_ID,
    TEST_TEACHER_ID,
    TEST_STUDENT_ID,
    ADMIN_FEE_STATS_PAYLOAD,
    CLASS_LIST_PAYLOAD,
    CLASS_ROSTER_PAYLOAD,
    STUDENT_FEE_DETAILS_PAYLOAD,
    WEEKLY_TIMETABLE_PAYLOAD,
)


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio'.
    2. Promotes the scope to 'session'.
    """
    return "asyncio"


# --- 1. Sessions ---

def _session(user_id: str, role: UserRole) -> Session:
    token = JWTHandler.create_access_token(subject=user_id, role=role)
    return Session(user_id=user_id, role=role, access_token=token)

@pytest.fixture(scope="function")
def admin_session() -> Session:
    return _session(TEST_ADMIN_ID, UserRole.ADMIN)

@pytest.fixture(scope="function")
def teacher_session() -> Session:
    return _session(TEST_TEACHER_ID, UserRole.TEACHER)

@pytest.fixture(scope="function")
def student_session() -> Session:
    return _session(TEST_STUDENT_ID, UserRole.STUDENT)


# --- 2. School backend mock ---

@pytest.fixture(scope="function")
def mock_school_api() -> SchoolApiClient:
    """
    Provides a mock SchoolApiClient seeded with the payloads in tests/constants.py.
    Individual tests override return values or side effects as needed.
    """
    mock_api = MagicMock(spec=SchoolApiClient)
    mock_api.fetch_admin_fee_stats = AsyncMock(return_value=[
        fee_models.ClassFeeStat.model_validate(row) for row in ADMIN_FEE_STATS_PAYLOAD
    ])
    mock_api.fetch_class_list = AsyncMock(return_value=[
        fee_models.ClassSection.model_validate(row) for row in CLASS_LIST_PAYLOAD
    ])
    mock_api.fetch_class_roster = AsyncMock(return_value=[
        fee_models.StudentFeeStatus.model_validate(row) for row in CLASS_ROSTER_PAYLOAD
    ])
    mock_api.fetch_student_fee_details = AsyncMock(
        return_value=fee_models.StudentFeeDetails.model_validate(STUDENT_FEE_DETAILS_PAYLOAD)
    )
    mock_api.fetch_weekly_timetable = AsyncMock(
        return_value=timetable_models.WeeklyTimetable.model_validate(WEEKLY_TIMETABLE_PAYLOAD)
    )
    mock_api.submit_bulk_assignment = AsyncMock(return_value=None)
    return mock_api


# --- 3. Service fixtures ---

@pytest.fixture(scope="function")
def fee_overview_service(mock_school_api: SchoolApiClient) -> FeeOverviewService:
    return FeeOverviewService(school_api=mock_school_api)

@pytest.fixture(scope="function")
def fee_assignment_service(mock_school_api: SchoolApiClient) -> FeeAssignmentService:
    return FeeAssignmentService(school_api=mock_school_api, workflow=AssignmentWorkflow())

@pytest.fixture(scope="function")
def timetable_service(mock_school_api: SchoolApiClient) -> TimetableService:
    return TimetableService(school_api=mock_school_api)


# --- 4. API client ---

@pytest.fixture(scope="function")
def client(mock_school_api: SchoolApiClient) -> TestClient:
    """
    Runs the app's lifespan and replaces the school backend client with
    the mock for every request.
    """
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."

    app.dependency_overrides[get_school_api] = lambda: mock_school_api

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
