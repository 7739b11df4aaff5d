import pytest
from fastapi.testclient import TestClient

from school_portal.models.user import Session
from school_portal.common.exceptions import LoadFailureError
from tests.constants import (
    ADMIN_FEE_STATS_SORTED_IDS,
    TEST_CLASS_SECTION_ID,
    TEST_STUDENT_ID,
    TEST_OTHER_STUDENT_ID,
)

from pprint import pp as pprint

# Helper to create auth headers
def auth_headers_for(session: Session) -> dict:
    """Returns the bearer header carrying the session's token."""
    return {"Authorization": f"Bearer {session.access_token}"}


@pytest.mark.anyio
class TestFeeOverviewAPI:
    """Tests for GET /fees/overview."""

    async def test_overview_as_admin(
        self,
        client: TestClient,
        admin_session: Session
    ):
        print("\n--- Testing GET /fees/overview as ADMIN ---")
        response = client.get("/fees/overview", headers=auth_headers_for(admin_session))

        assert response.status_code == 200, response.json()
        data = response.json()
        pprint(data["totals"])

        assert data["totals"] == {"expected": "180000", "collected": "115000", "pending": "66000"}
        assert [c["classSectionId"] for c in data["classes"]] == ADMIN_FEE_STATS_SORTED_IDS
        by_id = {c["classSectionId"]: c for c in data["classes"]}
        assert by_id["CS-2-A"]["collectionBand"] == "HIGH"
        assert by_id["CS-10-B"]["collectionRate"] == "66.67"

    async def test_overview_backend_down(
        self,
        client: TestClient,
        mock_school_api,
        admin_session: Session
    ):
        mock_school_api.fetch_admin_fee_stats.side_effect = LoadFailureError("Failed to load fee statistics")
        response = client.get("/fees/overview", headers=auth_headers_for(admin_session))

        assert response.status_code == 200, response.json()
        assert response.json()["classes"] == []

    async def test_overview_as_student_forbidden(
        self,
        client: TestClient,
        student_session: Session
    ):
        response = client.get("/fees/overview", headers=auth_headers_for(student_session))
        assert response.status_code == 403, response.json()
        assert response.json()["detail"] == "You do not have permission to perform this action."

    async def test_overview_without_token(self, client: TestClient):
        response = client.get("/fees/overview")
        assert response.status_code == 401

    async def test_overview_with_bad_token(self, client: TestClient):
        response = client.get("/fees/overview", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Could not validate credentials"


@pytest.mark.anyio
class TestClassListsAPI:
    """Tests for GET /fees/classes and GET /fees/classes/{id}/students."""

    async def test_classes_sorted(
        self,
        client: TestClient,
        admin_session: Session
    ):
        response = client.get("/fees/classes", headers=auth_headers_for(admin_session))
        assert response.status_code == 200, response.json()
        assert [c["classSectionId"] for c in response.json()] == ["CS-1-A", "CS-1-B", "CS-10-A"]

    async def test_class_students(
        self,
        client: TestClient,
        mock_school_api,
        admin_session: Session
    ):
        response = client.get(
            f"/fees/classes/{TEST_CLASS_SECTION_ID}/students",
            headers=auth_headers_for(admin_session)
        )
        assert response.status_code == 200, response.json()
        data = response.json()
        pprint(data[0])

        mock_school_api.fetch_class_roster.assert_awaited_once_with(TEST_CLASS_SECTION_ID)
        assert data[0]["studentId"] == TEST_STUDENT_ID
        assert data[0]["status"] == "PARTIAL"
        assert data[2]["totalFee"] is None


@pytest.mark.anyio
class TestStudentFeeDetailsAPI:
    """Tests for GET /fees/students/{student_id}."""

    async def test_own_details(
        self,
        client: TestClient,
        student_session: Session
    ):
        response = client.get(f"/fees/students/{TEST_STUDENT_ID}", headers=auth_headers_for(student_session))
        assert response.status_code == 200, response.json()
        data = response.json()

        assert [f["feeId"] for f in data["allFees"]] == ["3", "1", "2"]
        assert [p["paymentId"] for p in data["paymentHistory"]] == ["103", "102", "101"]

    async def test_other_students_details_forbidden(
        self,
        client: TestClient,
        student_session: Session
    ):
        response = client.get(f"/fees/students/{TEST_OTHER_STUDENT_ID}", headers=auth_headers_for(student_session))
        assert response.status_code == 403
        assert response.json()["detail"] == "You can only view your own fee details."

    async def test_details_backend_down(
        self,
        client: TestClient,
        mock_school_api,
        admin_session: Session
    ):
        mock_school_api.fetch_student_fee_details.side_effect = LoadFailureError("Failed to load fee details")
        response = client.get(f"/fees/students/{TEST_STUDENT_ID}", headers=auth_headers_for(admin_session))
        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to load fee details"


class TestHealthCheck:

    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
