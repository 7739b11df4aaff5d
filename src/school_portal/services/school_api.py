'''
Client for the school REST backend: the collaborator calls the fee and
timetable workflows depend on.
'''
from typing import Annotated, Any, Optional

import httpx
from fastapi import Depends
from pydantic import TypeAdapter, ValidationError

from ..models import fees as fee_models
from ..models import timetable as timetable_models
from ..models.user import Session
from ..common.exceptions import LoadFailureError, SubmissionFailureError
from ..common.logger import log
from .http_client import get_http_client
from .security import get_current_session

_roster_adapter = TypeAdapter(list[fee_models.StudentFeeStatus])
_class_list_adapter = TypeAdapter(list[fee_models.ClassSection])
_fee_stats_adapter = TypeAdapter(list[fee_models.ClassFeeStat])


class SchoolApiClient:
    """
    Thin wrapper over the student API. Every call carries the acting
    session's bearer token. Read failures surface as LoadFailureError and
    the bulk write as SubmissionFailureError.
    """
    CLASS_ROSTER_PATH = "/fees/class/{class_section_id}/status"
    CLASS_LIST_PATH = "/class-sections"
    ADMIN_FEE_STATS_PATH = "/fees/admin/stats"
    BULK_ASSIGN_PATH = "/fees/assign-bulk"
    STUDENT_FEES_PATH = "/fees/{student_id}"
    WEEKLY_TIMETABLE_PATH = "/{student_id}/timetable"

    def __init__(self, http: httpx.AsyncClient, access_token: Optional[str] = None):
        self.http = http
        self.access_token = access_token

    def _headers(self) -> dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    async def _get_json(self, path: str, what: str) -> Any:
        log.info(f"Fetching {what} from {path}")
        try:
            response = await self.http.get(path, headers=self._headers())
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()
        except httpx.HTTPStatusError as e:
            log.error(f"School backend returned {e.response.status_code} for {what}: {e.response.text}")
            raise LoadFailureError(f"Failed to load {what}") from e
        except httpx.RequestError as e:
            log.error(f"Request for {what} failed: {e}", exc_info=True)
            raise LoadFailureError(f"Failed to load {what}") from e
        except ValueError as e:
            log.error(f"School backend sent a non-JSON body for {what}: {e}")
            raise LoadFailureError(f"Failed to load {what}") from e

    @staticmethod
    def _validate(adapter: TypeAdapter, data: Any, what: str) -> Any:
        try:
            return adapter.validate_python(data if data is not None else [])
        except ValidationError as e:
            log.error(f"Malformed {what} payload: {e}")
            raise LoadFailureError(f"Failed to load {what}") from e

    # --- Reads ---

    async def fetch_class_roster(self, class_section_id: str) -> list[fee_models.StudentFeeStatus]:
        """Students of one class with their fee standing. Raises LoadFailureError."""
        data = await self._get_json(
            self.CLASS_ROSTER_PATH.format(class_section_id=class_section_id), "students"
        )
        return self._validate(_roster_adapter, data, "students")

    async def fetch_class_list(self) -> list[fee_models.ClassSection]:
        """Classes for the selector. A failure degrades to an empty list."""
        try:
            data = await self._get_json(self.CLASS_LIST_PATH, "classes")
            return self._validate(_class_list_adapter, data, "classes")
        except LoadFailureError:
            log.warning("Class list unavailable, continuing with an empty selector.")
            return []

    async def fetch_admin_fee_stats(self) -> list[fee_models.ClassFeeStat]:
        data = await self._get_json(self.ADMIN_FEE_STATS_PATH, "fee statistics")
        return self._validate(_fee_stats_adapter, data, "fee statistics")

    async def fetch_student_fee_details(self, student_id: str) -> fee_models.StudentFeeDetails:
        data = await self._get_json(
            self.STUDENT_FEES_PATH.format(student_id=student_id), "fee details"
        )
        try:
            return fee_models.StudentFeeDetails.model_validate(data)
        except ValidationError as e:
            log.error(f"Malformed fee details payload for student {student_id}: {e}")
            raise LoadFailureError("Failed to load fee details") from e

    async def fetch_weekly_timetable(self, student_id: str) -> timetable_models.WeeklyTimetable:
        data = await self._get_json(
            self.WEEKLY_TIMETABLE_PATH.format(student_id=student_id), "timetable"
        )
        if not data:
            return timetable_models.WeeklyTimetable(student_id=student_id)
        try:
            return timetable_models.WeeklyTimetable.model_validate(data)
        except ValidationError as e:
            log.error(f"Malformed timetable payload for student {student_id}: {e}")
            raise LoadFailureError("Failed to load timetable") from e

    # --- Write ---

    async def submit_bulk_assignment(self, batch: list[fee_models.AssignmentBatchEntry]) -> None:
        """
        The only write. Sends the compiled batch as a JSON array of
        {studentId, feeName, amount, dueDate}. Raises SubmissionFailureError.
        """
        payload = [entry.to_wire() for entry in batch]
        log.info(f"Submitting bulk fee assignment for {len(payload)} students.")
        try:
            response = await self.http.post(self.BULK_ASSIGN_PATH, json=payload, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.error(f"Bulk assignment rejected with {e.response.status_code}: {e.response.text}")
            raise SubmissionFailureError("Failed to assign fees") from e
        except httpx.RequestError as e:
            log.error(f"Bulk assignment request failed: {e}", exc_info=True)
            raise SubmissionFailureError("Failed to assign fees") from e


def get_school_api(
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    session: Annotated[Session, Depends(get_current_session)]
) -> SchoolApiClient:
    """FastAPI dependency: a client acting with the caller's token."""
    return SchoolApiClient(http, access_token=session.access_token)
