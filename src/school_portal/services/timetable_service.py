'''
Timetable Service
'''
from typing import Annotated, Optional
from datetime import date

from fastapi import Depends

from ..models import timetable as timetable_models
from ..models.enums import UserRole
from ..models.user import Session
from ..core.timetable_shaper import build_timetable_view
from ..common.exceptions import LoadFailureError, UnauthorizedRoleError
from ..common.logger import log
from .school_api import SchoolApiClient, get_school_api


class TimetableService:
    """
    Service for the subject-filtered weekly timetable of one student.
    Fetches the week from the school backend and shapes it into view-state.
    """
    def __init__(self, school_api: Annotated[SchoolApiClient, Depends(get_school_api)]):
        self.school_api = school_api

    # --- Authorization Helper ---

    def _authorize_view_access(self, session: Session, student_id: str) -> None:
        """
        Self-view is always allowed; admins and teachers may view any
        student's week; students may not view anyone else's.
        """
        if session.user_id == student_id:
            return
        if session.role in (UserRole.ADMIN, UserRole.TEACHER):
            return
        log.warning(f"User {session.user_id} (Role: {session.role.value}) denied timetable of {student_id}.")
        raise UnauthorizedRoleError("Students cannot view other users' timetables.")

    # --- Main API Method ---

    async def get_timetable_view(
        self,
        session: Session,
        student_id: str,
        subject_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> timetable_models.TimetableView:
        """
        A week that cannot be loaded is shown as an empty timetable; the
        failure is only logged. Today is still selected on the calendar.
        """
        self._authorize_view_access(session, student_id)
        today = today or date.today()

        try:
            payload = await self.school_api.fetch_weekly_timetable(student_id)
        except LoadFailureError as e:
            log.error(f"Timetable for student {student_id} unavailable, showing empty state: {e}")
            payload = None

        view = build_timetable_view(payload, subject_id, today)
        log.info(
            f"Timetable view for {student_id}: {len(view.subjects)} subjects, "
            f"{len(view.schedule)} periods for subject "
            f"{view.selected_subject.subject_id if view.selected_subject else None}."
        )
        return view
