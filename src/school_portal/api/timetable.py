'''
API endpoints for viewing a student's weekly Timetable.
'''
from datetime import date
from typing import Annotated, Any
from fastapi import APIRouter, Depends, Query

from ..models import timetable as timetable_models
from ..models.user import Session
from ..services.security import get_current_session
from ..services.timetable_service import TimetableService


class TimetableAPI:
    """
    A class to encapsulate endpoints for the Timetable.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/timetable",
            tags=["Timetable"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
            "/{student_id}",
            self.get_timetable,
            methods=["GET"],
            response_model=timetable_models.TimetableView)

    async def get_timetable(
        self,
        student_id: str,
        session: Annotated[Session, Depends(get_current_session)],
        timetable_service: Annotated[TimetableService, Depends(TimetableService)],
        subject_id: Annotated[str | None, Query(description="Subject to filter by; defaults to the class teacher's subject")] = None,
        today: Annotated[date | None, Query(description="The viewer's local date; defaults to the server date")] = None
    ) -> Any:
        """
        Retrieves the week of the student shaped for the subject view:
        subjects, the selected subject's periods, calendar marks and today's periods.
        """
        return await timetable_service.get_timetable_view(
            session, student_id, subject_id=subject_id, today=today
        )

# Instantiate the class and export its router
timetable_api = TimetableAPI()
router = timetable_api.router
