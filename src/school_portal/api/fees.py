'''
API endpoints for the admin fee dashboard and student fee details.
'''
from typing import Annotated, Any
from fastapi import APIRouter, Depends

from ..models import fees as fee_models
from ..models.user import Session
from ..services.security import get_current_session
from ..services.fee_service import FeeOverviewService


class FeesAPI:
    """
    A class to encapsulate the read-only fee endpoints.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/fees",
            tags=["Fees"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/overview",
                self.get_overview,
                methods=["GET"],
                response_model=fee_models.ClassFeeOverview)
        self.router.add_api_route(
                "/classes",
                self.list_classes,
                methods=["GET"],
                response_model=list[fee_models.ClassSection])
        self.router.add_api_route(
                "/classes/{class_section_id}/students",
                self.list_class_students,
                methods=["GET"],
                response_model=list[fee_models.StudentFeeStatus])
        self.router.add_api_route(
                "/students/{student_id}",
                self.get_student_fee_details,
                methods=["GET"],
                response_model=fee_models.StudentFeeDetails)

    async def get_overview(
        self,
        session: Annotated[Session, Depends(get_current_session)],
        fee_service: Annotated[FeeOverviewService, Depends(FeeOverviewService)]
    ) -> Any:
        """
        School-wide expected/collected/pending totals and every class,
        ordered by grade then section.
        """
        return await fee_service.get_overview(session)

    async def list_classes(
        self,
        session: Annotated[Session, Depends(get_current_session)],
        fee_service: Annotated[FeeOverviewService, Depends(FeeOverviewService)]
    ) -> list[Any]:
        """Classes for the assignment form's selector. Empty when unavailable."""
        return await fee_service.get_class_options(session)

    async def list_class_students(
        self,
        class_section_id: str,
        session: Annotated[Session, Depends(get_current_session)],
        fee_service: Annotated[FeeOverviewService, Depends(FeeOverviewService)]
    ) -> list[Any]:
        """Students of a class, largest outstanding balance first."""
        return await fee_service.get_class_students(session, class_section_id)

    async def get_student_fee_details(
        self,
        student_id: str,
        session: Annotated[Session, Depends(get_current_session)],
        fee_service: Annotated[FeeOverviewService, Depends(FeeOverviewService)]
    ) -> Any:
        return await fee_service.get_student_fee_details(session, student_id)

# Instantiate the class and export its router
fees_api = FeesAPI()
router = fees_api.router
