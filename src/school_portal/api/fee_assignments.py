'''
API endpoints for the two-phase bulk fee assignment.
'''
from typing import Annotated, Any
from fastapi import APIRouter, Depends, Response, status

from ..models import fees as fee_models
from ..models.user import Session
from ..services.security import get_current_session
from ..services.fee_service import FeeAssignmentService


class FeeAssignmentsAPI:
    """
    A class to encapsulate the fee assignment endpoints.
    Step 1 previews proposed amounts, step 2 submits the reviewed rows.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/fee-assignments",
            tags=["Fee Assignments"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        self.router.add_api_route(
                "/preview",
                self.preview_assignment,
                methods=["POST"],
                response_model=list[fee_models.ReviewRow])
        self.router.add_api_route(
                "/",
                self.submit_assignment,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=fee_models.BulkAssignmentResult)
        self.router.add_api_route(
                "/",
                self.cancel_assignment,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT,
                response_class=Response)

    async def preview_assignment(
        self,
        draft: fee_models.ChargeDraft,
        session: Annotated[Session, Depends(get_current_session)],
        assignment_service: Annotated[FeeAssignmentService, Depends(FeeAssignmentService)]
    ) -> list[Any]:
        """
        Validates the charge, loads the class and returns one included
        row per student with its proposed amount.
        """
        return await assignment_service.preview(session, draft)

    async def submit_assignment(
        self,
        submission: fee_models.FeeAssignmentSubmission,
        session: Annotated[Session, Depends(get_current_session)],
        assignment_service: Annotated[FeeAssignmentService, Depends(FeeAssignmentService)]
    ) -> Any:
        """
        Submits the included rows whose amount is a number. Deselected rows
        and rows with unparsable amounts are left out.
        """
        return await assignment_service.assign_reviewed(session, submission)

    async def cancel_assignment(
        self,
        session: Annotated[Session, Depends(get_current_session)],
        assignment_service: Annotated[FeeAssignmentService, Depends(FeeAssignmentService)]
    ) -> Response:
        """Discards the caller's drafted or reviewed assignment."""
        assignment_service.cancel(session)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

# Instantiate the class and export its router
fee_assignments_api = FeeAssignmentsAPI()
router = fee_assignments_api.router
