'''
Fee dashboard and bulk fee assignment services.
'''
from typing import Annotated, Optional

from fastapi import Depends

from ..models import fees as fee_models
from ..models.enums import UserRole, ReviewPhase
from ..models.user import Session
from ..core import class_roster
from ..core.fee_computation import validate_charge_draft, compute_initial_amounts
from ..core.assignment_review import AssignmentReviewState
from ..common.exceptions import LoadFailureError, SubmissionFailureError, RequestInProgressError, UnauthorizedRoleError
from ..common.logger import log
from .school_api import SchoolApiClient, get_school_api
from .security import authorize_role
from .assignment_workflows import AssignmentWorkflow, get_assignment_workflow

# --- Service 1: Dashboard & Class Views ---

class FeeOverviewService:
    """
    Read-side of fee accounting: the admin overview, the class selector,
    per-class student standings and one student's fee history.
    """
    def __init__(self, school_api: Annotated[SchoolApiClient, Depends(get_school_api)]):
        self.school_api = school_api

    async def get_overview(self, session: Session) -> fee_models.ClassFeeOverview:
        """
        School totals and the ordered class list. An unreachable backend
        yields an empty overview rather than an error.
        """
        authorize_role(session, [UserRole.ADMIN])
        try:
            stats = await self.school_api.fetch_admin_fee_stats()
        except LoadFailureError:
            log.warning(f"Fee statistics unavailable for admin {session.user_id}; showing an empty overview.")
            stats = []
        return class_roster.aggregate(stats)

    async def get_class_options(self, session: Session) -> list[fee_models.ClassSection]:
        authorize_role(session, [UserRole.ADMIN])
        classes = await self.school_api.fetch_class_list()
        return class_roster.sort_class_sections(classes)

    async def get_class_students(self, session: Session, class_section_id: str) -> list[fee_models.StudentFeeStatus]:
        authorize_role(session, [UserRole.ADMIN])
        try:
            students = await self.school_api.fetch_class_roster(class_section_id)
        except LoadFailureError:
            log.warning(f"Student list for class {class_section_id} unavailable; showing none.")
            return []
        return class_roster.sort_students_by_balance(students)

    async def get_student_fee_details(self, session: Session, student_id: str) -> fee_models.StudentFeeDetails:
        """
        Admins may open any student, students only themselves.
        Fees are listed latest due date first, payments most recent first.
        """
        if not session.is_admin and not (
            session.role == UserRole.STUDENT and session.user_id == student_id
        ):
            log.warning(f"User {session.user_id} (Role: {session.role.value}) denied fee details of {student_id}.")
            raise UnauthorizedRoleError("You can only view your own fee details.")

        details = await self.school_api.fetch_student_fee_details(student_id)
        return details.model_copy(update={
            "pending_fees": class_roster.sort_fee_items(details.pending_fees),
            "all_fees": class_roster.sort_fee_items(details.all_fees),
            "payment_history": class_roster.sort_payment_history(details.payment_history),
        })


# --- Service 2: Bulk Fee Assignment Workflow ---

class FeeAssignmentService:
    """
    Drives one assignment workflow: validate the draft, fetch the class
    roster, compute proposed amounts, let the admin review, then submit.

    The review table and `loading` live in the caller's AssignmentWorkflow,
    which outlasts the request. `loading` is set while a roster fetch or
    submission is outstanding; a second request in that window is refused
    rather than cancelled.
    """
    def __init__(
        self,
        school_api: Annotated[SchoolApiClient, Depends(get_school_api)],
        workflow: Annotated[AssignmentWorkflow, Depends(get_assignment_workflow)]
    ):
        self.school_api = school_api
        self.workflow = workflow

    @property
    def state(self) -> AssignmentReviewState:
        return self.workflow.state

    @property
    def loading(self) -> bool:
        return self.workflow.loading

    @loading.setter
    def loading(self, value: bool) -> None:
        self.workflow.loading = value

    def _guard(self) -> None:
        if self.loading:
            log.warning("Fee assignment request refused: another one is still in progress.")
            raise RequestInProgressError()

    async def proceed_to_review(
        self,
        session: Session,
        draft: Optional[fee_models.ChargeDraft] = None
    ) -> AssignmentReviewState:
        """
        "Next": validation first (no network call on failure), then the
        roster fetch. A failed fetch leaves the workflow in Drafting.
        """
        authorize_role(session, [UserRole.ADMIN])
        self._guard()
        if self.state.phase == ReviewPhase.REVIEWING:
            self.state.back()
        elif self.state.phase != ReviewPhase.DRAFTING:
            self.state.reset()
        if draft is not None:
            self.state.draft = draft

        definition = validate_charge_draft(self.state.draft)

        self.loading = True
        try:
            roster = await self.school_api.fetch_class_roster(definition.class_id)
        except LoadFailureError as e:
            log.error(f"Could not load students of class {definition.class_id}; staying in Drafting.")
            raise LoadFailureError("Failed to load students") from e
        finally:
            self.loading = False

        self.state.begin_review(definition, compute_initial_amounts(roster, definition))
        return self.state

    async def submit(self, session: Session) -> fee_models.BulkAssignmentResult:
        """
        Compiles and sends the batch. On failure the review table is left
        exactly as it was so the admin can retry; on success the workflow
        is reset for the next charge.
        """
        authorize_role(session, [UserRole.ADMIN])
        self._guard()
        batch = self.state.require_batch()
        fee_name = self.state.definition.fee_name

        self.loading = True
        try:
            await self.school_api.submit_bulk_assignment(batch)
        except SubmissionFailureError:
            log.error(f"Bulk assignment of '{fee_name}' failed; review state kept for retry.")
            raise
        finally:
            self.loading = False

        self.state.mark_submitted()
        log.info(f"Fee '{fee_name}' assigned to {len(batch)} students by {session.user_id}.")
        self.state.reset()
        return fee_models.BulkAssignmentResult(
            assigned_count=len(batch),
            fee_name=fee_name,
            message=f"Fee Assigned to {len(batch)} Students!"
        )

    def cancel(self, session: Session) -> AssignmentReviewState:
        """Closes the form; whatever was drafted or reviewed is dropped."""
        authorize_role(session, [UserRole.ADMIN])
        self._guard()
        self.state.cancel()
        log.info(f"Fee assignment cancelled by {session.user_id}.")
        return self.state

    # --- Entry points of the view-state API ---

    async def preview(self, session: Session, draft: fee_models.ChargeDraft) -> list[fee_models.ReviewRow]:
        state = await self.proceed_to_review(session, draft)
        return list(state.rows.values())

    async def assign_reviewed(
        self,
        session: Session,
        submission: fee_models.FeeAssignmentSubmission
    ) -> fee_models.BulkAssignmentResult:
        """
        Submits rows the front end already reviewed, re-validating the draft
        they were computed from. Refused while an earlier request of the
        same administrator is outstanding, before its table is touched.
        """
        authorize_role(session, [UserRole.ADMIN])
        self._guard()
        self.state.reset()
        self.state.draft = submission.draft
        definition = validate_charge_draft(submission.draft)
        self.state.begin_review(definition, {row.student_id: row for row in submission.rows})
        return await self.submit(session)
