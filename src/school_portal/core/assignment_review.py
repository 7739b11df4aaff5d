'''
The review table of the two-phase bulk fee assignment workflow.

Drafting -> Reviewing -> Submitted | Cancelled, with Reviewing -> Drafting
("Back") discarding the table. Two commands (toggle, set_amount) and one
query (compile) operate on the table while Reviewing.
'''
from typing import Optional

from pydantic import BaseModel, Field

from ..models import fees as fee_models
from ..models.enums import ReviewPhase
from ..common.exceptions import NoStudentsSelectedError, WorkflowStateError
from ..common.logger import log


class AssignmentReviewState(BaseModel):
    phase: ReviewPhase = ReviewPhase.DRAFTING
    draft: fee_models.ChargeDraft = Field(default_factory=fee_models.ChargeDraft)
    definition: Optional[fee_models.ChargeDefinition] = None
    rows: dict[str, fee_models.ReviewRow] = Field(default_factory=dict)

    # --- Transitions ---

    def _require_phase(self, *phases: ReviewPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise WorkflowStateError(f"Action not allowed while {self.phase.value}; requires {allowed}.")

    def begin_review(
        self,
        definition: fee_models.ChargeDefinition,
        rows: dict[str, fee_models.ReviewRow]
    ) -> None:
        """Drafting -> Reviewing with a freshly computed table."""
        self._require_phase(ReviewPhase.DRAFTING)
        self.definition = definition
        self.rows = dict(rows)
        self.phase = ReviewPhase.REVIEWING

    def back(self) -> None:
        """Reviewing -> Drafting. The table is discarded, the draft is kept for editing."""
        self._require_phase(ReviewPhase.REVIEWING)
        self.definition = None
        self.rows = {}
        self.phase = ReviewPhase.DRAFTING

    def mark_submitted(self) -> None:
        self._require_phase(ReviewPhase.REVIEWING)
        self.phase = ReviewPhase.SUBMITTED

    def cancel(self) -> None:
        self.definition = None
        self.rows = {}
        self.phase = ReviewPhase.CANCELLED

    def reset(self) -> None:
        """Back to a Drafting state equal to a newly constructed one."""
        self.phase = ReviewPhase.DRAFTING
        self.draft = fee_models.ChargeDraft()
        self.definition = None
        self.rows = {}

    # --- Commands ---

    def toggle(self, student_id: str) -> None:
        row = self.rows.get(student_id)
        if row is None:
            return
        row.included = not row.included

    def set_amount(self, student_id: str, text: str) -> None:
        """Stores the text verbatim; it is only judged when the batch is compiled."""
        row = self.rows.get(student_id)
        if row is None:
            return
        row.proposed_amount = fee_models.parse_proposed_amount(text)

    # --- Query ---

    def compile(self) -> list[fee_models.AssignmentBatchEntry]:
        """
        Filter-map over the table: rows that are included and hold a finite
        number become batch entries, everything else is left out silently.
        """
        if self.definition is None:
            return []

        due_date = self.definition.due_date.isoformat()
        batch = []
        for row in self.rows.values():
            if not row.included:
                continue
            if not isinstance(row.proposed_amount, fee_models.ValidAmount):
                continue
            batch.append(fee_models.AssignmentBatchEntry(
                student_id=row.student_id,
                fee_name=self.definition.fee_name,
                amount=row.proposed_amount.value,
                due_date=due_date
            ))
        return batch

    def require_batch(self) -> list[fee_models.AssignmentBatchEntry]:
        """compile(), refusing an empty batch. The phase stays Reviewing either way."""
        self._require_phase(ReviewPhase.REVIEWING)
        batch = self.compile()
        if not batch:
            log.warning(f"Refusing to submit '{self.definition.fee_name}': no students selected.")
            raise NoStudentsSelectedError()
        return batch

    @property
    def selected_count(self) -> int:
        return sum(1 for row in self.rows.values() if row.included)
