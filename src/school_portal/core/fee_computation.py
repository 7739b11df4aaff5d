'''
Turns a charge definition and a class roster into proposed per-student amounts.
'''
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable

from ..models import fees as fee_models
from ..models.enums import CalculationMode
from ..common.exceptions import ChargeValidationError
from ..common.logger import log

HUNDRED = Decimal("100")
WHOLE_UNIT = Decimal("1")


def _parse_magnitude(raw: str, label: str) -> Decimal:
    try:
        magnitude = Decimal(raw.strip())
    except InvalidOperation:
        raise ChargeValidationError(f"{label} must be a positive number")
    if not magnitude.is_finite() or magnitude <= 0:
        raise ChargeValidationError(f"{label} must be a positive number")
    return magnitude


def validate_charge_draft(draft: fee_models.ChargeDraft) -> fee_models.ChargeDefinition:
    """
    Pre-flight checks run before any roster is fetched.
    Raises ChargeValidationError carrying the message shown to the administrator.
    """
    if not draft.class_id.strip() or not draft.fee_name.strip():
        raise ChargeValidationError("Please fill Class and Fee Name")

    if draft.calculation_mode == CalculationMode.FIXED:
        if not draft.fixed_amount.strip():
            raise ChargeValidationError("Please enter amount")
        magnitude = _parse_magnitude(draft.fixed_amount, "Amount")
    else:
        if not draft.percentage.strip():
            raise ChargeValidationError("Please enter percentage (e.g. 50 for half term)")
        magnitude = _parse_magnitude(draft.percentage, "Percentage")

    return fee_models.ChargeDefinition(
        fee_name=draft.fee_name.strip(),
        class_id=draft.class_id.strip(),
        calculation_mode=draft.calculation_mode,
        magnitude=magnitude,
        due_date=draft.due_date
    )


def percentage_of(total_fee: Decimal | None, percent: Decimal) -> Decimal:
    """round(total * percent / 100) to whole currency units, halves rounded up."""
    base = total_fee if total_fee is not None else Decimal("0")
    return (base * percent / HUNDRED).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def propose_amount(student: fee_models.StudentFeeStatus, definition: fee_models.ChargeDefinition) -> Decimal:
    if definition.calculation_mode == CalculationMode.FIXED:
        return definition.magnitude
    return percentage_of(student.total_fee, definition.magnitude)


def compute_initial_amounts(
    roster: Iterable[fee_models.StudentFeeStatus],
    definition: fee_models.ChargeDefinition
) -> dict[str, fee_models.ReviewRow]:
    """
    One included review row per student, keyed by student id.
    FIXED: the magnitude itself, unrounded. PERCENTAGE: that share of the
    student's total fee, where a missing total counts as 0.
    """
    rows: dict[str, fee_models.ReviewRow] = {}
    for student in roster:
        amount = propose_amount(student, definition)
        rows[student.student_id] = fee_models.ReviewRow(
            student_id=student.student_id,
            student_name=student.student_name,
            reference_total_fee=student.total_fee or fee_models.ZERO,
            proposed_amount=fee_models.parse_proposed_amount(format(amount, "f")),
            included=True
        )

    log.info(
        f"Computed {len(rows)} proposed amounts for '{definition.fee_name}' "
        f"({definition.calculation_mode.value} {definition.magnitude}) in class {definition.class_id}."
    )
    return rows
