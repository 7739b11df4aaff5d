'''
Fee accounting models: dashboard statistics, charge drafts and the
per-student review/batch records of the bulk fee assignment workflow.
'''
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Literal, Annotated, Union, Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, field_serializer
from pydantic.alias_generators import to_camel

from .enums import CalculationMode, FeePaymentStatus, CollectionBand

ZERO = Decimal("0")


def coerce_money(value: Any) -> Decimal:
    """
    Reads an upstream numeric field leniently.
    None, blanks, garbage and non-finite values all become 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return amount if amount.is_finite() else ZERO


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class CamelModel(BaseModel):
    """Base for every record exchanged with the school backend or the front end."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- 1. Dashboard Statistics ---

class ClassFeeStat(CamelModel):
    """
    Per-class fee statistics as reported by the school backend.
    expected = collected + pending is assumed upstream, never enforced here.
    """
    class_section_id: str = ""
    class_name: str = ""
    section: str = ""
    total_expected_fee: Decimal = ZERO
    total_collected_fee: Decimal = ZERO
    total_pending_fee: Decimal = ZERO

    model_config = ConfigDict(frozen=True)

    @field_validator("class_section_id", "class_name", "section", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("total_expected_fee", "total_collected_fee", "total_pending_fee", mode="before")
    @classmethod
    def _degrade_to_zero(cls, value: Any) -> Decimal:
        return coerce_money(value)

    @computed_field(alias="collectionRate")
    @property
    def collection_rate(self) -> Decimal:
        if self.total_expected_fee <= 0:
            return Decimal("0.00")
        rate = self.total_collected_fee / self.total_expected_fee * 100
        return rate.quantize(Decimal("0.01"))

    @computed_field(alias="collectionBand")
    @property
    def collection_band(self) -> CollectionBand:
        rate = self.collection_rate
        if rate >= 80:
            return CollectionBand.HIGH
        if rate >= 50:
            return CollectionBand.MEDIUM
        return CollectionBand.LOW


class SchoolFeeTotals(CamelModel):
    expected: Decimal = ZERO
    collected: Decimal = ZERO
    pending: Decimal = ZERO


class ClassFeeOverview(CamelModel):
    """School-wide totals plus the class list in display order."""
    totals: SchoolFeeTotals
    classes: list[ClassFeeStat]


class ClassSection(CamelModel):
    """
    A class/section as listed in the class selector of the assignment form.
    """
    class_section_id: Optional[str] = None
    class_name: str = ""
    section: str = ""
    academic_year: Optional[str] = None
    capacity: Optional[int] = None
    current_strength: Optional[int] = None
    class_teacher_id: Optional[str] = None
    class_teacher_name: Optional[str] = None

    @field_validator("class_name", "section", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("class_section_id", "class_teacher_id", mode="before")
    @classmethod
    def _id_fields(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class StudentFeeStatus(CamelModel):
    """
    One student's fee standing inside a class. Read-only input to the
    fee computation.
    """
    student_id: str
    student_name: str = ""
    roll_number: Optional[str] = None
    total_fee: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    balance_amount: Decimal = ZERO
    status: Optional[FeePaymentStatus] = None

    @field_validator("student_id", "student_name", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("total_fee", "paid_amount", mode="before")
    @classmethod
    def _optional_money(cls, value: Any) -> Optional[Decimal]:
        return None if value is None else coerce_money(value)

    @field_validator("balance_amount", mode="before")
    @classmethod
    def _balance(cls, value: Any) -> Decimal:
        return coerce_money(value)


# --- 2. Charge Definition ---

class ChargeDraft(CamelModel):
    """
    Raw administrator input while the workflow is in the Drafting phase.
    Amount and percentage stay as typed until validate_charge_draft runs.
    """
    fee_name: str = ""
    class_id: str = ""
    calculation_mode: CalculationMode = CalculationMode.PERCENTAGE
    fixed_amount: str = ""
    percentage: str = ""
    due_date: date = Field(default_factory=date.today)


class ChargeDefinition(CamelModel):
    """A validated charge. Frozen once the review phase begins."""
    fee_name: str = Field(..., min_length=1)
    class_id: str = Field(..., min_length=1)
    calculation_mode: CalculationMode
    magnitude: Decimal = Field(..., gt=0)
    due_date: date

    model_config = ConfigDict(frozen=True)


# --- 3. Review Rows ---

class ValidAmount(BaseModel):
    kind: Literal["valid"] = "valid"
    text: str
    value: Decimal

class InvalidAmount(BaseModel):
    kind: Literal["invalid"] = "invalid"
    text: str

ProposedAmount = Annotated[
    Union[ValidAmount, InvalidAmount],
    Field(discriminator="kind")
]


def parse_proposed_amount(text: str) -> Union[ValidAmount, InvalidAmount]:
    """
    Tags typed input without rejecting it, so "12." or "" survive
    until the batch is compiled.
    """
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        return InvalidAmount(text=text)
    if not value.is_finite():
        return InvalidAmount(text=text)
    return ValidAmount(text=text, value=value)


class ReviewRow(CamelModel):
    """
    One student's editable entry during review. Only `included` and
    `proposed_amount` change after creation.
    On the wire `proposedAmount` is the raw text the user typed.
    """
    student_id: str
    student_name: str = ""
    reference_total_fee: Decimal = ZERO
    proposed_amount: ProposedAmount
    included: bool = True

    @field_validator("proposed_amount", mode="before")
    @classmethod
    def _tag_raw_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_proposed_amount(value)
        if isinstance(value, Decimal):
            return parse_proposed_amount(format(value, "f"))
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return parse_proposed_amount(str(value))
        # serialized form: the tag is re-derived from the text, never trusted
        if isinstance(value, dict) and "text" in value:
            return parse_proposed_amount(str(value["text"]))
        return value

    @field_serializer("proposed_amount")
    def _raw_text(self, amount: Union[ValidAmount, InvalidAmount]) -> str:
        return amount.text

    @computed_field(alias="amountValid")
    @property
    def amount_valid(self) -> bool:
        return isinstance(self.proposed_amount, ValidAmount)


# --- 4. Submission ---

class AssignmentBatchEntry(CamelModel):
    """
    The submission-ready record for one student.
    Wire shape: {studentId, feeName, amount: number, dueDate: "YYYY-MM-DD"}.
    """
    student_id: str
    fee_name: str
    amount: Decimal
    due_date: str

    model_config = ConfigDict(frozen=True)

    @field_serializer("amount")
    def _amount_as_number(self, amount: Decimal) -> Union[int, float]:
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FeeAssignmentSubmission(CamelModel):
    """Request body for submitting a reviewed assignment in one call."""
    draft: ChargeDraft
    rows: list[ReviewRow]


class BulkAssignmentResult(CamelModel):
    assigned_count: int
    fee_name: str
    message: str


# --- 5. Student Fee Details ---

class FeeSummary(CamelModel):
    total_fee: Decimal = ZERO
    paid_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO

class FeeItem(CamelModel):
    fee_id: str
    fee_name: str
    due_date: date
    amount: Decimal = ZERO
    amount_paid: Decimal = ZERO
    status: str

class PaymentHistoryItem(CamelModel):
    payment_id: str
    payment_date: datetime
    amount: Decimal
    method: str
    transaction_ref: Optional[str] = None

class StudentFeeDetails(CamelModel):
    summary: FeeSummary
    pending_fees: list[FeeItem] = Field(default_factory=list)
    all_fees: list[FeeItem] = Field(default_factory=list)
    payment_history: list[PaymentHistoryItem] = Field(default_factory=list)
