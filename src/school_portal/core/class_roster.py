'''
Dashboard aggregation and ordering of classes and their students.
'''
import re
from typing import Iterable, Sequence

from ..models import fees as fee_models

_NON_DIGITS = re.compile(r"\D")


def class_number(class_name: str) -> int:
    """
    The grade embedded in a class name: 'Class 10' -> 10.
    Every non-digit is stripped first, names without digits sort as 0.
    """
    digits = _NON_DIGITS.sub("", class_name or "")
    return int(digits) if digits else 0


def class_sort_key(class_name: str, section: str) -> tuple[int, str]:
    # section compared case-sensitively, plain code-point order
    return class_number(class_name), section or ""


def sort_classes(stats: Iterable[fee_models.ClassFeeStat]) -> list[fee_models.ClassFeeStat]:
    """Returns a new list; sorted() is stable so equal keys keep their input order."""
    return sorted(stats, key=lambda stat: class_sort_key(stat.class_name, stat.section))


def sort_class_sections(sections: Iterable[fee_models.ClassSection]) -> list[fee_models.ClassSection]:
    return sorted(sections, key=lambda cls: class_sort_key(cls.class_name, cls.section))


def sum_totals(stats: Iterable[fee_models.ClassFeeStat]) -> fee_models.SchoolFeeTotals:
    expected = collected = pending = fee_models.ZERO
    for stat in stats:
        expected += stat.total_expected_fee
        collected += stat.total_collected_fee
        pending += stat.total_pending_fee
    return fee_models.SchoolFeeTotals(expected=expected, collected=collected, pending=pending)


def aggregate(stats: Sequence[fee_models.ClassFeeStat]) -> fee_models.ClassFeeOverview:
    """
    Builds the admin fee overview: school-wide totals and the classes in
    display order. The input sequence and its elements are left untouched.
    """
    stats = list(stats or [])
    return fee_models.ClassFeeOverview(
        totals=sum_totals(stats),
        classes=sort_classes(stats)
    )


def sort_students_by_balance(students: Iterable[fee_models.StudentFeeStatus]) -> list[fee_models.StudentFeeStatus]:
    """Largest outstanding balance first."""
    return sorted(students, key=lambda student: student.balance_amount, reverse=True)


def sort_fee_items(items: Iterable[fee_models.FeeItem]) -> list[fee_models.FeeItem]:
    """Latest due date first."""
    return sorted(items, key=lambda item: item.due_date, reverse=True)


def sort_payment_history(payments: Iterable[fee_models.PaymentHistoryItem]) -> list[fee_models.PaymentHistoryItem]:
    """Most recent payment first."""
    return sorted(payments, key=lambda payment: payment.payment_date, reverse=True)
