'''
Static enums shared by the fee and timetable models.
'''
import enum

class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"

class FeePaymentStatus(str, enum.Enum):
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    PENDING = "PENDING"

class CalculationMode(str, enum.Enum):
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"

class ReviewPhase(str, enum.Enum):
    DRAFTING = "DRAFTING"
    REVIEWING = "REVIEWING"
    SUBMITTED = "SUBMITTED"
    CANCELLED = "CANCELLED"

class CollectionBand(str, enum.Enum):
    """Dashboard colouring of a class by how much of its expected fee is collected."""
    HIGH = "HIGH"      # >= 80%
    MEDIUM = "MEDIUM"  # >= 50%
    LOW = "LOW"
