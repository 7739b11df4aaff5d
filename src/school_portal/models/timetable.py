'''
Timetable Models
'''
from typing import Optional, Any

from pydantic import Field, field_validator

from .fees import CamelModel

class Period(CamelModel):
    subject_id: str = ""
    subject_name: str = ""
    teacher_id: str = ""
    teacher_name: str = ""
    start_time: str = Field("", description="e.g. '09:00'")
    end_time: str = Field("", description="e.g. '09:45'")

    @field_validator("subject_id", "subject_name", "teacher_id", "teacher_name", "start_time", "end_time", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> str:
        return "" if value is None else str(value)

class DayEntry(CamelModel):
    day: str = Field("", description="e.g. 'MONDAY'")
    date: Optional[str] = Field(None, description="e.g. '2025-11-20'. Absent for template weeks.")
    periods: list[Period] = Field(default_factory=list)

    @field_validator("periods", mode="before")
    @classmethod
    def _no_periods(cls, value: Any) -> Any:
        return [] if value is None else value

class TeacherMini(CamelModel):
    teacher_id: str
    full_name: str = ""

class ClassSectionMini(CamelModel):
    class_section_id: str
    class_name: str = ""
    section_name: str = ""
    academic_year: Optional[str] = None

class WeeklyTimetable(CamelModel):
    """
    The weekly payload returned by the school backend for one student.
    """
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    class_section_id: Optional[str] = None
    class_section: Optional[ClassSectionMini] = None
    class_teacher: Optional[TeacherMini] = None
    weekly_timetable: list[DayEntry] = Field(default_factory=list)

    @field_validator("weekly_timetable", mode="before")
    @classmethod
    def _no_days(cls, value: Any) -> Any:
        return [] if value is None else value


# --- Derived view-state ---

class UniqueSubject(CamelModel):
    subject_id: str
    subject_name: str
    teacher_id: str
    teacher_name: str

class ScheduledPeriod(Period):
    """A period of one subject, tagged with the day it came from."""
    day: str

class MarkInfo(CamelModel):
    """Calendar marking for one date."""
    marked: bool = False
    dot_color: Optional[str] = None
    selected: bool = False
    selected_color: Optional[str] = None

class TimetableView(CamelModel):
    """Everything the subject-filtered timetable screen renders."""
    class_teacher: Optional[TeacherMini] = None
    subjects: list[UniqueSubject] = Field(default_factory=list)
    selected_subject: Optional[UniqueSubject] = None
    schedule: list[ScheduledPeriod] = Field(default_factory=list)
    marked_dates: dict[str, MarkInfo] = Field(default_factory=dict)
    todays_periods: list[Period] = Field(default_factory=list)
