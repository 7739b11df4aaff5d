'''
Derives the subject-filtered timetable view from a weekly payload.

Every function is pure and treats a missing week as "no data yet":
empty results, never an exception.
'''
from datetime import date
from typing import Optional, Sequence

from ..models import timetable as timetable_models

DOT_COLOR = "#F97316"
SELECTED_COLOR = "#F97316"

Week = Optional[Sequence[timetable_models.DayEntry]]


def extract_unique_subjects(week: Week) -> list[timetable_models.UniqueSubject]:
    """
    Distinct subjects in encounter order. The first period seen for a
    subject id decides its name and teacher; later ones are ignored even
    if they name a different teacher.
    """
    seen: dict[str, timetable_models.UniqueSubject] = {}
    for day in week or []:
        for period in day.periods:
            if not period.subject_id or period.subject_id in seen:
                continue
            seen[period.subject_id] = timetable_models.UniqueSubject(
                subject_id=period.subject_id,
                subject_name=period.subject_name,
                teacher_id=period.teacher_id,
                teacher_name=period.teacher_name
            )
    return list(seen.values())


def default_subject(
    subjects: Sequence[timetable_models.UniqueSubject],
    class_teacher_id: Optional[str]
) -> Optional[timetable_models.UniqueSubject]:
    """The class teacher's subject, else the first one, else None."""
    if not subjects:
        return None
    if class_teacher_id:
        for subject in subjects:
            if subject.teacher_id == class_teacher_id:
                return subject
    return subjects[0]


def schedule_for(week: Week, subject_id: Optional[str]) -> list[timetable_models.ScheduledPeriod]:
    if not subject_id:
        return []
    schedule = []
    for day in week or []:
        for period in day.periods:
            if period.subject_id == subject_id:
                schedule.append(timetable_models.ScheduledPeriod(day=day.day, **period.model_dump()))
    return schedule


def calendar_marks(
    week: Week,
    subject_id: Optional[str],
    today: date
) -> dict[str, timetable_models.MarkInfo]:
    """
    Dot every dated day that has at least one period of the subject, then
    select today, merging into a dot already placed there.
    """
    marks: dict[str, timetable_models.MarkInfo] = {}
    if subject_id:
        for day in week or []:
            if not day.date:
                continue
            if any(period.subject_id == subject_id for period in day.periods):
                marks[day.date] = timetable_models.MarkInfo(marked=True, dot_color=DOT_COLOR)

    today_key = today.isoformat()
    existing = marks.get(today_key, timetable_models.MarkInfo())
    marks[today_key] = existing.model_copy(update={"selected": True, "selected_color": SELECTED_COLOR})
    return marks


def todays_periods(week: Week, today: date) -> list[timetable_models.Period]:
    today_key = today.isoformat()
    for day in week or []:
        if day.date == today_key:
            return list(day.periods)
    return []


def periods_for_day(week: Week, day_name: str) -> list[timetable_models.Period]:
    """All periods of one weekday, earliest start first."""
    wanted = (day_name or "").upper()
    periods = [
        period
        for day in week or []
        if day.day.upper() == wanted
        for period in day.periods
    ]
    return sorted(periods, key=lambda period: period.start_time)


def build_timetable_view(
    payload: Optional[timetable_models.WeeklyTimetable],
    subject_id: Optional[str],
    today: date
) -> timetable_models.TimetableView:
    """
    Assembles the screen state. Without an explicit subject the default
    subject (class teacher's, else first) is selected.
    """
    week = payload.weekly_timetable if payload else []
    class_teacher = payload.class_teacher if payload else None

    subjects = extract_unique_subjects(week)
    if subject_id:
        selected = next((s for s in subjects if s.subject_id == subject_id), None)
    else:
        selected = default_subject(subjects, class_teacher.teacher_id if class_teacher else None)
    selected_id = selected.subject_id if selected else subject_id

    return timetable_models.TimetableView(
        class_teacher=class_teacher,
        subjects=subjects,
        selected_subject=selected,
        schedule=schedule_for(week, selected_id),
        marked_dates=calendar_marks(week, selected_id, today),
        todays_periods=todays_periods(week, today)
    )
