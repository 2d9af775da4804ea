"""Schedule health report: hours placed against hours requested, load per
day, double-bookings and entries that point outside the timetable."""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    WEEK,
    Conflict,
    Day,
    DomainModel,
    ScheduleEntry,
    SessionType,
    Subject,
    Timeslot,
    find_conflicts,
    timeslot_index,
)

logger = logging.getLogger(__name__)


class SubjectCoverage(DomainModel):
    subject_id: str
    subject_name: str
    expected_lecture_hours: int
    placed_lecture_hours: int
    expected_lab_hours: int
    placed_lab_hours: int

    @property
    def expected_hours(self) -> int:
        return self.expected_lecture_hours + self.expected_lab_hours

    @property
    def placed_hours(self) -> int:
        return self.placed_lecture_hours + self.placed_lab_hours

    @property
    def complete(self) -> bool:
        return (
            self.placed_lecture_hours == self.expected_lecture_hours
            and self.placed_lab_hours == self.expected_lab_hours
        )


class ScheduleReport(DomainModel):
    total_entries: int
    expected_hours: int
    coverage: List[SubjectCoverage]
    day_counts: Dict[Day, int]
    busiest_day: Optional[Day] = None
    quietest_day: Optional[Day] = None
    conflicts: List[Conflict]
    violations: List[str]
    valid: bool


def validate_schedule(
    entries: Sequence[ScheduleEntry],
    subjects: Iterable[Subject],
    timeslots: Optional[Sequence[Timeslot]] = None,
) -> ScheduleReport:
    """Check a schedule against the subjects it was built for.

    Each subject's placed lecture and lab hours are compared with the hours it
    asks for; entries of unknown subjects, entries on a (day, slot) missing
    from ``timeslots`` and teacher/room double-bookings are reported as
    violations. Never raises on a bad schedule; the report carries the
    findings.
    """
    subjects = list(subjects)
    placed = Counter((e.subject_id, e.session_type) for e in entries)
    violations: List[str] = []

    coverage = []
    for subject in subjects:
        row = SubjectCoverage(
            subject_id=subject.id,
            subject_name=subject.name,
            expected_lecture_hours=subject.lecture_hours,
            placed_lecture_hours=placed[(subject.id, SessionType.LECTURE)],
            expected_lab_hours=subject.lab_hours,
            placed_lab_hours=placed[(subject.id, SessionType.LAB)],
        )
        coverage.append(row)
        if not row.complete:
            violations.append(
                f"{subject.name} ({subject.id}) has {row.placed_hours} hours placed, "
                f"expected {row.expected_hours}"
            )

    known = {s.id for s in subjects}
    for subject_id in sorted({e.subject_id for e in entries} - known):
        violations.append(f"{subject_id} is scheduled but is not a listed subject")

    if timeslots is not None:
        index = timeslot_index(timeslots)
        for e in entries:
            if (e.day, e.slot_no) not in index:
                violations.append(f"{e.subject_name} sits on {e.day.value} period {e.slot_no}, not in the timetable")

    conflicts = find_conflicts(entries)
    for c in conflicts:
        violations.append(f"{c.kind.capitalize()} {c.name} double-booked on {c.day.value} period {c.slot_no}")

    day_counts = {day: 0 for day in WEEK}
    for e in entries:
        day_counts[e.day] += 1
    busiest = quietest = None
    if entries:
        # Ties go to the earlier day
        busiest = max(WEEK, key=lambda d: (day_counts[d], -WEEK.index(d)))
        quietest = min(WEEK, key=lambda d: (day_counts[d], WEEK.index(d)))

    if violations:
        logger.warning("Schedule check found %d violations", len(violations))

    return ScheduleReport(
        total_entries=len(entries),
        expected_hours=sum(s.lecture_hours + s.lab_hours for s in subjects),
        coverage=coverage,
        day_counts=day_counts,
        busiest_day=busiest,
        quietest_day=quietest,
        conflicts=conflicts,
        violations=violations,
        valid=not violations,
    )
