import json
from pathlib import Path

import pytest

from timetable_engine.models import (
    Day,
    EntitySnapshot,
    Room,
    RoomType,
    ScheduleEntry,
    SessionType,
    Subject,
    Teacher,
    TeachingAssignment,
    Timeslot,
    WEEK,
)

EXAMPLE_JSON = Path(__file__).resolve().parents[1] / "timetable_engine" / "example.json"


def make_grid(slots_per_day=8, days=WEEK):
    """Hourly periods from 08:00, numbered from 1 on every day."""
    return [
        Timeslot(
            day=day,
            slot_no=n,
            start_time=f"{7 + n:02d}:00",
            end_time=f"{8 + n:02d}:00",
        )
        for day in days
        for n in range(1, slots_per_day + 1)
    ]


def entry(subject_name, day, slot_no, teacher="Ann", room="R101", session_type=SessionType.LECTURE):
    return ScheduleEntry(
        subject_id=subject_name[:3].upper(),
        subject_name=subject_name,
        teacher_name=teacher,
        room_name=room,
        day=day,
        slot_no=slot_no,
        time=f"{7 + slot_no:02d}:00-{8 + slot_no:02d}:00",
        session_type=session_type,
    )


@pytest.fixture
def grid():
    return make_grid()


@pytest.fixture
def schedule():
    return [
        entry("Database", Day.MON, 1, teacher="Ann", room="R101"),
        entry("Networks", Day.MON, 2, teacher="Bob", room="L202", session_type=SessionType.LAB),
        entry("Math", Day.TUE, 1, teacher="Cid", room="R102"),
        entry("Math", Day.WED, 3, teacher="Cid", room="R102"),
        entry("Physics", Day.FRI, 7, teacher="Dee", room="R101"),
        entry("Chemistry", Day.FRI, 7, teacher="Eve", room="L201", session_type=SessionType.LAB),
        entry("Biology", Day.FRI, 6, teacher="Ann", room="R101"),
    ]


@pytest.fixture
def snapshot():
    teachers = [
        Teacher(id="T1", name="Ann", unavailable="Mon-1;Mon-2"),
        Teacher(id="T2", name="Bob"),
    ]
    subjects = [
        Subject(id="DB", name="Database", lecture_hours=2, lab_hours=1, requires_computer=True),
        Subject(id="NW", name="Networks", lecture_hours=1, lab_hours=2, requires_network=True),
        Subject(id="EN", name="English", lecture_hours=3),
    ]
    rooms = [
        Room(id="R1", name="R101", type=RoomType.LECTURE_ROOM),
        Room(id="L1", name="L201", type=RoomType.COMPUTER_LAB),
        Room(id="L2", name="L202", type=RoomType.NETWORK_LAB),
    ]
    assignments = [
        TeachingAssignment(subject_id="DB", teacher_id="T1"),
        TeachingAssignment(subject_id="NW", teacher_id="T2"),
        TeachingAssignment(subject_id="EN", teacher_id="T1"),
        TeachingAssignment(subject_id="EN", teacher_id="T2"),
    ]
    return EntitySnapshot(
        teachers=teachers,
        subjects=subjects,
        rooms=rooms,
        timeslots=make_grid(slots_per_day=5),
        assignments=assignments,
    )


@pytest.fixture
def example_data():
    with EXAMPLE_JSON.open("r", encoding="utf-8") as f:
        return json.load(f)
