"""Domain types shared by the allocator, the interpreter and the executor.

Every model is frozen: a schedule is replaced wholesale on each mutation,
never edited in place.
"""

import logging
import re
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class Day(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"


WEEK: List[Day] = list(Day)


class SessionType(str, Enum):
    LECTURE = "Lecture"
    LAB = "Lab"


class RoomType(str, Enum):
    LECTURE_ROOM = "Lecture Room"
    COMPUTER_LAB = "Computer Lab"
    NETWORK_LAB = "Network Lab"
    BUSINESS_LAB = "Business Lab"
    GENERIC_LAB = "Lab"

    @property
    def is_lab(self) -> bool:
        return self is not RoomType.LECTURE_ROOM

    @classmethod
    def _missing_(cls, value):
        # "computer_lab", "LECTURE ROOM", "lecture" ...
        if isinstance(value, str):
            key = re.sub(r"[\s_-]+", " ", value).strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
            if key in ("lecture", "lecture hall", "classroom", "theory"):
                return cls.LECTURE_ROOM
        return None


Slot = Tuple[Day, int]

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_UNAVAILABLE_RE = re.compile(r"^\s*([A-Za-z]{3})[A-Za-z]*\s*[-_ ]\s*(\d+)\s*$")


def normalise_time(value: str) -> str:
    """Return a wall-clock string in canonical ``HH:MM`` form."""
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"invalid time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"invalid time {value!r}, out of range")
    return f"{hours:02d}:{minutes:02d}"


def parse_unavailable(blob: Optional[str]) -> FrozenSet[Slot]:
    """Parse the entity-store blob ``"Mon-1;Tue-3"`` into (day, slot) pairs.

    Tokens that are not a day-slot pair (the store also keeps role markers
    in this column) are skipped.
    """
    if not blob:
        return frozenset()
    slots = set()
    for token in blob.split(";"):
        if not token.strip():
            continue
        match = _UNAVAILABLE_RE.match(token)
        day = None
        if match:
            try:
                day = Day(match.group(1).capitalize())
            except ValueError:
                day = None
        if day is None:
            logger.warning("Skipping unrecognised unavailability token %r", token)
            continue
        slots.add((day, int(match.group(2))))
    return frozenset(slots)


class DomainModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Teacher(DomainModel):
    id: str
    name: str
    unavailable: FrozenSet[Slot] = frozenset()

    @field_validator("unavailable", mode="before")
    @classmethod
    def _parse_blob(cls, value):
        if value is None or isinstance(value, str):
            return parse_unavailable(value)
        return value

    def is_available(self, day: Day, slot_no: int) -> bool:
        return (day, slot_no) not in self.unavailable


class Subject(DomainModel):
    id: str
    name: str
    lecture_hours: int = Field(default=0, ge=0)
    lab_hours: int = Field(default=0, ge=0)
    requires_computer: bool = False
    requires_network: bool = False
    requires_business: bool = False

    def hours_for(self, session_type: SessionType) -> int:
        if session_type is SessionType.LECTURE:
            return self.lecture_hours
        return self.lab_hours


class Room(DomainModel):
    id: str
    name: str
    type: RoomType


class Timeslot(DomainModel):
    day: Day
    slot_no: int = Field(ge=1)
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def _canonical_time(cls, value: str) -> str:
        return normalise_time(value)

    @property
    def time_range(self) -> str:
        return f"{self.start_time}-{self.end_time}"


class TeachingAssignment(DomainModel):
    subject_id: str
    teacher_id: str


class ScheduleEntry(DomainModel):
    subject_id: str
    subject_name: str
    teacher_name: str
    room_name: str
    day: Day
    slot_no: int = Field(ge=1)
    time: str
    session_type: SessionType


class PlacementFailure(DomainModel):
    subject_id: str
    session_type: SessionType
    reason: str


class EntitySnapshot(DomainModel):
    """Entity lists of one run, as loaded from the entity store."""

    teachers: List[Teacher] = Field(default_factory=list)
    subjects: List[Subject] = Field(default_factory=list)
    rooms: List[Room] = Field(default_factory=list)
    timeslots: List[Timeslot] = Field(default_factory=list)
    assignments: List[TeachingAssignment] = Field(default_factory=list)


class AllocationResult(DomainModel):
    entries: List[ScheduleEntry] = Field(default_factory=list)
    failures: List[PlacementFailure] = Field(default_factory=list)
    strategy: str = "random"


class Conflict(DomainModel):
    kind: str  # "teacher" or "room"
    day: Day
    slot_no: int
    name: str


def timeslot_index(timeslots: Iterable[Timeslot]) -> Dict[Slot, Timeslot]:
    """Map (day, slot_no) to its Timeslot for O(1) reference checks."""
    return {(t.day, t.slot_no): t for t in timeslots}


def find_conflicts(entries: Iterable[ScheduleEntry]) -> List[Conflict]:
    """Return every teacher or room double-booking in a schedule."""
    seen = set()
    conflicts: List[Conflict] = []
    for entry in entries:
        for kind, name in (("teacher", entry.teacher_name), ("room", entry.room_name)):
            key = (kind, entry.day, entry.slot_no, name)
            if key in seen:
                conflicts.append(Conflict(kind=kind, day=entry.day, slot_no=entry.slot_no, name=name))
            else:
                seen.add(key)
    return conflicts
