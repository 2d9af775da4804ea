from .allocator import Allocator, suitable_rooms
from .commands import (
    ClearSlot,
    ClearSlotAllDays,
    Command,
    DeleteAll,
    DeleteSubject,
    Move,
    Regenerate,
    Swap,
)
from .config import EngineSettings, load_settings
from .conflicts import ConflictTracker
from .executor import CommandExecutor, CommandResult
from .interpreter import CommandInterpreter, parse_command
from .models import (
    AllocationResult,
    Day,
    EntitySnapshot,
    PlacementFailure,
    Room,
    RoomType,
    ScheduleEntry,
    SessionType,
    Subject,
    Teacher,
    TeachingAssignment,
    Timeslot,
    find_conflicts,
    parse_unavailable,
)
from .validation import ScheduleReport, SubjectCoverage, validate_schedule
