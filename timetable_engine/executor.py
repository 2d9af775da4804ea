import logging
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence

from .allocator import Allocator
from .commands import (
    ClearSlot,
    ClearSlotAllDays,
    Command,
    DeleteAll,
    DeleteSubject,
    Move,
    Regenerate,
    Swap,
    describe,
)
from .config import MOVE_POLICIES, EngineSettings
from .models import (
    Day,
    EntitySnapshot,
    PlacementFailure,
    ScheduleEntry,
    Slot,
    Timeslot,
    timeslot_index,
)

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    schedule: List[ScheduleEntry]
    error: Optional[str] = None
    failures: Sequence[PlacementFailure] = ()


def _relocate(entry: ScheduleEntry, timeslot: Timeslot) -> ScheduleEntry:
    return entry.model_copy(
        update={"day": timeslot.day, "slot_no": timeslot.slot_no, "time": timeslot.time_range}
    )


def _at(entry: ScheduleEntry, slot: Slot) -> bool:
    return (entry.day, entry.slot_no) == slot


def _label(day: Day, slot_no: int) -> str:
    return f"{day.value} period {slot_no}"


class CommandExecutor:
    """Applies a ``Command`` to a schedule and returns a new schedule.

    The input list is never modified. Entries are addressed by (day, slot);
    whenever an entry moves, its display time is re-derived from the run's
    timeslots. Invalid operands never raise: the result carries the schedule
    unchanged and an error message for the caller to present.
    """

    def __init__(
        self,
        allocator: Optional[Allocator] = None,
        snapshot: Optional[EntitySnapshot] = None,
        move_policy: str = "reject",
    ) -> None:
        if move_policy not in MOVE_POLICIES:
            raise ValueError(f"Unknown move policy {move_policy!r}")
        self.allocator = allocator or Allocator()
        self.snapshot = snapshot
        self.move_policy = move_policy
        self._handlers: Dict[type, Callable[..., CommandResult]] = {
            Swap: self._swap,
            Move: self._move,
            ClearSlot: self._clear_slot,
            ClearSlotAllDays: self._clear_slot_all_days,
            DeleteSubject: self._delete_subject,
            DeleteAll: self._delete_all,
            Regenerate: self._regenerate,
        }

    @classmethod
    def from_settings(
        cls, settings: EngineSettings, snapshot: Optional[EntitySnapshot] = None
    ) -> "CommandExecutor":
        return cls(
            allocator=Allocator.from_settings(settings),
            snapshot=snapshot,
            move_policy=settings.move_policy,
        )

    def apply(
        self,
        schedule: Sequence[ScheduleEntry],
        command: Command,
        timeslots: Sequence[Timeslot],
    ) -> CommandResult:
        entries = list(schedule)
        handler = self._handlers.get(type(command))
        if handler is None:
            return CommandResult(entries, f"unsupported command {command!r}")
        result = handler(entries, command, timeslot_index(timeslots))
        if result.error:
            logger.warning("Rejected %s: %s", describe(command), result.error)
        else:
            logger.info(
                "Applied %s: %d -> %d entries", describe(command), len(entries), len(result.schedule)
            )
        return result

    def _swap(self, entries: List[ScheduleEntry], command: Swap, slots: Dict[Slot, Timeslot]) -> CommandResult:
        first = slots.get((command.day, command.slot_a))
        second = slots.get((command.day_b, command.slot_b))
        if first is None or second is None:
            missing = _label(command.day, command.slot_a) if first is None else _label(command.day_b, command.slot_b)
            return CommandResult(entries, f"invalid slot reference: {missing} is not in the timetable")

        key_a, key_b = (first.day, first.slot_no), (second.day, second.slot_no)
        swapped = []
        for entry in entries:
            if _at(entry, key_a):
                swapped.append(_relocate(entry, second))
            elif _at(entry, key_b):
                swapped.append(_relocate(entry, first))
            else:
                swapped.append(entry)
        return CommandResult(swapped)

    def _move(self, entries: List[ScheduleEntry], command: Move, slots: Dict[Slot, Timeslot]) -> CommandResult:
        source = slots.get((command.from_day, command.from_slot))
        target = slots.get((command.to_day, command.to_slot))
        if source is None:
            return CommandResult(
                entries,
                f"invalid slot reference: {_label(command.from_day, command.from_slot)} is not in the timetable",
            )
        if target is None:
            return CommandResult(
                entries,
                f"invalid slot reference: {_label(command.to_day, command.to_slot)} is not in the timetable",
            )

        src_key, dst_key = (source.day, source.slot_no), (target.day, target.slot_no)
        moving = [e for e in entries if _at(e, src_key)]
        if not moving:
            return CommandResult(entries, f"nothing is scheduled on {_label(*src_key)}")
        if src_key == dst_key:
            return CommandResult(entries)

        occupants = [e for e in entries if _at(e, dst_key)]
        clashes = [
            (mover, occupant)
            for mover in moving
            for occupant in occupants
            if mover.teacher_name == occupant.teacher_name or mover.room_name == occupant.room_name
        ]
        if clashes:
            mover, occupant = clashes[0]
            reason = (
                f"teacher {mover.teacher_name}"
                if mover.teacher_name == occupant.teacher_name
                else f"room {mover.room_name}"
            )
            if self.move_policy == "reject":
                return CommandResult(
                    entries,
                    f"{_label(*dst_key)} is already booked for {reason} ({occupant.subject_name})",
                )
            logger.warning("Move to %s double-books %s", _label(*dst_key), reason)

        moved = [_relocate(e, target) if _at(e, src_key) else e for e in entries]
        return CommandResult(moved)

    def _clear_slot(
        self, entries: List[ScheduleEntry], command: ClearSlot, slots: Dict[Slot, Timeslot]
    ) -> CommandResult:
        key = (command.day, command.slot_no)
        if key not in slots:
            return CommandResult(
                entries, f"invalid slot reference: {_label(*key)} is not in the timetable"
            )
        return CommandResult([e for e in entries if not _at(e, key)])

    def _clear_slot_all_days(
        self, entries: List[ScheduleEntry], command: ClearSlotAllDays, slots: Dict[Slot, Timeslot]
    ) -> CommandResult:
        # Day grids may differ, so only days that define this period are cleared
        days = {day for day, slot_no in slots if slot_no == command.slot_no}
        if not days:
            return CommandResult(
                entries, f"invalid slot reference: period {command.slot_no} is not in the timetable"
            )
        return CommandResult(
            [e for e in entries if not (e.slot_no == command.slot_no and e.day in days)]
        )

    def _delete_subject(
        self, entries: List[ScheduleEntry], command: DeleteSubject, slots: Dict[Slot, Timeslot]
    ) -> CommandResult:
        needle = command.name.strip().lower()
        if not needle:
            return CommandResult(entries, "no subject name given")
        kept = [
            e for e in entries
            if needle not in e.subject_id.lower() and needle not in e.subject_name.lower()
        ]
        if len(kept) == len(entries):
            return CommandResult(entries, f"no subject matching {command.name!r} in the schedule")
        return CommandResult(kept)

    def _delete_all(
        self, entries: List[ScheduleEntry], command: DeleteAll, slots: Dict[Slot, Timeslot]
    ) -> CommandResult:
        return CommandResult([])

    def _regenerate(
        self, entries: List[ScheduleEntry], command: Regenerate, slots: Dict[Slot, Timeslot]
    ) -> CommandResult:
        if self.snapshot is None:
            return CommandResult(entries, "regeneration needs the entity lists of this run")
        result = self.allocator.generate_from(self.snapshot)
        return CommandResult(list(result.entries), None, list(result.failures))
