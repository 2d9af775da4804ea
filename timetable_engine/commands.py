"""Structured schedule mutations produced by the interpreter.

Each variant carries only the operands it needs; ``action`` is the tag the
executor dispatches on and the discriminator on the wire.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .models import Day, DomainModel


class Swap(DomainModel):
    action: Literal["swap"] = "swap"
    day: Day
    slot_a: int = Field(ge=1)
    slot_b: int = Field(ge=1)
    # Day of slot_b when the two periods sit on different days
    other_day: Optional[Day] = None

    @property
    def day_b(self) -> Day:
        return self.other_day or self.day


class Move(DomainModel):
    action: Literal["move"] = "move"
    from_day: Day
    from_slot: int = Field(ge=1)
    to_day: Day
    to_slot: int = Field(ge=1)


class ClearSlot(DomainModel):
    action: Literal["clear_slot"] = "clear_slot"
    day: Day
    slot_no: int = Field(ge=1)


class ClearSlotAllDays(DomainModel):
    action: Literal["clear_slot_all_days"] = "clear_slot_all_days"
    slot_no: int = Field(ge=1)


class DeleteSubject(DomainModel):
    action: Literal["delete_subject"] = "delete_subject"
    name: str = Field(min_length=1)


class DeleteAll(DomainModel):
    action: Literal["delete_all"] = "delete_all"


class Regenerate(DomainModel):
    action: Literal["regenerate"] = "regenerate"


Command = Annotated[
    Union[Swap, Move, ClearSlot, ClearSlotAllDays, DeleteSubject, DeleteAll, Regenerate],
    Field(discriminator="action"),
]

command_adapter: TypeAdapter = TypeAdapter(Command)


def describe(command: Command) -> str:
    """One-line human summary, used in log lines and API responses."""
    if isinstance(command, Swap):
        return f"swap {command.day.value} period {command.slot_a} with {command.day_b.value} period {command.slot_b}"
    if isinstance(command, Move):
        return (
            f"move {command.from_day.value} period {command.from_slot} "
            f"to {command.to_day.value} period {command.to_slot}"
        )
    if isinstance(command, ClearSlot):
        return f"clear {command.day.value} period {command.slot_no}"
    if isinstance(command, ClearSlotAllDays):
        return f"clear period {command.slot_no} on every day"
    if isinstance(command, DeleteSubject):
        return f"delete subject {command.name!r}"
    if isinstance(command, DeleteAll):
        return "delete the whole schedule"
    return "regenerate the schedule"
