import pytest

from timetable_engine.commands import (
    ClearSlot,
    ClearSlotAllDays,
    DeleteAll,
    DeleteSubject,
    Move,
    Regenerate,
    Swap,
    command_adapter,
    describe,
)
from timetable_engine.interpreter import CommandInterpreter, parse_command, resolve_day
from timetable_engine.models import Day


@pytest.mark.parametrize(
    "text",
    [
        "clear period 7 on Friday",
        "delete period 7 on Friday",
        "remove Friday period 7",
        "Please cancel class 7 on Fri",
        "free up slot 7 on friday",
        "ลบคาบ 7 วันศุกร์",
        "ล้างคาบที่ ๗ วันศุกร์",
        "ยกเลิกคาบ 7 ศุกร์",
    ],
)
def test_clear_slot_synonyms(text):
    assert parse_command(text) == ClearSlot(day=Day.FRI, slot_no=7)


@pytest.mark.parametrize(
    "text",
    ["", "   ", "hello world", "what is on Monday?", "swap Monday", "move it somewhere"],
)
def test_not_understood(text):
    assert parse_command(text) is None


def test_none_is_not_understood():
    assert parse_command(None) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("swap period 2 and period 4 on Monday", Swap(day=Day.MON, slot_a=2, slot_b=4)),
        ("swap Monday period 2 with period 4", Swap(day=Day.MON, slot_a=2, slot_b=4)),
        ("สลับคาบ 2 กับคาบ 4 วันจันทร์", Swap(day=Day.MON, slot_a=2, slot_b=4)),
        (
            "swap period 2 on Monday with period 4 on Tuesday",
            Swap(day=Day.MON, slot_a=2, slot_b=4, other_day=Day.TUE),
        ),
        (
            "switch Wed 1 and Thu 3",
            Swap(day=Day.WED, slot_a=1, slot_b=3, other_day=Day.THU),
        ),
    ],
)
def test_swap(text, expected):
    assert parse_command(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        (
            "Move period 1 Monday to Wednesday period 1",
            Move(from_day=Day.MON, from_slot=1, to_day=Day.WED, to_slot=1),
        ),
        (
            "move period 1 Monday to period 3 Wednesday",
            Move(from_day=Day.MON, from_slot=1, to_day=Day.WED, to_slot=3),
        ),
        (
            "move Monday period 1 to Friday period 4",
            Move(from_day=Day.MON, from_slot=1, to_day=Day.FRI, to_slot=4),
        ),
        (
            "ย้ายวันจันทร์คาบ 1 ไปวันพุธคาบ 2",
            Move(from_day=Day.MON, from_slot=1, to_day=Day.WED, to_slot=2),
        ),
    ],
)
def test_move(text, expected):
    assert parse_command(text) == expected


def test_zero_period_is_not_understood():
    assert parse_command("swap period 0 and period 2 on Monday") is None


@pytest.mark.parametrize(
    "text",
    ["swap Monday period 1 and period 3 Frday", "swap period 1 and period 3 on Monday or Friday"],
)
def test_swap_with_trailing_words_is_not_understood(text):
    # A misspelt or second day must not fall back to a one-day swap
    assert parse_command(text) is None


@pytest.mark.parametrize(
    "text",
    [
        "delete all",
        "clear the whole schedule",
        "please wipe everything",
        "ลบทั้งหมด",
        "ลบคาบทั้งหมด",
        "ล้างตาราง",
    ],
)
def test_delete_all(text):
    assert parse_command(text) == DeleteAll()


@pytest.mark.parametrize(
    "text, name",
    [
        ("delete all Math classes", "Math"),
        ("delete all Math", "Math"),
        ("remove the subject Physics", "Physics"),
        ("delete subject Computer Networks", "Computer Networks"),
        ("ลบวิชาคณิตศาสตร์", "คณิตศาสตร์"),
        ("ลบวิชาคณิตศาสตร์ทั้งหมด", "คณิตศาสตร์"),
        ("delete subject Database", "Database"),
    ],
)
def test_delete_subject(text, name):
    assert parse_command(text) == DeleteSubject(name=name)


def test_delete_subject_needs_a_qualifier():
    # Without "all" or "subject" a bare delete is not a subject deletion
    assert parse_command("delete Math") is None


def test_reserved_words_are_not_subjects():
    assert parse_command("delete all period 7") == ClearSlotAllDays(slot_no=7)


@pytest.mark.parametrize("text", ["delete subject all", "delete all subjects", "ลบวิชาทั้งหมด"])
def test_scope_words_are_not_subject_names(text):
    assert parse_command(text) is None


def test_break_words_are_not_subject_names():
    assert parse_command("delete all lunch breaks") == ClearSlotAllDays(slot_no=3)


def test_clear_period_without_day_applies_to_every_day():
    assert parse_command("clear period 5") == ClearSlotAllDays(slot_no=5)


def test_break_phrases_use_lunch_slot():
    assert parse_command("clear the lunch break on Friday") == ClearSlot(day=Day.FRI, slot_no=3)
    assert parse_command("remove lunch break") == ClearSlotAllDays(slot_no=3)
    assert parse_command("พักเที่ยงวันอังคาร") == ClearSlot(day=Day.TUE, slot_no=3)
    assert parse_command("คาบว่างวันจันทร์") == ClearSlot(day=Day.MON, slot_no=3)
    assert parse_command("ทำคาบ 4 วันพุธให้ว่าง") == ClearSlot(day=Day.WED, slot_no=4)


def test_between_is_not_a_break_word():
    # "ระหว่าง" ends in the same letters as "ว่าง"
    assert parse_command("ล้างคาบระหว่างวัน") is None


def test_clear_with_two_periods_is_not_understood():
    assert parse_command("cancel period 2 and 4 on Monday") is None
    assert parse_command("clear periods 2, 4") is None


def test_lunch_slot_is_configurable():
    interpreter = CommandInterpreter(lunch_slot=4)
    assert interpreter.parse("lunch break on Monday") == ClearSlot(day=Day.MON, slot_no=4)
    # An explicit number still wins
    assert interpreter.parse("break period 2 on Monday") == ClearSlot(day=Day.MON, slot_no=2)


@pytest.mark.parametrize(
    "text",
    ["regenerate the timetable", "please reset", "re-arrange everything", "start over", "จัดใหม่"],
)
def test_regenerate(text):
    assert parse_command(text) == Regenerate()


def test_verbs_do_not_match_inside_words():
    # "remove" contains "move" and must stay a clear command
    assert parse_command("remove period 2 on Tuesday") == ClearSlot(day=Day.TUE, slot_no=2)


def test_resolve_day():
    assert resolve_day("Thurs") is Day.THU
    assert resolve_day("วันพฤหัสบดี") is Day.THU
    assert resolve_day("weds") is Day.WED
    assert resolve_day("someday") is None
    assert resolve_day(None) is None


def test_custom_matchers():
    interpreter = CommandInterpreter(matchers=[])
    assert interpreter.parse("delete all") is None


def test_commands_round_trip_through_the_adapter():
    command = command_adapter.validate_python(
        {"action": "swap", "day": "Mon", "slotA": 1, "slotB": 2, "otherDay": "Tue"}
    )
    assert command == Swap(day=Day.MON, slot_a=1, slot_b=2, other_day=Day.TUE)
    assert command.day_b is Day.TUE
    assert describe(command) == "swap Mon period 1 with Tue period 2"
    assert describe(ClearSlotAllDays(slot_no=3)) == "clear period 3 on every day"
