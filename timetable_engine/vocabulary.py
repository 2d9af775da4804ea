"""Keyword tables for the schedule command interpreter (English and Thai).

Only data lives here; ``interpreter.py`` turns the tables into patterns.
"""

from typing import Dict, Tuple

from .models import Day

# Every accepted spelling of a weekday -> canonical day code
DAY_NAMES: Dict[str, Day] = {
    "monday": Day.MON,
    "mon": Day.MON,
    "จันทร์": Day.MON,
    "วันจันทร์": Day.MON,
    "tuesday": Day.TUE,
    "tues": Day.TUE,
    "tue": Day.TUE,
    "อังคาร": Day.TUE,
    "วันอังคาร": Day.TUE,
    "wednesday": Day.WED,
    "weds": Day.WED,
    "wed": Day.WED,
    "พุธ": Day.WED,
    "วันพุธ": Day.WED,
    "thursday": Day.THU,
    "thurs": Day.THU,
    "thur": Day.THU,
    "thu": Day.THU,
    "พฤหัสบดี": Day.THU,
    "พฤหัส": Day.THU,
    "วันพฤหัสบดี": Day.THU,
    "วันพฤหัส": Day.THU,
    "friday": Day.FRI,
    "fri": Day.FRI,
    "ศุกร์": Day.FRI,
    "วันศุกร์": Day.FRI,
}

# Action -> verb synonyms
ACTION_VERBS: Dict[str, Tuple[str, ...]] = {
    "delete-all": ("delete", "remove", "clear", "wipe", "erase", "ลบ", "ล้าง"),
    "delete-subject": ("delete", "remove", "drop", "erase", "ลบ", "เอาออก"),
    "swap": ("swap", "switch", "exchange", "interchange", "สลับ", "แลก"),
    "move": ("move", "shift", "reschedule", "relocate", "ย้าย"),
    "clear": ("clear", "delete", "remove", "cancel", "empty", "free up", "ลบ", "ล้าง", "ยกเลิก", "เคลียร์"),
    "reset": (
        "reset",
        "regenerate",
        "rearrange",
        "re-arrange",
        "rebuild",
        "reshuffle",
        "start over",
        "generate again",
        "รีเซ็ต",
        "จัดใหม่",
        "สร้างใหม่",
        "เริ่มใหม่",
    ),
}

# "all" / "whole schedule" qualifiers
ALL_WORDS: Tuple[str, ...] = ("all", "everything", "ทั้งหมด")
SCHEDULE_WORDS: Tuple[str, ...] = (
    "schedule",
    "timetable",
    "periods",
    "classes",
    "entries",
    "ตารางเรียน",
    "ตารางสอน",
    "ตาราง",
    "คาบเรียน",
    "คาบ",
)
WHOLE_WORDS: Tuple[str, ...] = ("whole", "entire", "full")

SUBJECT_WORDS: Tuple[str, ...] = ("subject", "course", "รายวิชา", "วิชา")
# Trailing words after a subject name ("delete all Math classes")
SUBJECT_SUFFIXES: Tuple[str, ...] = ("classes", "lessons", "sessions", "periods", "out", "subject", "course")

# A captured subject name starting with one of these is a period/schedule reference
RESERVED_TARGETS: Tuple[str, ...] = (
    "period",
    "periods",
    "slot",
    "slots",
    "schedule",
    "timetable",
    "subject",
    "subjects",
    "course",
    "courses",
    "class",
    "classes",
    "คาบ",
    "ตาราง",
    "วิชา",
)

SLOT_WORDS: Tuple[str, ...] = ("period", "slot", "hour", "class", "คาบที่", "คาบ", "ชั่วโมงที่")
CONNECTIVES: Tuple[str, ...] = ("and", "with", "กับ", "&")
DESTINATIONS: Tuple[str, ...] = ("to", "into", "onto", "ไปที่", "ไปยัง", "ไป")
# Bare "ว่าง" is left out: it also ends "ระหว่าง" ("between")
BREAK_WORDS: Tuple[str, ...] = ("break", "lunch", "recess", "พักเที่ยง", "พัก", "คาบว่าง", "ให้ว่าง")
POLITE_WORDS: Tuple[str, ...] = ("please", "kindly", "กรุณา", "ช่วย")

THAI_DIGITS = str.maketrans("๐๑๒๓๔๕๖๗๘๙", "0123456789")
