"""Free-text schedule commands -> structured ``Command`` objects.

Rules are matcher objects evaluated in a fixed priority order, first match
wins, so specific phrasings ("delete all Math") are not swallowed by looser
ones ("delete period 7"). Text no rule understands yields ``None``; the
caller decides what to do with it.
"""

import logging
import re
from typing import Iterable, List, Optional, Pattern, Sequence

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
from .models import Day
from .vocabulary import (
    ACTION_VERBS,
    ALL_WORDS,
    BREAK_WORDS,
    CONNECTIVES,
    DAY_NAMES,
    DESTINATIONS,
    POLITE_WORDS,
    RESERVED_TARGETS,
    SCHEDULE_WORDS,
    SLOT_WORDS,
    SUBJECT_SUFFIXES,
    SUBJECT_WORDS,
    THAI_DIGITS,
    WHOLE_WORDS,
)

logger = logging.getLogger(__name__)

DEFAULT_LUNCH_SLOT = 3

_FLAGS = re.IGNORECASE | re.DOTALL


def _words(words: Iterable[str]) -> str:
    """Alternation of ``words``, longest first, that never matches inside a Latin word."""
    ordered = sorted(set(words), key=len, reverse=True)
    body = "|".join(re.escape(w).replace(r"\ ", r"\s+") for w in ordered)
    return rf"(?<![a-z])(?:{body})(?![a-z])"


DAY = _words(DAY_NAMES)
POLITE = rf"(?:{_words(POLITE_WORDS)}\s*)?"
ALL = _words(ALL_WORDS)
SCHEDULE = _words(SCHEDULE_WORDS)
WHOLE = _words(WHOLE_WORDS)
SUBJECT = _words(SUBJECT_WORDS)
SUFFIX = _words(SUBJECT_SUFFIXES + ALL_WORDS)
SLOT_WORD = _words(SLOT_WORDS)
CONNECT = _words(CONNECTIVES)
DEST = _words(DESTINATIONS)
BREAK = _words(BREAK_WORDS)
VERB = {action: _words(verbs) for action, verbs in ACTION_VERBS.items()}


def _day(name: str) -> str:
    return rf"(?P<{name}>{DAY})"


def _slot(name: str) -> str:
    return rf"(?<!\d)(?P<{name}>\d{{1,2}})(?!\d)"


def _valid_slots(match, *names: str) -> bool:
    # Periods are numbered from 1
    return all(int(match.group(name)) >= 1 for name in names)


def resolve_day(token: Optional[str]) -> Optional[Day]:
    """Canonical day code for any accepted spelling, or None."""
    if not token:
        return None
    return DAY_NAMES.get(re.sub(r"\s+", "", token).lower())


def normalise_text(text: str) -> str:
    return re.sub(r"\s+", " ", text.translate(THAI_DIGITS)).strip()


class Matcher:
    """One interpretation rule."""

    name = "matcher"

    def try_match(self, text: str) -> Optional[Command]:
        raise NotImplementedError


class DeleteAllMatcher(Matcher):
    name = "delete_all"
    pattern = re.compile(
        rf"^{POLITE}{VERB['delete-all']}\s*(?:the\s+)?(?:{WHOLE}\s+)?(?:{SCHEDULE}\s*)?"
        rf"(?:{ALL}|{SCHEDULE})(?:\s*(?:of\s+)?(?:the\s+)?{SCHEDULE})?\s*[.!]*$",
        _FLAGS,
    )

    def try_match(self, text: str) -> Optional[Command]:
        if self.pattern.search(text):
            return DeleteAll()
        return None


class DeleteSubjectMatcher(Matcher):
    name = "delete_subject"
    pattern = re.compile(
        rf"^{POLITE}{VERB['delete-subject']}\s*(?:the\s+)?(?:(?:{ALL}|{SUBJECT})\s*)*(?:the\s+)?"
        rf"(?P<name>.+?)\s*(?:(?:{SUFFIX})\s*)*[.!]*$",
        _FLAGS,
    )
    qualifier = re.compile(rf"{ALL}|{SUBJECT}", _FLAGS)

    def try_match(self, text: str) -> Optional[Command]:
        match = self.pattern.search(text)
        if not match or not self.qualifier.search(text):
            return None
        name = match.group("name").strip(" \"'`.,!?")
        if not name or self._is_reserved(name):
            return None
        return DeleteSubject(name=name)

    # "all", "lunch" ... scope or slot words, never a subject name
    reserved = frozenset(RESERVED_TARGETS + ALL_WORDS + BREAK_WORDS)

    def _is_reserved(self, name: str) -> bool:
        lowered = name.lower()
        if lowered.split()[0] in self.reserved:
            return True
        # Thai has no spaces between words
        return any(lowered.startswith(w) for w in self.reserved if not w.isascii())


class SwapMatcher(Matcher):
    name = "swap"
    verb = VERB["swap"]
    # Each pattern fills slot_a/day_a and slot_b, plus day_b when both days are named
    patterns: Sequence[Pattern] = (
        re.compile(
            rf"{verb}.*?{_slot('slot_a')}.*?{_day('day_a')}.*?{CONNECT}.*?{_slot('slot_b')}.*?{_day('day_b')}",
            _FLAGS,
        ),
        re.compile(
            rf"{verb}.*?{_day('day_a')}.*?{_slot('slot_a')}.*?{CONNECT}.*?{_day('day_b')}.*?{_slot('slot_b')}",
            _FLAGS,
        ),
        # One day for both periods; only period words may sit between the operands
        re.compile(
            rf"{verb}\s*(?:{SLOT_WORD}\s*)?{_slot('slot_a')}\s*{CONNECT}\s*(?:{SLOT_WORD}\s*)?"
            rf"{_slot('slot_b')}\s*(?:on\s+)?{_day('day_a')}\s*[.!?]*$",
            _FLAGS,
        ),
        re.compile(
            rf"{verb}\s*(?:on\s+)?{_day('day_a')}\s*(?:{SLOT_WORD}\s*)?{_slot('slot_a')}\s*{CONNECT}\s*"
            rf"(?:{SLOT_WORD}\s*)?{_slot('slot_b')}\s*[.!?]*$",
            _FLAGS,
        ),
    )

    def try_match(self, text: str) -> Optional[Command]:
        for pattern in self.patterns:
            match = pattern.search(text)
            if not match:
                continue
            day_a = resolve_day(match.group("day_a"))
            groups = match.groupdict()
            day_b = resolve_day(groups["day_b"]) if "day_b" in groups else day_a
            if day_a is None or day_b is None or not _valid_slots(match, "slot_a", "slot_b"):
                continue
            return Swap(
                day=day_a,
                slot_a=int(match.group("slot_a")),
                slot_b=int(match.group("slot_b")),
                other_day=day_b if day_b != day_a else None,
            )
        return None


class MoveMatcher(Matcher):
    name = "move"
    verb = VERB["move"]
    patterns: Sequence[Pattern] = (
        # period 1 Monday to Wednesday period 1
        re.compile(
            rf"{verb}.*?{_slot('from_slot')}.*?{_day('from_day')}.*?{DEST}.*?{_day('to_day')}.*?{_slot('to_slot')}",
            _FLAGS,
        ),
        # period 1 Monday to period 3 Wednesday
        re.compile(
            rf"{verb}.*?{_slot('from_slot')}.*?{_day('from_day')}.*?{DEST}.*?{SLOT_WORD}.*?"
            rf"{_slot('to_slot')}.*?{_day('to_day')}",
            _FLAGS,
        ),
        # Monday period 1 to Friday period 4
        re.compile(
            rf"{verb}.*?{_day('from_day')}.*?{_slot('from_slot')}.*?{DEST}.*?{_day('to_day')}.*?{_slot('to_slot')}",
            _FLAGS,
        ),
    )

    def try_match(self, text: str) -> Optional[Command]:
        for pattern in self.patterns:
            match = pattern.search(text)
            if not match:
                continue
            from_day = resolve_day(match.group("from_day"))
            to_day = resolve_day(match.group("to_day"))
            if from_day is None or to_day is None or not _valid_slots(match, "from_slot", "to_slot"):
                continue
            return Move(
                from_day=from_day,
                from_slot=int(match.group("from_slot")),
                to_day=to_day,
                to_slot=int(match.group("to_slot")),
            )
        return None


class ClearSlotMatcher(Matcher):
    """Clear one period on one day, or on every day when no day is named.

    A break/lunch phrase without a period number clears ``lunch_slot``; a
    plain clear/delete verb needs an explicit number.
    """

    name = "clear_slot"
    verb = re.compile(VERB["clear"], _FLAGS)
    break_word = re.compile(BREAK, _FLAGS)
    slot = re.compile(_slot("slot_no"), _FLAGS)
    day = re.compile(DAY, _FLAGS)

    def __init__(self, lunch_slot: int = DEFAULT_LUNCH_SLOT) -> None:
        self.lunch_slot = lunch_slot

    def try_match(self, text: str) -> Optional[Command]:
        is_break = self.break_word.search(text) is not None
        if not is_break and not self.verb.search(text):
            return None
        numbers = {int(n) for n in self.slot.findall(text)}
        if len(numbers) > 1:
            # "clear period 2 and 4" names two periods; one command clears one
            return None
        if numbers:
            slot_no = numbers.pop()
        elif is_break:
            slot_no = self.lunch_slot
        else:
            return None
        if slot_no < 1:
            return None
        day_match = self.day.search(text)
        day = resolve_day(day_match.group(0)) if day_match else None
        if day is None:
            return ClearSlotAllDays(slot_no=slot_no)
        return ClearSlot(day=day, slot_no=slot_no)


class RegenerateMatcher(Matcher):
    name = "regenerate"
    pattern = re.compile(VERB["reset"], _FLAGS)

    def try_match(self, text: str) -> Optional[Command]:
        if self.pattern.search(text):
            return Regenerate()
        return None


def default_matchers(lunch_slot: int = DEFAULT_LUNCH_SLOT) -> List[Matcher]:
    return [
        DeleteAllMatcher(),
        DeleteSubjectMatcher(),
        SwapMatcher(),
        MoveMatcher(),
        ClearSlotMatcher(lunch_slot),
        RegenerateMatcher(),
    ]


class CommandInterpreter:
    def __init__(
        self,
        lunch_slot: int = DEFAULT_LUNCH_SLOT,
        matchers: Optional[Sequence[Matcher]] = None,
    ) -> None:
        self.matchers: List[Matcher] = list(matchers) if matchers is not None else default_matchers(lunch_slot)

    def parse(self, text: Optional[str]) -> Optional[Command]:
        """Return the command ``text`` asks for, or None when not understood."""
        if not text or not text.strip():
            return None
        cleaned = normalise_text(text)
        for matcher in self.matchers:
            command = matcher.try_match(cleaned)
            if command is not None:
                logger.debug("Parsed %r with rule %s -> %r", cleaned, matcher.name, command)
                return command
        logger.debug("No rule matched %r", cleaned)
        return None


_default_interpreter = CommandInterpreter()


def parse_command(text: Optional[str]) -> Optional[Command]:
    return _default_interpreter.parse(text)
