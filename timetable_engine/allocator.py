import logging
import random
from collections import defaultdict
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from ortools.sat.python import cp_model
from ortools.sat.python.cp_model import IntVar

from .config import EngineSettings
from .conflicts import ConflictTracker
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
)

logger = logging.getLogger(__name__)

NO_SLOT_REASON = "no conflict-free slot found within attempt budget"
NO_TEACHER_REASON = "no teacher assigned"
NO_ROOMS_REASON = "no rooms available"
NO_TIMESLOTS_REASON = "no timeslots available"

Placement = Tuple[Timeslot, Room]


class Session(NamedTuple):
    """All weekly hours of one subject for one session type."""

    subject: Subject
    teacher: Teacher
    session_type: SessionType
    rooms: List[Room]
    hours: int


def suitable_rooms(subject: Subject, session_type: SessionType, rooms: Sequence[Room]) -> List[Room]:
    """Rooms a session may use; falls back to every room when none qualify."""
    if session_type is SessionType.LECTURE:
        matching = [r for r in rooms if r.type is RoomType.LECTURE_ROOM]
    else:
        wanted = set()
        if subject.requires_computer:
            wanted.add(RoomType.COMPUTER_LAB)
        if subject.requires_network:
            wanted.add(RoomType.NETWORK_LAB)
        if subject.requires_business:
            wanted.add(RoomType.BUSINESS_LAB)
        if wanted:
            matching = [r for r in rooms if r.type in wanted]
        else:
            matching = [r for r in rooms if r.type.is_lab]
    return matching or list(rooms)


class Allocator:
    """Assigns every subject's weekly hours to a teacher, room and timeslot.

    Hard constraints: a teacher or a room holds at most one session per
    (day, slot), and never teaches in one of their unavailable slots. All
    hours of a session type are placed together or reported together as one
    failure.

    The ``cp-sat`` strategy places every session jointly with OR-Tools and
    maximises the number of placed hours, starting from the bounded random
    retry result as a hint. That retry result is returned as is when
    ``strategy="random"``, and kept instead of the solver's when the solver
    stops at a time limit with fewer hours placed or with no solution.
    Pass ``seed`` to make both searches reproducible.
    """

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        strategy: str = "cp-sat",
        max_attempts: int = 50,
        time_limit_seconds: float = 10.0,
    ) -> None:
        if strategy not in ("cp-sat", "random"):
            raise ValueError(f"Unknown allocation strategy {strategy!r}")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.seed = seed
        self.strategy = strategy
        self.max_attempts = max_attempts
        self.time_limit_seconds = time_limit_seconds

    @classmethod
    def from_settings(cls, settings: EngineSettings, *, seed: Optional[int] = None) -> "Allocator":
        return cls(
            seed=settings.random_seed if seed is None else seed,
            strategy=settings.strategy,
            max_attempts=settings.max_attempts,
            time_limit_seconds=settings.time_limit_seconds,
        )

    def generate_from(self, snapshot: EntitySnapshot) -> AllocationResult:
        return self.generate(
            snapshot.teachers,
            snapshot.subjects,
            snapshot.rooms,
            snapshot.timeslots,
            snapshot.assignments,
        )

    def generate(
        self,
        teachers: Sequence[Teacher],
        subjects: Sequence[Subject],
        rooms: Sequence[Room],
        timeslots: Sequence[Timeslot],
        assignments: Sequence[TeachingAssignment],
    ) -> AllocationResult:
        # Private to this call so concurrent runs never share bookings
        tracker = ConflictTracker()
        tracker.reset()
        rng = random.Random(self.seed)

        sessions, failures = self._plan_sessions(teachers, subjects, rooms, timeslots, assignments, rng)

        # The retry pass seeds the solver hint; a time-limited solver result has to beat it
        strategy = "random" if sessions else self.strategy
        placements = [self._place_randomly(s, timeslots, tracker, rng) for s in sessions]
        if sessions and self.strategy == "cp-sat":
            solved = self._solve_exact(sessions, timeslots, rng, hint=placements)
            if solved is None:
                logger.warning(
                    "CP-SAT found no solution within %.1fs; keeping the random retry result",
                    self.time_limit_seconds,
                )
            else:
                exact, optimal = solved
                if optimal or _placed_hours(sessions, exact) >= _placed_hours(sessions, placements):
                    strategy = "cp-sat"
                    placements = exact
                    tracker.reset()
                    for session, picks in zip(sessions, placements):
                        for timeslot, room in picks or ():
                            assert tracker.is_free(
                                session.teacher.id, room.id, timeslot.day, timeslot.slot_no
                            ), "Model invariant violated"
                            tracker.book_placement(
                                session.teacher.id, room.id, timeslot.day, timeslot.slot_no
                            )
                else:
                    logger.warning(
                        "CP-SAT stopped at a feasible solution placing fewer hours than random retry; "
                        "keeping the random retry result"
                    )

        entries: List[ScheduleEntry] = []
        for session, picks in zip(sessions, placements):
            if picks is None:
                failures.append(
                    PlacementFailure(
                        subject_id=session.subject.id,
                        session_type=session.session_type,
                        reason=NO_SLOT_REASON,
                    )
                )
                continue
            for timeslot, room in picks:
                entries.append(
                    ScheduleEntry(
                        subject_id=session.subject.id,
                        subject_name=session.subject.name,
                        teacher_name=session.teacher.name,
                        room_name=room.name,
                        day=timeslot.day,
                        slot_no=timeslot.slot_no,
                        time=timeslot.time_range,
                        session_type=session.session_type,
                    )
                )

        logger.info(
            "Allocated %d entries for %d sessions (%d failures, strategy=%s)",
            len(entries),
            len(sessions),
            len(failures),
            strategy,
        )
        return AllocationResult(entries=entries, failures=failures, strategy=strategy)

    def _plan_sessions(
        self,
        teachers: Sequence[Teacher],
        subjects: Sequence[Subject],
        rooms: Sequence[Room],
        timeslots: Sequence[Timeslot],
        assignments: Sequence[TeachingAssignment],
        rng: random.Random,
    ) -> Tuple[List[Session], List[PlacementFailure]]:
        teacher_by_id = {t.id: t for t in teachers}
        assigned: Dict[str, List[str]] = defaultdict(list)
        for link in assignments:
            assigned[link.subject_id].append(link.teacher_id)

        # Shuffled so low ids do not always get first pick of the grid
        order = list(subjects)
        rng.shuffle(order)

        sessions: List[Session] = []
        failures: List[PlacementFailure] = []
        for subject in order:
            session_types = [st for st in SessionType if subject.hours_for(st) > 0]
            if not session_types:
                continue

            candidates = [teacher_by_id[tid] for tid in assigned.get(subject.id, []) if tid in teacher_by_id]
            reason = None
            if not candidates:
                reason = NO_TEACHER_REASON
                logger.warning("Subject %s has no assigned teacher; skipping", subject.id)
            elif not rooms:
                reason = NO_ROOMS_REASON
            elif not timeslots:
                reason = NO_TIMESLOTS_REASON
            if reason is not None:
                failures.extend(
                    PlacementFailure(subject_id=subject.id, session_type=st, reason=reason)
                    for st in session_types
                )
                continue

            teacher = rng.choice(candidates)
            for st in session_types:
                sessions.append(
                    Session(
                        subject=subject,
                        teacher=teacher,
                        session_type=st,
                        rooms=suitable_rooms(subject, st, rooms),
                        hours=subject.hours_for(st),
                    )
                )
        return sessions, failures

    def _place_randomly(
        self,
        session: Session,
        timeslots: Sequence[Timeslot],
        tracker: ConflictTracker,
        rng: random.Random,
    ) -> Optional[List[Placement]]:
        """Bounded random retry for every hour of one session.

        Picks are held back from the run's tracker until the whole session
        fits, so a partially placed session leaves no bookings behind.
        """
        pending = ConflictTracker()
        teacher = session.teacher
        picks: List[Placement] = []
        for _ in range(session.hours):
            for _attempt in range(self.max_attempts):
                timeslot = rng.choice(timeslots)
                room = rng.choice(session.rooms)
                day, slot_no = timeslot.day, timeslot.slot_no
                if not teacher.is_available(day, slot_no):
                    continue
                if not tracker.is_free(teacher.id, room.id, day, slot_no):
                    continue
                if not pending.is_free(teacher.id, room.id, day, slot_no):
                    continue
                pending.book_placement(teacher.id, room.id, day, slot_no)
                picks.append((timeslot, room))
                break
            else:
                return None
        for timeslot, room in picks:
            tracker.book_placement(teacher.id, room.id, timeslot.day, timeslot.slot_no)
        return picks

    def _solve_exact(
        self,
        sessions: Sequence[Session],
        timeslots: Sequence[Timeslot],
        rng: random.Random,
        hint: Optional[Sequence[Optional[List[Placement]]]] = None,
    ) -> Optional[Tuple[List[Optional[List[Placement]]], bool]]:
        """Place all sessions with CP-SAT, maximising the hours placed.

        Returns one pick list per session (None for a session left out) and
        whether the solver proved it optimal, or None when the solver produced
        no solution at all.
        """
        model = cp_model.CpModel()

        session_placed: List[IntVar] = []
        # session -> [(var, timeslot, room)]; a var means "one hour here"
        choices: List[List[Tuple[IntVar, Timeslot, Room]]] = []
        teacher_time: Dict[Tuple[str, Day, int], List[IntVar]] = defaultdict(list)
        room_time: Dict[Tuple[str, Day, int], List[IntVar]] = defaultdict(list)

        for s_idx, session in enumerate(sessions):
            placed = model.NewBoolVar(f"placed_s{s_idx}")
            session_placed.append(placed)
            options = []
            for t_idx, timeslot in enumerate(timeslots):
                if not session.teacher.is_available(timeslot.day, timeslot.slot_no):
                    continue
                for room in session.rooms:
                    x = model.NewBoolVar(f"x_s{s_idx}_t{t_idx}_r{room.id}")
                    options.append((x, timeslot, room))
                    teacher_time[(session.teacher.id, timeslot.day, timeslot.slot_no)].append(x)
                    room_time[(room.id, timeslot.day, timeslot.slot_no)].append(x)
            choices.append(options)
            # All hours or none; the teacher bucket keeps them on distinct slots
            model.Add(sum(x for x, _, _ in options) == session.hours * placed)

        for bucket in teacher_time.values():
            if len(bucket) > 1:
                model.AddAtMostOne(bucket)
        for bucket in room_time.values():
            if len(bucket) > 1:
                model.AddAtMostOne(bucket)

        model.Maximize(sum(s.hours * p for s, p in zip(sessions, session_placed)))

        if hint is not None:
            for s_idx, picks in enumerate(hint):
                model.AddHint(session_placed[s_idx], 1 if picks else 0)
                chosen = {(ts.day, ts.slot_no, room.id) for ts, room in picks or ()}
                for x, ts, room in choices[s_idx]:
                    model.AddHint(x, 1 if (ts.day, ts.slot_no, room.id) in chosen else 0)

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.time_limit_seconds
        # Single worker keeps the search reproducible for a given seed
        solver.parameters.num_search_workers = 1
        solver.parameters.random_seed = rng.randrange(2**31 - 1)
        status = solver.Solve(model)
        logger.debug(
            "CP-SAT status=%s wall_time=%.3fs conflicts=%d",
            solver.StatusName(status),
            solver.WallTime(),
            solver.NumConflicts(),
        )
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            return None

        placements: List[Optional[List[Placement]]] = []
        for s_idx in range(len(sessions)):
            if solver.Value(session_placed[s_idx]) != 1:
                placements.append(None)
                continue
            placements.append([(ts, room) for x, ts, room in choices[s_idx] if solver.Value(x) == 1])
        return placements, status == cp_model.OPTIMAL


def _placed_hours(sessions: Sequence[Session], placements: Sequence[Optional[List[Placement]]]) -> int:
    return sum(s.hours for s, picks in zip(sessions, placements) if picks is not None)
