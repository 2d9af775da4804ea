from timetable_engine.conflicts import ConflictTracker
from timetable_engine.models import Day


def test_book_and_query():
    tracker = ConflictTracker()
    key = ConflictTracker.booking_key("T1", Day.MON, 1)
    assert not tracker.is_booked(key)
    tracker.book(key)
    assert tracker.is_booked(key)
    assert key in tracker
    assert not tracker.is_booked(ConflictTracker.booking_key("T1", Day.MON, 2))


def test_reset_forgets_everything():
    tracker = ConflictTracker()
    tracker.book(ConflictTracker.booking_key("T1", Day.MON, 1))
    tracker.book(ConflictTracker.booking_key("R1", Day.TUE, 2))
    assert len(tracker) == 2
    tracker.reset()
    assert len(tracker) == 0


def test_teacher_and_room_ids_do_not_collide():
    tracker = ConflictTracker()
    tracker.book_placement("X1", "R1", Day.WED, 3)
    # A room that happens to share the teacher's id is still free
    assert tracker.is_free("T9", "X1", Day.WED, 3)
    assert not tracker.is_free("X1", "R9", Day.WED, 3)
    assert not tracker.is_free("T9", "R1", Day.WED, 3)
    assert tracker.is_free("X1", "R1", Day.WED, 4)
