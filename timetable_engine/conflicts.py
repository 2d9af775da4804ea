from typing import Hashable, Set, Tuple

from .models import Day

BookingKey = Tuple[Hashable, Day, int]


class ConflictTracker:
    """Booked (resource, day, slot) keys of a single allocation run.

    Teachers and rooms share one key space, so resource ids are tagged with
    their kind before they are booked. Never share an instance across runs.
    """

    def __init__(self) -> None:
        self._booked: Set[BookingKey] = set()

    @staticmethod
    def booking_key(resource_id: Hashable, day: Day, slot_no: int) -> BookingKey:
        return (resource_id, day, slot_no)

    def is_booked(self, key: BookingKey) -> bool:
        return key in self._booked

    def book(self, key: BookingKey) -> None:
        self._booked.add(key)

    def reset(self) -> None:
        self._booked.clear()

    def is_free(self, teacher_id: str, room_id: str, day: Day, slot_no: int) -> bool:
        return not (
            self.is_booked(self.booking_key(("teacher", teacher_id), day, slot_no))
            or self.is_booked(self.booking_key(("room", room_id), day, slot_no))
        )

    def book_placement(self, teacher_id: str, room_id: str, day: Day, slot_no: int) -> None:
        self.book(self.booking_key(("teacher", teacher_id), day, slot_no))
        self.book(self.booking_key(("room", room_id), day, slot_no))

    def __contains__(self, key: BookingKey) -> bool:
        return self.is_booked(key)

    def __len__(self) -> int:
        return len(self._booked)
