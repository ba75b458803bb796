from typing import Iterable, List

from boardeasy.seats.schemas import SeatMapView, SeatStatus, SeatToggle, SeatView


class SelectionLimitExceeded(ValueError):
    """The traveler tried to pick more seats than there are passengers"""

    def __init__(self, required: int):
        self.required = required
        super().__init__(
            f"You can only select {required} seat(s) for {required} passenger(s)"
        )


class SeatMap:
    """Booked and selected seats of one offering for the current session.

    Booked seats never change during a session. Selected seats keep click
    order, never overlap booked seats and never exceed ``capacity``.
    """

    def __init__(self, capacity: int, booked_seats: Iterable[int] = (), total_seats: int = 40):
        self.total_seats = total_seats
        self.booked_seats = frozenset(booked_seats)
        self.capacity = capacity
        self._selected: List[int] = []

    @property
    def selected_seats(self) -> List[int]:
        return list(self._selected)

    @property
    def is_complete(self) -> bool:
        return len(self._selected) == self.capacity

    def toggle_seat(self, seat_number: int) -> SeatToggle:
        self._check_seat_number(seat_number)

        if seat_number in self.booked_seats:
            return SeatToggle.IGNORED

        if seat_number in self._selected:
            self._selected.remove(seat_number)
            return SeatToggle.REMOVED

        if len(self._selected) >= self.capacity:
            raise SelectionLimitExceeded(self.capacity)

        self._selected.append(seat_number)
        return SeatToggle.ADDED

    def set_capacity(self, capacity: int) -> List[int]:
        """Change the required seat count, dropping the latest picks if needed.

        Returns the seats that were released.
        """
        self.capacity = capacity
        released = []
        while len(self._selected) > capacity:
            released.insert(0, self._selected.pop())
        return released

    def clear_selection(self) -> None:
        self._selected = []

    def seat_status(self, seat_number: int) -> SeatStatus:
        self._check_seat_number(seat_number)
        if seat_number in self.booked_seats:
            return SeatStatus.BOOKED
        if seat_number in self._selected:
            return SeatStatus.SELECTED
        return SeatStatus.AVAILABLE

    def view(self) -> SeatMapView:
        return SeatMapView(
            total_seats=self.total_seats,
            booked_seats=sorted(self.booked_seats),
            selected_seats=self.selected_seats,
            required_count=self.capacity,
            is_complete=self.is_complete,
            seats=[
                SeatView(number=n, status=self.seat_status(n))
                for n in range(1, self.total_seats + 1)
            ],
        )

    def _check_seat_number(self, seat_number: int) -> None:
        if not 1 <= seat_number <= self.total_seats:
            raise ValueError(f"Seat {seat_number} does not exist on this bus")
