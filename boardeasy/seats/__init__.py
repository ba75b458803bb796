"""
Seat Selection Module

Seat bookkeeping for one chosen offering: which seats are already booked,
which ones the traveler picked, and the rule that exactly one seat is needed
per passenger.

Key Components:
- service.py: SeatMap and the SelectionLimitExceeded signal
- schemas.py: Pydantic views of the seat map for the UI
"""

from .service import SeatMap, SelectionLimitExceeded
from .schemas import SeatStatus, SeatToggle, SeatView, SeatMapView

__all__ = [
    "SeatMap",
    "SelectionLimitExceeded",
    "SeatStatus",
    "SeatToggle",
    "SeatView",
    "SeatMapView"
]
