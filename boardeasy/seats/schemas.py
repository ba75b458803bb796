from pydantic import BaseModel
from typing import List
from enum import Enum

class SeatStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    SELECTED = "selected"

class SeatToggle(str, Enum):
    """Outcome of a seat click"""
    ADDED = "added"
    REMOVED = "removed"
    IGNORED = "ignored"

class SeatView(BaseModel):
    number: int
    status: SeatStatus

class SeatMapView(BaseModel):
    total_seats: int
    booked_seats: List[int]
    selected_seats: List[int]
    required_count: int
    is_complete: bool
    seats: List[SeatView]
