from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Tuple
from datetime import date
from enum import Enum

class TripType(str, Enum):
    ONE_WAY = "one-way"
    ROUND_TRIP = "round-trip"

class ProviderKind(str, Enum):
    """Which offering provider serves searches"""
    SYNTHETIC = "synthetic"
    LIVE = "live"

class SearchCriteria(BaseModel):
    """What the traveler asked for on the search form"""
    origin_name: str = ""
    destination_name: str = ""
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    passenger_count: int = Field(1, ge=1, le=6)
    trip_type: TripType = TripType.ONE_WAY

    def swapped(self) -> "SearchCriteria":
        return self.model_copy(update={
            "origin_name": self.destination_name,
            "destination_name": self.origin_name,
        })

class Offering(BaseModel):
    """One bookable bus trip for a search"""
    model_config = ConfigDict(frozen=True)

    id: int
    operator_name: str
    vehicle_class: str
    departure_time: str
    arrival_time: str
    duration_label: str
    unit_price: int  # whole currency units
    available_seat_count: int
    rating_score: float
    amenities: Tuple[str, ...] = ()
    cancellation_policy: str = ""
    highlight_tag: str = ""
    schedule_id: Optional[int] = None
    vehicle_number: Optional[str] = None

class DepartureWindow(str, Enum):
    """Part of the day a bus leaves in"""
    ALL = "all"
    MORNING = "morning"      # 06:00-11:59
    AFTERNOON = "afternoon"  # 12:00-17:59
    EVENING = "evening"      # 18:00-23:59
    NIGHT = "night"          # 00:00-05:59

class OfferingFilter(BaseModel):
    """Narrowing applied to search results on the bus list"""
    min_price: int = Field(0, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    operator_name: Optional[str] = None
    vehicle_class: Optional[str] = None  # case-insensitive substring, e.g. "sleeper"
    departure_window: DepartureWindow = DepartureWindow.ALL