from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Union
from datetime import datetime
from enum import Enum

from boardeasy.auth.schemas import CurrentUser
from boardeasy.offerings.schemas import SearchCriteria, Offering, OfferingFilter
from boardeasy.passengers.schemas import PassengerRecord
from boardeasy.seats.schemas import SeatMapView

class BookingStage(str, Enum):
    """Booking workflow stages, in order"""
    IDLE = "idle"
    SELECT_BUS = "select_bus"
    PASSENGER_DETAILS = "passenger_details"
    SEAT_SELECTION = "seat_selection"
    SUMMARY = "summary"
    SUBMITTED = "submitted"  # submission in flight

# Fare Models
class FareBreakdown(BaseModel):
    """Fare for one booking, in whole currency units"""
    unit_price: int
    passenger_count: int
    base_fare: int
    tax_amount: int
    service_charge: int
    total: int
    currency: str = "INR"

# Booking Models
class BookingDraft(BaseModel):
    """Everything needed to submit a booking"""
    criteria: SearchCriteria
    offering: Offering
    passengers: List[PassengerRecord]
    seat_numbers: List[int]
    fare: FareBreakdown
    user_id: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_amount(self) -> int:
        return self.fare.total

class BookingConfirmation(BaseModel):
    """Ledger acknowledgement of a submitted booking"""
    booking_reference: str
    booking_id: Optional[Union[int, str]] = None
    status: Optional[str] = None
    total_amount: Optional[float] = None

class BookingRecord(BaseModel):
    """A past booking as listed by the ledger"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Union[int, str]
    pnr_number: Optional[str] = Field(None, alias="pnrNumber")
    status: Optional[str] = None
    total_amount: Optional[float] = Field(None, alias="totalAmount")
    travel_date: Optional[str] = Field(None, alias="travelDate")

# Workflow Models
class TransitionResult(BaseModel):
    """Outcome of one workflow action"""
    accepted: bool
    stage: BookingStage
    message: Optional[str] = None
    login_required: bool = False

class WorkflowView(BaseModel):
    """What the UI renders for the current booking"""
    stage: BookingStage
    criteria: Optional[SearchCriteria] = None
    offerings: List[Offering] = []
    offering_filter: OfferingFilter = OfferingFilter()
    filtered_offerings: List[Offering] = []
    operators: List[str] = []
    selected_offering: Optional[Offering] = None
    seat_map: Optional[SeatMapView] = None
    passengers: List[PassengerRecord] = []
    fare: Optional[FareBreakdown] = None
    draft: Optional[BookingDraft] = None
    messages: Dict[BookingStage, str] = {}
    is_submitting: bool = False
    last_confirmation: Optional[BookingConfirmation] = None
    user: Optional[CurrentUser] = None
