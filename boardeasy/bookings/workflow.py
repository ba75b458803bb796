import logging
from typing import Any, Dict, List, Optional, Union

from boardeasy.auth.service import AuthSession
from boardeasy.bookings.fare_service import FareCalculationService
from boardeasy.bookings.ledger import BookingLedger, BookingSubmissionError
from boardeasy.bookings.schemas import (
    BookingConfirmation, BookingDraft, BookingRecord, BookingStage,
    FareBreakdown, TransitionResult, WorkflowView
)
from boardeasy.config import Settings, settings as default_settings
from boardeasy.offerings.filters import apply_offering_filter, operator_names
from boardeasy.offerings.schemas import Offering, OfferingFilter, SearchCriteria
from boardeasy.offerings.service import OfferingProvider, OfferingSearchError
from boardeasy.offerings.validation import SearchCriteriaError, ensure_searchable
from boardeasy.passengers.service import PassengerRoster, PassengerValidationError
from boardeasy.seats.schemas import SeatToggle
from boardeasy.seats.service import SeatMap, SelectionLimitExceeded

logger = logging.getLogger(__name__)

# One step back from each stage
PREVIOUS_STAGE = {
    BookingStage.SELECT_BUS: BookingStage.IDLE,
    BookingStage.PASSENGER_DETAILS: BookingStage.SELECT_BUS,
    BookingStage.SEAT_SELECTION: BookingStage.PASSENGER_DETAILS,
    BookingStage.SUMMARY: BookingStage.SEAT_SELECTION,
}


class BookingWorkflow:
    """Drives one traveler from search results to a submitted booking.

    Stages run SELECT_BUS -> PASSENGER_DETAILS -> SEAT_SELECTION -> SUMMARY.
    Submitting moves to SUBMITTED while the ledger call is in flight, then
    back to SELECT_BUS on success or to SUMMARY on failure. Every action
    returns a TransitionResult; refusals leave the stage unchanged and record
    their message under the stage they happened in.

    The workflow is the only owner of the booking draft. A reset requested
    while a submission is in flight is applied once the ledger answers.
    """

    def __init__(
        self,
        auth: AuthSession,
        offering_provider: OfferingProvider,
        ledger: BookingLedger,
        config: Optional[Settings] = None,
    ):
        self.auth = auth
        self.offering_provider = offering_provider
        self.ledger = ledger
        self.config = config or default_settings
        self.fare_service = FareCalculationService(self.config)

        self.stage = BookingStage.IDLE
        self.criteria: Optional[SearchCriteria] = None
        self.offerings: List[Offering] = []
        self.offering_filter = OfferingFilter()
        self.selected_offering: Optional[Offering] = None
        self.roster: Optional[PassengerRoster] = None
        self.seat_map: Optional[SeatMap] = None
        self.draft: Optional[BookingDraft] = None
        self.messages: Dict[BookingStage, str] = {}
        self.last_confirmation: Optional[BookingConfirmation] = None
        self._reset_requested = False

    @property
    def is_submitting(self) -> bool:
        return self.stage == BookingStage.SUBMITTED

    @property
    def filtered_offerings(self) -> List[Offering]:
        return apply_offering_filter(self.offerings, self.offering_filter)

    # Search & bus selection

    async def search(self, criteria: SearchCriteria) -> TransitionResult:
        if self.is_submitting:
            return self._refuse("Please wait for the current booking to finish")
        if not self.auth.is_authenticated():
            return self._require_login("Please login to search and book tickets")

        try:
            ensure_searchable(criteria)
        except SearchCriteriaError as e:
            return self._refuse(str(e))

        try:
            offerings = await self.offering_provider.generate_offerings(criteria)
        except OfferingSearchError as e:
            logger.warning("Offering search failed: %s", e)
            return self._refuse("Could not load buses. Please try again.")

        self._discard_booking()
        self.criteria = criteria.model_copy()
        self.offerings = list(offerings)
        self.offering_filter = OfferingFilter()
        self.messages = {}
        logger.info(
            "Found %d offerings from %s to %s",
            len(self.offerings), criteria.origin_name, criteria.destination_name
        )
        return self._move_to(BookingStage.SELECT_BUS)

    def filter_offerings(self, offering_filter: OfferingFilter) -> TransitionResult:
        """Narrow the bus list; the underlying results stay untouched"""
        refusal = self._check_stage(BookingStage.SELECT_BUS)
        if refusal:
            return refusal
        self.offering_filter = offering_filter
        return self._accept()

    def select_offering(self, offering_id: int) -> TransitionResult:
        refusal = self._check_stage(BookingStage.SELECT_BUS)
        if refusal:
            return refusal
        if not self.auth.is_authenticated():
            return self._require_login("Please login to book tickets")

        offering = next((o for o in self.filtered_offerings if o.id == offering_id), None)
        if offering is None:
            return self._refuse(f"Bus {offering_id} is not part of the search results")

        count = self.criteria.passenger_count
        self.selected_offering = offering
        self.roster = PassengerRoster(count, self.config)
        self.seat_map = SeatMap(
            capacity=count,
            booked_seats=self.config.DEFAULT_BOOKED_SEATS,
            total_seats=self.config.TOTAL_SEATS,
        )
        self.draft = None
        return self._move_to(BookingStage.PASSENGER_DETAILS)

    # Passenger details

    def add_passenger(self) -> TransitionResult:
        refusal = self._check_stage(BookingStage.PASSENGER_DETAILS)
        if refusal:
            return refusal
        if not self.roster.add_passenger():
            return self._refuse(
                f"A booking can have at most {self.config.MAX_PASSENGERS} passengers"
            )
        self._sync_passenger_count()
        return self._accept()

    def remove_passenger(self, index: int) -> TransitionResult:
        refusal = self._check_stage(BookingStage.PASSENGER_DETAILS)
        if refusal:
            return refusal
        try:
            removed = self.roster.remove_passenger(index)
        except IndexError as e:
            return self._refuse(str(e))
        if not removed:
            return self._refuse("A booking needs at least one passenger")
        self._sync_passenger_count()
        return self._accept()

    def update_passenger(self, index: int, field: str, value: Any) -> TransitionResult:
        refusal = self._check_stage(BookingStage.PASSENGER_DETAILS)
        if refusal:
            return refusal
        try:
            self.roster.update_field(index, field, value)
        except (IndexError, ValueError) as e:
            return self._refuse(str(e))
        return self._accept()

    def continue_to_seats(self) -> TransitionResult:
        refusal = self._check_stage(BookingStage.PASSENGER_DETAILS)
        if refusal:
            return refusal
        if self.config.VALIDATE_PASSENGERS_BEFORE_SEATS:
            try:
                self.roster.validate()
            except PassengerValidationError as e:
                return self._refuse(str(e))
        return self._move_to(BookingStage.SEAT_SELECTION)

    # Seats & summary

    def toggle_seat(self, seat_number: int) -> TransitionResult:
        refusal = self._check_stage(BookingStage.SEAT_SELECTION)
        if refusal:
            return refusal
        try:
            outcome = self.seat_map.toggle_seat(seat_number)
        except ValueError as e:
            # SelectionLimitExceeded included
            return self._refuse(str(e))
        if outcome == SeatToggle.IGNORED:
            return TransitionResult(accepted=False, stage=self.stage)
        return self._accept()

    def continue_to_summary(self) -> TransitionResult:
        refusal = self._check_stage(BookingStage.SEAT_SELECTION)
        if refusal:
            return refusal
        if not self.seat_map.is_complete:
            return self._refuse(self._seat_count_message())
        self.draft = self._build_draft()
        return self._move_to(BookingStage.SUMMARY)

    async def submit(self) -> TransitionResult:
        if self.is_submitting:
            return TransitionResult(
                accepted=False,
                stage=self.stage,
                message="Booking is already being submitted",
            )
        refusal = self._check_stage(BookingStage.SUMMARY)
        if refusal:
            return refusal

        try:
            self.roster.validate()
        except PassengerValidationError as e:
            return self._refuse(str(e))
        if not self.seat_map.is_complete:
            return self._refuse(self._seat_count_message())

        draft = self._build_draft()
        self.draft = draft
        self.stage = BookingStage.SUBMITTED
        try:
            confirmation = await self.ledger.submit_booking(draft)
        except BookingSubmissionError as e:
            logger.warning("Booking submission failed: %s", e)
            self.stage = BookingStage.SUMMARY
            result = self._refuse("Booking failed. Please try again.")
        except BaseException:
            self.stage = BookingStage.SUMMARY
            self._apply_requested_reset()
            raise
        else:
            logger.info("Booking %s confirmed", confirmation.booking_reference)
            self.last_confirmation = confirmation
            self._discard_booking()
            self.messages = {}
            self.stage = BookingStage.SELECT_BUS
            result = TransitionResult(
                accepted=True,
                stage=self.stage,
                message=f"Booking confirmed! Your booking ID is {confirmation.booking_reference}.",
            )

        if self._apply_requested_reset():
            return result.model_copy(update={"stage": self.stage})
        return result

    # Navigation

    def back(self) -> TransitionResult:
        if self.is_submitting:
            return TransitionResult(
                accepted=False,
                stage=self.stage,
                message="Please wait for the current booking to finish",
            )
        previous = PREVIOUS_STAGE.get(self.stage)
        if previous is None:
            return TransitionResult(accepted=False, stage=self.stage)

        # The draft is rebuilt on the way back into SUMMARY
        self.draft = None
        if previous == BookingStage.SELECT_BUS:
            self.selected_offering = None
        return self._move_to(previous)

    def reset(self) -> None:
        """Forget everything, e.g. after logout.

        While a submission is in flight the reset is only recorded; submit()
        applies it when the ledger call returns.
        """
        if self.is_submitting:
            logger.info("Reset requested during submission, deferring")
            self._reset_requested = True
            return
        self._reset_requested = False
        self._discard_booking()
        self.criteria = None
        self.offerings = []
        self.offering_filter = OfferingFilter()
        self.messages = {}
        self.stage = BookingStage.IDLE

    # Booking history

    async def booking_history(self) -> List[BookingRecord]:
        if not self.auth.is_authenticated():
            self.auth.redirect_to_login()
            return []
        return await self.ledger.list_bookings()

    async def cancel_booking(self, booking_id: Union[int, str]) -> None:
        await self.ledger.cancel_booking(booking_id)

    # Views

    def current_fare(self) -> Optional[FareBreakdown]:
        if self.selected_offering is None or self.criteria is None:
            return None
        return self.fare_service.calculate(
            self.selected_offering.unit_price, self.criteria.passenger_count
        )

    def view(self) -> WorkflowView:
        return WorkflowView(
            stage=self.stage,
            criteria=self.criteria,
            offerings=self.offerings,
            offering_filter=self.offering_filter,
            filtered_offerings=self.filtered_offerings,
            operators=operator_names(self.offerings),
            selected_offering=self.selected_offering,
            seat_map=self.seat_map.view() if self.seat_map else None,
            passengers=self.roster.passengers if self.roster else [],
            fare=self.current_fare(),
            draft=self.draft,
            messages=dict(self.messages),
            is_submitting=self.is_submitting,
            last_confirmation=self.last_confirmation,
            user=self.auth.current_user(),
        )

    # Internals

    def _build_draft(self) -> BookingDraft:
        user = self.auth.current_user()
        return BookingDraft(
            criteria=self.criteria.model_copy(),
            offering=self.selected_offering,
            passengers=self.roster.passengers,
            seat_numbers=sorted(self.seat_map.selected_seats),
            fare=self.current_fare(),
            user_id=user.id if user else None,
        )

    def _sync_passenger_count(self) -> None:
        count = len(self.roster)
        self.criteria.passenger_count = count
        released = self.seat_map.set_capacity(count)
        if released:
            logger.debug("Released seats %s after passenger removal", released)

    def _seat_count_message(self) -> str:
        count = self.criteria.passenger_count
        return f"Please select {count} seat(s) for {count} passenger(s)"

    def _apply_requested_reset(self) -> bool:
        if not self._reset_requested:
            return False
        self.reset()
        return True

    def _discard_booking(self) -> None:
        self.selected_offering = None
        self.roster = None
        self.seat_map = None
        self.draft = None

    def _require_login(self, message: str) -> TransitionResult:
        self.auth.redirect_to_login()
        self.reset()
        self.messages[self.stage] = message
        return TransitionResult(
            accepted=False, stage=self.stage, message=message, login_required=True
        )

    def _check_stage(self, expected: BookingStage) -> Optional[TransitionResult]:
        if self.stage == expected:
            return None
        return TransitionResult(
            accepted=False,
            stage=self.stage,
            message=f"Not available during {self.stage.value.replace('_', ' ')}",
        )

    def _move_to(self, stage: BookingStage) -> TransitionResult:
        logger.info("Booking stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage
        self.messages.pop(stage, None)
        return TransitionResult(accepted=True, stage=stage)

    def _accept(self) -> TransitionResult:
        self.messages.pop(self.stage, None)
        return TransitionResult(accepted=True, stage=self.stage)

    def _refuse(self, message: str) -> TransitionResult:
        self.messages[self.stage] = message
        return TransitionResult(accepted=False, stage=self.stage, message=message)
