import logging
from typing import List, Protocol, Union

import httpx

from boardeasy.bookings.schemas import BookingConfirmation, BookingDraft, BookingRecord

logger = logging.getLogger(__name__)


class BookingSubmissionError(Exception):
    """The booking ledger could not be reached or rejected the request"""


class BookingLedger(Protocol):
    async def submit_booking(self, draft: BookingDraft) -> BookingConfirmation: ...

    async def list_bookings(self) -> List[BookingRecord]: ...

    async def cancel_booking(self, booking_id: Union[int, str]) -> None: ...


class HttpBookingLedger:
    """Booking ledger behind the BoardEasy bookings API"""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def submit_booking(self, draft: BookingDraft) -> BookingConfirmation:
        payload = self._build_payload(draft)
        try:
            response = await self.client.post("/api/bookings/simple", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BookingSubmissionError(f"Booking submission failed: {e}") from e

        if not isinstance(data, dict):
            raise BookingSubmissionError("Booking response was not an object")

        reference = data.get("pnrNumber") or data.get("bookingReference")
        if not reference:
            raise BookingSubmissionError("Booking response carried no reference")

        return BookingConfirmation(
            booking_reference=reference,
            booking_id=data.get("id") or data.get("bookingId"),
            status=data.get("status"),
            total_amount=data.get("totalAmount"),
        )

    async def list_bookings(self) -> List[BookingRecord]:
        try:
            response = await self.client.get("/api/bookings/user")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BookingSubmissionError(f"Could not load bookings: {e}") from e
        try:
            return [BookingRecord.model_validate(item) for item in data]
        except (TypeError, ValueError) as e:
            raise BookingSubmissionError(f"Malformed booking history: {e}") from e

    async def cancel_booking(self, booking_id: Union[int, str]) -> None:
        try:
            response = await self.client.put(f"/api/bookings/{booking_id}/cancel")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise BookingSubmissionError(f"Could not cancel booking {booking_id}: {e}") from e
        logger.info("Cancelled booking %s", booking_id)

    @staticmethod
    def _build_payload(draft: BookingDraft) -> dict:
        offering = draft.offering
        payload = {
            "seatNumbers": draft.seat_numbers,
            "totalAmount": draft.total_amount,
            "travelDate": draft.criteria.departure_date.isoformat() if draft.criteria.departure_date else None,
            "busInfo": {
                "operator": offering.operator_name,
                "type": offering.vehicle_class,
                "departure": offering.departure_time,
                "arrival": offering.arrival_time,
            },
            "passengerDetails": [p.model_dump() for p in draft.passengers],
        }
        if offering.schedule_id is not None:
            payload["scheduleId"] = offering.schedule_id
        return payload
