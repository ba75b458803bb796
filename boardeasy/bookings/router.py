from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Union

from boardeasy.bookings.ledger import BookingSubmissionError
from boardeasy.bookings.registry import BookingSession
from boardeasy.bookings.schemas import BookingRecord, TransitionResult, WorkflowView
from boardeasy.dependencies import get_booking_session, require_login
from boardeasy.offerings.schemas import OfferingFilter, SearchCriteria
from boardeasy.passengers.schemas import PassengerUpdate

router = APIRouter()

def _respond(session: BookingSession, result: TransitionResult) -> WorkflowView:
    """Turn a workflow result into the HTTP answer"""
    if result.login_required:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message or "Please login to continue",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not result.accepted and result.message:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.message
        )
    return session.workflow.view()

# Workflow state
@router.get("", response_model=WorkflowView)
async def get_booking_state(session: BookingSession = Depends(get_booking_session)):
    """Current stage, seat map, passengers, fare and messages"""
    return session.workflow.view()

@router.post("/search", response_model=WorkflowView)
async def search_buses(
    criteria: SearchCriteria,
    session: BookingSession = Depends(get_booking_session)
):
    """Search offerings and enter bus selection"""
    result = await session.workflow.search(criteria)
    return _respond(session, result)

@router.post("/offerings/filter", response_model=WorkflowView)
async def filter_offerings(
    offering_filter: OfferingFilter,
    session: BookingSession = Depends(get_booking_session)
):
    """Narrow the bus list by price, operator, bus type or departure time"""
    return _respond(session, session.workflow.filter_offerings(offering_filter))

@router.post("/offerings/{offering_id}/select", response_model=WorkflowView)
async def select_offering(
    offering_id: int,
    session: BookingSession = Depends(get_booking_session)
):
    """Choose a bus and start entering passengers"""
    return _respond(session, session.workflow.select_offering(offering_id))

# Passenger details
@router.post("/passengers", response_model=WorkflowView)
async def add_passenger(session: BookingSession = Depends(get_booking_session)):
    return _respond(session, session.workflow.add_passenger())

@router.delete("/passengers/{index}", response_model=WorkflowView)
async def remove_passenger(
    index: int,
    session: BookingSession = Depends(get_booking_session)
):
    return _respond(session, session.workflow.remove_passenger(index))

@router.patch("/passengers/{index}", response_model=WorkflowView)
async def update_passenger(
    index: int,
    update: PassengerUpdate,
    session: BookingSession = Depends(get_booking_session)
):
    """Set one field of one passenger"""
    result = session.workflow.update_passenger(index, update.field, update.value)
    return _respond(session, result)

# Seats
@router.post("/seats/continue", response_model=WorkflowView)
async def continue_to_seats(session: BookingSession = Depends(get_booking_session)):
    """Leave passenger details for seat selection"""
    return _respond(session, session.workflow.continue_to_seats())

@router.post("/seats/{seat_number}/toggle", response_model=WorkflowView)
async def toggle_seat(
    seat_number: int,
    session: BookingSession = Depends(get_booking_session)
):
    return _respond(session, session.workflow.toggle_seat(seat_number))

# Summary & submission
@router.post("/summary", response_model=WorkflowView)
async def continue_to_summary(session: BookingSession = Depends(get_booking_session)):
    """Review the booking and fare"""
    return _respond(session, session.workflow.continue_to_summary())

@router.post("/submit", response_model=WorkflowView)
async def submit_booking(session: BookingSession = Depends(get_booking_session)):
    """Send the booking to the ledger"""
    result = await session.workflow.submit()
    return _respond(session, result)

@router.post("/back", response_model=WorkflowView)
async def go_back(session: BookingSession = Depends(get_booking_session)):
    """Go back one stage, keeping what was entered"""
    return _respond(session, session.workflow.back())

# Booking history
@router.get("/history", response_model=List[BookingRecord])
async def get_booking_history(session: BookingSession = Depends(require_login)):
    """Bookings the traveler made before"""
    try:
        return await session.workflow.booking_history()
    except BookingSubmissionError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )

@router.post("/history/{booking_id}/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking(
    booking_id: Union[int, str],
    session: BookingSession = Depends(require_login)
):
    """Cancel a past booking"""
    try:
        await session.workflow.cancel_booking(booking_id)
    except BookingSubmissionError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )
