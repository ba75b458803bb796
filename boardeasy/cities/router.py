from fastapi import APIRouter, Depends, Query
from typing import List

from boardeasy.bookings.registry import BookingSession
from boardeasy.cities.schemas import (
    AutocompleteField, AutocompleteView, CitySelectRequest, CitySuggestion
)
from boardeasy.dependencies import get_booking_session

router = APIRouter()

@router.get("/suggest", response_model=List[CitySuggestion])
async def suggest_cities(
    query: str = Query("", description="Text typed into the city input"),
    field: AutocompleteField = Query(..., description="origin or destination"),
    session: BookingSession = Depends(get_booking_session)
):
    """City suggestions for one keystroke.

    Requests superseded by a newer keystroke on the same field return an
    empty list.
    """
    return await session.cities.resolve_cities(query, field)

@router.get("/{field}", response_model=AutocompleteView)
async def get_autocomplete_state(
    field: AutocompleteField,
    session: BookingSession = Depends(get_booking_session)
):
    """Current dropdown state of one field"""
    return session.cities.view(field)

@router.post("/{field}/select", response_model=AutocompleteView)
async def select_city(
    field: AutocompleteField,
    suggestion: CitySelectRequest,
    session: BookingSession = Depends(get_booking_session)
):
    """Pick a suggestion for the field"""
    session.cities.select(field, CitySuggestion(id=suggestion.id, name=suggestion.name))
    return session.cities.view(field)

@router.post("/{field}/focus", response_model=AutocompleteView)
async def focus_city_input(
    field: AutocompleteField,
    session: BookingSession = Depends(get_booking_session)
):
    session.cities.focus(field)
    return session.cities.view(field)

@router.post("/{field}/close", response_model=AutocompleteView)
async def close_city_dropdown(
    field: AutocompleteField,
    session: BookingSession = Depends(get_booking_session)
):
    """Click outside the input"""
    session.cities.close(field)
    return session.cities.view(field)
