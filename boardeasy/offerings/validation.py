from typing import List

from boardeasy.offerings.schemas import SearchCriteria, TripType


class SearchCriteriaError(ValueError):
    """Search form is incomplete or inconsistent"""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("\n".join(errors))


def validate_search_criteria(criteria: SearchCriteria) -> List[str]:
    """Collect every problem with the search form, in display order"""
    errors = []

    if not criteria.origin_name.strip():
        errors.append("Departure city is required")
    if not criteria.destination_name.strip():
        errors.append("Destination city is required")
    if not criteria.departure_date:
        errors.append("Travel date is required")
    if criteria.trip_type == TripType.ROUND_TRIP and not criteria.return_date:
        errors.append("Return date is required for round trip")

    if (
        criteria.origin_name.strip()
        and criteria.origin_name.strip().lower() == criteria.destination_name.strip().lower()
    ):
        errors.append("Departure and destination cities cannot be the same")

    if (
        criteria.trip_type == TripType.ROUND_TRIP
        and criteria.departure_date
        and criteria.return_date
        and criteria.return_date < criteria.departure_date
    ):
        errors.append("Return date cannot be before the travel date")

    return errors


def ensure_searchable(criteria: SearchCriteria) -> None:
    errors = validate_search_criteria(criteria)
    if errors:
        raise SearchCriteriaError(errors)
