from typing import Iterable, List, Optional

from boardeasy.offerings.schemas import DepartureWindow, Offering, OfferingFilter

# Start hour inclusive, end hour exclusive
WINDOW_HOURS = {
    DepartureWindow.MORNING: (6, 12),
    DepartureWindow.AFTERNOON: (12, 18),
    DepartureWindow.EVENING: (18, 24),
    DepartureWindow.NIGHT: (0, 6),
}


def departure_hour(offering: Offering) -> Optional[int]:
    """Hour of an "HH:MM" departure time, None when unreadable"""
    try:
        hour = int(offering.departure_time.split(":")[0])
    except ValueError:
        return None
    return hour if 0 <= hour < 24 else None


def matches_filter(offering: Offering, offering_filter: OfferingFilter) -> bool:
    if offering.unit_price < offering_filter.min_price:
        return False
    if offering_filter.max_price is not None and offering.unit_price > offering_filter.max_price:
        return False
    if offering_filter.operator_name and offering.operator_name != offering_filter.operator_name:
        return False
    if (
        offering_filter.vehicle_class
        and offering_filter.vehicle_class.lower() not in offering.vehicle_class.lower()
    ):
        return False

    if offering_filter.departure_window != DepartureWindow.ALL:
        hour = departure_hour(offering)
        start, end = WINDOW_HOURS[offering_filter.departure_window]
        if hour is None or not start <= hour < end:
            return False
    return True


def apply_offering_filter(
    offerings: Iterable[Offering], offering_filter: OfferingFilter
) -> List[Offering]:
    """Offerings passing the filter, in their original order"""
    return [o for o in offerings if matches_filter(o, offering_filter)]


def operator_names(offerings: Iterable[Offering]) -> List[str]:
    """Distinct operators in first-seen order, for the operator picker"""
    names: List[str] = []
    for offering in offerings:
        if offering.operator_name and offering.operator_name not in names:
            names.append(offering.operator_name)
    return names
