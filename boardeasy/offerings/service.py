import logging
import random
from typing import List, Optional, Protocol

import httpx

from boardeasy.config import Settings, settings as default_settings
from boardeasy.offerings.schemas import Offering, ProviderKind, SearchCriteria

logger = logging.getLogger(__name__)

VEHICLE_CLASSES = [
    {"name": "AC Sleeper", "amenities": ("AC", "Charging Port", "WiFi", "Blanket", "Water Bottle")},
    {"name": "Non-AC Seater", "amenities": ("Charging Port", "Water Bottle")},
    {"name": "Volvo Multi-Axle", "amenities": ("AC", "WiFi", "Charging Port", "Blanket", "Snacks", "Entertainment")},
    {"name": "Luxury Coach", "amenities": ("AC", "WiFi", "Charging Port", "Blanket", "Meal", "Hot/Cold Water")},
]

OPERATORS = [
    {"name": "BoardEasy Express", "rating": 4.5},
    {"name": "GreenLine Travels", "rating": 4.2},
    {"name": "Comfort Coach", "rating": 4.7},
    {"name": "Royal Rides", "rating": 4.8},
    {"name": "Swift Travels", "rating": 4.3},
    {"name": "Premium Line", "rating": 4.6},
]

DEPARTURE_TIMES = ["06:00", "08:30", "11:00", "14:15", "18:45", "22:00", "23:30"]
ARRIVAL_TIMES = ["12:30", "15:00", "17:30", "20:45", "01:15", "04:30", "06:00"]
HIGHLIGHT_TAGS = ["Live Tracking", "Punctuality", "Cleanliness"]


class OfferingSearchError(Exception):
    """Raised when a provider cannot produce offerings"""


class OfferingProvider(Protocol):
    kind: ProviderKind

    async def generate_offerings(self, criteria: SearchCriteria) -> List[Offering]: ...


class SyntheticOfferingProvider:
    """Template-driven offerings with a random price jitter.

    Offering ``i`` cycles through vehicle classes, operators and timetable
    slots by index. Pass ``price_jitter=0`` for fully deterministic prices.
    """

    kind = ProviderKind.SYNTHETIC

    def __init__(
        self,
        count: int = 12,
        price_jitter: int = 300,
        rng: Optional[random.Random] = None,
    ):
        self.count = count
        self.price_jitter = price_jitter
        self.rng = rng or random.Random()

    async def generate_offerings(self, criteria: SearchCriteria) -> List[Offering]:
        return [self._build(index) for index in range(self.count)]

    def _build(self, index: int) -> Offering:
        vehicle = VEHICLE_CLASSES[index % len(VEHICLE_CLASSES)]
        operator = OPERATORS[index % len(OPERATORS)]
        base_price = 500 + (index % 4) * 200
        jitter = self.rng.randrange(self.price_jitter) if self.price_jitter > 0 else 0

        return Offering(
            id=index + 1,
            operator_name=operator["name"],
            vehicle_class=vehicle["name"],
            departure_time=DEPARTURE_TIMES[index % len(DEPARTURE_TIMES)],
            arrival_time=ARRIVAL_TIMES[index % len(ARRIVAL_TIMES)],
            duration_label="7h 30m",
            unit_price=base_price + jitter,
            available_seat_count=max(5, 40 - index * 3),
            rating_score=operator["rating"],
            amenities=vehicle["amenities"],
            cancellation_policy="Free cancellation" if index % 2 == 0 else "Moderate cancellation",
            highlight_tag=HIGHLIGHT_TAGS[index % len(HIGHLIGHT_TAGS)],
        )


class LiveOfferingProvider:
    """Offerings from the BoardEasy bus search API"""

    kind = ProviderKind.LIVE

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def generate_offerings(self, criteria: SearchCriteria) -> List[Offering]:
        payload = {
            "source": criteria.origin_name,
            "destination": criteria.destination_name,
            "travelDate": criteria.departure_date.isoformat() if criteria.departure_date else None,
            "passengers": criteria.passenger_count,
        }
        try:
            response = await self.client.post("/api/bus-search/search", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OfferingSearchError(f"Bus search failed: {e}") from e

        if not isinstance(data, list):
            logger.warning("Unexpected bus search response: %r", type(data))
            return []

        try:
            return [self._to_offering(index, bus) for index, bus in enumerate(data)]
        except (AttributeError, TypeError, ValueError) as e:
            raise OfferingSearchError(f"Malformed bus search result: {e}") from e

    @staticmethod
    def _to_offering(index: int, bus: dict) -> Offering:
        amenities = bus.get("amenities") or ()
        if isinstance(amenities, str):
            amenities = tuple(a.strip() for a in amenities.split(",") if a.strip())

        return Offering(
            id=bus.get("scheduleId") or index + 1,
            operator_name=bus.get("operatorName", ""),
            vehicle_class=bus.get("vehicleType", ""),
            departure_time=str(bus.get("departureTime", "")),
            arrival_time=str(bus.get("arrivalTime", "")),
            duration_label=str(bus.get("duration", "")),
            unit_price=int(float(bus.get("price", 0))),
            available_seat_count=int(bus.get("availableSeats", 0)),
            rating_score=float(bus.get("rating") or 0),
            amenities=tuple(amenities),
            cancellation_policy=bus.get("cancellationPolicy", ""),
            highlight_tag=bus.get("highlight", ""),
            schedule_id=bus.get("scheduleId"),
            vehicle_number=bus.get("vehicleNumber"),
        )


def build_offering_provider(
    config: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> OfferingProvider:
    """Pick the provider named by OFFERING_PROVIDER"""
    config = config or default_settings
    kind = ProviderKind(config.OFFERING_PROVIDER)

    if kind == ProviderKind.LIVE:
        if client is None:
            raise ValueError("Live offering provider needs an HTTP client")
        return LiveOfferingProvider(client)

    return SyntheticOfferingProvider(
        count=config.OFFERING_COUNT,
        price_jitter=config.OFFERING_PRICE_JITTER,
    )
