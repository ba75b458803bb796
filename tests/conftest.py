import asyncio
from datetime import date
from typing import List, Optional

import pytest

from boardeasy.auth.schemas import CurrentUser, LoginResult
from boardeasy.bookings.ledger import BookingSubmissionError
from boardeasy.bookings.schemas import BookingConfirmation, BookingDraft, BookingRecord
from boardeasy.bookings.workflow import BookingWorkflow
from boardeasy.cities.catalog import RouteCatalogError
from boardeasy.cities.schemas import RouteEntry
from boardeasy.config import Settings
from boardeasy.offerings.schemas import SearchCriteria
from boardeasy.offerings.service import SyntheticOfferingProvider


class FakeAuthSession:
    def __init__(self, authenticated: bool = True):
        self.user: Optional[CurrentUser] = (
            CurrentUser(id=7, username="traveler", role="USER") if authenticated else None
        )
        self.redirects = 0

    def is_authenticated(self) -> bool:
        return self.user is not None

    def current_user(self) -> Optional[CurrentUser]:
        return self.user

    async def login(self, username: str, password: str) -> LoginResult:
        self.user = CurrentUser(id=7, username=username, role="USER")
        return LoginResult(success=True, user=self.user)

    def logout(self) -> None:
        self.user = None

    def redirect_to_login(self) -> None:
        self.redirects += 1


class FakeRouteCatalog:
    def __init__(self, routes: List[RouteEntry], delays: Optional[List[float]] = None, fail: bool = False):
        self.routes = routes
        self.delays = list(delays or [])
        self.fail = fail
        self.calls = 0

    async def list_routes(self) -> List[RouteEntry]:
        self.calls += 1
        if self.delays:
            await asyncio.sleep(self.delays.pop(0))
        if self.fail:
            raise RouteCatalogError("catalog down")
        return list(self.routes)


class FakeLedger:
    def __init__(self, reference: str = "PNR1001"):
        self.reference = reference
        self.fail = False
        self.gate: Optional[asyncio.Event] = None
        self.submitted: List[BookingDraft] = []
        self.cancelled: List[str] = []

    async def submit_booking(self, draft: BookingDraft) -> BookingConfirmation:
        self.submitted.append(draft)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise BookingSubmissionError("ledger unavailable")
        return BookingConfirmation(booking_reference=self.reference, total_amount=draft.total_amount)

    async def list_bookings(self) -> List[BookingRecord]:
        return [BookingRecord(id=1, pnrNumber=self.reference, status="CONFIRMED")]

    async def cancel_booking(self, booking_id) -> None:
        self.cancelled.append(booking_id)


@pytest.fixture
def config():
    return Settings(OFFERING_PRICE_JITTER=0)


@pytest.fixture
def routes():
    return [
        RouteEntry(source="Mumbai", destination="Pune"),
        RouteEntry(source="Pune", destination="Goa"),
        RouteEntry(source="Delhi", destination="Jaipur"),
        RouteEntry(source="Mumbai", destination="Nagpur"),
    ]


@pytest.fixture
def catalog(routes):
    return FakeRouteCatalog(routes)


@pytest.fixture
def auth():
    return FakeAuthSession()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def criteria():
    return SearchCriteria(
        origin_name="Mumbai",
        destination_name="Pune",
        departure_date=date(2026, 11, 2),
        passenger_count=3,
    )


@pytest.fixture
def workflow(auth, ledger, config):
    return BookingWorkflow(
        auth=auth,
        offering_provider=SyntheticOfferingProvider(price_jitter=0),
        ledger=ledger,
        config=config,
    )
