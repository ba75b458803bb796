import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, List, Optional

import httpx

from boardeasy.auth.service import HttpAuthSession
from boardeasy.bookings.ledger import HttpBookingLedger
from boardeasy.bookings.workflow import BookingWorkflow
from boardeasy.cities.catalog import HttpRouteCatalog
from boardeasy.cities.service import CityResolver
from boardeasy.client import build_http_client
from boardeasy.config import Settings, settings as default_settings
from boardeasy.offerings.service import build_offering_provider

logger = logging.getLogger(__name__)


@dataclass
class BookingSession:
    """Collaborators and workflow of one browser session"""
    session_id: str
    client: httpx.AsyncClient
    auth: HttpAuthSession
    cities: CityResolver
    workflow: BookingWorkflow
    last_used: float = 0.0


class WorkflowRegistry:
    """In-memory sessions, one active booking workflow each.

    Sessions idle for longer than SESSION_IDLE_SECONDS are closed, and at most
    MAX_SESSIONS are kept, least recently used going first. A session with a
    submission in flight is never evicted.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or default_settings
        self.transport = transport
        self.clock = clock
        self._sessions: "OrderedDict[str, BookingSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def get(self, session_id: str) -> BookingSession:
        now = self.clock()
        await self._expire_idle(now)

        session = self._sessions.get(session_id)
        if session is None:
            session = self._create(session_id)
            self._sessions[session_id] = session
            await self._enforce_limit(keep=session_id)
        else:
            self._sessions.move_to_end(session_id)
        session.last_used = now
        return session

    async def discard(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session:
            logger.debug("Closing booking session %s", session_id)
            await session.client.aclose()

    async def close(self) -> None:
        for session_id in list(self._sessions):
            await self.discard(session_id)

    async def _expire_idle(self, now: float) -> None:
        expired: List[str] = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_used > self.config.SESSION_IDLE_SECONDS
            and not session.workflow.is_submitting
        ]
        for session_id in expired:
            logger.info("Expiring idle booking session %s", session_id)
            await self.discard(session_id)

    async def _enforce_limit(self, keep: str) -> None:
        # Oldest first
        for session_id in list(self._sessions):
            if len(self._sessions) <= self.config.MAX_SESSIONS:
                break
            session = self._sessions[session_id]
            if session_id == keep or session.workflow.is_submitting:
                continue
            logger.info("Evicting booking session %s", session_id)
            await self.discard(session_id)

    def _create(self, session_id: str) -> BookingSession:
        logger.debug("Opening booking session %s", session_id)
        client = build_http_client(self.config, self.transport)
        auth = HttpAuthSession(client)
        workflow = BookingWorkflow(
            auth=auth,
            offering_provider=build_offering_provider(self.config, client),
            ledger=HttpBookingLedger(client),
            config=self.config,
        )
        return BookingSession(
            session_id=session_id,
            client=client,
            auth=auth,
            cities=CityResolver(HttpRouteCatalog(client), self.config),
            workflow=workflow,
        )
