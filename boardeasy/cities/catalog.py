import logging
from typing import List, Protocol

import httpx

from boardeasy.cities.schemas import RouteEntry

logger = logging.getLogger(__name__)


class RouteCatalogError(Exception):
    """Raised when the route catalog cannot be read"""


class RouteCatalog(Protocol):
    async def list_routes(self) -> List[RouteEntry]: ...


class HttpRouteCatalog:
    """Route catalog read from the BoardEasy routes API"""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def list_routes(self) -> List[RouteEntry]:
        try:
            response = await self.client.get("/api/routes")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RouteCatalogError(f"Failed to list routes: {e}") from e

        # Paged responses wrap the list in "content"
        if isinstance(data, dict):
            data = data.get("content") or []

        if not isinstance(data, list):
            raise RouteCatalogError(f"Unexpected routes response: {type(data).__name__}")

        routes = []
        for item in data:
            if not isinstance(item, dict):
                logger.debug("Skipping malformed route entry: %r", item)
                continue
            source = item.get("source")
            destination = item.get("destination")
            if not source or not destination:
                logger.debug("Skipping incomplete route entry: %s", item)
                continue
            routes.append(RouteEntry(source=source, destination=destination))
        return routes
