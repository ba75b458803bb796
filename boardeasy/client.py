from typing import Optional

import httpx

from boardeasy.config import Settings, settings as default_settings


def build_http_client(
    config: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Shared client for the route catalog, auth and booking ledger APIs.

    The auth session sets the bearer header on this client after login, so all
    collaborators built on the same instance send it.
    """
    config = config or default_settings
    return httpx.AsyncClient(
        base_url=config.API_BASE_URL,
        timeout=config.HTTP_TIMEOUT_SECONDS,
        transport=transport,
    )
