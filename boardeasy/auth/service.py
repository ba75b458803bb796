import logging
from typing import Callable, Optional, Protocol

import httpx

from boardeasy.auth.schemas import CurrentUser, LoginResult

logger = logging.getLogger(__name__)


class AuthSession(Protocol):
    """Authentication collaborator consumed by the booking workflow"""

    def is_authenticated(self) -> bool: ...

    def current_user(self) -> Optional[CurrentUser]: ...

    async def login(self, username: str, password: str) -> LoginResult: ...

    def logout(self) -> None: ...

    def redirect_to_login(self) -> None: ...


class HttpAuthSession:
    """Session backed by the BoardEasy auth API.

    A successful login stores the bearer token on the shared HTTP client so the
    route catalog and booking ledger calls are authenticated as well.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        on_login_required: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.on_login_required = on_login_required
        self._user: Optional[CurrentUser] = None
        self._token: Optional[str] = None

    def is_authenticated(self) -> bool:
        return self._user is not None

    def current_user(self) -> Optional[CurrentUser]:
        return self._user

    def has_role(self, role: str) -> bool:
        return self._user is not None and self._user.role == role

    async def login(self, username: str, password: str) -> LoginResult:
        try:
            response = await self.client.post(
                "/api/auth/login",
                json={"username": username, "password": password},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.info("Login rejected for %s: %s", username, e.response.status_code)
            return LoginResult(success=False, error=e.response.text or "Login failed")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Login request failed: %s", e)
            return LoginResult(success=False, error="Login failed")

        if not isinstance(data, dict) or not data.get("token") or data.get("userId") is None:
            logger.warning("Login response for %s carried no token", username)
            return LoginResult(success=False, error="Login failed")

        self._token = data["token"]
        self._user = CurrentUser(
            id=data["userId"],
            username=username,
            role=data.get("role") or "USER",
        )
        self.client.headers["Authorization"] = f"Bearer {self._token}"
        logger.info("User %s logged in", username)
        return LoginResult(success=True, user=self._user)

    def logout(self) -> None:
        if self._user:
            logger.info("User %s logged out", self._user.username)
        self._user = None
        self._token = None
        self.client.headers.pop("Authorization", None)

    def redirect_to_login(self) -> None:
        logger.info("Authentication required, redirecting to login")
        if self.on_login_required:
            self.on_login_required()
