"""
Authentication Module

Wraps the BoardEasy authentication API as a session collaborator for the
booking workflow:

- Login / logout against the upstream auth endpoint
- Current user identity and role checks
- Redirect-to-login side channel used when a booking step needs a session

Key Components:
- service.py: AuthSession protocol and the HTTP-backed session
- router.py: FastAPI endpoints for login, logout and the current user
  (mounted by boardeasy.main)
- schemas.py: Pydantic models for credentials and user identity
"""

from .service import AuthSession, HttpAuthSession
from .schemas import LoginRequest, CurrentUser, LoginResult

__all__ = [
    "AuthSession",
    "HttpAuthSession",
    "LoginRequest",
    "CurrentUser",
    "LoginResult"
]
