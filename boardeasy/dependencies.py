from fastapi import Depends, Header, HTTPException, Request, status

from boardeasy.bookings.registry import BookingSession, WorkflowRegistry


async def get_registry(request: Request) -> WorkflowRegistry:
    return request.app.state.registry


async def get_booking_session(
    x_session_id: str = Header(..., description="Browser session identifier"),
    registry: WorkflowRegistry = Depends(get_registry),
) -> BookingSession:
    """Session for the calling browser, created on first use"""
    if not x_session_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Session-Id header must not be empty"
        )
    return await registry.get(x_session_id.strip())


async def require_login(session: BookingSession = Depends(get_booking_session)) -> BookingSession:
    """Session whose traveler is logged in"""
    if not session.auth.is_authenticated():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please login to continue",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session
