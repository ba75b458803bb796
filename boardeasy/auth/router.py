from fastapi import APIRouter, Depends, HTTPException, status

from boardeasy.auth.schemas import CurrentUser, LoginRequest
from boardeasy.bookings.registry import BookingSession
from boardeasy.dependencies import get_booking_session, require_login

router = APIRouter()

@router.post("/login", response_model=CurrentUser)
async def login(
    login_data: LoginRequest,
    session: BookingSession = Depends(get_booking_session)
):
    """Log the session in against the BoardEasy auth API"""
    result = await session.auth.login(login_data.username, login_data.password)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error or "Login failed",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.user

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(session: BookingSession = Depends(get_booking_session)):
    """Log out and drop any booking in progress"""
    session.auth.logout()
    session.workflow.reset()

@router.get("/me", response_model=CurrentUser)
async def read_current_user(session: BookingSession = Depends(require_login)):
    """Get the logged-in traveler"""
    return session.auth.current_user()
