from pydantic import BaseModel
from typing import Optional

class LoginRequest(BaseModel):
    username: str
    password: str

class CurrentUser(BaseModel):
    """Identity of the logged-in traveler"""
    id: int
    username: str
    role: str = "USER"

class LoginResult(BaseModel):
    success: bool
    user: Optional[CurrentUser] = None
    error: Optional[str] = None
