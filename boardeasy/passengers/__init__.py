"""
Passenger Details Module

Keeps the passenger list for a booking (one to six travelers) and checks it
before the booking moves on: name present, age between 5 and 100, gender
chosen.

Key Components:
- service.py: PassengerRoster and PassengerValidationError
- schemas.py: Pydantic models for passenger records
"""

from .service import PassengerRoster, PassengerValidationError
from .schemas import PassengerRecord, PassengerRule, PassengerUpdate, Gender

__all__ = [
    "PassengerRoster",
    "PassengerValidationError",
    "PassengerRecord",
    "PassengerRule",
    "PassengerUpdate",
    "Gender"
]
