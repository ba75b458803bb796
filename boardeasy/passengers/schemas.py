from pydantic import BaseModel
from typing import Optional
from enum import Enum

class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

class PassengerRule(str, Enum):
    """Which passenger check failed"""
    MISSING_DETAILS = "missing_details"
    AGE_OUT_OF_RANGE = "age_out_of_range"

class PassengerRecord(BaseModel):
    """One traveler as typed into the form.

    Values are stored as entered; they are checked when the traveler moves on,
    not on every keystroke.
    """
    name: str = ""
    age: Optional[int] = None
    gender: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

class PassengerUpdate(BaseModel):
    field: str
    value: Optional[str] = None
