from typing import Any, List, Optional

from boardeasy.config import Settings, settings as default_settings
from boardeasy.passengers.schemas import Gender, PassengerRecord, PassengerRule

EDITABLE_FIELDS = ("name", "age", "gender", "email", "phone")
VALID_GENDERS = {g.value for g in Gender}


class PassengerValidationError(ValueError):
    """First passenger check that failed, with the passenger's position"""

    def __init__(self, index: int, rule: PassengerRule, message: str):
        self.index = index
        self.rule = rule
        super().__init__(message)


def _parse_age(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return None


class PassengerRoster:
    """Ordered, bounded list of passengers for one booking"""

    def __init__(self, count: int = 1, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._passengers: List[PassengerRecord] = []
        self.reset(count)

    def __len__(self) -> int:
        return len(self._passengers)

    @property
    def passengers(self) -> List[PassengerRecord]:
        return [p.model_copy() for p in self._passengers]

    def reset(self, count: int) -> None:
        count = max(self.config.MIN_PASSENGERS, min(count, self.config.MAX_PASSENGERS))
        self._passengers = [PassengerRecord() for _ in range(count)]

    def add_passenger(self) -> bool:
        if len(self._passengers) >= self.config.MAX_PASSENGERS:
            return False
        self._passengers.append(PassengerRecord())
        return True

    def remove_passenger(self, index: int) -> bool:
        if len(self._passengers) <= self.config.MIN_PASSENGERS:
            return False
        self._check_index(index)
        del self._passengers[index]
        return True

    def update_field(self, index: int, field: str, value: Any) -> PassengerRecord:
        self._check_index(index)
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown passenger field '{field}'")

        passenger = self._passengers[index]
        if field == "age":
            passenger.age = _parse_age(value)
        elif field == "gender":
            passenger.gender = str(value or "").strip().lower()
        elif field == "name":
            passenger.name = str(value or "")
        else:
            setattr(passenger, field, str(value) if value not in (None, "") else None)
        return passenger.model_copy()

    def validate(self) -> None:
        """Raise PassengerValidationError for the first incomplete passenger"""
        for i, passenger in enumerate(self._passengers):
            position = i + 1
            if (
                not passenger.name.strip()
                or passenger.age is None
                or passenger.gender not in VALID_GENDERS
            ):
                raise PassengerValidationError(
                    i,
                    PassengerRule.MISSING_DETAILS,
                    f"Please fill all details for Passenger {position}",
                )
            if not self.config.MIN_PASSENGER_AGE <= passenger.age <= self.config.MAX_PASSENGER_AGE:
                raise PassengerValidationError(
                    i,
                    PassengerRule.AGE_OUT_OF_RANGE,
                    f"Please enter a valid age for Passenger {position}",
                )

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._passengers):
            raise IndexError(f"No passenger at position {index + 1}")
