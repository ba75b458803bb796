from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from boardeasy.bookings.schemas import FareBreakdown
from boardeasy.config import Settings, settings as default_settings


def compute_tax(base_fare: int, tax_rate: Decimal) -> int:
    """Tax on the base fare, rounded down to a whole unit"""
    return int((Decimal(base_fare) * Decimal(tax_rate)).to_integral_value(rounding=ROUND_FLOOR))


def compute_total(
    unit_price: int,
    passenger_count: int,
    tax_rate: Optional[Decimal] = None,
    service_charge: Optional[int] = None,
) -> int:
    tax_rate = default_settings.TAX_RATE if tax_rate is None else tax_rate
    service_charge = default_settings.SERVICE_CHARGE if service_charge is None else service_charge

    base_fare = unit_price * passenger_count
    return base_fare + compute_tax(base_fare, tax_rate) + service_charge


class FareCalculationService:
    """Prices a booking: base fare, tax and a flat service charge"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def calculate(self, unit_price: int, passenger_count: int) -> FareBreakdown:
        if unit_price < 0:
            raise ValueError("Unit price cannot be negative")
        if passenger_count < 1:
            raise ValueError("At least one passenger is required")

        base_fare = unit_price * passenger_count
        tax_amount = compute_tax(base_fare, self.config.TAX_RATE)
        service_charge = self.config.SERVICE_CHARGE

        return FareBreakdown(
            unit_price=unit_price,
            passenger_count=passenger_count,
            base_fare=base_fare,
            tax_amount=tax_amount,
            service_charge=service_charge,
            total=base_fare + tax_amount + service_charge,
        )
