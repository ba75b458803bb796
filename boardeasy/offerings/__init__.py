"""
Bus Offerings Module

Search criteria and the candidate bus offerings returned for a search:

- SearchCriteria with form validation (cities, dates, trip type)
- Synthetic offering generation for demos and tests
- Live offerings from the bus search API
- Provider selection by configuration
- Result filters (price, operator, bus type, departure time)

Key Components:
- service.py: Offering providers and the provider factory
- validation.py: Search form checks
- filters.py: Bus list filters that keep result order
- schemas.py: Pydantic models for criteria and offerings
"""

from .service import (
    OfferingProvider, SyntheticOfferingProvider, LiveOfferingProvider,
    OfferingSearchError, build_offering_provider
)
from .validation import SearchCriteriaError, validate_search_criteria, ensure_searchable
from .filters import apply_offering_filter, matches_filter, operator_names
from .schemas import (
    SearchCriteria, Offering, TripType, ProviderKind, OfferingFilter, DepartureWindow
)

__all__ = [
    "OfferingProvider",
    "SyntheticOfferingProvider",
    "LiveOfferingProvider",
    "OfferingSearchError",
    "build_offering_provider",
    "SearchCriteriaError",
    "validate_search_criteria",
    "ensure_searchable",
    "apply_offering_filter",
    "matches_filter",
    "operator_names",
    "SearchCriteria",
    "Offering",
    "TripType",
    "ProviderKind",
    "OfferingFilter",
    "DepartureWindow"
]
