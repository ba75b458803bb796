"""
City Autocomplete Module

Resolves departure and destination names typed into the search form against
the route catalog:

- Debounced lookups, independent per input field
- Case-insensitive substring matching over every city served by a route
- Stale lookup results are discarded when a newer query exists
- Dropdown open/close bookkeeping per field

Key Components:
- debounce.py: Reusable cancellable debounce timer
- catalog.py: Route catalog protocol and the HTTP-backed catalog
- service.py: CityResolver with per-field autocomplete state
- router.py: FastAPI endpoints for suggestions (mounted by boardeasy.main)
- schemas.py: Pydantic models for suggestions and autocomplete snapshots
"""

from .debounce import DebounceTimer
from .catalog import RouteCatalog, HttpRouteCatalog, RouteCatalogError
from .service import CityResolver, AutocompleteState
from .schemas import AutocompleteField, CitySuggestion, RouteEntry, AutocompleteView

__all__ = [
    "DebounceTimer",
    "RouteCatalog",
    "HttpRouteCatalog",
    "RouteCatalogError",
    "CityResolver",
    "AutocompleteState",
    "AutocompleteField",
    "CitySuggestion",
    "RouteEntry",
    "AutocompleteView"
]
