from pydantic import BaseModel
from typing import List
from enum import Enum

class AutocompleteField(str, Enum):
    """Search form inputs that offer city suggestions"""
    ORIGIN = "origin"
    DESTINATION = "destination"

class CitySuggestion(BaseModel):
    id: int
    name: str

class RouteEntry(BaseModel):
    """One route as listed by the route catalog"""
    source: str
    destination: str

class AutocompleteView(BaseModel):
    """Read-only snapshot of one field's autocomplete state"""
    field: AutocompleteField
    query: str
    suggestions: List[CitySuggestion]
    is_open: bool
    is_loading: bool
    lookup_pending: bool

class CitySelectRequest(BaseModel):
    id: int
    name: str
