import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Dict, List, Optional

from boardeasy.cities.catalog import RouteCatalog, RouteCatalogError
from boardeasy.cities.debounce import DebounceTimer
from boardeasy.cities.schemas import AutocompleteField, AutocompleteView, CitySuggestion
from boardeasy.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass
class AutocompleteState:
    """Everything one autocomplete input needs, kept in one place"""
    query: str
    pending_timer: DebounceTimer
    suggestions: List[CitySuggestion] = dataclass_field(default_factory=list)
    is_open: bool = False
    is_loading: bool = False
    generation: int = 0

    def clear(self) -> None:
        self.suggestions = []
        self.is_open = False


class CityResolver:
    """Debounced city autocomplete for the search form.

    Origin and destination keep separate state and timers. Only the most
    recently issued query of a field may update that field.
    """

    def __init__(self, catalog: RouteCatalog, config: Optional[Settings] = None):
        self.catalog = catalog
        self.config = config or default_settings
        self._states: Dict[AutocompleteField, AutocompleteState] = {
            f: AutocompleteState(query="", pending_timer=DebounceTimer(self.config.CITY_DEBOUNCE_SECONDS))
            for f in AutocompleteField
        }

    def state(self, field: AutocompleteField) -> AutocompleteState:
        return self._states[AutocompleteField(field)]

    async def resolve_cities(self, query: str, field: AutocompleteField) -> List[CitySuggestion]:
        """Suggest cities matching ``query`` for one input.

        Returns [] for short queries and for calls superseded by a newer
        keystroke on the same field before their lookup completed.
        """
        state = self.state(field)
        state.query = query
        state.generation += 1
        generation = state.generation

        if not query or len(query) < self.config.CITY_MIN_QUERY_LENGTH:
            state.pending_timer.cancel()
            state.is_loading = False
            state.clear()
            return []

        fired = await state.pending_timer.schedule()
        if not fired or generation != state.generation:
            return []

        state.is_loading = True
        try:
            suggestions = await self._lookup(query)
        finally:
            if generation == state.generation:
                state.is_loading = False

        if generation != state.generation:
            logger.debug("Discarding stale %s suggestions for %r", field, query)
            return []

        state.suggestions = suggestions
        state.is_open = len(suggestions) > 0
        return suggestions

    def select(self, field: AutocompleteField, suggestion: CitySuggestion) -> str:
        """Pick a suggestion; the input takes its name and the dropdown closes"""
        state = self.state(field)
        state.pending_timer.cancel()
        state.generation += 1
        state.query = suggestion.name
        state.is_loading = False
        state.clear()
        return suggestion.name

    def close(self, field: AutocompleteField) -> None:
        """Pointer interaction outside the input"""
        self.state(field).is_open = False

    def focus(self, field: AutocompleteField) -> bool:
        state = self.state(field)
        if len(state.query) >= self.config.CITY_MIN_QUERY_LENGTH:
            state.is_open = len(state.suggestions) > 0
        return state.is_open

    def view(self, field: AutocompleteField) -> AutocompleteView:
        state = self.state(field)
        return AutocompleteView(
            field=AutocompleteField(field),
            query=state.query,
            suggestions=list(state.suggestions),
            is_open=state.is_open,
            is_loading=state.is_loading,
            lookup_pending=state.pending_timer.pending,
        )

    async def _lookup(self, query: str) -> List[CitySuggestion]:
        try:
            routes = await self.catalog.list_routes()
        except RouteCatalogError as e:
            logger.warning("City lookup failed: %s", e)
            return []

        # Unique city names across both ends of every route, first seen first
        names: List[str] = []
        seen = set()
        for route in routes:
            for name in (route.source, route.destination):
                if name not in seen:
                    seen.add(name)
                    names.append(name)

        needle = query.lower()
        matches = [
            CitySuggestion(id=index, name=name)
            for index, name in enumerate(names)
            if needle in name.lower()
        ]
        return matches[:self.config.CITY_SUGGESTION_LIMIT]
