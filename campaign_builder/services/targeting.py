from __future__ import annotations

from collections.abc import Callable

from campaign_builder.schemas import TargetingFilters
from campaign_builder.vocabulary import assert_token

# Facet attribute on TargetingFilters -> vocabulary kind.
TARGETING_FACETS: dict[str, str] = {
    "industries": "industry",
    "company_sizes": "company_size",
    "seniorities": "seniority",
    "regions": "region",
}


class TargetingEditor:
    """Multi-select facet state. An empty facet means "no filter"."""

    def __init__(self, targeting: TargetingFilters, *, on_change: Callable[[], None] | None = None) -> None:
        self._targeting = targeting
        self._on_change = on_change

    @property
    def targeting(self) -> TargetingFilters:
        return self._targeting

    def toggle(self, facet: str, token: str) -> bool:
        """Add ``token`` to ``facet`` if absent, else remove it. Returns membership after the call."""
        values = self._facet_values(facet)
        canonical = assert_token(TARGETING_FACETS[facet], token)
        if canonical in values:
            values.remove(canonical)
            selected = False
        else:
            values.append(canonical)
            selected = True
        self._changed()
        return selected

    def clear(self, facet: str) -> None:
        self._facet_values(facet).clear()
        self._changed()

    def clear_all(self) -> None:
        for facet in TARGETING_FACETS:
            getattr(self._targeting, facet).clear()
        self._changed()

    def is_unfiltered(self) -> bool:
        return not any(getattr(self._targeting, facet) for facet in TARGETING_FACETS)

    def _facet_values(self, facet: str) -> list[str]:
        if facet not in TARGETING_FACETS:
            raise KeyError(f"Unknown targeting facet '{facet}'. Allowed: {', '.join(TARGETING_FACETS)}")
        return getattr(self._targeting, facet)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
