"""Persisted gallery sort preference."""

from dataclasses import dataclass, field
from typing import Protocol

from veo_gallery.domain.gallery import DEFAULT_SORT_KEY, SortKey

SORT_ORDER_KEY = "veo-gallery-sort-order"


class PreferenceRepository(Protocol):
    """Client-local key-value storage for scalar preferences."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if any."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""


def parse_sort_key(raw: str | None) -> SortKey:
    """Map a stored scalar onto a sort key, falling back to newest first."""
    if raw is None:
        return DEFAULT_SORT_KEY
    try:
        return SortKey(raw)
    except ValueError:
        return DEFAULT_SORT_KEY


@dataclass
class SortPreferenceService:
    """Reads the sort order once and writes it on every change."""

    repository: PreferenceRepository
    _current: SortKey | None = field(default=None, init=False)

    @property
    def sort_key(self) -> SortKey:
        """Return the current sort order, loading it on first access."""
        if self._current is None:
            self._current = parse_sort_key(self.repository.get(SORT_ORDER_KEY))
        return self._current

    def set_sort_key(self, key: SortKey) -> None:
        """Change and persist the sort order."""
        self._current = key
        self.repository.set(SORT_ORDER_KEY, key.value)
