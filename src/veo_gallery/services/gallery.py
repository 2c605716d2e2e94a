"""In-memory gallery of generated videos."""

import unicodedata
from collections import deque
from collections.abc import Iterable
from uuid import UUID

from veo_gallery.domain.gallery import SortKey
from veo_gallery.domain.records import VideoRecord


class GalleryStore:
    """Insertion-ordered record collection, newest insertion first."""

    def __init__(self, records: Iterable[VideoRecord] = ()) -> None:
        self._records: deque[VideoRecord] = deque(records)

    def prepend(self, record: VideoRecord) -> None:
        """Insert a record at the front."""
        self._records.appendleft(record)

    def records(self) -> list[VideoRecord]:
        """Return a snapshot in stored order."""
        return list(self._records)

    def get(self, record_id: UUID) -> VideoRecord | None:
        """Return a record by id, if present."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def view_ordered_by(self, key: SortKey) -> list[VideoRecord]:
        """Return the records ordered by ``key`` without touching stored order."""
        return order_records(self.records(), key)

    def __len__(self) -> int:
        return len(self._records)


def order_records(records: list[VideoRecord], key: SortKey) -> list[VideoRecord]:
    """Stable sort of records; equal keys keep their relative order."""
    # sorted(reverse=True) keeps ties in input order
    if key is SortKey.TITLE_ASC:
        return sorted(records, key=lambda r: collation_key(r.title))
    if key is SortKey.TITLE_DESC:
        return sorted(records, key=lambda r: collation_key(r.title), reverse=True)
    if key is SortKey.CREATED_ASC:
        return sorted(records, key=lambda r: r.created_at)
    return sorted(records, key=lambda r: r.created_at, reverse=True)


def collation_key(text: str) -> tuple[tuple[tuple[int, str], ...], str, str]:
    """Locale-style collation key.

    Compares base letters first (ignoring case and accents), then accents,
    then case with lowercase ahead of uppercase. Within the base comparison
    punctuation and symbols sort before digits, and digits before letters.
    """
    folded = text.casefold()
    base = tuple(
        (_character_rank(ch), ch)
        for ch in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(ch)
    )
    return base, folded, text.swapcase()


def _character_rank(ch: str) -> int:
    if ch.isalpha():
        return 2
    if ch.isdigit():
        return 1
    return 0
