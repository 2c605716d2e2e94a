"""Gallery ordering models."""

from enum import Enum


class SortKey(Enum):
    """User-selectable gallery order."""

    CREATED_DESC = "date-desc"
    CREATED_ASC = "date-asc"
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"


DEFAULT_SORT_KEY = SortKey.CREATED_DESC
