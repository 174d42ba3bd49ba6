"""Enums for note listing options."""

from enum import Enum


class NoteSortField(str, Enum):
    """Fields a note listing can be ordered by."""

    CREATED = "created"
    UPDATED = "updated"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class DateFilter(str, Enum):
    """Recency windows applied to a note's last update."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"
