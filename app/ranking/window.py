"""Inclusive date-range filtering for review timestamps."""

import calendar
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import Select
from sqlalchemy.sql.elements import ColumnElement


@dataclass(frozen=True)
class Window:
    """Optional inclusive ``[start, end]`` range.  Either bound may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None


def apply_date_range(
    stmt: Select,
    column: ColumnElement,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Select:
    """Restrict ``stmt`` to rows whose ``column`` falls inside ``[start, end]``.

    A missing bound leaves that side open; with no bounds the statement is
    returned unchanged.  An inverted range (``start > end``) is not rejected,
    it simply matches no rows.
    """
    if start is not None and end is not None:
        return stmt.where(column.between(start, end))
    if start is not None:
        return stmt.where(column >= start)
    if end is not None:
        return stmt.where(column <= end)
    return stmt


def months_before(instant: datetime, months: int) -> datetime:
    """Shift ``instant`` back by whole calendar months.

    The day is clamped to the length of the target month, so 31 March minus
    one month is 28 (or 29) February.
    """
    month_index = instant.year * 12 + (instant.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(instant.day, calendar.monthrange(year, month)[1])
    return instant.replace(year=year, month=month, day=day)
