"""Birth-date and elapsed-time helpers behind every age-gated rule.

A missing or unparsable date is reported as ``None`` so callers can show a
prompt instead of computing with a made-up age.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

MAX_AGE = 120


class AgeAnchor(BaseModel):
    """A point in time reduced to whole years and whole months since birth."""

    years: int = Field(ge=0)
    months: int = Field(ge=0)


def parse_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def months_between(start: date, as_of: date) -> int:
    """Whole calendar months from ``start`` to ``as_of``, never negative.

    A month only counts once its day-of-month has been reached.
    """
    months = (as_of.year - start.year) * 12 + (as_of.month - start.month)
    if as_of.day < start.day:
        months -= 1
    return max(0, months)


def age_anchor(dob: Any, as_of: Optional[date] = None) -> Optional[AgeAnchor]:
    birth = parse_date(dob)
    if birth is None:
        return None
    months = months_between(birth, as_of or date.today())
    return AgeAnchor(years=months // 12, months=months)


def age_on(dob: Any, as_of: Optional[date] = None) -> Optional[int]:
    anchor = age_anchor(dob, as_of)
    return anchor.years if anchor is not None else None


def clamp_age(age: int, max_age: int = MAX_AGE) -> int:
    return max(0, min(int(age), max_age))
