"""Markers shared by every result payload."""

from typing import Literal

from pydantic import BaseModel


class Unavailable(BaseModel):
    """Returned instead of a number when a required anchor (a date) is missing."""

    status: Literal["unavailable"] = "unavailable"
    reason: str
