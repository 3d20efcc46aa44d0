"""Deep-copy helper for itinerary records."""

from __future__ import annotations

import copy
from typing import TypeVar

T = TypeVar("T")


def clone(record: T) -> T:
    """Return a structurally independent deep copy of a nested record."""
    return copy.deepcopy(record)
