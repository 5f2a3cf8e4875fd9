"""
detection/categories.py

Fixed detection category table.

The detector stores counts under its own class names ("Salmonella-like",
"NCD-like", ...) while the dashboard shows short disease names. Both
spellings, and the chart colour of each category, live in the single
table below. Aggregation and presentation code must look categories up
here instead of repeating the string literals.

    member        storage key          display label    colour
    HEALTHY       Healthy              Healthy          #4A7F2C
    SALMONELLA    Salmonella-like      Salmonella       #FFC107
    NEWCASTLE     NCD-like             Newcastle        #F44336
    COCCIDIOSIS   Coccidiosis-like     Coccidiosis      #0288D1

Declaration order is the display order.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class Category(Enum):
    """Closed set of detection categories recognised by the dashboard."""

    HEALTHY = ("Healthy", "Healthy", "#4A7F2C")
    SALMONELLA = ("Salmonella-like", "Salmonella", "#FFC107")
    NEWCASTLE = ("NCD-like", "Newcastle", "#F44336")
    COCCIDIOSIS = ("Coccidiosis-like", "Coccidiosis", "#0288D1")

    def __init__(self, storage_key: str, label: str, color: str) -> None:
        self.storage_key = storage_key
        self.label = label
        self.color = color


DISPLAY_ORDER: Final[tuple[Category, ...]] = tuple(Category)
"""Categories in the order the chart lists them."""

_BY_STORAGE_KEY: Final[dict[str, Category]] = {c.storage_key: c for c in Category}
_BY_LABEL: Final[dict[str, Category]] = {c.label: c for c in Category}


def category_for_key(storage_key: str) -> Category | None:
    """
    Return the category stored under *storage_key*, or ``None`` when the key
    is not one of the four recognised detector classes.
    """

    return _BY_STORAGE_KEY.get(storage_key)


def category_for_label(label: str) -> Category | None:
    """Return the category shown as *label*, or ``None``."""

    return _BY_LABEL.get(label)
