from __future__ import annotations

from typing import List, Optional

from currency_lens.models.detection import DetectedAmount
from .overlap import resolve
from .patterns import DEFAULT_CATALOG, PatternCatalog


def detect_currencies(
    text: str, catalog: PatternCatalog = DEFAULT_CATALOG
) -> List[DetectedAmount]:
    """Detect every currency amount in ``text``, ordered by position."""
    if not text:
        return []
    return resolve(catalog.match_all(text))


def detect_first(
    text: str, catalog: PatternCatalog = DEFAULT_CATALOG
) -> Optional[DetectedAmount]:
    found = detect_currencies(text, catalog)
    return found[0] if found else None
