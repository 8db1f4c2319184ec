from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict

from .constants import CurrencyCode


@dataclass(frozen=True)
class DetectedAmount:
    """A currency amount found in scanned text.

    ``[start_index, end_index)`` is a half-open character range into the text
    that was scanned.
    """

    code: CurrencyCode
    amount: float
    original_text: str
    start_index: int
    end_index: int

    def shifted(self, offset: int) -> "DetectedAmount":
        """Return a copy whose span is moved by ``offset`` characters."""
        return replace(
            self,
            start_index=self.start_index + offset,
            end_index=self.end_index + offset,
        )

    def overlaps(self, start: int, end: int) -> bool:
        return self.start_index < end and start < self.end_index

    def as_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "amount": self.amount,
            "originalText": self.original_text,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
        }
