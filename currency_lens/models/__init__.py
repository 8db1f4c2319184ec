"""Pydantic / dataclass domain models for Currency Lens."""

from .constants import (
    CURRENCIES,
    FOREIGN_CURRENCIES,
    REFERENCE_CURRENCY,
    MAX_AMOUNT,
    CurrencyCode,
)  # re-export
from .detection import DetectedAmount
from .messages import MessageResponse
from .rates import RateTable
from .settings import ExtensionSettings, ExtensionSettingsPatch

__all__ = [
    "CURRENCIES",
    "FOREIGN_CURRENCIES",
    "REFERENCE_CURRENCY",
    "MAX_AMOUNT",
    "CurrencyCode",
    "DetectedAmount",
    "MessageResponse",
    "RateTable",
    "ExtensionSettings",
    "ExtensionSettingsPatch",
]
