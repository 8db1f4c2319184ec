from __future__ import annotations
from pydantic import BaseModel
from typing import Any, Optional


class MessageResponse(BaseModel):
    """Envelope returned for every message and envelope endpoint."""

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "MessageResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "MessageResponse":
        return cls(success=False, error=error)
