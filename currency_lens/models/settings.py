from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

DEFAULT_TOOLTIP_DELAY_MS = 200


class ExtensionSettings(BaseModel):
    """User-facing toggles read by the presentation layer.

    The detection engine never consults these; gating happens in the host.
    """

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    show_original_amount: bool = Field(True, alias="showOriginalAmount")
    tooltip_delay: int = Field(
        DEFAULT_TOOLTIP_DELAY_MS, ge=0, le=10_000, alias="tooltipDelay"
    )


class ExtensionSettingsPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: Optional[bool] = None
    show_original_amount: Optional[bool] = Field(None, alias="showOriginalAmount")
    tooltip_delay: Optional[int] = Field(None, ge=0, le=10_000, alias="tooltipDelay")
