"""Extension settings backed by the metadata table.

Stored as one JSON document under the ``settings`` key. Reads are resilient:
a missing, unreadable or invalid document falls back to defaults field by
field, so a corrupt store never blocks the presentation layer.

Fields (wire names):
  - enabled: bool (default true)
  - showOriginalAmount: bool (default true)
  - tooltipDelay: int milliseconds, 0..10000 (default 200)
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional, Protocol

from pydantic import ValidationError

from currency_lens.core.errors import StorageError
from currency_lens.models.settings import ExtensionSettings, ExtensionSettingsPatch

logger = logging.getLogger("currency_lens.settings")


class _SettingsStoreProto(Protocol):
    def load_settings(self) -> Optional[Dict[str, Any]]: ...

    def save_settings(self, settings: Dict[str, Any]) -> None: ...


def _merge_valid_fields(stored: Mapping[str, Any]) -> ExtensionSettings:
    settings = ExtensionSettings()
    for name, field in ExtensionSettings.model_fields.items():
        key = field.alias or name
        if key not in stored:
            continue
        try:
            candidate = ExtensionSettings.model_validate(
                {**settings.model_dump(by_alias=True), key: stored[key]}
            )
        except ValidationError:
            logger.warning("ignoring invalid stored setting %s=%r", key, stored[key])
            continue
        settings = candidate
    return settings


def get_extension_settings(store: _SettingsStoreProto) -> ExtensionSettings:
    try:
        stored = store.load_settings()
    except StorageError as e:
        logger.warning("settings read failed, using defaults: %s", e)
        return ExtensionSettings()
    if not stored:
        return ExtensionSettings()
    return _merge_valid_fields(stored)


def set_extension_settings(
    store: _SettingsStoreProto, patch: ExtensionSettingsPatch | Mapping[str, Any]
) -> ExtensionSettings:
    """Merge ``patch`` over the current settings, persist, return the result.

    Raises ValidationError for invalid patch values and StorageError when the
    write fails; unlike reads, a lost write is reported to the caller.
    """
    if not isinstance(patch, ExtensionSettingsPatch):
        patch = ExtensionSettingsPatch.model_validate(patch)
    current = get_extension_settings(store)
    updated = current.model_copy(update=patch.model_dump(exclude_none=True))
    store.save_settings(updated.model_dump(by_alias=True))
    return updated


__all__ = [
    "get_extension_settings",
    "set_extension_settings",
]
