from __future__ import annotations

from fastapi import APIRouter, Depends
import logging

from currency_lens.core.errors import StorageError
from currency_lens.db.dal import Database
from currency_lens.models.messages import MessageResponse
from currency_lens.models.settings import ExtensionSettingsPatch
from currency_lens.services.app_settings import (
    get_extension_settings,
    set_extension_settings,
)
from .deps import get_database

router = APIRouter(prefix="/settings", tags=["settings"])
logger = logging.getLogger("currency_lens.routers.settings")


@router.get("", summary="Resolved extension settings (defaults applied)")
async def read_settings(db: Database = Depends(get_database)) -> MessageResponse:
    return MessageResponse.ok(get_extension_settings(db).model_dump(by_alias=True))


@router.patch("", summary="Update some extension settings")
async def update_settings(
    patch: ExtensionSettingsPatch, db: Database = Depends(get_database)
) -> MessageResponse:
    try:
        updated = set_extension_settings(db, patch)
    except StorageError as e:
        logger.error("settings write failed: %s", e)
        return MessageResponse.fail(str(e))
    return MessageResponse.ok(updated.model_dump(by_alias=True))
