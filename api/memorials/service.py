"""
Memorial business logic.

Scope:
- required-field checks and date normalization
- canonical profile URL + QR rendering on create/update
- status workflow (pending <-> approved)
- mapping "no row" results to NotFound

The HTTP origin is passed in as a plain string so nothing here depends on
FastAPI's request object.
"""

from __future__ import annotations

import logging
from typing import Any

from core.errors import INVALID_FORMAT_MESSAGE, NotFound, ValidationError

from . import qrcodes, repository, schemas
from .dates import normalize_date

REQUIRED_FIELDS_MESSAGE = "Name, birth date, death date, biography, and passport photo URL are required."
SEARCH_REQUIRED_MESSAGE = "Missing required fields: name and death_date"

logger = logging.getLogger(__name__)


def _require(payload: schemas.UpdateMemorialRequest) -> None:
    required = (
        payload.name,
        payload.bio,
        payload.passport_photo_url,
        payload.birth_date,
        payload.death_date,
    )
    if not all(required):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)


async def create_memorial(payload: schemas.CreateMemorialRequest, *, origin: str) -> dict[str, Any]:
    """
    Insert a memorial, then store its canonical URL in a second write.

    The two writes are independent statements. If the second one fails the
    row exists with `qr_code_url` NULL; readers fall back to deriving it.
    """
    _require(payload)

    birth_date = normalize_date(payload.birth_date)
    death_date = normalize_date(payload.death_date)
    logger.debug(
        "memorial_create_dates birth_date=%r->%s death_date=%r->%s",
        payload.birth_date,
        birth_date,
        payload.death_date,
        death_date,
    )

    memorial_id = await repository.insert_memorial(
        name=payload.name,
        bio=payload.bio,
        passport_photo_url=payload.passport_photo_url,
        birth_date=birth_date,
        death_date=death_date,
        brief_info=payload.brief_info,
    )

    url = qrcodes.profile_url(memorial_id, origin)
    await repository.set_qr_code_url(memorial_id, url)
    logger.info("memorial_created id=%s url=%s", memorial_id, url)

    return {
        "id": memorial_id,
        "qr_code": qrcodes.render_data_url(url),
    }


async def get_memorial(memorial_id: int) -> dict[str, Any]:
    row = await repository.get_memorial(memorial_id)
    if row is None:
        raise NotFound("Profile not found.")
    return row


async def search_profile(name: str | None, death_date: str | None) -> dict[str, Any]:
    if not name or not death_date:
        raise ValidationError(SEARCH_REQUIRED_MESSAGE)

    parsed = normalize_date(death_date)
    if parsed is None:
        raise ValidationError(INVALID_FORMAT_MESSAGE)

    row = await repository.find_by_name_and_death_date(name, parsed)
    if row is None:
        logger.info("profile_search_miss name=%r death_date=%s", name, parsed)
        raise NotFound("Profile not found")
    return row


async def list_memorials() -> list[dict[str, Any]]:
    rows = await repository.list_memorials()
    if not rows:
        raise NotFound("No memorials found")
    return rows


async def update_memorial(
    memorial_id: int,
    payload: schemas.UpdateMemorialRequest,
    *,
    origin: str,
) -> dict[str, Any]:
    _require(payload)

    row = await repository.update_memorial(
        memorial_id,
        name=payload.name,
        bio=payload.bio,
        passport_photo_url=payload.passport_photo_url,
        birth_date=normalize_date(payload.birth_date),
        death_date=normalize_date(payload.death_date),
        qr_code_url=qrcodes.profile_url(memorial_id, origin),
        brief_info=payload.brief_info,
    )
    if row is None:
        raise NotFound("Memorial not found")

    logger.info("memorial_updated id=%s", memorial_id)
    return row


async def _set_status(memorial_id: int, status: str) -> dict[str, Any]:
    row = await repository.set_status(memorial_id, status)
    if row is None:
        raise NotFound("Memorial not found")
    logger.info("memorial_status id=%s status=%s", memorial_id, status)
    return row


async def approve_memorial(memorial_id: int) -> dict[str, Any]:
    return await _set_status(memorial_id, repository.STATUS_APPROVED)


async def disapprove_memorial(memorial_id: int) -> dict[str, Any]:
    return await _set_status(memorial_id, repository.STATUS_PENDING)


async def delete_memorial(memorial_id: int) -> None:
    deleted = await repository.delete_memorial(memorial_id)
    if not deleted:
        raise NotFound("Memorial not found")
    logger.info("memorial_deleted id=%s", memorial_id)


async def memorial_qr_png(memorial_id: int, *, origin: str) -> bytes:
    """
    PNG QR code for an existing memorial.

    Uses the stored URL, or derives it when the create-time write never landed.
    """
    row = await get_memorial(memorial_id)
    url = row.get("qr_code_url") or qrcodes.profile_url(memorial_id, origin)
    return qrcodes.render_png(url)
