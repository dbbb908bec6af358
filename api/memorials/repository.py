"""
Memorial persistence (raw SQL).

One statement per function; callers compose them. Functions that target a
single row return None when no row matched.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from core import db

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"

_COLUMNS = """
    id, name, bio, brief_info, passport_photo_url,
    birth_date, death_date, status, qr_code_url, created_at
"""


async def insert_memorial(
    *,
    name: str,
    bio: str,
    passport_photo_url: str,
    birth_date: date | None,
    death_date: date | None,
    brief_info: str | None = None,
) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO memorials (name, bio, passport_photo_url, birth_date, death_date, brief_info)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING id
        """,
        name,
        bio,
        passport_photo_url,
        birth_date,
        death_date,
        brief_info,
    )
    if row is None:
        raise RuntimeError("Failed to insert memorial.")
    return int(row["id"])


async def set_qr_code_url(memorial_id: int, qr_code_url: str) -> None:
    await db.execute(
        """
        UPDATE memorials
        SET qr_code_url = $1
        WHERE id = $2
        """,
        qr_code_url,
        memorial_id,
    )


async def get_memorial(memorial_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM memorials
        WHERE id = $1
        """,
        memorial_id,
    )


async def find_by_name_and_death_date(name: str, death_date: date) -> dict[str, Any] | None:
    """
    Case-insensitive name match plus exact death date.

    Several memorials can share both values; the lowest id wins.
    """
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM memorials
        WHERE lower(name) = lower($1)
          AND death_date = $2
        ORDER BY id
        LIMIT 1
        """,
        name,
        death_date,
    )


async def list_memorials() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM memorials
        ORDER BY id DESC
        """
    )


async def update_memorial(
    memorial_id: int,
    *,
    name: str,
    bio: str,
    passport_photo_url: str,
    birth_date: date | None,
    death_date: date | None,
    qr_code_url: str,
    brief_info: str | None = None,
) -> dict[str, Any] | None:
    # brief_info is only overwritten when the caller sent one.
    return await db.fetch_one(
        f"""
        UPDATE memorials
        SET name = $1,
            bio = $2,
            birth_date = $3,
            death_date = $4,
            passport_photo_url = $5,
            qr_code_url = $6,
            brief_info = COALESCE($7, brief_info)
        WHERE id = $8
        RETURNING {_COLUMNS}
        """,
        name,
        bio,
        birth_date,
        death_date,
        passport_photo_url,
        qr_code_url,
        brief_info,
        memorial_id,
    )


async def set_status(memorial_id: int, status: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE memorials
        SET status = $1
        WHERE id = $2
        RETURNING {_COLUMNS}
        """,
        status,
        memorial_id,
    )


async def delete_memorial(memorial_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM memorials
        WHERE id = $1
        RETURNING id
        """,
        memorial_id,
    )
    return row is not None
