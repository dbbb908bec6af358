from __future__ import annotations

from datetime import datetime, timezone

import asyncpg
import pytest
from fastapi.testclient import TestClient

from core import db, errors
from memorials import repository


def _not_null(column: str) -> errors.StoreError:
    exc = asyncpg.exceptions.NotNullViolationError(
        f'null value in column "{column}" of relation "memorials" violates not-null constraint'
    )
    return errors.StoreError.from_driver_error(exc)


class FakeMemorialStore:
    """
    In-memory stand-in for `memorials.repository`, with the table's NOT NULL
    constraints and id ordering.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self.next_id = 1
        self.fail_qr_write = False

    def _check_not_null(self, **values) -> None:
        for column, value in values.items():
            if value is None:
                raise _not_null(column)

    async def insert_memorial(
        self,
        *,
        name,
        bio,
        passport_photo_url,
        birth_date,
        death_date,
        brief_info=None,
    ) -> int:
        self._check_not_null(
            name=name,
            bio=bio,
            passport_photo_url=passport_photo_url,
            birth_date=birth_date,
            death_date=death_date,
        )
        memorial_id = self.next_id
        self.next_id += 1
        self.rows[memorial_id] = {
            "id": memorial_id,
            "name": name,
            "bio": bio,
            "brief_info": brief_info,
            "passport_photo_url": passport_photo_url,
            "birth_date": birth_date,
            "death_date": death_date,
            "status": repository.STATUS_PENDING,
            "qr_code_url": None,
            "created_at": datetime.now(timezone.utc),
        }
        return memorial_id

    async def set_qr_code_url(self, memorial_id, qr_code_url) -> None:
        if self.fail_qr_write:
            raise errors.StoreError(errors.INTERNAL_ERROR_MESSAGE)
        if memorial_id in self.rows:
            self.rows[memorial_id]["qr_code_url"] = qr_code_url

    async def get_memorial(self, memorial_id):
        row = self.rows.get(memorial_id)
        return dict(row) if row is not None else None

    async def find_by_name_and_death_date(self, name, death_date):
        for memorial_id in sorted(self.rows):
            row = self.rows[memorial_id]
            if row["name"].lower() == name.lower() and row["death_date"] == death_date:
                return dict(row)
        return None

    async def list_memorials(self):
        return [dict(self.rows[i]) for i in sorted(self.rows, reverse=True)]

    async def update_memorial(
        self,
        memorial_id,
        *,
        name,
        bio,
        passport_photo_url,
        birth_date,
        death_date,
        qr_code_url,
        brief_info=None,
    ):
        row = self.rows.get(memorial_id)
        if row is None:
            return None
        self._check_not_null(
            name=name,
            bio=bio,
            passport_photo_url=passport_photo_url,
            birth_date=birth_date,
            death_date=death_date,
        )
        row.update(
            name=name,
            bio=bio,
            passport_photo_url=passport_photo_url,
            birth_date=birth_date,
            death_date=death_date,
            qr_code_url=qr_code_url,
        )
        if brief_info is not None:
            row["brief_info"] = brief_info
        return dict(row)

    async def set_status(self, memorial_id, status):
        row = self.rows.get(memorial_id)
        if row is None:
            return None
        row["status"] = status
        return dict(row)

    async def delete_memorial(self, memorial_id) -> bool:
        return self.rows.pop(memorial_id, None) is not None


@pytest.fixture
def store(monkeypatch) -> FakeMemorialStore:
    fake = FakeMemorialStore()
    for name in (
        "insert_memorial",
        "set_qr_code_url",
        "get_memorial",
        "find_by_name_and_death_date",
        "list_memorials",
        "update_memorial",
        "set_status",
        "delete_memorial",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(store, monkeypatch) -> TestClient:
    monkeypatch.delenv("APP_BASE_URL", raising=False)
    from main import app

    # Not entered as a context manager, so the lifespan (DB pool) never runs.
    return TestClient(app)


@pytest.fixture
def jane() -> dict:
    return {
        "name": "Jane Doe",
        "bio": "Nurse, gardener, grandmother.",
        "passport_photo_url": "http://x/y.jpg",
        "birth_date": "1950-01-01",
        "death_date": "2020-05-05",
    }


class RecordingPool:
    """
    Stand-in for `db._pool` that records each call and returns canned rows.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple]] = []
        self.row: dict | None = None
        self.rows: list[dict] = []
        self.error: Exception | None = None

    def _record(self, method: str, sql: str, args: tuple) -> None:
        self.calls.append((method, " ".join(sql.split()), args))
        if self.error is not None:
            raise self.error

    async def fetchrow(self, sql, *args):
        self._record("fetchrow", sql, args)
        return self.row

    async def fetch(self, sql, *args):
        self._record("fetch", sql, args)
        return self.rows

    async def execute(self, sql, *args):
        self._record("execute", sql, args)
        return "UPDATE 1"


@pytest.fixture
def pool(monkeypatch) -> RecordingPool:
    fake = RecordingPool()
    monkeypatch.setattr(db, "_pool", fake)
    return fake
