"""Shared fixtures: an in-memory Supabase stand-in and an app wired to it."""

from __future__ import annotations

import itertools
from pathlib import Path
import sys
from typing import Any, Callable, Optional

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402

ADMIN_SECRET = "front-desk-secret"
TEST_JWT_SECRET = b"test-signing-key-for-hotel-backend-0123456789"


class FakeSupabaseResponse:
    """Minimal Supabase-like response wrapper."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeTable:
    """In-memory table with the subset of the Supabase query builder the stores use."""

    def __init__(self, backing_store: list[dict[str, Any]], table_name: str, ids: itertools.count) -> None:
        self._store = backing_store
        self._table_name = table_name
        self._ids = ids
        self._action: str | None = None
        self._columns: tuple[str, ...] = ("*",)
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._payload: dict[str, Any] | list[dict[str, Any]] | None = None

    def select(self, *columns: str) -> "FakeTable":
        self._action = "select"
        self._columns = columns or ("*",)
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "FakeTable":
        self._action = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeTable":
        self._action = "update"
        self._payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeTable":
        self._filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def lte(self, column: str, value: Any) -> "FakeTable":
        self._filters.append(lambda row: str(row.get(column)) <= str(value))
        return self

    def gte(self, column: str, value: Any) -> "FakeTable":
        self._filters.append(lambda row: str(row.get(column)) >= str(value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeTable":
        needle = pattern.strip("%").lower()
        self._filters.append(lambda row: needle in str(row.get(column, "")).lower())
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self._order = (column, desc)
        return self

    def _matching(self) -> list[dict[str, Any]]:
        return [row for row in self._store if all(check(row) for check in self._filters)]

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if "*" in self._columns:
            return dict(row)
        return {column: row.get(column) for column in self._columns}

    def execute(self) -> FakeSupabaseResponse:
        if self._action == "select":
            rows = self._matching()
            if self._order is not None:
                column, desc = self._order
                rows = sorted(rows, key=lambda row: row[column], reverse=desc)
            data = [self._project(row) for row in rows]
        elif self._action == "insert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]  # type: ignore[list-item]
            data = []
            for row in rows:
                if self._table_name == "users" and any(
                    existing.get("email") == row.get("email") for existing in self._store
                ):
                    raise APIError(
                        {
                            "message": "duplicate key value violates unique constraint",
                            "code": "23505",
                            "hint": None,
                            "details": None,
                        }
                    )
                stored = {**row, "id": row.get("id") or next(self._ids)}
                self._store.append(stored)
                data.append(dict(stored))
        elif self._action == "update":
            data = []
            for row in self._matching():
                row.update(self._payload or {})  # type: ignore[arg-type]
                data.append(dict(row))
        elif self._action == "delete":
            data = self._matching()
            for row in data:
                self._store.remove(row)
        else:
            raise ValueError("Unsupported action for FakeTable.")
        return FakeSupabaseResponse(data)


class FakeDB:
    """Simplified Supabase client exposing the minimal table(...) API."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {"users": [], "rooms": [], "bookings": []}
        self._ids = {name: itertools.count(1) for name in self.tables}

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            raise ValueError(f"Unknown table {name}")
        return FakeTable(self.tables[name], name, self._ids[name])


class FakeImageHost:
    """Records uploads and hands back predictable URLs."""

    def __init__(self) -> None:
        self.uploads: list[bytes] = []

    def upload(self, content: bytes) -> str:
        self.uploads.append(content)
        return f"https://i.ibb.co/fake/{len(self.uploads)}.jpg"


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret=TEST_JWT_SECRET, admin_secret_key=ADMIN_SECRET)


@pytest.fixture()
def fake_db() -> FakeDB:
    return FakeDB()


@pytest.fixture()
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture()
def client(settings: Settings, fake_db: FakeDB, image_host: FakeImageHost) -> TestClient:
    """Create a TestClient for an app backed by the fake database."""

    app = create_app(settings, db=fake_db)
    app.state.image_host = image_host
    return TestClient(app)


def build_registration(**overrides: Any) -> dict[str, Any]:
    payload = {
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "phone_number": "+1-555-000",
        "password": "correct horse",
    }
    payload.update(overrides)
    return payload


def login_headers(client: TestClient, email: str, password: str) -> dict[str, str]:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.json()
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture()
def user_account(client: TestClient) -> dict[str, Any]:
    """A registered USER with auth headers."""

    payload = build_registration(email="guest@example.com", name="Guest")
    created = client.post("/auth/register", json=payload)
    assert created.status_code == 200, created.json()
    return {
        "id": created.json()["user"]["id"],
        "email": payload["email"],
        "headers": login_headers(client, payload["email"], payload["password"]),
    }


@pytest.fixture()
def admin_account(client: TestClient) -> dict[str, Any]:
    """A registered ADMIN with auth headers."""

    payload = build_registration(email="manager@example.com", name="Manager")
    created = client.post("/auth/admin/register", params={"secretKey": ADMIN_SECRET}, json=payload)
    assert created.status_code == 200, created.json()
    return {
        "id": created.json()["user"]["id"],
        "email": payload["email"],
        "headers": login_headers(client, payload["email"], payload["password"]),
    }


def seed_room(fake_db: FakeDB, room_type: str = "Deluxe", room_price: str = "150.00") -> int:
    """Insert a room row directly and return its id."""

    data = fake_db.table("rooms").insert(
        {
            "room_type": room_type,
            "room_price": room_price,
            "room_description": f"{room_type} room",
            "room_img_url": "https://i.ibb.co/seed.jpg",
        }
    ).execute().data
    return data[0]["id"]
