"""
Entity stores backed by the Supabase client.

Each store wraps one table and speaks in model objects; callers never see raw
rows. All methods are blocking and are expected to be run off the event loop
(``run_in_threadpool``) by async callers.
"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import status
from postgrest.exceptions import APIError

from exceptions import InvalidRequestError
from Hotels.booking import Booking
from Hotels.structure import Room
from Users.user import User

logger = logging.getLogger(__name__)

USERS_TABLE_NAME = "users"
ROOMS_TABLE_NAME = "rooms"
BOOKINGS_TABLE_NAME = "bookings"


def is_unique_violation(error: Exception) -> bool:
    """
    Determine whether an API error represents a uniqueness constraint violation.

    Args:
        error: Exception raised by the persistence layer.

    Returns:
        True if the error indicates a duplicate/unique constraint conflict.
    """

    error_code = getattr(error, "code", None)
    if error_code == "23505":
        return True

    status_code_value = getattr(error, "status_code", None)
    if str(status_code_value) == str(status.HTTP_409_CONFLICT):
        return True

    message = str(error).lower()
    return "duplicate key value" in message or "unique constraint" in message


class _TableStore:
    table_name: str = ""

    def __init__(self, db: Any) -> None:
        self._db = db

    def _table(self) -> Any:
        return self._db.table(self.table_name)

    def _first(self, column: str, value: Any) -> Optional[dict[str, Any]]:
        result = self._table().select("*").eq(column, value).execute()
        return result.data[0] if result.data else None

    def _insert_or_update(self, row: dict[str, Any]) -> dict[str, Any]:
        if row.get("id") is None:
            row = {key: value for key, value in row.items() if key != "id"}
            result = self._table().insert(row).execute()
        else:
            result = self._table().update(row).eq("id", row["id"]).execute()
        return result.data[0] if result.data else row

    def delete_by_id(self, entity_id: int) -> None:
        self._table().delete().eq("id", entity_id).execute()


class UserStore(_TableStore):
    """Identity store: users keyed by id and by unique email."""

    table_name = USERS_TABLE_NAME

    def exists_by_email(self, email: str) -> bool:
        return self._first("email", email) is not None

    def find_by_email(self, email: str) -> Optional[User]:
        record = self._first("email", email)
        return User(**record) if record else None

    def find_by_id(self, user_id: int) -> Optional[User]:
        record = self._first("id", user_id)
        return User(**record) if record else None

    def list_all(self) -> list[User]:
        result = self._table().select("*").execute()
        return [User(**record) for record in result.data]

    def save(self, user: User) -> User:
        try:
            record = self._insert_or_update(user.to_dict())
        except APIError as exc:
            if is_unique_violation(exc):
                logger.info("Duplicate user blocked by unique constraint", extra={"email": user.email})
                raise InvalidRequestError(f"{user.email} already exists") from exc
            raise
        return User(**record)


class RoomStore(_TableStore):
    """Room inventory."""

    table_name = ROOMS_TABLE_NAME

    def find_by_id(self, room_id: int) -> Optional[Room]:
        record = self._first("id", room_id)
        return Room(**record) if record else None

    def list_all(self) -> list[Room]:
        result = self._table().select("*").order("id", desc=True).execute()
        return [Room(**record) for record in result.data]

    def save(self, room: Room) -> Room:
        return Room(**self._insert_or_update(room.to_dict()))

    def find_distinct_types(self) -> list[str]:
        result = self._table().select("room_type").execute()
        # dict keeps first-seen order
        return list(dict.fromkeys(record["room_type"] for record in result.data))

    def _booked_room_ids(self, check_in: Optional[date] = None, check_out: Optional[date] = None) -> set[int]:
        query = self._db.table(BOOKINGS_TABLE_NAME).select("room_id")
        if check_in is not None and check_out is not None:
            query = query.lte("check_in_date", check_out.isoformat()).gte(
                "check_out_date", check_in.isoformat()
            )
        result = query.execute()
        return {int(record["room_id"]) for record in result.data}

    def find_available_by_type_and_date_range(
        self, room_type: str, check_in: date, check_out: date
    ) -> list[Room]:
        """
        Rooms whose type contains ``room_type`` and that have no booking
        touching [check_in, check_out], both ends inclusive.
        """
        booked = self._booked_room_ids(check_in, check_out)
        result = self._table().select("*").ilike("room_type", f"%{room_type}%").execute()
        return [Room(**record) for record in result.data if int(record["id"]) not in booked]

    def find_without_bookings(self) -> list[Room]:
        booked = self._booked_room_ids()
        result = self._table().select("*").execute()
        return [Room(**record) for record in result.data if int(record["id"]) not in booked]


class BookingStore(_TableStore):
    """Bookings keyed by id and by confirmation code."""

    table_name = BOOKINGS_TABLE_NAME

    def find_by_id(self, booking_id: int) -> Optional[Booking]:
        record = self._first("id", booking_id)
        return Booking(**record) if record else None

    def find_by_confirmation_code(self, code: str) -> Optional[Booking]:
        record = self._first("booking_confirmation_code", code)
        return Booking(**record) if record else None

    def list_all(self) -> list[Booking]:
        result = self._table().select("*").order("id", desc=True).execute()
        return [Booking(**record) for record in result.data]

    def list_by_room(self, room_id: int) -> list[Booking]:
        result = self._table().select("*").eq("room_id", room_id).execute()
        return [Booking(**record) for record in result.data]

    def list_by_user(self, user_id: int) -> list[Booking]:
        result = self._table().select("*").eq("user_id", user_id).execute()
        return [Booking(**record) for record in result.data]

    def save(self, booking: Booking) -> Booking:
        return Booking(**self._insert_or_update(booking.to_dict()))
