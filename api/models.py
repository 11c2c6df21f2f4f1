"""Shared API request and response models for the hotel reservation backend."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from Hotels.booking import Booking
from Hotels.structure import Room
from Users.user import Role, User


class UserView(BaseModel):
    """Public projection of a user. Never carries the password hash."""

    id: Optional[int] = None
    email: str
    name: str
    phone_number: str
    role: Role
    bookings: Optional[list["BookingView"]] = None

    @classmethod
    def from_user(cls, user: User, bookings: Optional[list["BookingView"]] = None) -> "UserView":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            phone_number=user.phone_number,
            role=user.role,
            bookings=bookings,
        )


class RoomView(BaseModel):
    """Public projection of a room, optionally with its bookings."""

    id: Optional[int] = None
    room_type: str
    room_price: Decimal
    room_description: Optional[str] = None
    room_img_url: Optional[str] = None
    bookings: Optional[list["BookingView"]] = None

    @classmethod
    def from_room(cls, room: Room, bookings: Optional[list["BookingView"]] = None) -> "RoomView":
        return cls(**room.model_dump(), bookings=bookings)


class BookingView(BaseModel):
    """Public projection of a booking, optionally with its room and owner."""

    id: Optional[int] = None
    check_in_date: date
    check_out_date: date
    num_of_adults: int
    num_of_children: int
    total_guests: int
    booking_confirmation_code: Optional[str] = None
    room_id: int
    user_id: int
    room: Optional[RoomView] = None
    user: Optional[UserView] = None

    @classmethod
    def from_booking(
        cls, booking: Booking, room: Optional[Room] = None, user: Optional[User] = None
    ) -> "BookingView":
        return cls(
            **booking.model_dump(),
            room=RoomView.from_room(room) if room is not None else None,
            user=UserView.from_user(user) if user is not None else None,
        )


UserView.model_rebuild()
RoomView.model_rebuild()


class MessageResponse(BaseModel):
    """Envelope for simple string responses."""

    status: int
    message: str


class Response(MessageResponse):
    """
    Uniform envelope returned by every service operation.

    ``status`` doubles as the HTTP status code of the route that returns it.
    At most one of the payload fields is set for a given operation, except
    for login which carries ``token``, ``role`` and ``expiration_time``.
    """

    user: Optional[UserView] = None
    user_list: Optional[list[UserView]] = None
    booking: Optional[BookingView] = None
    booking_list: Optional[list[BookingView]] = None
    room: Optional[RoomView] = None
    room_list: Optional[list[RoomView]] = None
    token: Optional[str] = None
    role: Optional[Role] = None
    expiration_time: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
