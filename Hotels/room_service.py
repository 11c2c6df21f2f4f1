"""Room inventory operations."""
import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Protocol

from fastapi import status

from api.models import BookingView, Response, RoomView
from Database.stores import BookingStore, RoomStore
from exceptions import NotFoundError
from Hotels.structure import Room

logger = logging.getLogger(__name__)


class ImageHost(Protocol):
    def upload(self, content: bytes) -> str: ...


class RoomService:
    """Every method except ``get_all_room_types`` returns a Response envelope and never raises."""

    def __init__(self, rooms: RoomStore, bookings: BookingStore, images: ImageHost) -> None:
        self.rooms = rooms
        self.bookings = bookings
        self.images = images

    def add_new_room(
        self, photo: bytes, room_type: str, room_price: Decimal, room_description: str
    ) -> Response:
        try:
            image_url = self.images.upload(photo)
            room = Room(
                room_type=room_type,
                room_price=room_price,
                room_description=room_description,
                room_img_url=image_url,
            )
            saved = self.rooms.save(room)
        except ValueError as exc:
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except Exception as exc:
            logger.exception("Saving room failed", extra={"room_type": room_type})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error saving a room: {exc}",
            )
        logger.info("Room created", extra={"room_id": saved.id})
        return Response(status=status.HTTP_200_OK, message="successful", room=RoomView.from_room(saved))

    def get_all_room_types(self) -> list[str]:
        return self.rooms.find_distinct_types()

    def get_all_rooms(self) -> Response:
        try:
            rooms = self.rooms.list_all()
        except Exception as exc:
            logger.exception("Listing rooms failed")
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error getting rooms: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="successful",
            room_list=[RoomView.from_room(room) for room in rooms],
        )

    def _require_room(self, room_id: int) -> Room:
        room = self.rooms.find_by_id(room_id)
        if room is None:
            raise NotFoundError("Room Not Found")
        return room

    def get_room_by_id(self, room_id: int) -> Response:
        try:
            room = self._require_room(room_id)
            bookings = [BookingView.from_booking(booking) for booking in self.bookings.list_by_room(room_id)]
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Fetching room failed", extra={"room_id": room_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error retrieving room: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="successful",
            room=RoomView.from_room(room, bookings=bookings),
        )

    def get_available_rooms_by_date_and_type(
        self, check_in_date: date, check_out_date: date, room_type: str
    ) -> Response:
        try:
            rooms = self.rooms.find_available_by_type_and_date_range(room_type, check_in_date, check_out_date)
        except Exception as exc:
            logger.exception("Searching available rooms failed", extra={"room_type": room_type})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error retrieving available rooms: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="successful",
            room_list=[RoomView.from_room(room) for room in rooms],
        )

    def get_all_available_rooms(self) -> Response:
        try:
            rooms = self.rooms.find_without_bookings()
        except Exception as exc:
            logger.exception("Listing available rooms failed")
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error retrieving available rooms: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="successful",
            room_list=[RoomView.from_room(room) for room in rooms],
        )

    def update_room(
        self,
        room_id: int,
        room_description: Optional[str] = None,
        room_type: Optional[str] = None,
        room_price: Optional[Decimal] = None,
        photo: Optional[bytes] = None,
    ) -> Response:
        try:
            image_url = self.images.upload(photo) if photo else None
            room = self._require_room(room_id)
            updates = {
                "room_type": room_type,
                "room_price": room_price,
                "room_description": room_description,
                "room_img_url": image_url,
            }
            updated = Room(**{**room.model_dump(), **{k: v for k, v in updates.items() if v is not None}})
            saved = self.rooms.save(updated)
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except ValueError as exc:
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except Exception as exc:
            logger.exception("Updating room failed", extra={"room_id": room_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error updating room: {exc}",
            )
        logger.info("Room updated", extra={"room_id": room_id})
        return Response(status=status.HTTP_200_OK, message="successful", room=RoomView.from_room(saved))

    def delete_room(self, room_id: int) -> Response:
        try:
            self._require_room(room_id)
            self.rooms.delete_by_id(room_id)
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Deleting room failed", extra={"room_id": room_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error deleting room: {exc}",
            )
        logger.info("Room deleted", extra={"room_id": room_id})
        return Response(status=status.HTTP_200_OK, message="successful")
