"""
Booking operations.

``create_booking`` checks the requested stay against the room's existing
bookings before saving it. The check and the insert run under a lock held
per room, so two requests served by the same process cannot both admit
clashing stays. Nothing coordinates separate processes; that is left to the
database.
"""
import logging
import threading
from typing import Optional

from fastapi import status

from api.models import BookingView, Response
from Database.stores import BookingStore, RoomStore, UserStore
from exceptions import InvalidRequestError, NotFoundError
from Hotels.availability import generate_confirmation_code, is_available
from Hotels.booking import Booking, BookingRequest

logger = logging.getLogger(__name__)

CONFIRMATION_CODE_ATTEMPTS = 5


class RoomLocks:
    """One lock per room id, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def for_room(self, room_id: int) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(room_id, threading.Lock())


class BookingService:
    """Every method returns a Response envelope and never raises."""

    def __init__(
        self,
        bookings: BookingStore,
        rooms: RoomStore,
        users: UserStore,
        room_locks: Optional[RoomLocks] = None,
        enforce_availability: bool = True,
    ) -> None:
        self.bookings = bookings
        self.rooms = rooms
        self.users = users
        self.room_locks = room_locks or RoomLocks()
        self.enforce_availability = enforce_availability

    def _allocate_confirmation_code(self) -> str:
        for _ in range(CONFIRMATION_CODE_ATTEMPTS):
            code = generate_confirmation_code()
            if self.bookings.find_by_confirmation_code(code) is None:
                return code
            logger.warning("Confirmation code collision, drawing again")
        raise RuntimeError("Unable to allocate a unique confirmation code")

    def _admit(self, room_id: int, booking: Booking) -> Booking:
        if self.enforce_availability:
            existing = [booked.interval for booked in self.bookings.list_by_room(room_id)]
            if not is_available(booking.interval, existing):
                raise InvalidRequestError("Room not available for selected date range")
        booking.booking_confirmation_code = self._allocate_confirmation_code()
        return self.bookings.save(booking)

    def create_booking(self, room_id: int, user_id: int, request: BookingRequest) -> Response:
        try:
            room = self.rooms.find_by_id(room_id)
            if room is None:
                raise NotFoundError("Room not found")
            user = self.users.find_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found")

            booking = Booking(
                check_in_date=request.check_in_date,  # type: ignore[arg-type]
                check_out_date=request.check_out_date,  # type: ignore[arg-type]
                num_of_adults=request.num_of_adults,
                num_of_children=request.num_of_children,
                room_id=room_id,
                user_id=user_id,
            )
            with self.room_locks.for_room(room_id):
                saved = self._admit(room_id, booking)
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except InvalidRequestError as exc:
            logger.info("Booking rejected", extra={"room_id": room_id, "reason": str(exc)})
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except Exception as exc:
            logger.exception("Saving booking failed", extra={"room_id": room_id, "user_id": user_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error while saving booking: {exc}",
            )

        logger.info("Booking created", extra={"booking_id": saved.id, "room_id": room_id})
        return Response(
            status=status.HTTP_200_OK,
            message="Booking successful",
            booking=BookingView.from_booking(saved),
        )

    def find_booking_by_confirmation_code(self, confirmation_code: str) -> Response:
        try:
            booking = self.bookings.find_by_confirmation_code(confirmation_code)
            if booking is None:
                raise NotFoundError("Booking Not Found")
            room = self.rooms.find_by_id(booking.room_id)
            user = self.users.find_by_id(booking.user_id)
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Finding booking failed")
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error Finding a booking: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="successful",
            booking=BookingView.from_booking(booking, room=room, user=user),
        )

    def get_all_bookings(self) -> Response:
        try:
            bookings = self.bookings.list_all()
        except Exception as exc:
            logger.exception("Listing bookings failed")
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error Getting all bookings: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="successful",
            booking_list=[BookingView.from_booking(booking) for booking in bookings],
        )

    def cancel_booking(self, booking_id: int) -> Response:
        try:
            if self.bookings.find_by_id(booking_id) is None:
                raise NotFoundError("Booking Does Not Exist")
            self.bookings.delete_by_id(booking_id)
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Cancelling booking failed", extra={"booking_id": booking_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error Cancelling a booking: {exc}",
            )
        logger.info("Booking cancelled", extra={"booking_id": booking_id})
        return Response(status=status.HTTP_200_OK, message="successful")
