"""Booking-related FastAPI routes."""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from Hotels.booking import BookingRequest
from Hotels.booking_service import BookingService

from .deps import admin_only, any_user, get_booking_service
from .models import Response
from .utils import envelope_response

# mount api router
booking_router = APIRouter()


@booking_router.post(
    "/room/{room_id}/user/{user_id}",
    response_model=Response,
    dependencies=[Depends(any_user)],
)
async def save_booking(
    room_id: int,
    user_id: int,
    booking_request: BookingRequest,
    service: BookingService = Depends(get_booking_service),
) -> JSONResponse:
    """
    Book a room for a user.

    Args:
        room_id: Identifier of the room to book.
        user_id: Identifier of the booking owner.
        booking_request: Stay dates and guest counts.
        service: Booking service injected via dependency.

    Returns:
        Envelope wrapping the saved booking and its confirmation code.
    """

    response = await run_in_threadpool(lambda: service.create_booking(room_id, user_id, booking_request))
    return envelope_response(response)


@booking_router.get("", response_model=Response, dependencies=[Depends(admin_only)])
async def get_all_bookings(service: BookingService = Depends(get_booking_service)) -> JSONResponse:
    response = await run_in_threadpool(service.get_all_bookings)
    return envelope_response(response)


@booking_router.get(
    "/confirmation/{confirmation_code}",
    response_model=Response,
    dependencies=[Depends(any_user)],
)
async def get_booking_by_confirmation_code(
    confirmation_code: str, service: BookingService = Depends(get_booking_service)
) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.find_booking_by_confirmation_code(confirmation_code))
    return envelope_response(response)


@booking_router.delete("/{booking_id}", response_model=Response, dependencies=[Depends(any_user)])
async def cancel_booking(booking_id: int, service: BookingService = Depends(get_booking_service)) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.cancel_booking(booking_id))
    return envelope_response(response)
