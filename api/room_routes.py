"""Room-related FastAPI routes."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from Hotels.room_service import RoomService

from .deps import admin_only, get_room_service
from .models import MessageResponse, Response
from .utils import envelope_response, missing_fields_response

logger = logging.getLogger(__name__)

# mount api router
room_router = APIRouter()


async def _read_photo(photo: Optional[UploadFile]) -> Optional[bytes]:
    if photo is None:
        return None
    content = await photo.read()
    return content or None


@room_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    """Quick liveness probe for the room service."""

    return MessageResponse(status=200, message="Room service is healthy")


@room_router.post("/add", response_model=Response, dependencies=[Depends(admin_only)])
async def add_new_room(
    photo: Optional[UploadFile] = File(default=None),
    room_type: Optional[str] = Form(default=None, alias="roomType"),
    room_price: Optional[Decimal] = Form(default=None, alias="roomPrice"),
    room_description: Optional[str] = Form(default=None, alias="roomDescription"),
    service: RoomService = Depends(get_room_service),
) -> JSONResponse:
    """
    Add a room with its photo. Admin only.

    Args:
        photo: Image file uploaded to the image host.
        room_type: Free-text room category.
        room_price: Nightly price.
        room_description: Description shown to guests.
        service: Room service injected via dependency.

    Returns:
        Envelope wrapping the created room.
    """

    content = await _read_photo(photo)
    if (
        content is None
        or not room_type
        or not room_type.strip()
        or room_price is None
        or not room_description
        or not room_description.strip()
    ):
        logger.info("Rejected incomplete room payload")
        return missing_fields_response(
            "Please provide values for all fields (photo, roomType, roomPrice, roomDescription)"
        )

    response = await run_in_threadpool(
        lambda: service.add_new_room(content, room_type, room_price, room_description)
    )
    return envelope_response(response)


@room_router.get("/all", response_model=Response)
async def get_all_rooms(service: RoomService = Depends(get_room_service)) -> JSONResponse:
    response = await run_in_threadpool(service.get_all_rooms)
    return envelope_response(response)


@room_router.get("/types", response_model=list[str])
async def get_room_types(service: RoomService = Depends(get_room_service)) -> list[str]:
    return await run_in_threadpool(service.get_all_room_types)


@room_router.get("/available", response_model=Response)
async def get_all_available_rooms(service: RoomService = Depends(get_room_service)) -> JSONResponse:
    response = await run_in_threadpool(service.get_all_available_rooms)
    return envelope_response(response)


@room_router.get("/available-by-date-type", response_model=Response)
async def get_available_rooms_by_date_and_type(
    check_in_date: Optional[date] = Query(default=None, alias="checkInDate"),
    check_out_date: Optional[date] = Query(default=None, alias="checkOutDate"),
    room_type: Optional[str] = Query(default=None, alias="roomType"),
    service: RoomService = Depends(get_room_service),
) -> JSONResponse:
    """Rooms of a type with no booking touching the requested dates."""

    if check_in_date is None or check_out_date is None or not room_type or not room_type.strip():
        return missing_fields_response(
            "Missing required parameters: checkInDate, checkOutDate, or roomType"
        )

    response = await run_in_threadpool(
        lambda: service.get_available_rooms_by_date_and_type(check_in_date, check_out_date, room_type)
    )
    return envelope_response(response)


@room_router.get("/{room_id}", response_model=Response)
async def get_room(room_id: int, service: RoomService = Depends(get_room_service)) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.get_room_by_id(room_id))
    return envelope_response(response)


@room_router.put("/update/{room_id}", response_model=Response, dependencies=[Depends(admin_only)])
async def update_room(
    room_id: int,
    photo: Optional[UploadFile] = File(default=None),
    room_type: Optional[str] = Form(default=None, alias="roomType"),
    room_price: Optional[Decimal] = Form(default=None, alias="roomPrice"),
    room_description: Optional[str] = Form(default=None, alias="roomDescription"),
    service: RoomService = Depends(get_room_service),
) -> JSONResponse:
    """Partially update a room; a new photo replaces the image URL. Admin only."""

    content = await _read_photo(photo)
    response = await run_in_threadpool(
        lambda: service.update_room(
            room_id,
            room_description=room_description,
            room_type=room_type,
            room_price=room_price,
            photo=content,
        )
    )
    return envelope_response(response)


@room_router.delete("/delete/{room_id}", response_model=Response, dependencies=[Depends(admin_only)])
async def delete_room(room_id: int, service: RoomService = Depends(get_room_service)) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.delete_room(room_id))
    return envelope_response(response)
