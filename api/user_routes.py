from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from Users.user import User
from Users.user_service import UserService

from .deps import admin_only, any_user, get_user_service
from .models import MessageResponse, Response
from .utils import envelope_response

# mount api router
user_router = APIRouter()


@user_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    return MessageResponse(status=200, message="User service is healthy")


@user_router.get("/all", response_model=Response, dependencies=[Depends(admin_only)])
async def get_all_users(service: UserService = Depends(get_user_service)) -> JSONResponse:
    response = await run_in_threadpool(service.get_all_users)
    return envelope_response(response)


@user_router.get("/get-by-id/{user_id}", response_model=Response, dependencies=[Depends(any_user)])
async def get_user_by_id(user_id: str, service: UserService = Depends(get_user_service)) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.get_user_by_id(user_id))
    return envelope_response(response)


@user_router.delete("/delete/{user_id}", response_model=Response, dependencies=[Depends(admin_only)])
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.delete_user(user_id))
    return envelope_response(response)


@user_router.get("/get-logged-in-profile-info", response_model=Response)
async def get_logged_in_profile_info(
    principal: User = Depends(any_user), service: UserService = Depends(get_user_service)
) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.get_my_info(principal.email))
    return envelope_response(response)


@user_router.get("/get-user-bookings/{user_id}", response_model=Response, dependencies=[Depends(any_user)])
async def get_user_booking_history(
    user_id: str, service: UserService = Depends(get_user_service)
) -> JSONResponse:
    response = await run_in_threadpool(lambda: service.get_user_booking_history(user_id))
    return envelope_response(response)
