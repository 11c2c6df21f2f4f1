"""Registration and login routes. All public."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from Users.user import LoginRequest, UserRegistration
from Users.user_service import UserService

from .deps import get_user_service
from .models import Response
from .utils import envelope_response

# mount api router
auth_router = APIRouter()


@auth_router.post("/register", response_model=Response)
async def register(
    registration: UserRegistration, service: UserService = Depends(get_user_service)
) -> JSONResponse:
    """Register a USER account. Any role sent by the client is ignored."""

    response = await run_in_threadpool(lambda: service.register(registration))
    return envelope_response(response)


@auth_router.post("/admin/register", response_model=Response)
async def register_admin(
    registration: UserRegistration,
    secret_key: Optional[str] = Query(default=None, alias="secretKey"),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    """Register an ADMIN account; requires the shared admin secret."""

    response = await run_in_threadpool(lambda: service.register_admin(registration, secret_key))
    return envelope_response(response)


@auth_router.post("/login", response_model=Response)
async def login(request: LoginRequest, service: UserService = Depends(get_user_service)) -> JSONResponse:
    """Exchange email and password for a bearer token."""

    response = await run_in_threadpool(lambda: service.login(request))
    return envelope_response(response)
