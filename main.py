'''
FastAPI application for the hotel reservation backend.

Available endpoints:
- /auth: Register users and admins, log in for a bearer token.
- /users: Read and delete user accounts, booking history.
- /rooms: Room inventory and availability search.
- /bookings: Book rooms, find bookings by confirmation code, cancel bookings.

Every endpoint answers with the same envelope: ``status`` (mirrors the HTTP
status code), ``message`` and at most a few payload fields.

The module exposes an app factory, not an app instance. Run it with
``uvicorn main:create_app --factory`` or ``python main.py``.
'''

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from Auth.interceptor import AuthInterceptor, AuthMiddleware
from Auth.tokens import TokenService
from config import Settings
from Database.db import HotelDB
from Database.stores import UserStore
from Hotels.booking_service import RoomLocks
from Hotels.images import ImgBBClient

# routers
from api.auth_routes import auth_router
from api.booking_routes import booking_router
from api.room_routes import room_router
from api.user_routes import user_router
from api.utils import error_response

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(settings: Optional[Settings] = None, db: Optional[Any] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings; read from the environment when omitted.
        db: Database client; a Supabase client is created at startup when omitted.

    Returns:
        The configured FastAPI application.
    """

    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup ---
        if app.state.db is None:
            app.state.db = HotelDB(settings).client   # create ONCE
        app.state.auth_interceptor = AuthInterceptor(app.state.token_service, UserStore(app.state.db))
        yield

    app = FastAPI(title="Hotel Reservation API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.token_service = TokenService(settings.jwt_secret, ttl=settings.token_ttl)
    app.state.room_locks = RoomLocks()
    app.state.image_host = ImgBBClient(settings.imgbb_api_key, max_bytes=settings.max_image_bytes)
    if db is not None:
        app.state.auth_interceptor = AuthInterceptor(app.state.token_service, UserStore(db))

    app.add_middleware(AuthMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return error_response(exc.status_code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected invalid request", extra={"path": request.url.path})
        return error_response(400, _validation_message(exc))

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return error_response(500, f"Unexpected error: {exc}")

    app.include_router(auth_router, prefix="/auth", tags=["Auth"])
    app.include_router(user_router, prefix="/users", tags=["Users"])
    app.include_router(room_router, prefix="/rooms", tags=["Rooms"])
    app.include_router(booking_router, prefix="/bookings", tags=["Bookings"])

    @app.get("/")
    async def root():
        return {"message": "Welcome to the Hotel Reservation API"}

    return app


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    uvicorn.run("main:create_app", factory=True, host="localhost", port=8000, reload=True)
