"""FastAPI dependencies: services wired to the request's database client, and route policy."""

import logging
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, Request, status

from Auth.tokens import TokenService
from config import Settings
from Database.deps import get_db
from Database.stores import BookingStore, RoomStore, UserStore
from Hotels.booking_service import BookingService
from Hotels.room_service import RoomService
from Users.user import ADMIN, USER, Role, User
from Users.user_service import UserService

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_user_service(
    db: Any = Depends(get_db),
    settings: Settings = Depends(get_settings),
    tokens: TokenService = Depends(get_token_service),
) -> UserService:
    return UserService(
        users=UserStore(db),
        bookings=BookingStore(db),
        rooms=RoomStore(db),
        tokens=tokens,
        admin_secret_key=settings.admin_secret_key,
        expiration_label=settings.expiration_label,
    )


def get_room_service(request: Request, db: Any = Depends(get_db)) -> RoomService:
    return RoomService(rooms=RoomStore(db), bookings=BookingStore(db), images=request.app.state.image_host)


def get_booking_service(
    request: Request,
    db: Any = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(
        bookings=BookingStore(db),
        rooms=RoomStore(db),
        users=UserStore(db),
        room_locks=request.app.state.room_locks,
        enforce_availability=settings.enforce_availability,
    )


def current_principal(request: Request) -> Optional[User]:
    return getattr(request.state, "principal", None)


def require_authority(*authorities: Role) -> Callable[[Request], User]:
    """
    Build a dependency that admits only principals holding one of ``authorities``.

    Anonymous callers get 401, authenticated callers without the authority 403.
    """

    allowed = frozenset(authorities)

    def dependency(request: Request) -> User:
        principal = current_principal(request)
        if principal is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        if principal.authority not in allowed:
            logger.info(
                "Access denied",
                extra={"path": request.url.path, "authority": principal.authority},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied",
            )
        return principal

    return dependency


admin_only = require_authority(ADMIN)
any_user = require_authority(USER, ADMIN)
