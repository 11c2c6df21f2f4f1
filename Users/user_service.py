"""Account operations: registration, login and user administration."""
import hmac
import logging
from typing import Optional

from fastapi import status

from api.models import BookingView, Response, UserView
from Auth.passwords import hash_password, verify_password
from Auth.tokens import TokenService
from Database.stores import BookingStore, RoomStore, UserStore
from exceptions import InvalidRequestError, NotFoundError
from Users.user import ADMIN, USER, LoginRequest, Role, User, UserRegistration

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _parse_user_id(user_id: str | int) -> int:
    try:
        return int(user_id)
    except (TypeError, ValueError) as exc:
        raise InvalidRequestError("Invalid user ID format") from exc


class UserService:
    """Every method returns a Response envelope and never raises."""

    def __init__(
        self,
        users: UserStore,
        bookings: BookingStore,
        rooms: RoomStore,
        tokens: TokenService,
        admin_secret_key: str,
        expiration_label: str = "7 Days",
    ) -> None:
        self.users = users
        self.bookings = bookings
        self.rooms = rooms
        self.tokens = tokens
        self._admin_secret_key = admin_secret_key
        self._expiration_label = expiration_label

    def register(self, registration: UserRegistration, role: Role = USER) -> Response:
        try:
            if self.users.exists_by_email(registration.email):
                raise InvalidRequestError(f"{registration.email} already exists")
            user = User(
                email=registration.email,
                name=registration.name,
                phone_number=registration.phone_number,
                password=hash_password(registration.password),
                role=role,
            )
            saved = self.users.save(user)
        except InvalidRequestError as exc:
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except Exception as exc:
            logger.exception("Registration failed", extra={"email": registration.email})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error occurred during registration: {exc}",
            )

        logger.info("User registered", extra={"user_id": saved.id, "role": saved.role})
        return Response(
            status=status.HTTP_200_OK,
            message="Registration successful",
            user=UserView.from_user(saved),
        )

    def register_admin(self, registration: UserRegistration, secret_key: Optional[str]) -> Response:
        """Register an ADMIN only when ``secret_key`` matches the configured admin secret exactly."""
        supplied = (secret_key or "").encode("utf-8")
        if not hmac.compare_digest(supplied, self._admin_secret_key.encode("utf-8")):
            logger.warning("Admin registration refused", extra={"email": registration.email})
            return Response(status=status.HTTP_403_FORBIDDEN, message="Invalid Admin Secret Key")
        return self.register(registration, role=ADMIN)

    def login(self, request: LoginRequest) -> Response:
        try:
            user = self.users.find_by_email(request.email.strip().lower())
            # same answer for unknown email and wrong password
            if user is None or not verify_password(request.password, user.password):
                return Response(status=status.HTTP_401_UNAUTHORIZED, message=INVALID_CREDENTIALS)
            issued = self.tokens.issue(user)
        except Exception:
            logger.exception("Login failed")
            return Response(status=status.HTTP_401_UNAUTHORIZED, message=INVALID_CREDENTIALS)

        logger.info("Token issued", extra={"user_id": user.id})
        return Response(
            status=status.HTTP_200_OK,
            message="Token generated successfully",
            token=issued.serialize(),
            role=user.role,
            expiration_time=self._expiration_label,
        )

    def get_all_users(self) -> Response:
        try:
            users = self.users.list_all()
        except Exception as exc:
            logger.exception("Listing users failed")
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error retrieving users: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="Users fetched successfully",
            user_list=[UserView.from_user(user) for user in users],
        )

    def _require_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_by_id(self, user_id: str | int) -> Response:
        try:
            user = self._require_user(_parse_user_id(user_id))
        except InvalidRequestError as exc:
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Fetching user failed", extra={"user_id": user_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error fetching user by ID: {exc}",
            )
        return Response(status=status.HTTP_200_OK, message="User fetched successfully", user=UserView.from_user(user))

    def get_my_info(self, email: str) -> Response:
        try:
            user = self.users.find_by_email(email)
            if user is None:
                raise NotFoundError("User not found")
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Fetching own profile failed")
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error fetching user info: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="User info retrieved successfully",
            user=UserView.from_user(user),
        )

    def get_user_booking_history(self, user_id: str | int) -> Response:
        try:
            user = self._require_user(_parse_user_id(user_id))
            history = [
                BookingView.from_booking(booking, room=self.rooms.find_by_id(booking.room_id))
                for booking in self.bookings.list_by_user(user.id)  # type: ignore[arg-type]
            ]
        except InvalidRequestError as exc:
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Fetching booking history failed", extra={"user_id": user_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error fetching user booking history: {exc}",
            )
        return Response(
            status=status.HTTP_200_OK,
            message="Booking history fetched successfully",
            user=UserView.from_user(user, bookings=history),
        )

    def delete_user(self, user_id: str | int) -> Response:
        try:
            parsed_id = _parse_user_id(user_id)
            self._require_user(parsed_id)
            self.users.delete_by_id(parsed_id)
        except InvalidRequestError as exc:
            return Response(status=status.HTTP_400_BAD_REQUEST, message=str(exc))
        except NotFoundError as exc:
            return Response(status=status.HTTP_404_NOT_FOUND, message=str(exc))
        except Exception as exc:
            logger.exception("Deleting user failed", extra={"user_id": user_id})
            return Response(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                message=f"Error deleting user: {exc}",
            )
        logger.info("User deleted", extra={"user_id": user_id})
        return Response(status=status.HTTP_200_OK, message="User deleted successfully")
