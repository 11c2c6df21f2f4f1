'''
Signed bearer tokens.

A token proves who the caller is and nothing else: it carries the user's
email as subject plus issue and expiry timestamps, signed with HS256. Roles
are looked up again on every request and never read from the token.
'''
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from pydantic import BaseModel, Field

from exceptions import InvalidTokenError
from Users.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IssuedToken(BaseModel):
    """A freshly signed token together with the claims it was built from."""

    subject: str
    issued_at: datetime
    expires_at: datetime
    value: str = Field(repr=False)

    def serialize(self) -> str:
        return self.value


class TokenService:
    """Issues and verifies tokens with a single key fixed for the service lifetime."""

    def __init__(
        self,
        secret: bytes,
        ttl: timedelta = timedelta(days=7),
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock or _utcnow

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user: User) -> IssuedToken:
        """
        Sign a token for the given user.

        Args:
            user: The principal the token is issued to. Only the email is used.

        Returns:
            IssuedToken with the compact serialized value.
        """
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        value = jwt.encode(
            {"sub": user.email, "iat": issued_at, "exp": expires_at},
            self._secret,
            algorithm=ALGORITHM,
        )
        return IssuedToken(subject=user.email, issued_at=issued_at, expires_at=expires_at, value=value)

    def extract_subject(self, token: str) -> str:
        """
        Return the subject of a token whose signature and expiry check out.

        Expiry is judged against the service clock, the same one used to issue.

        Raises:
            InvalidTokenError: On a bad signature, an expired or malformed token.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        try:
            expires_at = int(claims["exp"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Expiration Time claim (exp) must be an integer.") from exc
        if expires_at <= self._clock().timestamp():
            raise InvalidTokenError("Signature has expired")

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token has no subject.")
        return subject

    def verify(self, token: str, expected_identity: str) -> bool:
        """True only for a correctly signed, unexpired token issued to ``expected_identity``."""
        try:
            subject = self.extract_subject(token)
        except InvalidTokenError as exc:
            logger.debug("Token rejected", extra={"reason": str(exc)})
            return False
        return subject == expected_identity
