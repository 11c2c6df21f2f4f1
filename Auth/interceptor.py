'''
Per-request authentication.

The interceptor runs before routing. It only decides whether the request
carries a verified principal; it never rejects a request itself. Route
dependencies (``api.deps.require_authority``) do the actual enforcement.
'''
import logging
from enum import Enum
from typing import Any, Optional, Protocol

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from Auth.tokens import TokenService
from exceptions import InvalidTokenError
from Users.user import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class IdentityStore(Protocol):
    def find_by_email(self, email: str) -> Optional[User]: ...


class AuthOutcome(str, Enum):
    PASS_ANONYMOUS = "PASS_ANONYMOUS"
    PASS_AUTHENTICATED = "PASS_AUTHENTICATED"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if authorization is None or not authorization.strip():
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class AuthInterceptor:
    """Attaches a verified principal to a request context object."""

    def __init__(self, tokens: TokenService, users: IdentityStore) -> None:
        self._tokens = tokens
        self._users = users

    def authenticate(self, authorization: Optional[str], context: Any) -> AuthOutcome:
        """
        Run the authentication steps for one request.

        Args:
            authorization: Raw ``Authorization`` header value, if any.
            context: Per-request state object; ``principal`` and ``authority``
                attributes are set on it when authentication succeeds.

        Returns:
            PASS_AUTHENTICATED when a principal is attached, PASS_ANONYMOUS otherwise.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            return AuthOutcome.PASS_ANONYMOUS

        try:
            email = self._tokens.extract_subject(token)
        except InvalidTokenError:
            logger.info("Ignoring unverifiable bearer token")
            return AuthOutcome.PASS_ANONYMOUS

        if getattr(context, "principal", None) is not None:
            return AuthOutcome.PASS_AUTHENTICATED

        # role is always re-read from the store, never taken from the token
        try:
            user = self._users.find_by_email(email)
        except Exception:
            logger.exception("Identity lookup failed", extra={"email": email})
            return AuthOutcome.PASS_ANONYMOUS
        if user is None:
            return AuthOutcome.PASS_ANONYMOUS

        if not self._tokens.verify(token, user.email):
            return AuthOutcome.PASS_ANONYMOUS

        context.principal = user
        context.authority = user.authority
        return AuthOutcome.PASS_AUTHENTICATED


class AuthMiddleware(BaseHTTPMiddleware):
    """Runs the interceptor configured on ``app.state.auth_interceptor`` for every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        interceptor: Optional[AuthInterceptor] = getattr(request.app.state, "auth_interceptor", None)
        if interceptor is not None:
            await run_in_threadpool(
                interceptor.authenticate, request.headers.get("Authorization"), request.state
            )
        return await call_next(request)
