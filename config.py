'''
Runtime configuration for the hotel reservation backend.

Values are read once at startup from the environment (optionally populated
from a .env file) and passed explicitly to the components that need them.
'''
import base64
import binascii
import os
from datetime import timedelta
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from exceptions import ConfigurationError

DEFAULT_TOKEN_TTL_DAYS = 7
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Process-wide settings. Immutable once built."""

    model_config = {"frozen": True}

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    jwt_secret: bytes = Field(repr=False)
    token_ttl: timedelta = timedelta(days=DEFAULT_TOKEN_TTL_DAYS)
    admin_secret_key: str = Field(repr=False)
    imgbb_api_key: Optional[str] = Field(default=None, repr=False)
    max_image_bytes: int = MAX_IMAGE_BYTES
    enforce_availability: bool = True

    @property
    def expiration_label(self) -> str:
        """Human readable token lifetime, e.g. ``7 Days``."""
        days = self.token_ttl.days
        return f"{days} Day" if days == 1 else f"{days} Days"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read from. Defaults to ``os.environ`` after
                loading a ``.env`` file.

        Returns:
            A populated Settings instance.

        Raises:
            ConfigurationError: If a required variable is missing or malformed.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        encoded_secret = env.get("JWT_SECRET")
        admin_secret = env.get("ADMIN_SECRET_KEY")
        if not encoded_secret or not admin_secret:
            raise ConfigurationError(
                "Environment variables 'JWT_SECRET' and 'ADMIN_SECRET_KEY' must be set."
            )

        try:
            secret = base64.b64decode(encoded_secret, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ConfigurationError("JWT_SECRET must be base64 encoded.") from exc
        if len(secret) < 32:
            raise ConfigurationError("JWT_SECRET must decode to at least 32 bytes for HS256.")

        try:
            ttl_days = int(env.get("TOKEN_TTL_DAYS", str(DEFAULT_TOKEN_TTL_DAYS)))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("TOKEN_TTL_DAYS must be an integer.") from exc
        if ttl_days <= 0:
            raise ConfigurationError("TOKEN_TTL_DAYS must be positive.")

        return cls(
            supabase_url=env.get("SUPABASE_URL"),
            supabase_key=env.get("SUPABASE_KEY"),
            jwt_secret=secret,
            token_ttl=timedelta(days=ttl_days),
            admin_secret_key=admin_secret,
            imgbb_api_key=env.get("IMGBB_API_KEY"),
            enforce_availability=_parse_bool(env.get("BOOKING_ENFORCE_AVAILABILITY"), True),
        )
