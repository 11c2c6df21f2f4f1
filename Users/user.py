"""User (principal) model and registration payloads."""
from email.utils import parseaddr
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

Role = Literal["USER", "ADMIN"]
USER: Role = "USER"
ADMIN: Role = "ADMIN"

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _normalize_email(value: str) -> str:
    lowered = value.strip().lower()
    parsed = parseaddr(lowered)[1]
    if "@" not in parsed or parsed != lowered:
        raise ValueError("Invalid email address format.")
    return lowered


class User(BaseModel):
    """Stored application user with hashed credentials and a role."""

    id: Optional[int] = None
    email: str
    name: str
    phone_number: str
    password: str = Field(repr=False)
    role: Role = USER

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, value: str) -> str:
        """
        Normalize and validate email to lowercase.

        Args:
            value: Input email string.

        Returns:
            Lowercased email string if valid.

        Raises:
            ValueError: If the email address is malformed.
        """
        return _normalize_email(value)

    @property
    def authority(self) -> Role:
        return self.role

    def to_dict(self) -> dict:
        """Row representation, without the id when it has not been assigned yet."""
        row = {
            "email": self.email,
            "name": self.name,
            "phone_number": self.phone_number,
            "password": self.password,
            "role": self.role,
        }
        if self.id is not None:
            row["id"] = self.id
        return row


class UserRegistration(BaseModel):
    """Payload accepted by the registration endpoints. Role is not client settable."""

    email: str
    name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_BYTES, repr=False)

    @field_validator("email")
    @classmethod
    def email_lowercase(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes.")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str = Field(repr=False)
