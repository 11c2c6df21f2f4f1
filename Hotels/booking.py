from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from Hotels.availability import BookingInterval
from utils import validate_stay_dates


class Booking(BaseModel):
    """A reservation of one room by one user for a date range."""

    model_config = {"validate_assignment": True}

    id : Optional[int] = None
    check_in_date : date
    check_out_date : date
    num_of_adults : int = Field(default=1, ge=1)
    num_of_children : int = Field(default=0, ge=0)
    booking_confirmation_code : Optional[str] = None
    room_id : int
    user_id : int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_guests(self) -> int:
        return self.num_of_adults + self.num_of_children

    @model_validator(mode="after")
    def validate_dates(self):
        # enforce chronological consistency
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be strictly greater than check_in_date")
        return self

    @property
    def interval(self) -> BookingInterval:
        return BookingInterval(check_in_date=self.check_in_date, check_out_date=self.check_out_date)

    def to_dict(self) -> dict[str, str | int | None]:
        row: dict[str, str | int | None] = {
            "check_in_date": self.check_in_date.isoformat(),
            "check_out_date": self.check_out_date.isoformat(),
            "num_of_adults": self.num_of_adults,
            "num_of_children": self.num_of_children,
            "total_guests": self.total_guests,
            "booking_confirmation_code": self.booking_confirmation_code,
            "room_id": self.room_id,
            "user_id": self.user_id,
        }
        if self.id is not None:
            row["id"] = self.id
        return row


class BookingRequest(BaseModel):
    """Payload accepted when booking a room."""

    check_in_date : Optional[date] = None
    check_out_date : Optional[date] = None
    num_of_adults : int = Field(default=1, ge=1)
    num_of_children : int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def validate_booking(self):
        validate_stay_dates(self.check_in_date, self.check_out_date, date.today())
        return self

    @property
    def interval(self) -> BookingInterval:
        return BookingInterval(check_in_date=self.check_in_date, check_out_date=self.check_out_date)  # type: ignore[arg-type]
