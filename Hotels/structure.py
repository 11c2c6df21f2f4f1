'''
Structure class implementation for Hotels module.
'''
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, model_validator


class Room(BaseModel):

    id : Optional[int] = None
    room_type : str
    room_price : Decimal
    room_description : Optional[str] = None
    room_img_url : Optional[str] = None

    @model_validator(mode="after")
    def validate_structure(self):
        # enforce non-negative price
        if self.room_price < 0:
            raise ValueError("Room price must not be negative.")
        if not self.room_type.strip():
            raise ValueError("Room type must not be blank.")
        return self

    def to_dict(self) -> dict[str, str | int | None]:
        """
        Serialize the room into a row dictionary.

        Returns:
            dict[str, str | int | None]: Mapping with the price stringified so
            that no precision is lost on the way to the numeric column.
        """
        row: dict[str, str | int | None] = {
            "room_type": self.room_type,
            "room_price": str(self.room_price),
            "room_description": self.room_description,
            "room_img_url": self.room_img_url,
        }
        if self.id is not None:
            row["id"] = self.id
        return row
