from datetime import date
from typing import Optional


def validate_stay_dates(check_in: Optional[date], check_out: Optional[date], today: date):
    '''Validate a requested stay: check-in present, check-out after check-in and in the future.'''
    if check_in is None:
        raise ValueError("Check-in date is required")
    if check_out is None:
        raise ValueError("Check-out date is required")
    if check_out <= check_in:
        raise ValueError("Check-out date must be after check-in date")
    if check_out <= today:
        raise ValueError("Check-out date must be in the future")
