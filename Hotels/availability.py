'''
Room availability rules.

A candidate stay is admitted only if it does not conflict with any stay
already booked for the same room. The conflict rules below are kept exactly
as the reservation desk has always applied them; note that ``checks out
before`` (rule 2) also rejects stays that end before an existing stay even
starts, so the predicate is stricter than a plain interval overlap test.
'''
from datetime import date
from typing import Iterable
from uuid import uuid4

from pydantic import BaseModel


class BookingInterval(BaseModel):
    """Check-in / check-out pair for a single stay."""

    model_config = {"frozen": True}

    check_in_date : date
    check_out_date : date


def conflicts(candidate: BookingInterval, existing: BookingInterval) -> bool:
    '''Check whether a candidate stay clashes with an existing stay of the same room.'''
    a_start, a_end = candidate.check_in_date, candidate.check_out_date
    b_start, b_end = existing.check_in_date, existing.check_out_date

    return (
        a_start == b_start                              # same check-in
        or a_end < b_end                                # checks out before
        or b_start < a_start < b_end                    # checks in during
        or (a_start < b_start and a_end == b_end)       # same check-out, earlier check-in
        or (a_start < b_start and a_end > b_end)        # envelops
        or (a_start == b_end and a_end == b_start)      # reversed back-to-back
        or (a_start == b_end and a_end == a_start)      # same-day stay on the check-out day
    )


def is_available(candidate: BookingInterval, existing: Iterable[BookingInterval]) -> bool:
    '''Return True when the candidate conflicts with none of the existing stays.'''
    return not any(conflicts(candidate, booked) for booked in existing)


def generate_confirmation_code() -> str:
    '''Draw a new opaque booking confirmation code.'''
    return str(uuid4())
