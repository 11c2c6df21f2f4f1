"""Room availability rules, one case per conflict rule plus the admitted shapes."""

from datetime import date
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from Hotels.availability import (  # noqa: E402
    BookingInterval,
    conflicts,
    generate_confirmation_code,
    is_available,
)


def stay(start: str, end: str) -> BookingInterval:
    return BookingInterval(check_in_date=date.fromisoformat(start), check_out_date=date.fromisoformat(end))


EXISTING = stay("2024-01-10", "2024-01-15")


@pytest.mark.parametrize(
    "candidate, rule",
    [
        (stay("2024-01-10", "2024-01-12"), "same check-in"),
        (stay("2024-01-11", "2024-01-14"), "checks out before existing check-out"),
        (stay("2024-01-12", "2024-01-20"), "checks in during existing stay"),
        (stay("2024-01-08", "2024-01-15"), "same check-out, earlier check-in"),
        (stay("2024-01-08", "2024-01-18"), "envelops existing stay"),
        (stay("2024-01-15", "2024-01-15"), "same-day stay on the check-out day"),
    ],
)
def test_each_rule_rejects(candidate: BookingInterval, rule: str) -> None:
    assert conflicts(candidate, EXISTING), rule
    assert is_available(candidate, [EXISTING]) is False


def test_reversed_back_to_back_rejects() -> None:
    # a.start == b.end and a.end == b.start only holds for a reversed pair
    existing = BookingInterval(check_in_date=date(2024, 1, 15), check_out_date=date(2024, 1, 10))
    candidate = stay("2024-01-10", "2024-01-15")

    assert conflicts(candidate, existing)


def test_stay_after_existing_is_available() -> None:
    assert is_available(stay("2024-01-20", "2024-01-25"), [EXISTING])


def test_check_in_on_existing_check_out_is_available() -> None:
    assert is_available(stay("2024-01-15", "2024-01-18"), [EXISTING])


def test_stay_entirely_before_existing_is_rejected() -> None:
    """Rule 2 also catches stays that end before the existing one begins."""
    assert is_available(stay("2024-01-01", "2024-01-05"), [EXISTING]) is False


def test_no_existing_bookings_is_available() -> None:
    assert is_available(stay("2024-01-01", "2024-01-05"), [])


def test_must_clear_every_existing_booking() -> None:
    later = stay("2024-02-01", "2024-02-05")
    candidate = stay("2024-01-20", "2024-01-25")

    assert is_available(candidate, [EXISTING])
    assert is_available(candidate, [EXISTING, later]) is False


def test_confirmation_codes_are_distinct() -> None:
    codes = {generate_confirmation_code() for _ in range(100)}

    assert len(codes) == 100
    assert all(len(code) == 36 for code in codes)
