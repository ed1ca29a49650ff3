"""
Domain record for a car rental and its lifecycle states.

A rental starts as ``PENDING``, moves to ``IN_PROGRESS`` when the car is
handed over and ends as ``FINISHED``.  ``CANCELLED`` can be reached from
either non-terminal state.  Nothing leaves a terminal state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional
from uuid import UUID

from rentals_api.app.core.errors import RentalValidationError


class RentalStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: "RentalStatus | str") -> "RentalStatus":
        """Return the status named by ``value`` (case insensitive)."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise RentalValidationError(
                f"Unknown rental status '{value}'. Expected one of: {allowed}"
            ) from None

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: Dict[RentalStatus, FrozenSet[RentalStatus]] = {
    RentalStatus.PENDING: frozenset({RentalStatus.IN_PROGRESS, RentalStatus.CANCELLED}),
    RentalStatus.IN_PROGRESS: frozenset({RentalStatus.FINISHED, RentalStatus.CANCELLED}),
    RentalStatus.FINISHED: frozenset(),
    RentalStatus.CANCELLED: frozenset(),
}


def to_utc(value: datetime) -> datetime:
    """Normalise ``value`` to UTC.  Naive timestamps are taken as UTC.

    Raises ``RentalValidationError`` when the UTC instant falls outside
    the range of ``datetime`` (e.g. ``0001-01-01T00:00:00+01:00``).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise RentalValidationError(
            f"Timestamp {value.isoformat()} is out of range in UTC"
        ) from None


def can_transition(current: RentalStatus, new: RentalStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


@dataclass
class Rental:
    """A booking of a car by a user for an inclusive UTC date range.

    ``id`` is the store's sequential identifier.  It is ``0`` until the
    record has been added and never leaves the service.  A draft built
    from a booking request may lack ``rental_uid``; stored records
    always carry one.
    """

    username: str
    payment_uid: UUID
    car_uid: UUID
    date_from: datetime
    date_to: datetime
    rental_uid: Optional[UUID] = None
    status: RentalStatus = RentalStatus.PENDING
    id: int = 0
