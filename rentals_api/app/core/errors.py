"""
Error taxonomy for rental operations.

Every expected failure of a rental operation has an ``ErrorKind``.  The
repository raises the matching ``RentalError`` subclass; the service
turns them into explicit ``(rental, error)`` results and the API maps
the kind to an HTTP status code.  Anything that is not a
``RentalError`` is an unexpected fault and propagates untouched.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_TRANSITION = "invalid_transition"


class RentalError(Exception):
    """Base class for expected rental failures."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message = "Rental operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class RentalValidationError(RentalError):
    """Malformed input, e.g. an inverted date range or unknown status."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid rental data"


class RentalNotFoundError(RentalError):
    """No rental with the given uid exists for the given user."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Rental not found"


class RentalConflictError(RentalError):
    """A rental with the same ``rentalUid`` already exists."""

    kind = ErrorKind.CONFLICT
    default_message = "Rental already exists"


class StaleRentalError(RentalConflictError):
    """The stored status changed between read and compare‑and‑swap write."""

    default_message = "Rental was modified concurrently"


class InvalidTransitionError(RentalError):
    """The requested status is not reachable from the current one."""

    kind = ErrorKind.INVALID_TRANSITION
    default_message = "Invalid status transition"
