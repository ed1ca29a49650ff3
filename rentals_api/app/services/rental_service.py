"""
Business logic for the rental lifecycle.

``RentalService`` is the only component allowed to mutate rentals.  It
validates booking windows, owns the status state machine and delegates
storage to a ``RentalRepository`` handed to it at construction time.

Expected outcomes (bad input, unknown rental, duplicate uid, illegal
transition) are not raised to callers.  Every operation returns a
``(result, error)`` pair where ``error`` is a ``RentalError`` carrying an
``ErrorKind``; callers must check it before using ``result``.  Anything
else the repository raises is a fault and propagates.

The repository is synchronous (SQLite); its calls run in the
threadpool so they do not block the event loop.

Car availability and payment authorisation belong to the car and
payment services.  Callers settle those before ``book_car``; this
service never contacts them.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID, uuid4

from fastapi.concurrency import run_in_threadpool

from rentals_api.app.core.errors import (
    InvalidTransitionError,
    RentalConflictError,
    RentalError,
    RentalValidationError,
    StaleRentalError,
)
from rentals_api.app.models.rental import (
    Rental,
    RentalStatus,
    can_transition,
    to_utc,
)
from rentals_api.app.repositories.rental_repository import RentalRepository


logger = logging.getLogger(__name__)

RentalResult = Tuple[Optional[Rental], Optional[RentalError]]


class RentalService:
    """Service enforcing rental invariants on top of a store."""

    def __init__(self, repository: RentalRepository, status_change_attempts: int = 3) -> None:
        self.repository = repository
        self.status_change_attempts = max(1, status_change_attempts)

    async def book_car(
        self,
        username: str,
        car_uid: UUID,
        payment_uid: UUID,
        date_from: datetime,
        date_to: datetime,
        rental_uid: Optional[UUID] = None,
    ) -> RentalResult:
        """Create a ``PENDING`` rental of ``car_uid`` for ``username``.

        The window is inclusive and must not be empty, so ``date_from``
        has to be strictly earlier than ``date_to``.  A fresh
        ``rental_uid`` is generated unless the caller supplies one; a
        taken uid yields a ``CONFLICT`` error.
        """
        if not username or not username.strip():
            return self._reject(RentalValidationError("Username must not be empty"))
        try:
            date_from = to_utc(date_from)
            date_to = to_utc(date_to)
        except RentalValidationError as e:
            return self._reject(e)
        if date_from >= date_to:
            return self._reject(
                RentalValidationError(
                    f"dateFrom ({date_from.isoformat()}) must be earlier than "
                    f"dateTo ({date_to.isoformat()})"
                )
            )

        rental = Rental(
            rental_uid=rental_uid or uuid4(),
            username=username,
            payment_uid=payment_uid,
            car_uid=car_uid,
            date_from=date_from,
            date_to=date_to,
            status=RentalStatus.PENDING,
        )
        try:
            stored = await run_in_threadpool(self.repository.add, rental)
        except RentalConflictError as e:
            return self._reject(e)
        logger.info(
            "Rental %s booked: user=%s car=%s %s..%s",
            stored.rental_uid,
            username,
            car_uid,
            date_from.isoformat(),
            date_to.isoformat(),
        )
        return stored, None

    async def get_rentals_by_user(self, username: str) -> List[Rental]:
        """Return every rental of ``username`` (possibly none)."""
        return await run_in_threadpool(self.repository.find_by_username, username)

    async def get_rental(self, username: str, rental_uid: UUID) -> RentalResult:
        try:
            return await run_in_threadpool(self.repository.find_by_uid, username, rental_uid), None
        except RentalError as e:
            return self._reject(e)

    async def change_status(
        self,
        username: str,
        rental_uid: UUID,
        new_status: "RentalStatus | str",
    ) -> RentalResult:
        """Move a rental to ``new_status`` following the state machine.

        The write is a compare‑and‑swap on the status that was read and
        validated.  If another request changed the rental in between,
        the rental is reloaded and the transition validated again, up to
        ``status_change_attempts`` times.
        """
        try:
            target = RentalStatus.parse(new_status)
        except RentalValidationError as e:
            return self._reject(e)

        for attempt in range(1, self.status_change_attempts + 1):
            try:
                rental = await run_in_threadpool(self.repository.find_by_uid, username, rental_uid)
            except RentalError as e:
                return self._reject(e)

            current = rental.status
            if not can_transition(current, target):
                return self._reject(
                    InvalidTransitionError(
                        f"Rental {rental_uid} cannot move from {current.value} to {target.value}"
                    )
                )

            rental.status = target
            try:
                await run_in_threadpool(self.repository.patch, rental, expected_status=current)
            except StaleRentalError:
                logger.info(
                    "Rental %s changed concurrently (attempt %s/%s), retrying",
                    rental_uid,
                    attempt,
                    self.status_change_attempts,
                )
                continue
            except RentalError as e:
                return self._reject(e)
            logger.info(
                "Rental %s status changed %s -> %s", rental_uid, current.value, target.value
            )
            return rental, None

        return self._reject(
            StaleRentalError(
                f"Rental {rental_uid} kept changing; gave up after "
                f"{self.status_change_attempts} attempts"
            )
        )

    async def start_rental(self, username: str, rental_uid: UUID) -> RentalResult:
        return await self.change_status(username, rental_uid, RentalStatus.IN_PROGRESS)

    async def finish_rental(self, username: str, rental_uid: UUID) -> RentalResult:
        return await self.change_status(username, rental_uid, RentalStatus.FINISHED)

    async def cancel_rental(self, username: str, rental_uid: UUID) -> RentalResult:
        return await self.change_status(username, rental_uid, RentalStatus.CANCELLED)

    @staticmethod
    def _reject(error: RentalError) -> RentalResult:
        logger.warning("Rental operation rejected (%s): %s", error.kind.value, error)
        return None, error
