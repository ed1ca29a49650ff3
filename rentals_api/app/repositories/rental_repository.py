"""
Persistence for rental records.

``RentalRepository`` is the store interface the lifecycle service
depends on.  ``SqliteRentalRepository`` implements it on top of the
SQLite helpers in ``core.db``; every method opens its own connection so
an instance can be shared by concurrent requests.

Uniqueness of ``rental_uid`` is enforced by the table's UNIQUE
constraint inside a single INSERT, and ``patch`` can run as a
compare‑and‑swap on the previously read status.  Neither operation
checks first and writes afterwards.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from rentals_api.app.core.db import get_cursor
from rentals_api.app.core.errors import (
    RentalConflictError,
    RentalNotFoundError,
    StaleRentalError,
)
from rentals_api.app.models.rental import Rental, RentalStatus, to_utc


logger = logging.getLogger(__name__)

_COLUMNS = "id, rental_uid, username, payment_uid, car_uid, date_from, date_to, status"


class RentalRepository(ABC):
    """Keyed storage of rental records with two lookup paths."""

    @abstractmethod
    def find_by_username(self, username: str) -> List[Rental]:
        """Return every rental owned by ``username``, oldest first."""

    @abstractmethod
    def find_by_uid(self, username: str, rental_uid: UUID) -> Rental:
        """Return the rental ``rental_uid`` owned by ``username``.

        Raises ``RentalNotFoundError`` when it does not exist or belongs
        to another user.
        """

    @abstractmethod
    def add(self, rental: Rental) -> Rental:
        """Persist ``rental`` and return it with the assigned ``id``.

        Raises ``RentalConflictError`` if ``rental_uid`` is taken.
        """

    @abstractmethod
    def patch(self, rental: Rental, expected_status: Optional[RentalStatus] = None) -> None:
        """Overwrite the stored record keyed by ``rental_uid``.

        With ``expected_status`` the write only happens while the stored
        status still equals it; otherwise ``StaleRentalError`` is raised.
        Raises ``RentalNotFoundError`` if the record does not exist.
        """


def _to_db_timestamp(value: datetime) -> str:
    return to_utc(value).isoformat()


def _from_db_timestamp(value: str) -> datetime:
    return to_utc(datetime.fromisoformat(value))


def _row_to_rental(row: sqlite3.Row) -> Rental:
    return Rental(
        id=row["id"],
        rental_uid=UUID(row["rental_uid"]),
        username=row["username"],
        payment_uid=UUID(row["payment_uid"]),
        car_uid=UUID(row["car_uid"]),
        date_from=_from_db_timestamp(row["date_from"]),
        date_to=_from_db_timestamp(row["date_to"]),
        status=RentalStatus(row["status"]),
    )


class SqliteRentalRepository(RentalRepository):
    """SQLite implementation of the rental store."""

    def __init__(self, db_path: str, timeout: Optional[float] = None) -> None:
        self.db_path = db_path
        self.timeout = timeout

    def find_by_username(self, username: str) -> List[Rental]:
        with get_cursor(self.db_path, self.timeout) as cursor:
            rows = cursor.execute(
                f"SELECT {_COLUMNS} FROM rentals WHERE username = ? ORDER BY id ASC",
                (username,),
            ).fetchall()
        return [_row_to_rental(row) for row in rows]

    def find_by_uid(self, username: str, rental_uid: UUID) -> Rental:
        with get_cursor(self.db_path, self.timeout) as cursor:
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM rentals WHERE rental_uid = ? AND username = ?",
                (str(rental_uid), username),
            ).fetchone()
        if not row:
            raise RentalNotFoundError(
                f"Rental {rental_uid} not found for user {username}"
            )
        return _row_to_rental(row)

    def add(self, rental: Rental) -> Rental:
        try:
            with get_cursor(self.db_path, self.timeout) as cursor:
                cursor.execute(
                    """
                    INSERT INTO rentals (rental_uid, username, payment_uid, car_uid, date_from, date_to, status)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        str(rental.rental_uid),
                        rental.username,
                        str(rental.payment_uid),
                        str(rental.car_uid),
                        _to_db_timestamp(rental.date_from),
                        _to_db_timestamp(rental.date_to),
                        rental.status.value,
                    ),
                )
                rental_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            # The only UNIQUE column besides the primary key.
            if "rental_uid" in str(exc):
                raise RentalConflictError(
                    f"Rental {rental.rental_uid} already exists"
                ) from exc
            raise
        logger.debug("Stored rental %s with id %s", rental.rental_uid, rental_id)
        return Rental(
            id=rental_id,
            rental_uid=rental.rental_uid,
            username=rental.username,
            payment_uid=rental.payment_uid,
            car_uid=rental.car_uid,
            date_from=to_utc(rental.date_from),
            date_to=to_utc(rental.date_to),
            status=rental.status,
        )

    def patch(self, rental: Rental, expected_status: Optional[RentalStatus] = None) -> None:
        query = (
            "UPDATE rentals SET username = ?, payment_uid = ?, car_uid = ?, "
            "date_from = ?, date_to = ?, status = ? WHERE rental_uid = ?"
        )
        params: list = [
            rental.username,
            str(rental.payment_uid),
            str(rental.car_uid),
            _to_db_timestamp(rental.date_from),
            _to_db_timestamp(rental.date_to),
            rental.status.value,
            str(rental.rental_uid),
        ]
        if expected_status is not None:
            query += " AND status = ?"
            params.append(expected_status.value)

        with get_cursor(self.db_path, self.timeout) as cursor:
            cursor.execute(query, tuple(params))
            if cursor.rowcount:
                return
            exists = cursor.execute(
                "SELECT 1 FROM rentals WHERE rental_uid = ?",
                (str(rental.rental_uid),),
            ).fetchone()
        if not exists or expected_status is None:
            raise RentalNotFoundError(f"Rental {rental.rental_uid} not found")
        raise StaleRentalError(
            f"Rental {rental.rental_uid} is no longer {expected_status.value}"
        )
