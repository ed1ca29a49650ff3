"""
Integration tests for SqliteRentalRepository against a temporary database.
"""
import dataclasses
import sqlite3
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from rentals_api.app.core.errors import (
    RentalConflictError,
    RentalNotFoundError,
    StaleRentalError,
)
from rentals_api.app.models.rental import Rental, RentalStatus


def make_rental(car_uid, payment_uid, username="alice", **overrides) -> Rental:
    fields = dict(
        rental_uid=uuid4(),
        username=username,
        payment_uid=payment_uid,
        car_uid=car_uid,
        date_from=datetime(2024, 1, 1, tzinfo=timezone.utc),
        date_to=datetime(2024, 1, 5, tzinfo=timezone.utc),
        status=RentalStatus.PENDING,
    )
    fields.update(overrides)
    return Rental(**fields)


class TestSqliteRentalRepository:
    """Tests for the SQLite rental store"""

    def test_add_assigns_sequential_ids(self, repository, car_uid, payment_uid):
        first = repository.add(make_rental(car_uid, payment_uid))
        second = repository.add(make_rental(car_uid, payment_uid))

        assert first.id > 0
        assert second.id > first.id

    def test_add_returns_stored_record(self, repository, car_uid, payment_uid):
        rental = make_rental(car_uid, payment_uid)
        stored = repository.add(rental)

        assert dataclasses.replace(stored, id=0) == rental

    def test_add_duplicate_uid_conflicts(self, repository, car_uid, payment_uid):
        rental = make_rental(car_uid, payment_uid)
        repository.add(rental)

        with pytest.raises(RentalConflictError):
            repository.add(make_rental(car_uid, payment_uid, username="bob", rental_uid=rental.rental_uid))
        assert len(repository.find_by_username("alice")) == 1
        assert repository.find_by_username("bob") == []

    def test_find_by_username_empty(self, repository):
        assert repository.find_by_username("nobody") == []

    def test_find_by_username_is_stable_and_filtered(self, repository, car_uid, payment_uid):
        uids = [repository.add(make_rental(car_uid, payment_uid)).rental_uid for _ in range(3)]
        repository.add(make_rental(car_uid, payment_uid, username="bob"))

        first = [r.rental_uid for r in repository.find_by_username("alice")]
        second = [r.rental_uid for r in repository.find_by_username("alice")]

        assert first == uids
        assert first == second

    def test_find_by_uid_enforces_ownership(self, repository, car_uid, payment_uid):
        stored = repository.add(make_rental(car_uid, payment_uid))

        assert repository.find_by_uid("alice", stored.rental_uid) == stored
        with pytest.raises(RentalNotFoundError):
            repository.find_by_uid("bob", stored.rental_uid)

    def test_find_by_uid_unknown(self, repository):
        with pytest.raises(RentalNotFoundError):
            repository.find_by_uid("alice", uuid4())

    def test_timestamps_are_stored_in_utc(self, repository, db_path, car_uid, payment_uid):
        plus_three = timezone(timedelta(hours=3))
        stored = repository.add(
            make_rental(
                car_uid,
                payment_uid,
                date_from=datetime(2024, 1, 1, 3, 0, tzinfo=plus_three),
                date_to=datetime(2024, 1, 5, 3, 0, tzinfo=plus_three),
            )
        )

        loaded = repository.find_by_uid("alice", stored.rental_uid)
        assert loaded.date_from == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert loaded.date_from.utcoffset() == timedelta(0)

        conn = sqlite3.connect(db_path)
        try:
            raw = conn.execute(
                "SELECT date_from FROM rentals WHERE rental_uid = ?", (str(stored.rental_uid),)
            ).fetchone()[0]
        finally:
            conn.close()
        assert raw == "2024-01-01T00:00:00+00:00"

    def test_patch_overwrites_record(self, repository, car_uid, payment_uid):
        stored = repository.add(make_rental(car_uid, payment_uid))
        stored.status = RentalStatus.IN_PROGRESS

        repository.patch(stored)

        assert repository.find_by_uid("alice", stored.rental_uid).status is RentalStatus.IN_PROGRESS

    def test_patch_unknown_rental(self, repository, car_uid, payment_uid):
        with pytest.raises(RentalNotFoundError):
            repository.patch(make_rental(car_uid, payment_uid))

    def test_patch_compare_and_swap(self, repository, car_uid, payment_uid):
        stored = repository.add(make_rental(car_uid, payment_uid))
        stored.status = RentalStatus.IN_PROGRESS
        repository.patch(stored, expected_status=RentalStatus.PENDING)

        stored.status = RentalStatus.CANCELLED
        with pytest.raises(StaleRentalError):
            repository.patch(stored, expected_status=RentalStatus.PENDING)
        assert repository.find_by_uid("alice", stored.rental_uid).status is RentalStatus.IN_PROGRESS
