"""
Unit tests for rental_mapper
"""
import dataclasses
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from rentals_api.app.models.rental import Rental, RentalStatus
from rentals_api.app.schemas.rental import RentalCreate, RentalRead
from rentals_api.app.services import rental_mapper


def stored_rental(car_uid, payment_uid) -> Rental:
    return Rental(
        id=42,
        rental_uid=uuid4(),
        username="alice",
        payment_uid=payment_uid,
        car_uid=car_uid,
        date_from=datetime(2024, 1, 1, tzinfo=timezone.utc),
        date_to=datetime(2024, 1, 5, tzinfo=timezone.utc),
        status=RentalStatus.IN_PROGRESS,
    )


class TestRentalMapper:
    """Tests for record <-> transfer object mapping"""

    def test_round_trip_preserves_everything_but_id(self, car_uid, payment_uid):
        rental = stored_rental(car_uid, payment_uid)

        restored = rental_mapper.to_rental(rental_mapper.to_read(rental))

        assert restored.id == 0
        assert restored == dataclasses.replace(rental, id=0)

    def test_internal_id_never_leaves(self, car_uid, payment_uid):
        payload = rental_mapper.to_read(stored_rental(car_uid, payment_uid)).model_dump(by_alias=True)

        assert "id" not in payload
        assert set(payload) == {
            "rentalUid",
            "username",
            "paymentUid",
            "carUid",
            "dateFrom",
            "dateTo",
            "status",
        }

    def test_incoming_timestamps_are_normalized(self, car_uid, payment_uid):
        dto = RentalCreate.model_validate(
            {
                "username": "alice",
                "carUid": str(car_uid),
                "paymentUid": str(payment_uid),
                "dateFrom": "2024-01-01T03:00:00+03:00",
                "dateTo": "2024-01-05T00:00:00",
            }
        )

        rental = rental_mapper.to_rental(dto)

        assert rental.date_from == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert rental.date_from.utcoffset() == timedelta(0)
        assert rental.date_to == datetime(2024, 1, 5, tzinfo=timezone.utc)

    def test_booking_request_ignores_id_and_status(self, car_uid, payment_uid):
        dto = RentalCreate.model_validate(
            {
                "id": 99,
                "username": "alice",
                "carUid": str(car_uid),
                "paymentUid": str(payment_uid),
                "dateFrom": "2024-01-01T00:00:00Z",
                "dateTo": "2024-01-05T00:00:00Z",
                "status": "FINISHED",
            }
        )

        rental = rental_mapper.to_rental(dto)

        assert rental.id == 0
        assert rental.status is RentalStatus.PENDING
        assert rental.rental_uid is None

    def test_to_read_list(self, car_uid, payment_uid):
        rentals = [stored_rental(car_uid, payment_uid) for _ in range(2)]

        result = rental_mapper.to_read_list(rentals)

        assert [r.rental_uid for r in result] == [r.rental_uid for r in rentals]
        assert all(isinstance(r, RentalRead) for r in result)
        assert rental_mapper.to_read_list([]) == []
