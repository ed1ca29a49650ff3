"""
Translation between transfer objects and rental records.

Pure functions with no state.  Incoming timestamps are normalised to
UTC, the internal ``id`` is never read from a payload and never written
to one; only ``rentalUid`` crosses the boundary.
"""

from typing import Iterable, List

from rentals_api.app.models.rental import Rental, RentalStatus, to_utc
from rentals_api.app.schemas.rental import RentalCreate, RentalRead


def to_rental(dto: "RentalCreate | RentalRead") -> Rental:
    """Build a record from a payload.  ``id`` is always left unset."""
    if isinstance(dto, RentalRead):
        status = dto.status
    else:
        # Caller-supplied status on a booking request is not trusted.
        status = RentalStatus.PENDING
    return Rental(
        id=0,
        rental_uid=dto.rental_uid,
        username=dto.username,
        payment_uid=dto.payment_uid,
        car_uid=dto.car_uid,
        date_from=to_utc(dto.date_from),
        date_to=to_utc(dto.date_to),
        status=status,
    )


def to_read(rental: Rental) -> RentalRead:
    return RentalRead(
        rental_uid=rental.rental_uid,
        username=rental.username,
        payment_uid=rental.payment_uid,
        car_uid=rental.car_uid,
        date_from=to_utc(rental.date_from),
        date_to=to_utc(rental.date_to),
        status=rental.status,
    )


def to_read_list(rentals: Iterable[Rental]) -> List[RentalRead]:
    return [to_read(rental) for rental in rentals]
