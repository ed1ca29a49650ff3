"""
Pydantic models for rental payloads.

Field names are snake_case in Python and camelCase on the wire
(``rentalUid``, ``paymentUid``, ``carUid``, ``dateFrom``, ``dateTo``).
Timestamps are ISO‑8601 with an offset.  The internal sequential id
of a rental never appears in any schema.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from rentals_api.app.models.rental import RentalStatus


class RentalBase(BaseModel):
    username: str = Field(..., min_length=1, example="alice")
    payment_uid: UUID = Field(..., alias="paymentUid", example="238c733c-48d3-4ad8-8ec4-d6cc4c1f9d6c")
    car_uid: UUID = Field(..., alias="carUid", example="109b42f3-198d-4c89-9276-a7520a7120ab")
    date_from: datetime = Field(..., alias="dateFrom", example="2024-01-01T00:00:00Z")
    date_to: datetime = Field(..., alias="dateTo", example="2024-01-05T00:00:00Z")

    model_config = {
        "populate_by_name": True,
    }


class RentalCreate(RentalBase):
    """Schema for booking a car.

    ``rentalUid`` may be supplied by the caller (the gateway reserves it
    before charging the payment); otherwise the service generates one.
    A ``status`` sent by the caller is accepted for compatibility and
    ignored: new rentals always start as ``PENDING``.
    """

    rental_uid: Optional[UUID] = Field(default=None, alias="rentalUid")
    status: Optional[str] = Field(default=None, description="Ignored; new rentals start as PENDING")


class RentalRead(RentalBase):
    """Schema for a rental returned by the API."""

    rental_uid: UUID = Field(..., alias="rentalUid")
    status: RentalStatus = Field(..., example="PENDING")

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }


class HealthRead(BaseModel):
    status: str = Field("OK", example="OK")
