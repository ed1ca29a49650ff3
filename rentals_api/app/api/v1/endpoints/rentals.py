"""
Rental endpoints for API v1.

These routes expose rental records to the gateway: list a user's
rentals, fetch one, book a car and change a rental's status.  All
business rules live in ``RentalService``; the handlers only translate
payloads through ``rental_mapper`` and turn the service's error kinds
into HTTP status codes.

The owning user is passed as the ``X-User-Name`` query parameter.  The
``X-User-Name`` header is accepted as well when the query parameter is
absent.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Path, Query, Request, Response, status

from rentals_api.app.core.errors import ErrorKind, RentalError
from rentals_api.app.schemas.rental import RentalCreate, RentalRead
from rentals_api.app.services import rental_mapper
from rentals_api.app.services.rental_service import RentalService


router = APIRouter()


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
}


def get_rental_service(request: Request) -> RentalService:
    """Return the service instance created for this application at startup."""
    return request.app.state.rental_service


def get_username(
    username_query: Optional[str] = Query(None, alias="X-User-Name", description="Owner of the rentals"),
    username_header: Optional[str] = Header(None, alias="X-User-Name"),
) -> str:
    username = username_query or username_header
    if not username or not username.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-User-Name is required",
        )
    return username


def _raise_for(error: RentalError) -> None:
    raise HTTPException(status_code=STATUS_BY_KIND[error.kind], detail=error.message)


@router.get("", response_model=List[RentalRead])
async def list_rentals(
    username: str = Depends(get_username),
    service: RentalService = Depends(get_rental_service),
) -> List[RentalRead]:
    """List every rental of the user.

    Returns an empty list when the user has no rentals.
    """
    rentals = await service.get_rentals_by_user(username)
    return rental_mapper.to_read_list(rentals)


@router.get(
    "/{rental_uid}",
    response_model=RentalRead,
    responses={404: {"description": "Rental not found for this user"}},
)
async def get_rental(
    rental_uid: UUID = Path(..., description="UUID of the rental"),
    username: str = Depends(get_username),
    service: RentalService = Depends(get_rental_service),
) -> RentalRead:
    """Return one rental of the user.

    A rental owned by another user is reported as not found.
    """
    rental, error = await service.get_rental(username, rental_uid)
    if error:
        _raise_for(error)
    return rental_mapper.to_read(rental)


@router.post(
    "",
    response_model=RentalRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error, e.g. dateFrom is not before dateTo"},
        409: {"description": "rentalUid already exists"},
    },
)
async def create_rental(
    body: RentalCreate,
    response: Response,
    service: RentalService = Depends(get_rental_service),
) -> RentalRead:
    """Book a car.

    The new rental starts as ``PENDING``.  Its location is returned in
    the ``Location`` header.
    """
    try:
        draft = rental_mapper.to_rental(body)
    except RentalError as e:
        _raise_for(e)
    rental, error = await service.book_car(
        draft.username,
        draft.car_uid,
        draft.payment_uid,
        draft.date_from,
        draft.date_to,
        rental_uid=draft.rental_uid,
    )
    if error:
        _raise_for(error)
    response.headers["Location"] = f"/api/v1/rental/{rental.rental_uid}"
    return rental_mapper.to_read(rental)


@router.patch(
    "/{username}/{rental_uid}/{new_status}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"description": "Unknown status"},
        404: {"description": "Rental not found for this user"},
        409: {"description": "Status is not reachable from the current one"},
    },
)
async def change_rental_status(
    username: str = Path(..., description="Owner of the rentals"),
    rental_uid: UUID = Path(..., description="UUID of the rental"),
    new_status: str = Path(..., description="PENDING, IN_PROGRESS, FINISHED or CANCELLED"),
    service: RentalService = Depends(get_rental_service),
) -> Response:
    """Change the status of a rental.

    Allowed moves: ``PENDING`` to ``IN_PROGRESS`` or ``CANCELLED``,
    ``IN_PROGRESS`` to ``FINISHED`` or ``CANCELLED``.  Finished and
    cancelled rentals are final.
    """
    _, error = await service.change_status(username, rental_uid, new_status)
    if error:
        _raise_for(error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
