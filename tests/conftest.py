"""
pytest configuration and shared fixtures.

Every test gets its own SQLite file under ``tmp_path`` so tests never
share rental records.
"""
from pathlib import Path
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from rentals_api.app.core.db import init_db
from rentals_api.app.main import create_app
from rentals_api.app.repositories.rental_repository import SqliteRentalRepository
from rentals_api.app.services.rental_service import RentalService


CAR_UID = UUID("109b42f3-198d-4c89-9276-a7520a7120ab")
PAYMENT_UID = UUID("238c733c-48d3-4ad8-8ec4-d6cc4c1f9d6c")


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Path of a migrated, empty rental database."""
    path = str(tmp_path / "test_rentals.db")
    init_db(path)
    return path


@pytest.fixture
def repository(db_path: str) -> SqliteRentalRepository:
    return SqliteRentalRepository(db_path)


@pytest.fixture
def service(repository: SqliteRentalRepository) -> RentalService:
    return RentalService(repository)


@pytest.fixture
def app(tmp_path: Path):
    return create_app(str(tmp_path / "api_rentals.db"))


@pytest.fixture
def client(app):
    """Test client with startup (migrations) and shutdown events applied."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def booking_payload() -> dict:
    """Body of a valid ``POST /api/v1/rental`` request."""
    return {
        "username": "alice",
        "carUid": str(CAR_UID),
        "paymentUid": str(PAYMENT_UID),
        "dateFrom": "2024-01-01T00:00:00Z",
        "dateTo": "2024-01-05T00:00:00Z",
    }


@pytest.fixture
def car_uid() -> UUID:
    return CAR_UID


@pytest.fixture
def payment_uid() -> UUID:
    return PAYMENT_UID
