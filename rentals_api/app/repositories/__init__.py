"""Persistence layer for rental records."""

from .rental_repository import RentalRepository, SqliteRentalRepository  # noqa: F401
