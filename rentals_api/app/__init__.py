"""
Application package initializer.

This package contains the main entrypoint for the rental service and
its submodules.  Rentals are the only domain owned by this service:
the API layer lives in ``api/v1/endpoints``, business rules in
``services``, persistence in ``repositories`` and the shared
configuration, logging and database plumbing in ``core``.
"""

from .main import app  # noqa: F401
