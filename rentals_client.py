"""Rentals API client.

This module defines a small client wrapper around the rental service's
REST API.  The gateway and other services of the car‑rental system use
it instead of building URLs by hand.  The client uses the ``requests``
library internally and always sends requests with a bounded timeout.

The client exposes high‑level methods for every rental operation:

* :meth:`list_rentals` – return all rentals of a user.
* :meth:`get_rental` – fetch a single rental of a user.
* :meth:`create_rental` – book a car.
* :meth:`change_status` – move a rental to another lifecycle status.
* :meth:`health` – call the liveness probe.

Every method returns a tuple ``(data, error)``.  On success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary with
keys ``status_code`` (``None`` when the service could not be reached)
and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import requests


logger = logging.getLogger(__name__)

ApiError = Dict[str, Any]


class RentalsClient:
    """Client for the rental service."""

    def __init__(
        self,
        *,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://rentals:8060``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[ApiError], Optional[requests.Response]]:
        """Perform an HTTP request against the service.

        Returns ``(data, error, response)``.  ``data`` holds the parsed
        JSON body (or ``None`` for empty bodies) and ``response`` the raw
        response so callers can read headers.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None, response
            return None, None, response
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("Rentals API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": str(message)}, exc.response
        except requests.RequestException as exc:
            logger.error("Rentals API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}, None

    # ------------------------------------------------------------------
    # Rental operations
    # ------------------------------------------------------------------
    def list_rentals(self, username: str) -> Tuple[List[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve every rental of ``username``."""
        data, error, _ = self._request("GET", "/api/v1/rental", params={"X-User-Name": username})
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    def get_rental(
        self, username: str, rental_uid: UUID | str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Retrieve a single rental; a 404 error means it is not ``username``'s."""
        data, error, _ = self._request(
            "GET", f"/api/v1/rental/{rental_uid}", params={"X-User-Name": username}
        )
        if error:
            return None, error
        return data, None

    def create_rental(
        self, payload: Dict[str, Any]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ApiError]]:
        """Book a car.

        Args:
            payload: Body with ``username``, ``carUid``, ``paymentUid``,
                ``dateFrom``, ``dateTo`` and optionally ``rentalUid``.
        Returns:
            A tuple ``(rental, error)``.  The rental dictionary gains a
            ``location`` key with the value of the ``Location`` header.
        """
        data, error, response = self._request("POST", "/api/v1/rental", json_body=payload)
        if error:
            return None, error
        if isinstance(data, dict) and response is not None and "Location" in response.headers:
            data["location"] = response.headers["Location"]
        return data, None

    def change_status(
        self, username: str, rental_uid: UUID | str, status: str
    ) -> Tuple[bool, Optional[ApiError]]:
        """Change the status of a rental.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error, _ = self._request("PATCH", f"/api/v1/rental/{username}/{rental_uid}/{status}")
        if error:
            return False, error
        return True, None

    def finish_rental(self, username: str, rental_uid: UUID | str) -> Tuple[bool, Optional[ApiError]]:
        return self.change_status(username, rental_uid, "FINISHED")

    def cancel_rental(self, username: str, rental_uid: UUID | str) -> Tuple[bool, Optional[ApiError]]:
        return self.change_status(username, rental_uid, "CANCELLED")

    def health(self) -> Tuple[bool, Optional[ApiError]]:
        data, error, _ = self._request("GET", "/api/v1/manage/health")
        if error:
            return False, error
        return bool(data) and data.get("status") == "OK", None
