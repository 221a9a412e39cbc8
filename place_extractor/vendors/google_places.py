"""Client utilities for the Google Places API."""

import logging
import threading
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_LOCAL = threading.local()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_TIMEOUT = 10

DETAIL_FIELDS = (
    "name,formatted_phone_number,international_phone_number,formatted_address,"
    "url,website,business_status,geometry,types"
)
QUOTA_EXCEEDED_MESSAGE = "Google Places quota exceeded. Wait before trying again or adjust your API usage."
_DENIED_STATUSES = {"REQUEST_DENIED", "INVALID_REQUEST"}


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


class PlacesTransportError(GooglePlacesError):
    """Raised when the search endpoint answers with a non-2xx HTTP status."""


class PlacesRateLimitError(GooglePlacesError):
    """Raised when the Places API reports OVER_QUERY_LIMIT."""

    def __init__(self, message: str = QUOTA_EXCEEDED_MESSAGE) -> None:
        super().__init__(message)


class PlacesRequestDeniedError(GooglePlacesError):
    """Raised when the Places API rejects the request (bad key, malformed query)."""


def _get_session() -> requests.Session:
    """Return the calling thread's session; requests does not guarantee Session is thread-safe."""
    session = getattr(_LOCAL, "session", None)
    if session is None:
        session = requests.Session()
        _LOCAL.session = session
    return session


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def _decode(response: requests.Response, endpoint: str) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        logger.error("%s returned a non-JSON body", endpoint)
        raise GooglePlacesError(f"{endpoint} returned a malformed response") from exc
    if not isinstance(payload, dict):
        raise GooglePlacesError(f"{endpoint} returned a malformed response")
    return payload


def text_search(query: str, api_key: str, pagetoken: Optional[str] = None) -> Dict[str, Any]:
    """Fetch one Text Search page.

    ZERO_RESULTS is returned as a normal payload with an empty ``results`` list.
    """
    params = {"query": query, "key": api_key}
    if pagetoken:
        params["pagetoken"] = pagetoken
    response = _get_session().get(f"{_BASE_URL}/textsearch/json", params=params, timeout=_TIMEOUT)
    if not _is_success(response):
        logger.error("text_search failed: http_status=%s", response.status_code)
        raise PlacesTransportError(f"Text search failed with status {response.status_code}")

    payload = _decode(response, "Text search")
    status = payload.get("status")
    if status in {"OK", "ZERO_RESULTS"}:
        return payload

    error_message = payload.get("error_message")
    logger.error("text_search failed: status=%s, error_message=%s", status, error_message)
    if status == "OVER_QUERY_LIMIT":
        raise PlacesRateLimitError()
    if status in _DENIED_STATUSES:
        raise PlacesRequestDeniedError(error_message or f"Request denied: {status}")
    raise GooglePlacesError(error_message or f"Unexpected status: {status}")


def place_details(place_id: str, api_key: str) -> Optional[Dict[str, Any]]:
    """Fetch the detail payload for ``place_id``.

    Returns None when the place is unknown or the HTTP call was not successful;
    detail enrichment is best-effort.
    """
    params = {"place_id": place_id, "key": api_key, "fields": DETAIL_FIELDS}
    response = _get_session().get(f"{_BASE_URL}/details/json", params=params, timeout=_TIMEOUT)
    if not _is_success(response):
        logger.warning("place_details http_status=%s for %s", response.status_code, place_id)
        return None

    payload = _decode(response, "Place details")
    status = payload.get("status")
    if status == "OK":
        return payload.get("result") or {}
    if status in {"NOT_FOUND", "ZERO_RESULTS"}:
        logger.debug("place_details returned %s for %s", status, place_id)
        return None

    error_message = payload.get("error_message")
    logger.error("place_details failed: status=%s, error_message=%s", status, error_message)
    if status == "OVER_QUERY_LIMIT":
        raise PlacesRateLimitError()
    if status in _DENIED_STATUSES:
        raise PlacesRequestDeniedError(error_message or f"Request denied: {status}")
    raise GooglePlacesError(error_message or f"Google Places Details returned status {status}")
