"""Utilities for transforming Google Places responses into place records."""

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from place_extractor.models import Coordinates, PlaceDetail, PlaceRecord, SearchSummary

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
UNKNOWN_ADDRESS = "Address unavailable"
MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query={lat},{lng}&query_place_id={place_id}"


def parse_coordinates(geometry: Optional[Dict[str, Any]]) -> Optional[Coordinates]:
    location = (geometry or {}).get("location") or {}
    lat = location.get("lat")
    lng = location.get("lng")
    if lat is None or lng is None:
        return None
    return Coordinates(lat=lat, lng=lng)


def _parse_types(types: Optional[Iterable[str]]) -> Optional[Tuple[str, ...]]:
    if types is None:
        return None
    return tuple(types)


def to_summary(result: Dict[str, Any]) -> Optional[SearchSummary]:
    """Build a SearchSummary from a Text Search result, or None when it has no place_id."""
    place_id = result.get("place_id")
    if not place_id:
        logger.debug("Skipping result without place_id: %s", result)
        return None

    return SearchSummary(
        place_id=place_id,
        name=result.get("name"),
        address=result.get("formatted_address"),
        business_status=result.get("business_status"),
        coordinates=parse_coordinates(result.get("geometry")),
        types=_parse_types(result.get("types")),
    )


def to_detail(result: Dict[str, Any]) -> PlaceDetail:
    return PlaceDetail(
        name=result.get("name"),
        formatted_phone=result.get("formatted_phone_number"),
        international_phone=result.get("international_phone_number"),
        address=result.get("formatted_address"),
        url=result.get("url"),
        website=result.get("website"),
        business_status=result.get("business_status"),
        coordinates=parse_coordinates(result.get("geometry")),
        types=_parse_types(result.get("types")),
    )


def _first(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def build_maps_url(coordinates: Optional[Coordinates], place_id: str) -> Optional[str]:
    if coordinates is None:
        return None
    return MAPS_SEARCH_URL.format(lat=coordinates.lat, lng=coordinates.lng, place_id=place_id)


def merge_record(summary: SearchSummary, detail: Optional[PlaceDetail]) -> PlaceRecord:
    """Merge a summary with its (possibly absent) detail.

    Detail values win when present and non-empty, then summary values, then the
    sentinels for name and address. Phone and website only ever come from the
    detail lookup.
    """
    detail = detail or PlaceDetail()
    coordinates = detail.coordinates or summary.coordinates

    return PlaceRecord(
        name=_first(detail.name, summary.name) or UNKNOWN_NAME,
        address=_first(detail.address, summary.address) or UNKNOWN_ADDRESS,
        phone=_first(detail.formatted_phone, detail.international_phone),
        maps_url=_first(detail.url) or build_maps_url(coordinates, summary.place_id),
        website=_first(detail.website),
        coordinates=coordinates,
        business_status=_first(detail.business_status, summary.business_status),
        types=_first(detail.types, summary.types),
    )


def to_result_row(record: PlaceRecord) -> Dict[str, Any]:
    """Render a record in the JSON shape returned to callers; absent fields are omitted."""
    row: Dict[str, Any] = {
        "name": record.name,
        "formattedAddress": record.address,
        "phoneNumber": record.phone,
        "googleMapsUrl": record.maps_url,
        "website": record.website,
        "latitude": record.coordinates.lat if record.coordinates else None,
        "longitude": record.coordinates.lng if record.coordinates else None,
        "businessStatus": record.business_status,
        "types": list(record.types) if record.types is not None else None,
    }
    return {key: value for key, value in row.items() if value is not None}
