"""Core data models shared by the Places search pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class SearchSummary:
    """Lightweight entry returned by a Text Search page, before enrichment."""

    place_id: str
    name: Optional[str] = None
    address: Optional[str] = None
    business_status: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    types: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True, slots=True)
class PlaceDetail:
    """Attributes returned by a Place Details lookup for a single place."""

    name: Optional[str] = None
    formatted_phone: Optional[str] = None
    international_phone: Optional[str] = None
    address: Optional[str] = None
    url: Optional[str] = None
    website: Optional[str] = None
    business_status: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    types: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True, slots=True)
class PlaceRecord:
    """Normalized, export-ready snapshot of a place."""

    name: str
    address: str
    phone: Optional[str] = None
    maps_url: Optional[str] = None
    website: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    business_status: Optional[str] = None
    types: Optional[Tuple[str, ...]] = None
