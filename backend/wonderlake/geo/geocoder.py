"""Nominatim geocoding client."""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger("wonderlake.geo.geocoder")


class GeocodingError(RuntimeError):
    """Transport failure or non-2xx response from the geocoding service."""


@dataclass(frozen=True)
class GeocodeCandidate:
    latitude: float
    longitude: float
    display_name: str


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @classmethod
    def from_lon_lat(cls, bbox: list[float]) -> "BoundingBox":
        """Build from ``[min_lon, min_lat, max_lon, max_lat]`` (GeoJSON order)."""
        min_lon, min_lat, max_lon, max_lat = bbox
        return cls(min_lat=min_lat, min_lon=min_lon, max_lat=max_lat, max_lon=max_lon)

    def expanded(self, margin_deg: float) -> "BoundingBox":
        return BoundingBox(
            min_lat=self.min_lat - margin_deg,
            min_lon=self.min_lon - margin_deg,
            max_lat=self.max_lat + margin_deg,
            max_lon=self.max_lon + margin_deg,
        )

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon

    def as_viewbox(self) -> str:
        """Nominatim ``viewbox`` parameter: ``<x1>,<y1>,<x2>,<y2>``."""
        return f"{self.min_lon},{self.max_lat},{self.max_lon},{self.min_lat}"


def _parse_candidates(payload) -> list[GeocodeCandidate]:
    candidates = []
    for item in payload or []:
        try:
            candidates.append(
                GeocodeCandidate(
                    latitude=float(item["lat"]),
                    longitude=float(item["lon"]),
                    display_name=str(item.get("display_name", "")),
                )
            )
        except (KeyError, TypeError, ValueError):
            logger.debug(f"Ignoring malformed geocoder result: {item!r}")
    return candidates


class NominatimGeocoder:
    """Resolve one free-text query to candidate coordinates.

    One HTTP request per ``search`` call and no internal retry; sequencing
    and spacing of calls belong to the caller.
    """

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "onewonderlake-address-check/1.1",
        timeout: float = 10.0,
        limit: int = 5,
        bbox_margin_deg: float = 0.05,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.limit = limit
        self.bbox_margin_deg = bbox_margin_deg
        self._transport = transport

    async def search(self, query: str, bbox: Optional[BoundingBox] = None) -> list[GeocodeCandidate]:
        params = {
            "format": "json",
            "q": query,
            "limit": str(self.limit),
            "countrycodes": "us",
        }
        if bbox is not None:
            params["viewbox"] = bbox.as_viewbox()

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        ) as client:
            try:
                response = await client.get(f"{self.base_url}/search", params=params)
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPStatusError as e:
                raise GeocodingError(
                    f"Geocoder returned HTTP {e.response.status_code} for {query!r}"
                ) from e
            except (httpx.HTTPError, ValueError) as e:
                raise GeocodingError(f"Geocoder request failed for {query!r}: {e}") from e

        candidates = _parse_candidates(payload)
        if not candidates or bbox is None:
            return candidates

        area = bbox.expanded(self.bbox_margin_deg)
        nearby = [c for c in candidates if area.contains(c.latitude, c.longitude)]
        return nearby or candidates
