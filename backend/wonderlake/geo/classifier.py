"""Point classification against the village, its neighbours and the service radius."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pyproj import Transformer
from shapely.geometry import Point
from shapely.ops import transform
from shapely.prepared import prep

from wonderlake.geo.boundaries import BoundarySet

METERS_PER_MILE = 1609.344
DEFAULT_SERVICE_RADIUS_MILES = 2.0


class AddressResult(str, Enum):
    """Closed set of address check outcomes."""
    RESIDENT = "resident"
    OTHER_MUNICIPALITY = "other_municipality"
    ANNEXATION = "annexation"
    OUTSIDE_AREA = "outside_area"
    NOT_FOUND = "not_found"

    @property
    def in_service_area(self) -> bool:
        return self in (
            AddressResult.RESIDENT,
            AddressResult.OTHER_MUNICIPALITY,
            AddressResult.ANNEXATION,
        )


@dataclass(frozen=True)
class Classification:
    result: AddressResult
    municipality_name: Optional[str] = None
    # Distance to the village outline; only computed for points outside every polygon
    distance_miles: Optional[float] = None


class SpatialClassifier:
    """Classify WGS84 coordinates against a read-only ``BoundarySet``.

    Distances are measured in an azimuthal equidistant projection centred on
    the village, which keeps error negligible at the scale of the service
    radius.

    Points lying exactly on a polygon edge count as inside that polygon.
    """

    def __init__(
        self,
        boundaries: BoundarySet,
        service_radius_miles: float = DEFAULT_SERVICE_RADIUS_MILES,
    ):
        self.boundaries = boundaries
        self.service_radius_miles = service_radius_miles

        self._village = prep(boundaries.village)
        self._municipalities = [(m.name, prep(m.geometry)) for m in boundaries.municipalities]
        self._zip_codes = [(z.name, prep(z.geometry)) for z in boundaries.zip_codes]

        center = boundaries.village.centroid
        self._to_local = Transformer.from_crs(
            "EPSG:4326",
            f"+proj=aeqd +lat_0={center.y} +lon_0={center.x} +datum=WGS84 +units=m",
            always_xy=True,
        )
        self._village_outline_m = transform(self._to_local.transform, boundaries.village.boundary)

    def _project(self, lat: float, lon: float) -> Point:
        x, y = self._to_local.transform(lon, lat)
        return Point(x, y)

    def distance_to_village_miles(self, lat: float, lon: float) -> float:
        """Distance from the point to the village outline (not its area), in miles."""
        meters = self._village_outline_m.distance(self._project(lat, lon))
        return meters / METERS_PER_MILE

    def is_inside_village(self, lat: float, lon: float) -> bool:
        return self._village.covers(Point(lon, lat))

    def municipality_for(self, lat: float, lon: float) -> Optional[str]:
        """Name of the first neighbouring municipality containing the point."""
        pt = Point(lon, lat)
        for name, geom in self._municipalities:
            if geom.covers(pt):
                return name
        return None

    def zip_code_for(self, lat: float, lon: float) -> Optional[str]:
        pt = Point(lon, lat)
        for name, geom in self._zip_codes:
            if geom.covers(pt):
                return name
        return None

    def classify(self, lat: float, lon: float) -> Classification:
        """Resident, then neighbouring municipality, then service radius test."""
        if self.is_inside_village(lat, lon):
            return Classification(AddressResult.RESIDENT)

        municipality = self.municipality_for(lat, lon)
        if municipality is not None:
            return Classification(AddressResult.OTHER_MUNICIPALITY, municipality_name=municipality)

        distance = self.distance_to_village_miles(lat, lon)
        if distance <= self.service_radius_miles:
            return Classification(AddressResult.ANNEXATION, distance_miles=distance)
        return Classification(AddressResult.OUTSIDE_AREA, distance_miles=distance)
