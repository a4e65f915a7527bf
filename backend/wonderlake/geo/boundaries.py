"""Static boundary polygons bundled with the application.

The village boundary, the neighbouring municipalities and the ZIP-code
overlay are GeoJSON FeatureCollections loaded once at startup and treated
as read-only for the life of the process.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

logger = logging.getLogger("wonderlake.geo.boundaries")

VILLAGE_FILE = "village_boundary.geojson"
MUNICIPALITIES_FILE = "neighboring_municipalities.geojson"
ZIP_CODES_FILE = "zip_codes.geojson"

MUNICIPALITY_NAME_PROPERTY = "CORPNAME"
ZIP_CODE_PROPERTIES = ("ZCTA5CE10", "ZCTA5CE20", "ZIP", "zip")

# Public layer names used by the boundaries endpoint
LAYER_FILES = {
    "village": VILLAGE_FILE,
    "municipalities": MUNICIPALITIES_FILE,
    "zip-codes": ZIP_CODES_FILE,
}


@dataclass(frozen=True)
class NamedBoundary:
    """A named polygon such as a neighbouring municipality or a ZIP code area."""
    name: str
    geometry: BaseGeometry


@dataclass(frozen=True)
class BoundarySet:
    """Immutable collection of every polygon the classifier needs."""
    village: BaseGeometry
    municipalities: tuple[NamedBoundary, ...]
    zip_codes: tuple[NamedBoundary, ...] = ()
    # Raw FeatureCollections, served unchanged to the map views
    documents: Optional[dict[str, dict[str, Any]]] = None


def read_feature_collection(path: Union[str, Path]) -> dict[str, Any]:
    """Read and minimally validate a GeoJSON FeatureCollection."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if data.get("type") != "FeatureCollection":
        raise ValueError(f"{path} is not a GeoJSON FeatureCollection")
    return data


def _polygonal(feature: dict[str, Any]) -> Optional[BaseGeometry]:
    geom_data = feature.get("geometry")
    if not geom_data:
        return None

    geom = shape(geom_data)
    if geom.geom_type not in ("Polygon", "MultiPolygon"):
        logger.warning(f"Skipping non-polygon feature of type {geom.geom_type}")
        return None
    if not geom.is_valid:
        logger.warning("Boundary polygon is not valid; repairing with a zero-width buffer")
        geom = geom.buffer(0)
    return geom


def _named_boundaries(data: dict[str, Any], name_keys: tuple[str, ...]) -> tuple[NamedBoundary, ...]:
    boundaries = []
    for feature in data.get("features", []):
        geom = _polygonal(feature)
        if geom is None:
            continue

        props = feature.get("properties") or {}
        name = next((str(props[k]) for k in name_keys if props.get(k)), None)
        if name is None:
            logger.warning(f"Skipping boundary feature without any of {name_keys}")
            continue
        boundaries.append(NamedBoundary(name=name, geometry=geom))
    return tuple(boundaries)


def load_boundaries(data_dir: Union[str, Path]) -> BoundarySet:
    """Load the village, municipality and ZIP overlays from ``data_dir``.

    Municipalities keep their file order, which is the order the classifier
    tests them in. A missing ZIP overlay is tolerated; the other two files
    are required.
    """
    data_dir = Path(data_dir)

    village_doc = read_feature_collection(data_dir / VILLAGE_FILE)
    village_parts = [g for g in (_polygonal(f) for f in village_doc.get("features", [])) if g is not None]
    if not village_parts:
        raise ValueError(f"No village polygon found in {data_dir / VILLAGE_FILE}")
    village = unary_union(village_parts)

    municipalities_doc = read_feature_collection(data_dir / MUNICIPALITIES_FILE)
    municipalities = _named_boundaries(municipalities_doc, (MUNICIPALITY_NAME_PROPERTY,))

    documents = {"village": village_doc, "municipalities": municipalities_doc}

    zip_codes: tuple[NamedBoundary, ...] = ()
    zip_path = data_dir / ZIP_CODES_FILE
    if zip_path.exists():
        zip_doc = read_feature_collection(zip_path)
        zip_codes = _named_boundaries(zip_doc, ZIP_CODE_PROPERTIES)
        documents["zip-codes"] = zip_doc

    logger.info(
        f"Loaded boundaries from {data_dir}: "
        f"{len(municipalities)} municipalities, {len(zip_codes)} ZIP areas"
    )
    return BoundarySet(
        village=village,
        municipalities=municipalities,
        zip_codes=zip_codes,
        documents=documents,
    )
