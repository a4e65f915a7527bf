"""Validate the bundled boundary GeoJSON and classify sample points against it.

    python scripts/check_boundaries.py
    python scripts/check_boundaries.py --point 42.38 -88.35 --point 42.42 -88.30
"""
import os
import sys

# Add app to path
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from wonderlake.config import get_settings
from wonderlake.geo.boundaries import load_boundaries
from wonderlake.geo.classifier import SpatialClassifier

settings = get_settings()


def check_boundaries(data_dir, points):
    boundaries = load_boundaries(data_dir)
    village = boundaries.village

    print(f"Village: area {village.area:.6f} deg^2, valid={village.is_valid}")
    minx, miny, maxx, maxy = village.bounds
    print(f"  bounds lon {minx:.5f}..{maxx:.5f}, lat {miny:.5f}..{maxy:.5f}")

    print(f"Municipalities: {len(boundaries.municipalities)}")
    for municipality in boundaries.municipalities:
        overlap = municipality.geometry.intersection(village).area
        flag = "  [!] overlaps village" if overlap > 0 else ""
        print(f"  {municipality.name}{flag}")

    print(f"ZIP codes: {', '.join(z.name for z in boundaries.zip_codes) or '(none)'}")

    if not points:
        return

    classifier = SpatialClassifier(boundaries, settings.SERVICE_RADIUS_MILES)
    print("\n=== Sample points ===")
    for lat, lon in points:
        classification = classifier.classify(lat, lon)
        distance = classifier.distance_to_village_miles(lat, lon)
        print(
            f"  ({lat}, {lon}) -> {classification.result.value}"
            f" municipality={classification.municipality_name}"
            f" zip={classifier.zip_code_for(lat, lon)}"
            f" distance={distance:.2f} mi"
        )


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Validate boundary data")
    parser.add_argument(
        "--data-dir",
        default=str(settings.BOUNDARY_DATA_DIR),
        help="Directory holding the boundary GeoJSON files"
    )
    parser.add_argument(
        "--point",
        nargs=2,
        type=float,
        action="append",
        metavar=("LAT", "LON"),
        help="Classify a point (repeatable)"
    )

    args = parser.parse_args()
    check_boundaries(args.data_dir, args.point or [])
