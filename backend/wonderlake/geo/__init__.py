"""Address classification pipeline exports."""
from wonderlake.geo.boundaries import BoundarySet, NamedBoundary, load_boundaries
from wonderlake.geo.classifier import AddressResult, Classification, SpatialClassifier
from wonderlake.geo.geocoder import BoundingBox, GeocodeCandidate, GeocodingError, NominatimGeocoder
from wonderlake.geo.normalizer import AddressNormalizer, address_variants

__all__ = [
    "BoundarySet",
    "NamedBoundary",
    "load_boundaries",
    "AddressResult",
    "Classification",
    "SpatialClassifier",
    "BoundingBox",
    "GeocodeCandidate",
    "GeocodingError",
    "NominatimGeocoder",
    "AddressNormalizer",
    "address_variants",
]
