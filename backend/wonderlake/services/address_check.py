"""Address check orchestration: normalize, geocode, classify, suggest."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from wonderlake.geo.classifier import AddressResult, SpatialClassifier
from wonderlake.geo.geocoder import BoundingBox, GeocodeCandidate, GeocodingError, NominatimGeocoder
from wonderlake.geo.normalizer import AddressNormalizer

logger = logging.getLogger("wonderlake.address_check")

DEFAULT_REQUEST_DELAY_SECONDS = 0.1
DEFAULT_MAX_SUGGESTIONS = 5
# Five decimal places is roughly one metre of latitude
DEDUP_PRECISION = 5


class InvalidAddressError(ValueError):
    """Address input rejected before any geocoding call."""


@dataclass(frozen=True)
class SearchRecord:
    """Analytics row describing one terminal outcome."""
    address: str
    result: AddressResult
    municipality_name: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None


Recorder = Callable[[SearchRecord], Awaitable[None]]


@dataclass(frozen=True)
class AddressSuggestion:
    display_name: str
    latitude: float
    longitude: float
    distance_miles: float

    @property
    def street_address(self) -> str:
        """Portion of the display name before its first comma."""
        return self.display_name.split(",", 1)[0].strip()


@dataclass
class AddressCheckOutcome:
    address: str
    result: AddressResult
    municipality_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    display_name: Optional[str] = None
    matched_query: Optional[str] = None
    distance_miles: Optional[float] = None
    suggestions: list[AddressSuggestion] = field(default_factory=list)
    message: Optional[str] = None


class _CallPacer:
    """Spaces consecutive outbound calls within one check."""

    def __init__(self, delay: float, sleep: Callable[[float], Awaitable[None]]):
        self.delay = delay
        self.calls = 0
        self._sleep = sleep

    async def wait(self):
        if self.calls and self.delay > 0:
            await self._sleep(self.delay)
        self.calls += 1


class AddressChecker:
    """Sequence normalizer -> geocoder -> classifier for one address.

    Stops at the first variant that lands inside the service area. When none
    does, re-queries every variant to offer up to ``max_suggestions`` nearby
    alternatives ranked by distance to the village boundary.
    """

    def __init__(
        self,
        geocoder: NominatimGeocoder,
        classifier: SpatialClassifier,
        normalizer: Optional[AddressNormalizer] = None,
        recorder: Optional[Recorder] = None,
        bbox: Optional[BoundingBox] = None,
        request_delay: float = DEFAULT_REQUEST_DELAY_SECONDS,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.geocoder = geocoder
        self.classifier = classifier
        self.normalizer = normalizer or AddressNormalizer()
        self.recorder = recorder
        self.bbox = bbox
        self.request_delay = request_delay
        self.max_suggestions = max_suggestions
        self._sleep = sleep

    @property
    def service_radius_miles(self) -> float:
        return self.classifier.service_radius_miles

    async def _geocode(self, query: str, pacer: _CallPacer) -> list[GeocodeCandidate]:
        await pacer.wait()
        try:
            return await self.geocoder.search(query, bbox=self.bbox)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for variant {query!r}: {e}")
            return []

    async def _record(self, record: SearchRecord) -> None:
        if self.recorder is None:
            return
        try:
            await self.recorder(record)
        except Exception:
            logger.exception(f"Failed to save searched address {record.address!r}")

    async def check(self, raw_address: Optional[str]) -> AddressCheckOutcome:
        address = (raw_address or "").strip()
        if not address:
            raise InvalidAddressError("Please enter an address")

        variants = self.normalizer.variants(address)
        pacer = _CallPacer(self.request_delay, self._sleep)
        fallback: Optional[AddressCheckOutcome] = None

        for variant in variants:
            candidates = await self._geocode(variant, pacer)
            if not candidates:
                continue

            best = candidates[0]
            classification = self.classifier.classify(best.latitude, best.longitude)
            outcome = AddressCheckOutcome(
                address=address,
                result=classification.result,
                municipality_name=classification.municipality_name,
                latitude=best.latitude,
                longitude=best.longitude,
                display_name=best.display_name,
                matched_query=variant,
                distance_miles=classification.distance_miles,
            )

            if classification.result.in_service_area:
                logger.info(f"Address {address!r} resolved via {variant!r}: {classification.result.value}")
                await self._record(self._record_for(outcome))
                return outcome

            if fallback is None:
                fallback = outcome

        suggestions = await self.collect_suggestions(variants, pacer)

        if fallback is not None:
            fallback.suggestions = suggestions
            if suggestions:
                fallback.message = "This address is outside our service area. Did you mean one of these?"
            else:
                fallback.message = (
                    "This address is outside our service area. Please enter an address "
                    f"within {self.service_radius_miles:g} miles of {self.normalizer.town}."
                )
            await self._record(self._record_for(fallback))
            return fallback

        outcome = AddressCheckOutcome(
            address=address,
            result=AddressResult.NOT_FOUND,
            suggestions=suggestions,
            message=(
                "Address not found. Did you mean one of these?"
                if suggestions
                else "Address not found. Please try a different address."
            ),
        )
        await self._record(SearchRecord(address=address, result=AddressResult.NOT_FOUND))
        return outcome

    async def collect_suggestions(
        self,
        variants: list[str],
        pacer: Optional[_CallPacer] = None,
    ) -> list[AddressSuggestion]:
        """Nearby in-range candidates from every variant, closest first."""
        pacer = pacer or _CallPacer(self.request_delay, self._sleep)
        seen: set[tuple[float, float]] = set()
        suggestions: list[AddressSuggestion] = []

        for variant in variants:
            for candidate in await self._geocode(variant, pacer):
                key = (
                    round(candidate.latitude, DEDUP_PRECISION),
                    round(candidate.longitude, DEDUP_PRECISION),
                )
                if key in seen:
                    continue
                seen.add(key)

                if self.classifier.is_inside_village(candidate.latitude, candidate.longitude):
                    distance = 0.0
                else:
                    distance = self.classifier.distance_to_village_miles(
                        candidate.latitude, candidate.longitude
                    )
                if distance > self.service_radius_miles:
                    continue

                suggestions.append(
                    AddressSuggestion(
                        display_name=candidate.display_name,
                        latitude=candidate.latitude,
                        longitude=candidate.longitude,
                        distance_miles=distance,
                    )
                )

        suggestions.sort(key=lambda s: s.distance_miles)
        return suggestions[: self.max_suggestions]

    async def check_suggestion(self, suggestion: AddressSuggestion) -> AddressCheckOutcome:
        """Classify a suggestion the user picked, without geocoding again."""
        classification = self.classifier.classify(suggestion.latitude, suggestion.longitude)
        outcome = AddressCheckOutcome(
            address=suggestion.street_address or suggestion.display_name,
            result=classification.result,
            municipality_name=classification.municipality_name,
            latitude=suggestion.latitude,
            longitude=suggestion.longitude,
            display_name=suggestion.display_name,
            distance_miles=classification.distance_miles,
        )
        await self._record(self._record_for(outcome))
        return outcome

    @staticmethod
    def _record_for(outcome: AddressCheckOutcome) -> SearchRecord:
        return SearchRecord(
            address=outcome.address,
            result=outcome.result,
            municipality_name=outcome.municipality_name,
            latitude=None if outcome.latitude is None else str(outcome.latitude),
            longitude=None if outcome.longitude is None else str(outcome.longitude),
        )
