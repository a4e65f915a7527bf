import pytest

from wonderlake.geo.classifier import AddressResult
from wonderlake.geo.normalizer import address_variants
from wonderlake.services.address_check import AddressChecker, AddressSuggestion, InvalidAddressError

from conftest import (
    ANNEX_FAR,
    ANNEX_NEAR,
    FAR_AWAY,
    GREENWOOD,
    OUTSIDE,
    RESIDENT,
    FakeGeocoder,
    candidate,
)

ADDRESS = "123 Main St"
VARIANTS = address_variants(ADDRESS)


class Harness:
    def __init__(self, classifier, responses=None, failing=(), recorder_error=None, **kwargs):
        self.geocoder = FakeGeocoder(responses, failing)
        self.records = []
        self.sleeps = []
        self.recorder_error = recorder_error
        self.checker = AddressChecker(
            geocoder=self.geocoder,
            classifier=classifier,
            recorder=self.record,
            sleep=self.sleep,
            **kwargs,
        )

    async def record(self, search):
        if self.recorder_error:
            raise self.recorder_error
        self.records.append(search)

    async def sleep(self, seconds):
        self.sleeps.append(seconds)


async def test_first_in_area_variant_wins(classifier):
    h = Harness(classifier, {VARIANTS[0]: [candidate(RESIDENT)]})

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.RESIDENT
    assert outcome.matched_query == VARIANTS[0]
    assert outcome.suggestions == []
    assert h.geocoder.calls == [VARIANTS[0]]
    assert h.sleeps == []
    assert len(h.records) == 1
    assert h.records[0].result is AddressResult.RESIDENT
    assert h.records[0].latitude == str(RESIDENT[0])
    assert h.records[0].longitude == str(RESIDENT[1])


async def test_empty_variants_are_skipped_with_spacing(classifier):
    h = Harness(classifier, {VARIANTS[2]: [candidate(ANNEX_NEAR)]}, request_delay=0.1)

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.ANNEXATION
    assert outcome.matched_query == VARIANTS[2]
    assert h.geocoder.calls == VARIANTS[:3]
    assert h.sleeps == [0.1, 0.1]


async def test_other_municipality_stops_search(classifier):
    h = Harness(classifier, {VARIANTS[0]: [candidate(GREENWOOD)]})

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.OTHER_MUNICIPALITY
    assert outcome.municipality_name == "GREENWOOD"
    assert h.records[0].municipality_name == "GREENWOOD"


async def test_only_first_candidate_is_classified(classifier):
    # a nearby second candidate does not rescue an out-of-area first candidate
    h = Harness(classifier, {VARIANTS[0]: [candidate(FAR_AWAY), candidate(RESIDENT)]})

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.OUTSIDE_AREA


async def test_geocoder_failure_counts_as_no_result(classifier):
    h = Harness(classifier, {VARIANTS[1]: [candidate(RESIDENT)]}, failing=[VARIANTS[0]])

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.RESIDENT
    assert outcome.matched_query == VARIANTS[1]


async def test_outside_area_with_ranked_suggestions(classifier):
    h = Harness(classifier, {
        VARIANTS[0]: [
            candidate(FAR_AWAY, "far"),
            candidate(ANNEX_FAR, "annex far"),
            candidate(ANNEX_NEAR, "annex near"),
            candidate(OUTSIDE, "outside"),
        ],
        VARIANTS[3]: [candidate(OUTSIDE, "outside again"), candidate(RESIDENT, "resident")],
    })

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.OUTSIDE_AREA
    assert outcome.latitude == FAR_AWAY[0]
    assert outcome.message == "This address is outside our service area. Did you mean one of these?"
    assert [s.display_name for s in outcome.suggestions] == ["resident", "annex near", "annex far"]
    assert outcome.suggestions[0].distance_miles == 0.0
    distances = [s.distance_miles for s in outcome.suggestions]
    assert distances == sorted(distances)
    assert all(d <= 2.0 for d in distances)

    assert len(h.records) == 1
    assert h.records[0].result is AddressResult.OUTSIDE_AREA


async def test_outside_area_without_suggestions(classifier):
    h = Harness(classifier, {VARIANTS[0]: [candidate(FAR_AWAY)]})

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.OUTSIDE_AREA
    assert outcome.suggestions == []
    assert outcome.message == (
        "This address is outside our service area. "
        "Please enter an address within 2 miles of Wonder Lake."
    )


async def test_not_found(classifier):
    h = Harness(classifier)

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.NOT_FOUND
    assert outcome.latitude is None
    assert outcome.message == "Address not found. Please try a different address."
    # every variant is tried once for a match and once for suggestions
    assert h.geocoder.calls == VARIANTS + VARIANTS
    assert len(h.sleeps) == len(h.geocoder.calls) - 1
    assert len(h.records) == 1
    assert h.records[0].result is AddressResult.NOT_FOUND
    assert h.records[0].latitude is None


async def test_suggestions_are_capped_and_deduplicated(classifier):
    nearby = [candidate((42.38, -88.325 + i * 0.001), f"near {i}") for i in range(7)]
    duplicate = candidate((42.380001, -88.325), "same place")
    h = Harness(
        classifier,
        {VARIANTS[0]: [candidate(FAR_AWAY)] + nearby + [duplicate]},
        max_suggestions=5,
    )

    outcome = await h.checker.check(ADDRESS)

    assert [s.display_name for s in outcome.suggestions] == [f"near {i}" for i in range(5)]


@pytest.mark.parametrize("raw", ["", "   ", None])
async def test_blank_address_is_rejected_without_calls(classifier, raw):
    h = Harness(classifier)

    with pytest.raises(InvalidAddressError, match="Please enter an address"):
        await h.checker.check(raw)

    assert h.geocoder.calls == []
    assert h.records == []


async def test_recorder_failure_does_not_fail_check(classifier):
    h = Harness(
        classifier,
        {VARIANTS[0]: [candidate(RESIDENT)]},
        recorder_error=RuntimeError("database down"),
    )

    outcome = await h.checker.check(ADDRESS)

    assert outcome.result is AddressResult.RESIDENT


async def test_check_suggestion_uses_street_portion(classifier):
    h = Harness(classifier)
    suggestion = AddressSuggestion(
        display_name="4512 E Lake Shore Dr, Wonder Lake, McHenry County, Illinois, 60097",
        latitude=RESIDENT[0],
        longitude=RESIDENT[1],
        distance_miles=0.0,
    )

    outcome = await h.checker.check_suggestion(suggestion)

    assert outcome.address == "4512 E Lake Shore Dr"
    assert outcome.result is AddressResult.RESIDENT
    assert h.geocoder.calls == []
    assert h.records[0].address == "4512 E Lake Shore Dr"
