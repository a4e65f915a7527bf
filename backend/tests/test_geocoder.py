import httpx
import pytest

from wonderlake.geo.geocoder import BoundingBox, GeocodingError, NominatimGeocoder

BBOX = BoundingBox.from_lon_lat([-88.45, 42.30, -88.25, 42.46])

WONDER_LAKE_HIT = {"lat": "42.3853", "lon": "-88.3473", "display_name": "123 Main St, Wonder Lake, IL"}
FAR_HIT = {"lat": "41.8781", "lon": "-87.6298", "display_name": "123 Main St, Chicago, IL"}


def _geocoder(handler, **kwargs):
    return NominatimGeocoder(
        base_url="https://geocoder.test",
        user_agent="onewonderlake-tests",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_bounding_box():
    assert BBOX.min_lat == 42.30 and BBOX.max_lon == -88.25
    assert BBOX.as_viewbox() == "-88.45,42.46,-88.25,42.3"
    assert BBOX.contains(42.38, -88.35)
    assert not BBOX.contains(41.87, -87.62)
    assert BBOX.expanded(0.1).contains(42.52, -88.35)


async def test_search_sends_query_parameters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["user_agent"] = request.headers["user-agent"]
        return httpx.Response(200, json=[WONDER_LAKE_HIT])

    results = await _geocoder(handler, limit=3).search("123 Main St, Wonder Lake, IL", bbox=BBOX)

    assert seen["path"] == "/search"
    assert seen["params"]["q"] == "123 Main St, Wonder Lake, IL"
    assert seen["params"]["format"] == "json"
    assert seen["params"]["limit"] == "3"
    assert seen["params"]["countrycodes"] == "us"
    assert seen["params"]["viewbox"] == BBOX.as_viewbox()
    assert seen["user_agent"] == "onewonderlake-tests"

    assert len(results) == 1
    assert results[0].latitude == pytest.approx(42.3853)
    assert results[0].longitude == pytest.approx(-88.3473)
    assert results[0].display_name == "123 Main St, Wonder Lake, IL"


async def test_candidates_near_the_village_are_preferred():
    def handler(request):
        return httpx.Response(200, json=[FAR_HIT, WONDER_LAKE_HIT])

    results = await _geocoder(handler).search("123 Main St", bbox=BBOX)
    assert [r.display_name for r in results] == ["123 Main St, Wonder Lake, IL"]


async def test_falls_back_to_all_candidates_when_none_nearby():
    def handler(request):
        return httpx.Response(200, json=[FAR_HIT])

    results = await _geocoder(handler).search("123 Main St", bbox=BBOX)
    assert [r.display_name for r in results] == ["123 Main St, Chicago, IL"]


async def test_without_bbox_keeps_provider_order():
    def handler(request):
        assert "viewbox" not in request.url.params
        return httpx.Response(200, json=[FAR_HIT, WONDER_LAKE_HIT])

    results = await _geocoder(handler).search("123 Main St")
    assert [r.display_name for r in results] == [FAR_HIT["display_name"], WONDER_LAKE_HIT["display_name"]]


async def test_malformed_items_are_skipped():
    def handler(request):
        return httpx.Response(200, json=[{"lat": "not-a-number", "lon": "1"}, {"display_name": "x"}, WONDER_LAKE_HIT])

    results = await _geocoder(handler).search("123 Main St")
    assert len(results) == 1


async def test_empty_result():
    results = await _geocoder(lambda request: httpx.Response(200, json=[])).search("nowhere")
    assert results == []


async def test_http_error_status_raises():
    with pytest.raises(GeocodingError, match="HTTP 503"):
        await _geocoder(lambda request: httpx.Response(503)).search("123 Main St")


async def test_invalid_json_raises():
    with pytest.raises(GeocodingError):
        await _geocoder(lambda request: httpx.Response(200, text="<html>")).search("123 Main St")


async def test_network_failure_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeocodingError):
        await _geocoder(handler).search("123 Main St")
