from urllib.parse import quote

import pytest

from dispatch_eta.exceptions import RouteUnavailable
from dispatch_eta.services.geospatial import GreatCircleEstimator, haversine_km
from dispatch_eta.services.routing.chain import RouteProviderChain
from dispatch_eta.services.routing.stages import ESTIMATED_LABEL, MATRIX_LABEL, build_default_stages

from conftest import BELAPUR, NERUL

ORIGIN = "Store A, Sector 10, Navi Mumbai"
DESTINATION = "Flat 402, Tower B, Sector 20, Navi Mumbai, India"


def _chain(config, client) -> RouteProviderChain:
    stages, fallback = build_default_stages(config, client)
    return RouteProviderChain(stages, fallback, address_suffix=config.address_suffix)


def test_haversine_known_distance():
    # Mumbai CST to Pune station, roughly 120 km as the crow flies
    assert haversine_km(18.9398, 72.8355, 18.5289, 73.8744) == pytest.approx(119.0, abs=2.0)


def test_great_circle_estimator_defaults():
    estimator = GreatCircleEstimator()
    distance_km, minutes = estimator.estimate(BELAPUR, NERUL)

    expected_km = haversine_km(BELAPUR.lat, BELAPUR.lng, NERUL.lat, NERUL.lng) * 1.4
    assert distance_km == pytest.approx(expected_km)
    assert minutes == round(expected_km / 30 * 60)


def test_precise_stage_wins(routing_config, fake_google):
    fake_google.routes_payload = {
        "routes": [
            {"duration": "4500s", "distanceMeters": 12345, "description": "Palm Beach Rd"},
            {"duration": "5200s", "distanceMeters": 11000, "description": "Sion-Panvel Hwy"},
        ]
    }

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.estimated is False
    assert result.stage == "precise"
    assert result.provider_label == "Palm Beach Rd"
    assert result.distance_text == "12.3 km"
    assert result.duration_text == "1 hr 15 mins"
    assert result.duration_seconds == 4500
    assert "directions" not in fake_google.calls


def test_precise_stage_falls_back_to_generic_label(routing_config, fake_google):
    fake_google.routes_payload = {"routes": [{"duration": "600s", "distanceMeters": 2500}]}

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.provider_label
    assert result.duration_text == "10 mins"


def test_malformed_precise_route_falls_through_to_directions(routing_config, fake_google):
    fake_google.routes_payload = {"routes": [{"description": "no numbers"}]}
    fake_google.directions_payload = {
        "status": "OK",
        "routes": [
            {
                "summary": "Palm Beach Rd",
                "legs": [
                    {
                        "distance": {"value": 5400, "text": "5.4 km"},
                        "duration": {"value": 1500, "text": "25 mins"},
                        "duration_in_traffic": {"value": 2000, "text": "33 mins"},
                    }
                ],
            }
        ],
    }

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.stage == "directions"
    assert result.estimated is False
    assert result.duration_seconds == round(2000 * 0.95)
    assert result.duration_text == "32 mins"
    assert result.distance_text == "5.4 km"


def test_matrix_stage_applies_speed_adjustment(routing_config, fake_google):
    fake_google.matrix_payload = {
        "status": "OK",
        "rows": [
            {
                "elements": [
                    {
                        "status": "OK",
                        "distance": {"value": 6100, "text": "6.1 km"},
                        "duration": {"value": 1100, "text": "18 mins"},
                        "duration_in_traffic": {"value": 1234, "text": "21 mins"},
                    }
                ]
            }
        ],
    }

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.stage == "matrix"
    assert result.estimated is False
    assert result.provider_label == MATRIX_LABEL
    assert result.duration_seconds == round(1234 * 0.95)
    assert result.distance_text == "6.1 km"
    assert result.duration_text == "21 mins"
    assert fake_google.calls.count("routes") == 1
    assert fake_google.calls.count("directions") == 1


def test_matrix_element_not_found_falls_back_to_estimate(routing_config, fake_google):
    fake_google.matrix_payload = {"status": "OK", "rows": [{"elements": [{"status": "ZERO_RESULTS"}]}]}

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.estimated is True


def test_all_live_stages_fail_uses_geometric_estimate(routing_config, fake_google):
    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    distance_km = haversine_km(BELAPUR.lat, BELAPUR.lng, NERUL.lat, NERUL.lng) * 1.4
    assert result.estimated is True
    assert result.provider_label == ESTIMATED_LABEL
    assert result.distance_meters == pytest.approx(distance_km * 1000)
    assert result.duration_seconds == round(distance_km / 30 * 60) * 60
    assert result.resolved_origin == BELAPUR.formatted_address
    assert result.resolved_destination == NERUL.formatted_address
    assert quote(BELAPUR.formatted_address, safe="") in result.map_link_url
    assert quote(NERUL.formatted_address, safe="") in result.map_link_url
    assert "travelmode=driving" in result.map_link_url


def test_map_link_is_driving_even_for_two_wheeler_routes(routing_config, fake_google):
    fake_google.routes_payload = {"routes": [{"duration": "900s", "distanceMeters": 4000}]}

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.stage == "precise"
    assert result.map_link_url.startswith("https://www.google.com/maps/dir/?api=1&")
    assert result.map_link_url.endswith("travelmode=driving")


def test_non_routable_address_skips_live_providers(routing_config, fake_google):
    fake_google.routes_payload = {"routes": [{"duration": "900s", "distanceMeters": 4000}]}
    fake_google.places["Belapur"] = BELAPUR

    result = _chain(routing_config, fake_google).resolve("Belapur", DESTINATION)

    assert result.estimated is True
    assert fake_google.calls == ["geocode", "geocode"]


def test_geocode_failure_everywhere_is_terminal(routing_config, fake_google):
    fake_google.places = {"Sector 10": BELAPUR}

    with pytest.raises(RouteUnavailable) as excinfo:
        _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    message = str(excinfo.value)
    assert "precise" in message
    assert "estimate" in message
    assert "routes" not in fake_google.calls


def test_stages_geocode_independently(routing_config, fake_google):
    _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    # Two lookups per stage, four stages.
    assert fake_google.calls.count("geocode") == 8


def test_null_route_entry_falls_through(routing_config, fake_google):
    fake_google.routes_payload = {"routes": [None]}

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.estimated is True
    assert fake_google.calls.count("directions") == 1


def test_infinite_duration_falls_through(routing_config, fake_google):
    fake_google.routes_payload = {"routes": [{"duration": "1e400s", "distanceMeters": 4000}]}

    result = _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert result.stage != "precise"
    assert result.estimated is True


def test_unexpected_geocoder_error_is_a_stage_failure(routing_config, fake_google, monkeypatch):
    def broken(address):
        fake_google.calls.append("geocode")
        raise RuntimeError("socket closed")

    monkeypatch.setattr(fake_google, "geocode", broken)

    with pytest.raises(RouteUnavailable) as excinfo:
        _chain(routing_config, fake_google).resolve(ORIGIN, DESTINATION)

    assert "socket closed" in str(excinfo.value)
    assert fake_google.calls.count("geocode") == 4
