"""Tests for the interactive map session."""

from unittest.mock import MagicMock

import pytest

from riskatlas.geo_utils import Coordinate, InvalidCoordinateError, SelectedLocation
from riskatlas.geocode.client import GeocodingError
from riskatlas.risk.profiles import RiskLevel
from riskatlas.session import LAYER_NOTICES, MapSession, format_location_report


@pytest.fixture
def session(resolver):
    return MapSession(resolver=resolver)


@pytest.fixture
def geocoder(daet_location):
    """Mock NominatimClient returning Daet for searches."""
    mock = MagicMock()
    mock.search.return_value = daet_location
    mock.reverse.side_effect = lambda coord: SelectedLocation(coord, "Legazpi, Albay, Philippines")
    return mock


class TestSelection:

    def test_starts_empty(self, session):
        assert session.selected is None
        assert session.profile() is None
        assert session.location_report() is None

    def test_select_overwrites(self, session):
        session.select(14.5995, 120.9842, "Manila")
        session.select(13.1391, 123.7438, "Legazpi")
        assert session.selected.display_name == "Legazpi"
        assert session.selected.coordinate == Coordinate(13.1391, 123.7438)

    def test_select_rejects_bad_coordinates(self, session):
        with pytest.raises(InvalidCoordinateError):
            session.select(91.0, 0.0, "Nowhere")
        assert session.selected is None

    def test_select_from_search(self, session, geocoder, daet_location):
        location = session.select_from_search("Daet", geocoder)
        assert location == daet_location
        assert session.selected == daet_location
        geocoder.search.assert_called_once_with("Daet")

    def test_search_miss_keeps_selection(self, session, geocoder):
        session.select(14.5995, 120.9842, "Manila")
        geocoder.search.return_value = None
        assert session.select_from_search("Atlantis", geocoder) is None
        assert session.selected.display_name == "Manila"

    def test_search_error_propagates(self, session, geocoder):
        geocoder.search.side_effect = GeocodingError("down")
        with pytest.raises(GeocodingError):
            session.select_from_search("Daet", geocoder)

    def test_select_from_click(self, session, geocoder):
        location = session.select_from_click(13.14, 123.74, geocoder)
        assert location.display_name == "Legazpi, Albay, Philippines"
        assert location.coordinate == Coordinate(13.14, 123.74)
        assert session.profile().risk_level is RiskLevel.HIGH

    def test_click_validates_before_lookup(self, session, geocoder):
        with pytest.raises(InvalidCoordinateError):
            session.select_from_click(0.0, 181.0, geocoder)
        geocoder.reverse.assert_not_called()


class TestLayers:

    @pytest.mark.parametrize("layer", list(LAYER_NOTICES))
    def test_toggle_on_then_off(self, session, layer):
        enabled, disabled = LAYER_NOTICES[layer]
        assert session.toggle_layer(layer) == enabled
        assert session.layers[layer] is True
        assert session.toggle_layer(layer) == disabled
        assert session.layers[layer] is False

    def test_case_insensitive(self, session):
        session.toggle_layer(" Satellite ")
        assert session.layers["satellite"] is True

    def test_unknown_layer(self, session):
        with pytest.raises(KeyError):
            session.toggle_layer("traffic")

    def test_sessions_do_not_share_layers(self, resolver):
        first, second = MapSession(resolver=resolver), MapSession(resolver=resolver)
        first.toggle_layer("3d")
        assert second.layers["3d"] is False


class TestQueries:

    def test_ask_uses_current_selection(self, session):
        assert session.ask("population").startswith("Please select a location")
        session.select(14.1122, 122.9553, "Daet, Camarines Norte")
        assert "580,000" in session.ask("population")

    def test_disasters_follow_selection(self, session):
        assert all(item.distance_km is None for item in session.disasters())
        session.select(13.2572, 123.6856, "Mayon")
        items = session.disasters("volcanoes")
        assert items[0].distance_km == pytest.approx(0.0, abs=1e-9)

    def test_location_report(self, session):
        session.select(14.1122, 122.9553, "Daet, Camarines Norte")
        report = session.location_report()
        lines = report.splitlines()
        assert lines[0] == "Daet, Camarines Norte"
        assert lines[1] == "14.112200, 122.955300"
        assert "  High Risk" in lines
        assert "  ~580,000 residents" in lines
        assert lines[-1] == "  ₱2.5B - ₱5B"


def test_format_location_report_default_profile(resolver):
    location = SelectedLocation(Coordinate(48.8566, 2.3522), "Paris, France")
    report = format_location_report(location, resolver.resolve(location.display_name, location.coordinate))
    assert "  Low Risk" in report
    assert "  - Standard environmental risks" in report
    assert "  - Basic emergency preparedness" in report
