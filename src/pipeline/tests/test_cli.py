"""Tests for the command-line interface."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from riskatlas.cli import cli
from riskatlas.config import reload_config
from riskatlas.geo_utils import SelectedLocation
from riskatlas.geocode.client import GeocodingError


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def geocoder(daet_location):
    """Patch the CLI's NominatimClient; yields the client used inside ``with``."""
    with patch("riskatlas.cli.NominatimClient") as factory:
        client = MagicMock()
        client.search.return_value = daet_location
        client.reverse.side_effect = lambda coord: SelectedLocation(coord, "Legazpi, Albay, Philippines")
        factory.return_value.__enter__.return_value = client
        yield client


class TestDistanceCommand:

    def test_manila_to_cebu(self, runner):
        result = runner.invoke(cli, ["distance", "14.5995,120.9842", "10.3157,123.8854"])
        assert result.exit_code == 0
        value = float(result.output.split()[0])
        assert 569 <= value <= 579

    def test_same_point(self, runner):
        result = runner.invoke(cli, ["distance", "13.0,123.0", "13.0,123.0"])
        assert result.output.strip() == "0.0 km"

    @pytest.mark.parametrize("point", ["91,0", "abc", "14.5"])
    def test_bad_point(self, runner, point):
        result = runner.invoke(cli, ["distance", point, "0,0"])
        assert result.exit_code == 2
        assert "not a valid lat,lon pair" in result.output


class TestProfileCommand:

    def test_json(self, runner):
        result = runner.invoke(cli, ["profile", "Daet, Camarines Norte", "--lat", "14.11", "--lon", "122.95", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["risk_level"] == "High"
        assert data["risk_class"] == "risk-high"
        assert data["budget"] == "₱2.5B - ₱5B"

    def test_report(self, runner):
        result = runner.invoke(cli, ["profile", "Cebu City", "--lat", "10.3157", "--lon", "123.8854"])
        assert result.exit_code == 0
        assert "Risk Assessment" in result.output
        assert "  Moderate Risk" in result.output

    def test_invalid_coordinate(self, runner):
        result = runner.invoke(cli, ["profile", "Nowhere", "--lat", "95", "--lon", "0"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_custom_rules_via_config_dir(self, runner, tmp_path):
        (tmp_path / "rules.yaml").write_text("default:\n  risk_level: high\n  budget: big\n")
        (tmp_path / "profiles.yaml").write_text("profiles:\n  rules_path: rules.yaml\n")

        result = runner.invoke(
            cli,
            ["--config-dir", str(tmp_path), "profile", "Paris", "--lat", "48.85", "--lon", "2.35", "--json"],
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["risk_level"] == "High"
        assert data["budget"] == "big"


class TestAskCommand:

    def test_greeting(self, runner):
        result = runner.invoke(cli, ["ask", "hi"])
        assert result.exit_code == 0
        assert result.output.startswith("Hello! I'm AI VISION")

    def test_with_location(self, runner):
        result = runner.invoke(
            cli, ["ask", "what are the hazards?", "--place", "Legazpi, Albay", "--lat", "13.14", "--lon", "123.74"]
        )
        assert result.exit_code == 0
        assert "Analysis for Legazpi, Albay" in result.output
        assert "High Risk" in result.output

    def test_lat_without_lon(self, runner):
        result = runner.invoke(cli, ["ask", "population", "--lat", "13.14"])
        assert result.exit_code == 2
        assert "--lat and --lon must be given together" in result.output

    def test_assistant_name_from_env(self, runner, monkeypatch):
        monkeypatch.setenv("ASSISTANT_NAME", "Bantay")
        reload_config()
        result = runner.invoke(cli, ["ask", "hello there"])
        assert "I'm Bantay" in result.output


class TestDisastersCommand:

    def test_default_lists_volcanoes(self, runner):
        result = runner.invoke(cli, ["disasters"])
        assert result.exit_code == 0
        assert result.output.startswith("Mayon Volcano")
        assert "Distance: N/A km from selected location" in result.output

    def test_within(self, runner):
        result = runner.invoke(
            cli, ["disasters", "--kind", "volcanoes", "--lat", "13.9", "--lon", "121.0", "--within", "200", "--json"]
        )
        assert result.exit_code == 0
        names = [item["name"] for item in json.loads(result.output)]
        assert names[0] == "Taal Volcano"
        assert "Bulusan Volcano" not in names

    def test_within_nothing_close(self, runner):
        result = runner.invoke(cli, ["disasters", "--lat", "48.85", "--lon", "2.35", "--within", "10"])
        assert result.exit_code == 0
        assert "No events found" in result.output

    def test_within_requires_location(self, runner):
        result = runner.invoke(cli, ["disasters", "--within", "100"])
        assert result.exit_code == 2

    def test_json_without_location(self, runner):
        result = runner.invoke(cli, ["disasters", "--kind", "earthquakes", "--json"])
        data = json.loads(result.output)
        assert len(data) == 4
        assert all(item["distance_km"] is None for item in data)


class TestSearchCommand:

    def test_found(self, runner, geocoder):
        result = runner.invoke(cli, ["search", "Daet"])
        assert result.exit_code == 0
        assert result.output.startswith("Daet, Camarines Norte")
        assert "  High Risk" in result.output
        geocoder.search.assert_called_once_with("Daet")

    def test_json(self, runner, geocoder):
        result = runner.invoke(cli, ["search", "Daet", "--json"])
        data = json.loads(result.output)
        assert data["lat"] == 14.1122
        assert data["population"] == "~580,000 residents"

    def test_not_found(self, runner, geocoder):
        geocoder.search.return_value = None
        result = runner.invoke(cli, ["search", "Atlantis"])
        assert result.exit_code == 1
        assert "Location not found" in result.output

    def test_service_error(self, runner, geocoder):
        geocoder.search.side_effect = GeocodingError("status 503")
        result = runner.invoke(cli, ["search", "Daet"])
        assert result.exit_code == 1
        assert "Search failed. Please try again." in result.output


class TestChatCommand:

    def test_conversation(self, runner, geocoder):
        result = runner.invoke(cli, ["chat"], input="population\n/search Daet\npopulation\nquit\n")
        assert result.exit_code == 0
        assert "Please select a location" in result.output
        assert "580,000" in result.output
        assert "Risk Assessment" in result.output

    def test_layer_and_click(self, runner, geocoder):
        result = runner.invoke(cli, ["chat"], input="/layer satellite\n/click 13.14 123.74\n/report\nexit\n")
        assert result.exit_code == 0
        assert "Legazpi, Albay, Philippines" in result.output
        assert "  High Risk" in result.output

    def test_errors_stay_in_session(self, runner, geocoder):
        result = runner.invoke(cli, ["chat"], input="/layer traffic\n/click 95 0\n/bogus\nhi\nq\n")
        assert result.exit_code == 0
        assert result.output.count("Error:") == 2
        assert "Unknown command '/bogus'" in result.output
        assert "Hello! I'm AI VISION" in result.output


class TestRuleTableStartup:

    def test_missing_rule_table_reported(self, runner, geocoder, tmp_path, monkeypatch):
        monkeypatch.setenv("RISK_RULES_PATH", str(tmp_path / "missing.yaml"))
        reload_config()

        result = runner.invoke(cli, ["search", "Daet"])

        assert result.exit_code == 1
        assert "Error: Rule table not found" in result.output
        geocoder.search.assert_not_called()

    def test_malformed_rule_table_reported(self, runner, tmp_path, monkeypatch):
        path = tmp_path / "rules.yaml"
        path.write_text('rules:\n  - patterns: "daet"\n    profile:\n      risk_level: High\n', encoding="utf-8")
        monkeypatch.setenv("RISK_RULES_PATH", str(path))
        reload_config()

        result = runner.invoke(cli, ["ask", "hello"])

        assert result.exit_code == 1
        assert "must be a list" in result.output

    def test_search_unexpected_error(self, runner, geocoder):
        with patch("riskatlas.cli.get_resolver", side_effect=RuntimeError("resolver broke")):
            result = runner.invoke(cli, ["search", "Daet"])
        assert result.exit_code == 1
        assert "Error: resolver broke" in result.output


def test_chat_unknown_layer_message(runner, geocoder):
    result = runner.invoke(cli, ["chat"], input="/layer traffic\nquit\n")
    assert result.exit_code == 0
    assert "Error: Unknown layer 'traffic'. Choose from: 3d, satellite" in result.output
    assert 'Error: "' not in result.output
