"""Tests for the address and weather menus."""

from __future__ import annotations

from io import StringIO
from unittest.mock import patch

import pytest
from polyapi.menus import weather
from polyapi.sources.census import GeocodeMatch
from polyapi.sources.http import ApiError
from polyapi.sources.noaa import ForecastPeriod, GridPoint, Observation, Station

_GRID_URL = "https://api.weather.gov/gridpoints/LOX/150,40"
_POINT = GridPoint(
    forecast_url=f"{_GRID_URL}/forecast",
    forecast_hourly_url=f"{_GRID_URL}/forecast/hourly",
)


def _hourly(temperature: int) -> list[ForecastPeriod]:
    return [
        ForecastPeriod(
            number=1,
            name="",
            start_time="2024-08-26T14:00:00-07:00",
            is_daytime=True,
            temperature=temperature,
            temperature_unit="F",
            short_forecast="Sunny",
            detailed_forecast="",
        )
    ]


@pytest.fixture
def quiet_noaa():
    """Stub the NOAA calls made by every weather flow."""
    with (
        patch("polyapi.sources.noaa.get_nearest_stations", return_value=[]),
        patch("polyapi.sources.noaa.get_point", return_value=_POINT),
        patch(
            "polyapi.sources.noaa.get_hourly_forecast", return_value=_hourly(68)
        ) as hourly,
    ):
        yield hourly


def _stdin(monkeypatch, text: str) -> None:
    monkeypatch.setattr("sys.stdin", StringIO(text))


class TestEnterNewAddress:
    """Tests for geocoding and caching a typed address."""

    @pytest.mark.usefixtures("quiet_noaa")
    def test_caches_address_and_temperature(self, session, monkeypatch, capsys):
        match = GeocodeMatch("100 MAIN ST, ANYTOWN, CA, 90001", 34.0, -118.0)
        _stdin(monkeypatch, "100 Main St, Anytown, CA 90001\n4\n")

        with patch("polyapi.sources.census.geocode_address", return_value=match):
            weather.enter_new_address(session)

        rows = session.store.list_addresses_distinct()
        assert len(rows) == 1
        assert rows[0].address == "100 MAIN ST, ANYTOWN, CA, 90001"
        assert rows[0].last_temperature == "68F"
        out = capsys.readouterr().out
        assert "Latitude: 34.000000" in out
        assert "latest temperature 68F" in out

    def test_no_match_stores_nothing(self, session, monkeypatch, capsys):
        _stdin(monkeypatch, "nowhere\n")

        with patch("polyapi.sources.census.geocode_address", return_value=None):
            weather.enter_new_address(session)

        assert session.store.list_addresses_distinct() == []
        assert "No coordinates found" in capsys.readouterr().out

    def test_end_of_input_cancels(self, session, monkeypatch, capsys):
        _stdin(monkeypatch, "")

        with patch("polyapi.sources.census.geocode_address") as geocode:
            weather.enter_new_address(session)

        geocode.assert_not_called()
        assert "Cancelled" in capsys.readouterr().out


class TestReuseAddress:
    """Tests for picking a cached address."""

    def test_empty_cache(self, session, capsys):
        weather.reuse_address(session)
        assert "No addresses found" in capsys.readouterr().out

    def test_lists_temperature_and_date(self, session, monkeypatch, capsys):
        address_id = session.store.insert_address("1 A ST", 40.0, -75.0)
        session.store.update_address_temperature(address_id, "72F")
        _stdin(monkeypatch, "1\n3\n")

        weather.reuse_address(session)

        out = capsys.readouterr().out
        assert "1. 1 A ST ~ 72F on " in out

    def test_delete(self, session, monkeypatch, capsys):
        session.store.insert_address("1 A ST", 40.0, -75.0)
        _stdin(monkeypatch, "1\n2\n")

        weather.reuse_address(session)

        assert "Address deleted successfully." in capsys.readouterr().out
        assert session.store.list_addresses_distinct() == []

    def test_reuse_refreshes_chosen_row(self, session, quiet_noaa, monkeypatch):
        address_id = session.store.insert_address("1 A ST", 40.0, -75.0)
        quiet_noaa.return_value = _hourly(55)
        _stdin(monkeypatch, "1\n1\n4\n")

        weather.reuse_address(session)

        assert session.store.get_address(address_id).last_temperature == "55F"

    def test_out_of_range_row(self, session, monkeypatch, capsys):
        session.store.insert_address("1 A ST", 40.0, -75.0)
        _stdin(monkeypatch, "5\n")

        weather.reuse_address(session)

        assert "Invalid choice" in capsys.readouterr().out
        assert len(session.store.list_addresses_distinct()) == 1

    def test_non_numeric_row(self, session, monkeypatch, capsys):
        session.store.insert_address("1 A ST", 40.0, -75.0)
        _stdin(monkeypatch, "first\n")

        weather.reuse_address(session)

        assert "Invalid input" in capsys.readouterr().out
        assert len(session.store.list_addresses_distinct()) == 1


class TestWeatherSubmenu:
    """Tests for the forecast submenu shown after a lookup."""

    @pytest.mark.usefixtures("quiet_noaa")
    def test_forecast_shows_head_and_tail(self, session, monkeypatch, capsys):
        address_id = session.store.insert_address("1 A ST", 40.0, -75.0)
        periods = [
            ForecastPeriod(
                n, f"Period {n}", f"2024-08-{25 + n}T06:00:00-04:00", True,
                60 + n, "F", "", f"Detail {n}",
            )
            for n in range(1, 15)
        ]
        _stdin(monkeypatch, "1\n4\n")

        with patch("polyapi.sources.noaa.get_forecast", return_value=periods):
            weather.weather_for_address(session, 40.0, -75.0, address_id)

        out = capsys.readouterr().out
        for n in (1, 2, 3, 4, 13, 14):
            assert f"(Period {n})" in out
        assert "(Period 5)" not in out

    @pytest.mark.usefixtures("quiet_noaa")
    def test_hourly_forecast(self, session, monkeypatch, capsys):
        address_id = session.store.insert_address("1 A ST", 40.0, -75.0)
        _stdin(monkeypatch, "2\n4\n")

        weather.weather_for_address(session, 40.0, -75.0, address_id)

        out = capsys.readouterr().out
        assert "Next 12 hours:" in out
        assert "02:00 PM 68F" in out

    @pytest.mark.usefixtures("quiet_noaa")
    def test_api_error_keeps_submenu_open(self, session, monkeypatch, capsys):
        address_id = session.store.insert_address("1 A ST", 40.0, -75.0)
        _stdin(monkeypatch, "1\n2\n4\n")

        with patch(
            "polyapi.sources.noaa.get_forecast", side_effect=ApiError("timed out")
        ):
            weather.weather_for_address(session, 40.0, -75.0, address_id)

        out = capsys.readouterr().out
        assert "Error: timed out" in out
        assert "Next 12 hours:" in out

    @pytest.mark.usefixtures("quiet_noaa")
    def test_deleted_address_is_reported(self, session, monkeypatch, capsys):
        _stdin(monkeypatch, "4\n")

        weather.weather_for_address(session, 40.0, -75.0, 999)

        assert "Address not found." in capsys.readouterr().out

    def test_stations_print_observations(self, session, capsys):
        station = Station("Central Park", "KNYC", 40.77898, -73.96925)
        observation = Observation(
            timestamp="2024-08-26T14:51:00+00:00",
            description="Mostly Cloudy",
            temperature=25.0,
            relative_humidity=59.4,
        )

        with (
            patch(
                "polyapi.sources.noaa.get_nearest_stations", return_value=[station]
            ),
            patch(
                "polyapi.sources.noaa.get_latest_observation",
                return_value=observation,
            ),
        ):
            weather.print_stations(session, 40.76, -73.97)

        out = capsys.readouterr().out
        assert "Station 1: Central Park" in out
        assert "Temperature: 77.00°F" in out
        assert "Humidity: 59.40%" in out
        assert "Wind Speed" not in out
