"""Address and weather menus.

A new address is geocoded and appended to the reference store; a
cached one is picked from the distinct address list. Either way the
weather flow then shows the nearest observation stations, caches the
current temperature on the address row, and offers forecast views.
"""

from __future__ import annotations

import logging

from polyapi.db.reference_store import AddressRecord
from polyapi.formatting import (
    celsius_to_fahrenheit,
    extract_date,
    format_time,
    google_maps_url,
)
from polyapi.menus.common import Session, choose_row, choose_row_action, prompt
from polyapi.sources import census, noaa
from polyapi.sources.http import ApiError

logger = logging.getLogger(__name__)

_FORECAST_HEAD = 4
_FORECAST_TAIL = 2
_HOURLY_PERIODS = 12


def print_observation(observation: noaa.Observation) -> None:
    stamp = observation.timestamp
    print(f"  Timestamp: {extract_date(stamp)} at {format_time(stamp)}")
    if observation.temperature is not None:
        temp_f = celsius_to_fahrenheit(observation.temperature)
        print(f"  Temperature: {temp_f:.2f}°F")
    if observation.dewpoint is not None:
        print(f"  Dewpoint: {celsius_to_fahrenheit(observation.dewpoint):.2f}°F")
    if observation.wind_speed is not None:
        print(f"  Wind Speed: {observation.wind_speed:.2f} km/h")
    if observation.wind_direction is not None:
        print(f"  Wind Direction: {observation.wind_direction:.2f}°")
    if observation.relative_humidity is not None:
        print(f"  Humidity: {observation.relative_humidity:.2f}%")
    if observation.barometric_pressure is not None:
        print(f"  Pressure: {observation.barometric_pressure:.2f} Pa")
    if observation.description:
        print(f"  Description: {observation.description}")
    print()


def print_stations(session: Session, lat: float, lon: float) -> None:
    """Show the nearest stations and what each one last observed."""
    stations = noaa.get_nearest_stations(lat, lon, timeout=session.timeout)

    print("\nNOAA weather stations: (sorted by nearest to farthest)")
    print()
    for i, station in enumerate(stations, start=1):
        print(f"Station {i}: {station.name}")
        print(f"  Identifier: {station.identifier}")
        print(f"  Location: {google_maps_url(station.lat, station.lon)}")
        try:
            observation = noaa.get_latest_observation(
                station.identifier, timeout=session.timeout
            )
        except ApiError as exc:
            print(f"Error fetching observation data: {exc}")
            continue
        print_observation(observation)


def _print_period(period: noaa.ForecastPeriod) -> None:
    start = period.start_time.split("T")[0]
    print(f"{start} ({period.name})  {period.temperature}{period.temperature_unit}")
    print(f"  {period.detailed_forecast}\n")


def print_forecast(session: Session, point: noaa.GridPoint) -> None:
    """Print the next two days and the last day of the week-long forecast."""
    periods = noaa.get_forecast(point.forecast_url, timeout=session.timeout)

    print("\nForecast: (next 2 days and a week out)")
    print()
    if not periods:
        print("No forecast periods available.")
        return

    head = periods[:_FORECAST_HEAD]
    tail = periods[max(_FORECAST_HEAD, len(periods) - _FORECAST_TAIL) :]
    for period in head + tail:
        _print_period(period)


def print_hourly_forecast(session: Session, point: noaa.GridPoint) -> None:
    periods = noaa.get_hourly_forecast(
        point.forecast_hourly_url, timeout=session.timeout
    )

    print(f"\nNext {_HOURLY_PERIODS} hours:")
    print()
    for period in periods[:_HOURLY_PERIODS]:
        print(
            f"{format_time(period.start_time)} "
            f"{period.temperature}{period.temperature_unit}"
        )
        print(f" - {period.short_forecast}")
        print()


def refresh_temperature(
    session: Session, point: noaa.GridPoint, address_id: int
) -> str | None:
    """Cache the current hourly temperature on an address row.

    Returns:
        The stored temperature text, or None if nothing was stored.

    """
    periods = noaa.get_hourly_forecast(
        point.forecast_hourly_url, timeout=session.timeout
    )
    temperature = noaa.current_temperature(periods)
    if temperature is None:
        print("No hourly forecast data available")
        return None

    if not session.store.update_address_temperature(address_id, temperature):
        print("\nAddress not found.")
        return None

    print()
    print(
        "Address record updated successfully with latest temperature "
        f"{temperature}!"
    )
    return temperature


def weather_for_address(
    session: Session, lat: float, lon: float, address_id: int
) -> None:
    """Run the weather flow for a stored address, then its submenu."""
    print_stations(session, lat, lon)

    point = noaa.get_point(lat, lon, timeout=session.timeout)
    refresh_temperature(session, point, address_id)

    print()
    print(google_maps_url(lat, lon))

    while True:
        print("\nNOAA Weather Submenu:")
        print()
        print("1. Forecast")
        print("2. Hourly Forecast")
        print("3. Choose another address")
        print("4. Main Menu")
        print()
        option = prompt("Enter your option: ")
        print()

        if option is None or option == "4":
            return
        if option == "3":
            geocode_menu(session)
            return
        try:
            if option == "1":
                print_forecast(session, point)
            elif option == "2":
                print_hourly_forecast(session, point)
            else:
                print("\nInvalid option")
        except ApiError as exc:
            print(f"Error: {exc}")


def enter_new_address(session: Session) -> None:
    """Geocode a typed address, cache it, and show its weather."""
    address = prompt(
        "\nEnter address: (e.g., 432 Park Ave, 10022 or 432 Park Ave NY, NY 10022)"
        " [Ctrl+D to quit]\n\n"
    )
    if address is None:
        print("Cancelled")
        print()
        return
    if not address:
        print("No address entered")
        return

    match = census.geocode_address(address, timeout=session.timeout)
    if match is None:
        print("No coordinates found")
        return

    print("\nCoordinates:")
    print(f"  Latitude: {match.lat:f}")
    print(f"  Longitude: {match.lon:f}")
    print(f"  {google_maps_url(match.lat, match.lon)}")

    address_id = session.store.insert_address(
        match.matched_address, match.lat, match.lon
    )
    weather_for_address(session, match.lat, match.lon, address_id)


def _address_line(index: int, record: AddressRecord) -> str:
    extra = ""
    if record.last_temperature or record.updated_at:
        updated = extract_date(record.updated_at) if record.updated_at else ""
        extra = f"{record.last_temperature or ''} on {updated}"
    return f"{index}. {record.address} ~ {extra}"


def reuse_address(session: Session) -> None:
    """Pick a cached address to refresh or delete."""
    addresses = session.store.list_addresses_distinct()
    if not addresses:
        print("No addresses found")
        return

    print("Previous addresses")
    print()
    for i, record in enumerate(addresses, start=1):
        print(_address_line(i, record))

    index = choose_row(len(addresses))
    if index is None:
        return
    chosen = addresses[index]

    action = choose_row_action()
    if action == "reuse":
        weather_for_address(session, chosen.lat, chosen.lon, chosen.id)
    elif action == "delete":
        print()
        if session.store.delete_address(chosen.id):
            print("Address deleted successfully.")
        else:
            print("Address not found.")


def geocode_menu(session: Session) -> None:
    print("\nGeocode menu:")
    print()
    print("1. Enter a new address")
    print("2. Re-use/delete a previous address")
    print()
    option = prompt("Enter your option: ")
    print()

    if option == "1":
        enter_new_address(session)
    elif option == "2":
        reuse_address(session)
    elif option is not None:
        print("Invalid option")
