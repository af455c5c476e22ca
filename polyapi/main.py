"""polyapi terminal entry point.

Opens the reference store once, then runs the numbered main menu
until the user exits or standard input is closed.

Error handling:
    - ApiError / ValueError raised by a menu action are printed and
      the loop continues.
    - duckdb.Error from the reference store is fatal: it is logged and
      the process exits with status 1.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

import duckdb

from polyapi import log_config
from polyapi.config import load_settings
from polyapi.db.reference_store import ReferenceStore
from polyapi.menus.common import Session, prompt
from polyapi.menus.ticker import ticker_menu
from polyapi.menus.weather import geocode_menu
from polyapi.sources.http import ApiError

logger = logging.getLogger(__name__)

EXIT_OPTION = "3"

MENU_ITEMS: list[tuple[str, str]] = [
    ("1", "Get weather for an address"),
    ("2", "Get stock quote"),
    (EXIT_OPTION, "Exit"),
]


def dispatch(option: str) -> Callable[[Session], None]:
    """Return the handler for a main-menu option.

    Raises:
        ValueError: If the option is not recognized.

    """
    handlers: dict[str, Callable[[Session], None]] = {
        "1": geocode_menu,
        "2": ticker_menu,
    }
    if option not in handlers:
        msg = f"Unknown option: {option}"
        raise ValueError(msg)
    return handlers[option]


def print_main_menu() -> None:
    print()
    print("polyAPI CLI")
    print("-----------")
    print()
    print("Main Menu:")
    print()
    for key, label in MENU_ITEMS:
        print(f"{key}. {label}")
    print()


def run(session: Session) -> None:
    """Run the main menu loop until exit or end of input."""
    while True:
        print_main_menu()
        option = prompt("Enter your option: ")
        if option is None or option == EXIT_OPTION:
            print("\nExiting...")
            return

        try:
            handler = dispatch(option)
        except ValueError:
            print("\nInvalid option")
            continue

        try:
            handler(session)
        except (ApiError, ValueError) as exc:
            logger.debug("Menu action failed", exc_info=True)
            print(f"\n{exc}")
            print()


def main() -> None:
    """CLI entry point."""
    try:
        settings = load_settings()
    except ValueError as exc:
        log_config.setup()
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)

    log_config.setup(verbose=settings.verbose)

    try:
        store = ReferenceStore.open(settings.db_path)
    except (duckdb.Error, OSError):
        logger.critical(
            "Cannot open reference store at %s", settings.db_path, exc_info=True
        )
        sys.exit(1)

    try:
        run(Session(store=store, settings=settings))
    except duckdb.Error:
        logger.critical("Reference store operation failed", exc_info=True)
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
