"""Vulture whitelist for names only reached through tooling.

Items listed here are known false positives: the console-script entry
point and pytest fixtures that are injected by name.

Usage:
    vulture polyapi tests vulture_whitelist.py
"""

# ── Entry points (called by setuptools console_scripts, not imported) ──
from polyapi.main import main  # noqa: F401

# ── Pytest fixtures (injected by pytest, never called directly) ──
from tests.conftest import fake_api  # noqa: F401
from tests.conftest import session  # noqa: F401
from tests.conftest import ticking_clock  # noqa: F401
from tests.menus.ticker_menu_test import quoted  # noqa: F401
from tests.menus.weather_menu_test import quiet_noaa  # noqa: F401
