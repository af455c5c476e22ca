"""Shared state and input helpers for the terminal menus.

All input is read line by line from ``sys.stdin`` and all output is
written with ``print`` so that tests can substitute both streams.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass

from polyapi.config import Settings
from polyapi.db.reference_store import ReferenceStore


@dataclass
class Session:
    """Resources held for the lifetime of one CLI run."""

    store: ReferenceStore
    settings: Settings

    @property
    def timeout(self) -> float:
        return self.settings.http_timeout


def prompt(text: str) -> str | None:
    """Print a prompt and read one line.

    Returns:
        The stripped line, or None at end of input (Ctrl+D).

    """
    sys.stdout.write(text)
    sys.stdout.flush()
    line = sys.stdin.readline()
    if not line:
        return None
    return line.strip()


def choose_row(count: int) -> int | None:
    """Ask for a 1-based row number between 1 and count.

    Prints "Invalid input" or "Invalid choice" and returns None when the
    answer is not a number or is out of range.

    Returns:
        Zero-based index of the chosen row, or None.

    """
    answer = prompt(f"\nEnter the row number (1-{count}): ")
    if answer is None:
        print("Cancelled")
        return None
    try:
        choice = int(answer)
    except ValueError:
        print("Invalid input")
        return None
    if choice < 1 or choice > count:
        print("Invalid choice")
        return None
    return choice - 1


def choose_row_action() -> str | None:
    """Ask whether to reuse or delete the chosen row.

    Returns:
        "reuse", "delete", or None to go back.

    """
    print("\n1. Reuse")
    print("2. Delete")
    print("3. Return to previous menu")
    print()
    answer = prompt("Enter your choice: ")
    if answer is None or answer == "3":
        return None
    if answer == "1":
        return "reuse"
    if answer == "2":
        return "delete"
    print("Invalid choice")
    return None
