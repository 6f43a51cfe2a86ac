"""Board size and fleet settings, read leniently from text or the environment."""

import os
from dataclasses import dataclass, field

DEFAULT_GRID_SIZE = 10
DEFAULT_SHIPS = (4, 3, 3, 2, 2, 2)


def parse_grid_size(text, default=DEFAULT_GRID_SIZE):
    """
    Parse a board size, falling back to ``default`` for anything that is not
    a positive integer.
    """
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_ships(text, default=DEFAULT_SHIPS):
    """
    Parse whitespace separated ship lengths such as ``"4 3 3 2"``.

    A single unparsable token discards the whole value; an empty result also
    falls back to ``default``.
    """
    if text is None:
        return list(default)
    try:
        ships = [int(token) for token in str(text).split()]
    except ValueError:
        return list(default)
    return ships if ships else list(default)


@dataclass
class Settings:
    grid_size: int = DEFAULT_GRID_SIZE
    ships: list = field(default_factory=lambda: list(DEFAULT_SHIPS))


def load_settings():
    """Settings from ``BATTLESHIP_GRID_SIZE`` and ``BATTLESHIP_SHIPS``."""
    return Settings(
        grid_size=parse_grid_size(os.getenv("BATTLESHIP_GRID_SIZE")),
        ships=parse_ships(os.getenv("BATTLESHIP_SHIPS")),
    )
