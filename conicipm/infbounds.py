"""Module-level bound above which inequality bounds count as infinite."""

INFINITY_DEFAULT: float = 1e20

_infinity: float = INFINITY_DEFAULT


def set_infinity(value: float) -> None:
    """Set the infinity bound to ``value``."""
    global _infinity
    _infinity = float(value)


def default_infinity() -> None:
    """Revert the infinity bound to :data:`INFINITY_DEFAULT`."""
    set_infinity(INFINITY_DEFAULT)


def get_infinity() -> float:
    """Return the current infinity bound."""
    return _infinity