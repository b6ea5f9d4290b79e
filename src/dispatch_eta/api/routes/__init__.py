"""Route group exports."""

from . import drivers, health, orders, routes

__all__ = ["routes", "orders", "drivers", "health"]
