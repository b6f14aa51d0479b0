"""Availability resolution and booking validation for stadium bookings."""

__version__ = "0.1.0"
