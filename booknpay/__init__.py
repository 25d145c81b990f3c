"""Availability, wallet and booking-confirmation core for small service providers."""

__version__ = "0.1.0"
