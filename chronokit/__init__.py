"""Leap second file tools and analysis of PTP transparent-clock probe results."""

__version__ = "0.1.0"