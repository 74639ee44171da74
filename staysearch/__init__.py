"""Geolocated accommodation search: plan building, candidate resolution and the stage pipeline."""

__version__ = "0.1.0"
