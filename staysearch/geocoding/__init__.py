"""Reverse geocoding services"""

from .reverse_geocoder import ReverseGeocoder

__all__ = ["ReverseGeocoder"]
