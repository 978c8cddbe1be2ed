"""Place search and reverse geocoding."""

from riskatlas.geocode.client import UNKNOWN_LOCATION, GeocodingError, NominatimClient

__all__ = ["NominatimClient", "GeocodingError", "UNKNOWN_LOCATION"]
