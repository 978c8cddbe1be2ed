"""HTTP client for Nominatim place search and reverse geocoding."""

from typing import Any

import httpx
import structlog

from riskatlas.config import get_config
from riskatlas.geo_utils import Coordinate, SelectedLocation, validate_coordinate

logger = structlog.get_logger()

UNKNOWN_LOCATION = "Unknown Location"


class GeocodingError(RuntimeError):
    """Raised when the geocoding service cannot be reached or answers badly."""


class NominatimClient:
    """Client for the Nominatim search and reverse endpoints.

    Requests are sent once; failures surface as GeocodingError with a
    readable message instead of being retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        language: str | None = None,
    ):
        """Initialize the geocoding client.

        Args:
            base_url: Nominatim base URL.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header (required by the Nominatim usage policy).
            language: Preferred language for display names.
        """
        config = get_config()
        self.base_url = (base_url or config.geocoder.base_url).rstrip("/")
        self.timeout = timeout or config.geocoder.timeout
        self.user_agent = user_agent or config.geocoder.user_agent
        self.language = language or config.geocoder.language

        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept-Language": self.language,
                },
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "NominatimClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        try:
            response = self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise GeocodingError(
                f"Geocoding request failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GeocodingError(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            raise GeocodingError("Geocoding service returned invalid JSON") from e

    def search(self, query: str) -> SelectedLocation | None:
        """Find the best match for a free-text place query.

        Args:
            query: Place name or address.

        Returns:
            The first result as a SelectedLocation, or None when nothing matched.

        Raises:
            GeocodingError: If the request fails.
        """
        query = (query or "").strip()
        if not query:
            return None

        results = self._get_json("/search", {"format": "json", "q": query, "limit": 1})
        if not results:
            logger.info("No geocoding results", query=query)
            return None

        top = results[0]
        try:
            coordinate = validate_coordinate(float(top["lat"]), float(top["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Geocoding result has no usable coordinates: {top!r}") from e

        location = SelectedLocation(
            coordinate=coordinate,
            display_name=top.get("display_name") or query,
        )
        logger.info(
            "Geocoded place",
            query=query,
            display_name=location.display_name,
            lat=coordinate.lat,
            lon=coordinate.lon,
        )
        return location

    def reverse(self, coord: Coordinate) -> SelectedLocation:
        """Name a clicked coordinate.

        The coordinate is always kept; the display name falls back to
        ``Unknown Location`` when the lookup fails or has no name.

        Args:
            coord: The clicked coordinate.

        Returns:
            SelectedLocation for the coordinate.
        """
        try:
            data = self._get_json(
                "/reverse",
                {"format": "json", "lat": coord.lat, "lon": coord.lon},
            )
        except GeocodingError as e:
            logger.warning("Reverse geocoding failed", lat=coord.lat, lon=coord.lon, error=str(e))
            return SelectedLocation(coordinate=coord, display_name=UNKNOWN_LOCATION)

        name = data.get("display_name") if isinstance(data, dict) else None
        return SelectedLocation(coordinate=coord, display_name=name or UNKNOWN_LOCATION)
