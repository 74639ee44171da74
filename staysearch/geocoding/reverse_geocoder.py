"""
Reverse geocoding client - turns a coordinate into a "City, Country" label
using a maps.co-compatible reverse endpoint.
"""

import asyncio
import aiohttp
import logging
from typing import Any, Dict, Optional

from staysearch.config import get_search_settings
from staysearch.config.search_config import GeocodingConfig
from staysearch.error_handling.errors import GeocodingError

logger = logging.getLogger(__name__)


class ReverseGeocoder:
    """
    Reverse geocoding client.

    Reuses one aiohttp session across calls; call close() on shutdown.
    """

    def __init__(self, config: Optional[GeocodingConfig] = None):
        self.config = config or get_search_settings().geocoding

        if not self.config.api_key:
            raise ValueError("Geocoding API key not configured. Set MAPS_API_KEY in .env")

        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Explicitly close the session when done"""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _ensure_session(self):
        """Ensure we have an open session"""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)

    async def reverse(self, lat: float, lon: float) -> str:
        """
        Resolve a coordinate to a place label.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Label such as "Amsterdam, Netherlands"

        Raises:
            GeocodingError: On a non-200 response, a transport failure, a timeout
                or a payload without an address
        """
        await self._ensure_session()

        params = {"lat": str(lat), "lon": str(lon), "api_key": self.config.api_key}
        try:
            async with self._session.get(self.config.base_url, params=params) as response:
                if response.status != 200:
                    raise GeocodingError(
                        f"Reverse geocode request failed: {response.status} {response.reason}"
                    )
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Reverse geocode request failed: {e}")
            raise GeocodingError(f"Reverse geocode request failed: {e}") from e

        return self._format_address(data)

    @staticmethod
    def _format_address(data: Dict[str, Any]) -> str:
        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, dict):
            raise GeocodingError("Reverse geocode response has no address")

        city = address.get("city") or address.get("town") or address.get("village")
        country = address.get("country")
        label = ", ".join(part for part in (city, country) if part)
        if not label:
            raise GeocodingError("Reverse geocode response has no city or country")
        return label
