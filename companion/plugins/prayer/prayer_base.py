import requests
from typing import Dict, Any, Optional
import logging
from abc import ABC, abstractmethod

from companion.core.errors import UpstreamServiceError

DEFAULT_METHOD = 2


class PrayerBackend(ABC):
    """Base class for prayer time providers"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def get_timings(
        self,
        city: Optional[str] = None,
        country: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        method: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Today's timings for a location, as returned by the provider."""
        pass

    @abstractmethod
    def get_calendar(
        self,
        city: str,
        country: str,
        month: int,
        year: int,
        method: Optional[int] = None,
    ) -> Dict[str, Any]:
        """A month of timings for a city, as returned by the provider."""
        pass

    def get_prayer_times(self, **location: Any) -> Dict[str, str]:
        """Today's {prayer_name: "HH:MM"} mapping for a location."""
        data = self.get_timings(**location)
        try:
            timings = data["data"]["timings"]
        except (KeyError, TypeError):
            raise UpstreamServiceError(f"Unexpected prayer times payload: {str(data)[:200]}")
        return {name: str(value) for name, value in timings.items()}


class AladhanBackend(PrayerBackend):
    """Prayer times backend using api.aladhan.com"""

    DEFAULT_BASE_URL = "https://api.aladhan.com/v1"

    def __init__(self, config: Dict[str, Any], session: Optional[requests.Session] = None):
        super().__init__(config)
        self.base_url = (config.get("base_url") or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = config.get("timeout", 10)
        self.session = session or requests.Session()

    def get_timings(self, city=None, country=None, latitude=None, longitude=None, method=None) -> Dict[str, Any]:
        method = method if method is not None else DEFAULT_METHOD
        if latitude is not None and longitude is not None:
            url = f"{self.base_url}/timings"
            params = {"latitude": latitude, "longitude": longitude, "method": method}
        else:
            url = f"{self.base_url}/timingsByCity"
            params = {"city": city, "country": country, "method": method}
        return self._get(url, params)

    def get_calendar(self, city, country, month, year, method=None) -> Dict[str, Any]:
        params = {
            "city": city,
            "country": country,
            "month": month,
            "year": year,
            "method": method if method is not None else DEFAULT_METHOD,
        }
        return self._get(f"{self.base_url}/calendarByCity", params)

    def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.logger.info(f"Making API request to {url} with params {params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            self.logger.error(f"Error fetching prayer times: {e}")
            raise UpstreamServiceError(str(e), user_message="Failed to fetch prayer times") from e
