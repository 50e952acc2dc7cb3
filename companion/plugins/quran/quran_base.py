import logging
from typing import Any, Dict, List, Optional

import requests

from companion.core.errors import UpstreamServiceError

SURAH_COUNT = 114


class AlQuranCloudBackend:
    """Surah list and surah text (Arabic plus translation) from api.alquran.cloud"""

    DEFAULT_BASE_URL = "https://api.alquran.cloud/v1"

    def __init__(self, config: Dict[str, Any], session: Optional[requests.Session] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.base_url = (config.get("base_url") or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = config.get("timeout", 10)
        self.arabic_edition = config.get("arabic_edition", "quran-uthmani")
        self.translation_edition = config.get("translation_edition", "en.sahih")
        self.session = session or requests.Session()

    def list_surahs(self) -> List[Dict[str, Any]]:
        return self._get(f"{self.base_url}/surah")

    def get_surah(self, number: int) -> Dict[str, Any]:
        """Surah metadata and ayahs, each ayah carrying its translation."""
        url = f"{self.base_url}/surah/{number}/editions/{self.arabic_edition},{self.translation_edition}"
        editions = self._get(url)
        try:
            arabic, translation = editions[0], editions[1]
            ayahs = [
                {
                    "number": ayah["number"],
                    "numberInSurah": ayah["numberInSurah"],
                    "text": ayah["text"],
                    "translation": translated["text"],
                }
                for ayah, translated in zip(arabic["ayahs"], translation["ayahs"])
            ]
            surah = {k: v for k, v in arabic.items() if k not in ("ayahs", "edition")}
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamServiceError(f"Unexpected surah payload: {e}", user_message="Failed to fetch Quran text") from e
        return {"surah": surah, "ayahs": ayahs}

    def _get(self, url: str) -> Any:
        self.logger.info(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()["data"]
        except (requests.RequestException, ValueError, KeyError) as e:
            self.logger.error(f"Error fetching Quran data: {e}")
            raise UpstreamServiceError(str(e), user_message="Failed to fetch Quran text") from e
