"""
Gemini-backed coaching and dua recommendations.

The client is built once at startup (CoachClient.from_config) and handed to
the routes through the application object.
"""
import json
import logging
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from pydantic import BaseModel, ValidationError

from companion.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"

LANGUAGES = {"en": "English", "bn": "Bengali"}

COACH_PROMPT = (
    "You are an expert Islamic Ramadan Coach. Based on the user's current progress: {context}, "
    "provide 3 actionable, motivational, and spiritually uplifting tips for today. "
    "Provide the response in {language}. Keep it concise and inspiring. "
    'Answer with a JSON object: {{"tips": [string, string, string], "motivation": string}}.'
)

DUA_PROMPT = (
    "The user is feeling {mood}. Recommend a powerful Dua from the Quran or Sunnah that fits this mood. "
    "Provide the Arabic text, transliteration, and English meaning. "
    'Answer with a JSON object: {{"duaArabic": string, "transliteration": string, '
    '"meaning": string, "source": string}}.'
)


class DuaRecommendation(BaseModel):
    duaArabic: str
    transliteration: str
    meaning: str
    source: Optional[str] = None


class CoachAdvice(BaseModel):
    tips: List[str]
    motivation: str


class CoachClient:
    def __init__(self, model: Any = None):
        """model: a genai.GenerativeModel (or anything with generate_content); None when not configured."""
        self.model = model

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CoachClient":
        api_key = config.get("api_key")
        if not api_key or str(api_key).startswith("$"):
            logger.warning("No Gemini API key configured; coach and dua endpoints will fail")
            return cls(model=None)
        genai.configure(api_key=api_key)
        model_name = config.get("model") or DEFAULT_MODEL
        logger.info(f"Gemini client configured with model {model_name}")
        return cls(genai.GenerativeModel(model_name))

    @property
    def configured(self) -> bool:
        return self.model is not None

    def _generate_json(self, prompt: str) -> Dict[str, Any]:
        if self.model is None:
            raise UpstreamServiceError("Gemini API key is not configured")
        try:
            response = self.model.generate_content(
                prompt,
                generation_config={"response_mime_type": "application/json"},
            )
            return json.loads(response.text or "{}")
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamServiceError(str(e)) from e

    def get_dua_recommendation(self, mood: str = "peaceful") -> DuaRecommendation:
        data = self._generate_json(DUA_PROMPT.format(mood=mood or "peaceful"))
        try:
            return DuaRecommendation.model_validate(data)
        except ValidationError as e:
            raise UpstreamServiceError(f"Unexpected dua payload: {e}") from e

    def get_coach_advice(self, context: Dict[str, Any], lang: str = "en") -> CoachAdvice:
        prompt = COACH_PROMPT.format(
            context=json.dumps(context, ensure_ascii=False),
            language=LANGUAGES.get(lang, "English"),
        )
        data = self._generate_json(prompt)
        try:
            return CoachAdvice.model_validate(data)
        except ValidationError as e:
            raise UpstreamServiceError(f"Unexpected coach payload: {e}") from e
