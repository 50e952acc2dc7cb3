import pytest

from companion.core.errors import UpstreamServiceError
from companion.plugins.coach import client as coach_client
from companion.plugins.coach.client import CoachClient

from .conftest import FakeGenerativeModel


def test_unconfigured_key_gives_unconfigured_client():
    client = CoachClient.from_config({"api_key": "${GEMINI_API_KEY}"})

    assert not client.configured
    with pytest.raises(UpstreamServiceError):
        client.get_dua_recommendation("hopeful")


def test_configured_key_builds_model(monkeypatch):
    configured = {}
    monkeypatch.setattr(coach_client.genai, "configure", lambda **kwargs: configured.update(kwargs))
    monkeypatch.setattr(coach_client.genai, "GenerativeModel", lambda name: FakeGenerativeModel([{"name": name}]))

    client = CoachClient.from_config({"api_key": "abc123"})

    assert client.configured
    assert configured == {"api_key": "abc123"}
    assert client.model.payloads == [{"name": "gemini-2.0-flash"}]


def test_requests_json_output():
    model = FakeGenerativeModel([{"tips": ["x", "y", "z"], "motivation": "m"}])

    advice = CoachClient(model).get_coach_advice({"fasts": 3})

    assert advice.tips == ["x", "y", "z"]
    assert model.generation_configs[0] == {"response_mime_type": "application/json"}
    assert "English" in model.prompts[0]


def test_unknown_language_falls_back_to_english():
    model = FakeGenerativeModel([{"tips": [], "motivation": "m"}])

    CoachClient(model).get_coach_advice({}, lang="fr")

    assert "English" in model.prompts[0]


def test_empty_mood_defaults_to_peaceful():
    model = FakeGenerativeModel([{"duaArabic": "a", "transliteration": "b", "meaning": "c", "source": "Quran 2:201"}])

    dua = CoachClient(model).get_dua_recommendation("")

    assert dua.source == "Quran 2:201"
    assert "peaceful" in model.prompts[0]


@pytest.mark.parametrize("payload", ["not json", {"duaArabic": "only arabic"}])
def test_bad_model_output_is_upstream_error(payload):
    with pytest.raises(UpstreamServiceError):
        CoachClient(FakeGenerativeModel([payload])).get_dua_recommendation("sad")


def test_model_exception_is_upstream_error():
    model = FakeGenerativeModel(error=RuntimeError("403 API key not valid"))

    with pytest.raises(UpstreamServiceError):
        CoachClient(model).get_coach_advice({})
