"""Settings: dispatch prerequisites and feature switches."""

from tests.fakes import make_settings


def test_complete_environment_has_nothing_missing():
    assert make_settings().missing_agent_config() == []


def test_blank_values_are_reported_in_stable_order():
    settings = make_settings(agora_app_id="  ", llm_api_key="")
    assert settings.missing_agent_config() == ["AGORA_APP_ID", "LLM_API_KEY"]


def test_microsoft_vendor_requires_its_own_keys():
    settings = make_settings(tts_vendor="Microsoft", microsoft_tts_key="k")
    assert settings.missing_agent_config() == [
        "MICROSOFT_TTS_REGION", "MICROSOFT_TTS_VOICE_NAME",
    ]


def test_unknown_vendor_is_reported():
    assert make_settings(tts_vendor="acme").missing_agent_config() == ["TTS_VENDOR"]


def test_search_enabled_follows_api_key():
    assert make_settings().search_enabled is False
    assert make_settings(yelp_api_key="y").search_enabled is True


def test_certificate_is_a_dispatch_prerequisite():
    settings = make_settings(agora_app_certificate="")
    assert settings.missing_agent_config() == ["AGORA_APP_CERTIFICATE"]
