"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - missing_agent_config() lists exactly the empty variables a dispatch needs, in stable order

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Field names mirror the platform's env var names (AGORA_*, PSTN_*, LLM_*) so the
      same .env works for every service talking to the platform
    - Dispatch prerequisites are checked per call, not at boot: the chat route works
      without telephony, only specialized agents need it
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Completion provider
    anthropic_api_key: str = "sk-ant-placeholder"
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 60
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 60_000
    agent_model: str = "claude-sonnet-4-5"
    completion_max_tokens: int = 1024

    # Inbound auth: empty disables the bearer check (local development)
    api_auth_token: str = ""

    # Conversational agent platform
    agora_app_id: str = ""
    agora_app_certificate: str = ""
    agora_customer_id: str = ""
    agora_customer_secret: str = ""
    agora_convo_ai_base_url: str = ""
    task_agent_uid: str = "392781"
    pstn_uid: str = "33399"

    # Telephony
    agora_pstn_api_url: str = ""
    agora_pstn_auth_header: str = ""
    agora_pstn_from_number: str = ""
    agora_pstn_region: str = "AREA_CODE_NA"
    custom_sip_gateway: str = ""
    hermes_phone_number: str = ""
    sid_phone_number: str = ""

    # LLM used by the specialized voice agent
    llm_url: str = ""
    llm_api_key: str = ""
    llm_model: str = "gpt-4o-mini"

    # Speech synthesis
    tts_vendor: str = "elevenlabs"
    elevenlabs_api_key: str = ""
    elevenlabs_model_id: str = ""
    elevenlabs_voice_id: str = ""
    microsoft_tts_key: str = ""
    microsoft_tts_region: str = ""
    microsoft_tts_voice_name: str = ""
    microsoft_tts_rate: float = 1.0
    microsoft_tts_volume: float = 1.0

    # Restaurant search: tools exposed only when a key is set
    yelp_api_key: str = ""
    yelp_base_url: str = "https://api.yelp.com/v3"

    # Timeouts and lifetimes
    provision_timeout_seconds: float = 30.0
    status_timeout_seconds: float = 10.0
    credential_ttl_seconds: int = 3600
    call_action_ttl_seconds: int = 3600

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def search_enabled(self) -> bool:
        return bool(self.yelp_api_key)

    def missing_agent_config(self) -> list[str]:
        """Env var names required for specialized-agent dispatch that are empty."""
        required = [
            ("AGORA_APP_ID", self.agora_app_id),
            ("AGORA_APP_CERTIFICATE", self.agora_app_certificate),
            ("AGORA_CUSTOMER_ID", self.agora_customer_id),
            ("AGORA_CUSTOMER_SECRET", self.agora_customer_secret),
            ("AGORA_CONVO_AI_BASE_URL", self.agora_convo_ai_base_url),
            ("AGORA_PSTN_API_URL", self.agora_pstn_api_url),
            ("AGORA_PSTN_AUTH_HEADER", self.agora_pstn_auth_header),
            ("AGORA_PSTN_FROM_NUMBER", self.agora_pstn_from_number),
            ("LLM_URL", self.llm_url),
            ("LLM_API_KEY", self.llm_api_key),
        ]
        vendor = self.tts_vendor.lower()
        if vendor == "elevenlabs":
            required += [
                ("ELEVENLABS_API_KEY", self.elevenlabs_api_key),
                ("ELEVENLABS_MODEL_ID", self.elevenlabs_model_id),
                ("ELEVENLABS_VOICE_ID", self.elevenlabs_voice_id),
            ]
        elif vendor == "microsoft":
            required += [
                ("MICROSOFT_TTS_KEY", self.microsoft_tts_key),
                ("MICROSOFT_TTS_REGION", self.microsoft_tts_region),
                ("MICROSOFT_TTS_VOICE_NAME", self.microsoft_tts_voice_name),
            ]
        else:
            required.append(("TTS_VENDOR", ""))
        return [name for name, value in required if not value.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
