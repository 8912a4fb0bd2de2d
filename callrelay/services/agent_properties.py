"""Agent Properties — join payload for a specialized voice agent.

Invariants:
    - The agent listens only to the PSTN participant (remote_rtc_uids = [pstn_uid])
    - The script is the agent's only system message; greeting is its first utterance
    - TTS block matches the configured vendor
"""

from callrelay.config import Settings
from callrelay.core.call_scripts import FAILURE_MESSAGE, CallScript

IDLE_TIMEOUT_SECONDS = 300
MAX_HISTORY = 30


def build_tts_config(settings: Settings) -> dict:
    if settings.tts_vendor.lower() == "microsoft":
        return {
            "vendor": "microsoft",
            "params": {
                "key": settings.microsoft_tts_key,
                "region": settings.microsoft_tts_region,
                "voice_name": settings.microsoft_tts_voice_name,
                "rate": settings.microsoft_tts_rate,
                "volume": settings.microsoft_tts_volume,
            },
        }
    return {
        "vendor": "elevenlabs",
        "params": {
            "key": settings.elevenlabs_api_key,
            "model_id": settings.elevenlabs_model_id,
            "voice_id": settings.elevenlabs_voice_id,
        },
    }


def build_agent_properties(
    settings: Settings, session_channel: str, token: str, script: CallScript,
) -> dict:
    return {
        "channel": session_channel,
        "token": token,
        "agent_rtc_uid": settings.task_agent_uid,
        "remote_rtc_uids": [settings.pstn_uid],
        "enable_string_uid": False,
        "idle_timeout": IDLE_TIMEOUT_SECONDS,
        "asr": {"language": "en-US", "task": "conversation"},
        "llm": {
            "url": settings.llm_url,
            "api_key": settings.llm_api_key,
            "system_messages": [
                {"role": "system", "content": script.system_message},
            ],
            "greeting_message": script.greeting,
            "failure_message": FAILURE_MESSAGE,
            "max_history": MAX_HISTORY,
            "params": {
                "model": settings.llm_model,
                "max_tokens": 1024,
                "temperature": 0.7,
                "top_p": 0.95,
            },
            "input_modalities": ["text"],
        },
        "vad": {
            "silence_duration_ms": 480,
            "speech_duration_ms": 15000,
            "threshold": 0.5,
            "interrupt_duration_ms": 160,
            "prefix_padding_ms": 300,
        },
        "tts": build_tts_config(settings),
        "advanced_features": {"enable_aivad": False, "enable_bhvs": False},
    }
