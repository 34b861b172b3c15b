"""Bridge configuration."""

import os
from typing import Optional

from pydantic import BaseModel, Field


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class BridgeConfig(BaseModel):
    """Runtime configuration. Secrets come from the environment only."""

    # Translation backend (OpenAI-compatible chat completions)
    openai_api_key: Optional[str] = Field(default=None, repr=False)
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4"
    translation_timeout_seconds: float = Field(default=12.0, ge=1, le=60)
    translation_temperature: float = Field(default=0.1, ge=0, le=2)
    translation_max_tokens: int = Field(default=500, ge=1)

    # Drop backend actions whose target is not in the current candidate list
    strict_targets: bool = False

    # Retention
    voice_log_capacity: int = Field(default=50, ge=1)
    execution_history_capacity: int = Field(default=50, ge=1)
    command_retention: int = Field(default=500, ge=1)
    dashboard_recent_window: int = Field(default=10, ge=1)

    # Optional voice-agent context hook
    voice_context_url: Optional[str] = None
    voice_context_api_key: Optional[str] = Field(default=None, repr=False)
    voice_context_agent_id: Optional[str] = None
    voice_context_timeout_seconds: float = Field(default=5.0, ge=1, le=60)

    log_level: str = "INFO"

    @property
    def backend_configured(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def voice_context_configured(self) -> bool:
        return bool(self.voice_context_url)

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Build a config from environment variables (call load_dotenv first if wanted)."""
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4"),
            translation_timeout_seconds=float(os.getenv("SHORTLIST_TRANSLATION_TIMEOUT", "12")),
            strict_targets=_env_bool("SHORTLIST_STRICT_TARGETS"),
            voice_log_capacity=int(os.getenv("SHORTLIST_VOICE_LOG_CAPACITY", "50")),
            execution_history_capacity=int(os.getenv("SHORTLIST_EXECUTION_HISTORY_CAPACITY", "50")),
            command_retention=int(os.getenv("SHORTLIST_COMMAND_RETENTION", "500")),
            voice_context_url=os.getenv("SHORTLIST_VOICE_CONTEXT_URL") or None,
            voice_context_api_key=os.getenv("ELEVENLABS_API_KEY") or None,
            voice_context_agent_id=os.getenv("ELEVENLABS_AGENT_ID") or None,
            log_level=os.getenv("SHORTLIST_LOG_LEVEL", "INFO").upper(),
        )
