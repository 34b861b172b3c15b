"""
Voice-agent context hook.

After each upload the current candidate names are pushed to the voice
agent so it can recognise them. Best-effort: failures are logged and
swallowed, and an unconfigured hook only logs.
"""

import logging
from typing import List, Optional

import requests

from shortlist_bridge.models.config import BridgeConfig

logger = logging.getLogger(__name__)


class VoiceContextNotifier:

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        agent_id: Optional[str] = None,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self._api_key = api_key
        self.agent_id = agent_id
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: BridgeConfig) -> "VoiceContextNotifier":
        return cls(
            url=config.voice_context_url,
            api_key=config.voice_context_api_key,
            agent_id=config.voice_context_agent_id,
            timeout=config.voice_context_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.url)

    @staticmethod
    def build_context(candidate_names: List[str]) -> str:
        return f"Current candidates available for shortlisting: {', '.join(candidate_names)}"

    def notify(self, candidate_names: List[str], request_id: str = "-") -> bool:
        """Push the candidate context. Returns True only if the service accepted it."""
        context = self.build_context(candidate_names)
        if not self.configured:
            logger.info("[%s] Voice context (not pushed, no endpoint): %s", request_id, context)
            return False

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            response = self._session.post(
                self.url,
                json={"agent_id": self.agent_id, "context": context},
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning(
                "[%s] Voice context update failed: %s", request_id, exc.__class__.__name__
            )
            return False

        logger.info("[%s] Voice context updated with %d candidates", request_id, len(candidate_names))
        return True

    def close(self) -> None:
        self._session.close()
