"""
Translation backend — language-model call that turns free text into
shortlist actions.

Behavioral Contract:
- One synchronous request/response per translation; no streaming, no retry.
- Bounded by a timeout.
- Every failure mode (transport, non-2xx, unparseable body, wrong JSON
  shape) raises TranslationBackendError. The caller decides what to do.
- The API key is sent as a header and never logged.
"""

import json
import logging
import re
from typing import List, Literal, Optional, Protocol

import requests
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from shortlist_bridge.errors import TranslationBackendError
from shortlist_bridge.models.config import BridgeConfig
from shortlist_bridge.models.voice import ActionOperation, ProposedAction, TranslationResult

logger = logging.getLogger(__name__)


SYSTEM_PROMPT_TEMPLATE = """You are a voice command interpreter for a candidate shortlisting system.

Current candidates available: {names}

Your job is to interpret voice commands and generate shortlist actions.

Voice commands might be like:
- "Shortlist Todd Kurtz and Kyle Scharnhorst"
- "Add Kenneth Chen to the shortlist"
- "I want to shortlist the first three candidates"
- "Remove Scott Goldwater from shortlist"

Respond with a single JSON object in this format:
{{
  "interpretation": "Brief explanation of what the user wants",
  "actions": [
    {{
      "type": "shortlist",
      "action": "add" or "remove",
      "candidateName": "Exact candidate name",
      "confidence": 0.0 to 1.0
    }}
  ]
}}

If no clear shortlist action is requested, return an empty actions array.
Only use exact candidate names from the provided list. Only output JSON."""


class TranslationBackend(Protocol):
    """Protocol for translation backends — pluggable."""

    def translate(self, text: str, candidate_names: List[str]) -> TranslationResult: ...


class BackendActionPayload(BaseModel):
    """One action as the model is asked to emit it."""

    type: Literal["shortlist"] = "shortlist"
    action: ActionOperation
    candidateName: str = Field(min_length=1)
    confidence: float = Field(ge=0, le=1)


class BackendReply(BaseModel):
    """The JSON object the model is asked to return."""

    interpretation: str = ""
    actions: List[BackendActionPayload] = []

    def to_result(self) -> TranslationResult:
        return TranslationResult(
            interpretation=self.interpretation,
            actions=[
                ProposedAction(
                    kind=a.type,
                    operation=a.action,
                    target_name=a.candidateName,
                    confidence=a.confidence,
                )
                for a in self.actions
            ],
        )


_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def build_system_prompt(candidate_names: List[str]) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(names=", ".join(candidate_names))


def parse_reply(content: str) -> BackendReply:
    """Parse the model's message content into a BackendReply."""
    if not isinstance(content, str) or not content.strip():
        raise TranslationBackendError("backend returned empty content")

    text = _FENCE_RE.sub("", content.strip())
    match = _OBJECT_RE.search(text)
    if not match:
        raise TranslationBackendError("backend content contains no JSON object")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise TranslationBackendError(f"backend content is not valid JSON: {exc}") from exc

    try:
        return BackendReply.model_validate(data)
    except PydanticValidationError as exc:
        raise TranslationBackendError(
            f"backend JSON does not match the action schema ({exc.error_count()} errors)"
        ) from exc


class OpenAIChatBackend:
    """
    OpenAI-compatible `/chat/completions` backend over `requests`.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4",
        timeout: float = 12.0,
        temperature: float = 0.1,
        max_tokens: int = 500,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: BridgeConfig) -> Optional["OpenAIChatBackend"]:
        """None when no API key is configured."""
        if not config.backend_configured:
            return None
        return cls(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            model=config.openai_model,
            timeout=config.translation_timeout_seconds,
            temperature=config.translation_temperature,
            max_tokens=config.translation_max_tokens,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(self, text: str, candidate_names: List[str]) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": build_system_prompt(candidate_names)},
                {"role": "user", "content": text},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def translate(self, text: str, candidate_names: List[str]) -> TranslationResult:
        payload = self.build_payload(text, candidate_names)
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self._session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TranslationBackendError(
                f"backend transport failure: {exc.__class__.__name__}"
            ) from exc

        if not response.ok:
            raise TranslationBackendError(f"backend returned HTTP {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise TranslationBackendError("backend response is not a chat completion") from exc

        logger.debug("Backend content: %s", content)
        reply = parse_reply(content)
        return reply.to_result()

    def close(self) -> None:
        self._session.close()
