"""Relay between the chat client and the Gemini `generateContent` API.

Every call ends in a `RelayResult`: missing configuration, transport
failures, upstream errors and empty generations are all turned into a reply
the browser can display. Diagnostics stay in the server log.
"""

from __future__ import annotations as _annotations

import enum
from dataclasses import dataclass
from typing import Any

import httpx
import logfire

from . import config
from .models import RelayRequest, RelayResult


class Outcome(enum.Enum):
    """Kinds of result a relayed message can end in."""

    OK = "ok"
    CONFIG_MISSING = "config_missing"
    TRANSPORT_ERROR = "transport_error"
    UPSTREAM_ERROR = "upstream_error"
    SAFETY_BLOCKED = "safety_blocked"
    EMPTY_RESULT = "empty_result"


@dataclass(frozen=True)
class RelayOutcome:
    """What happened to one relayed message, before it is rendered for the client."""

    kind: Outcome
    text: str = ""
    status_code: int = 200

    def render(self) -> RelayResult:
        """Turn the outcome into the reply and status sent to the browser."""
        if self.kind is Outcome.OK:
            return RelayResult(self.text, 200)
        if self.kind is Outcome.CONFIG_MISSING:
            return RelayResult(config.CONFIG_MISSING_REPLY, 500)
        if self.kind is Outcome.TRANSPORT_ERROR:
            return RelayResult(config.INTERNAL_ERROR_REPLY, 500)
        if self.kind is Outcome.UPSTREAM_ERROR:
            return RelayResult(config.UPSTREAM_ERROR_PREFIX + self.text, self.status_code)
        if self.kind is Outcome.SAFETY_BLOCKED:
            return RelayResult(config.SAFETY_BLOCKED_REPLY, 200)
        return RelayResult(config.EMPTY_RESULT_REPLY, 200)


def build_request_body(message: str) -> dict[str, Any]:
    """Single-turn conversation: no history is sent upstream."""
    return {"contents": [{"role": "user", "parts": [{"text": message}]}]}


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, dict) else None


def extract_text(data: Any) -> str | None:
    """Return `candidates[0].content.parts[0].text`, or None if any step is missing."""
    candidate = _first(_get(data, "candidates"))
    part = _first(_get(_get(candidate, "content"), "parts"))
    text = _get(part, "text")
    return text if isinstance(text, str) and text else None


def is_safety_block(data: Any) -> bool:
    """True when the candidate or the prompt itself was stopped by safety filters."""
    candidate = _first(_get(data, "candidates"))
    if _get(candidate, "finishReason") in config.SAFETY_FINISH_REASONS:
        return True
    return bool(_get(_get(data, "promptFeedback"), "blockReason"))


def upstream_error_message(response: httpx.Response) -> str:
    """Human-readable message from an error response, synthesized from the status if needed."""
    try:
        message = _get(_get(response.json(), "error"), "message")
    except ValueError:
        message = None
    if isinstance(message, str) and message:
        return message
    return f"{response.status_code} {response.reason_phrase}".strip()


def upstream_status(response: httpx.Response) -> int:
    """Status to pass back to the browser: 4xx/5xx as is, anything else becomes 502."""
    return response.status_code if response.is_error else 502


def classify(response: httpx.Response) -> RelayOutcome:
    """Map a Gemini HTTP response onto a relay outcome.

    Raises `ValueError` when a successful response does not carry JSON.
    """
    if not response.is_success:
        logfire.error(
            "Gemini API returned an error status {status_code}",
            status_code=response.status_code,
            body=response.text,
        )
        return RelayOutcome(
            Outcome.UPSTREAM_ERROR,
            text=upstream_error_message(response),
            status_code=upstream_status(response),
        )

    data = response.json()
    text = extract_text(data)
    if text is not None:
        return RelayOutcome(Outcome.OK, text=text)

    if is_safety_block(data):
        logfire.warn("Gemini response blocked by safety filters", body=data)
        return RelayOutcome(Outcome.SAFETY_BLOCKED)

    logfire.warn("Gemini response had no text part", body=data)
    return RelayOutcome(Outcome.EMPTY_RESULT)


async def relay(message: str, client: httpx.AsyncClient) -> RelayOutcome:
    """Send one message to Gemini and classify the result."""
    api_key = config.get_api_key()
    if not api_key:
        logfire.error(
            "Gemini API key is missing, set {env_var} in the environment or .env file",
            env_var=config.API_KEY_ENV_VAR,
        )
        return RelayOutcome(Outcome.CONFIG_MISSING)

    try:
        response = await client.post(
            config.generate_content_url(),
            params={"key": api_key},
            json=build_request_body(message),
        )
        return classify(response)
    except (httpx.HTTPError, ValueError) as e:
        # The request URL carries the key, so only the error type and text are logged
        logfire.error(
            "Could not process the Gemini request: {error_type}: {error}",
            error_type=type(e).__name__,
            error=str(e),
        )
        return RelayOutcome(Outcome.TRANSPORT_ERROR)


async def handle(request: RelayRequest, client: httpx.AsyncClient) -> RelayResult:
    """Relay a chat message and return the reply to show in the browser."""
    outcome = await relay(request.message, client)
    return outcome.render()
