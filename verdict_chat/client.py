"""Chat client: the conversation log and the calls it makes to the relay.

`ChatSession` mirrors what the browser page does. It keeps the messages of
one session in order and lets only one message wait for a reply at a time.
"""

from __future__ import annotations as _annotations

from typing import Awaitable, Callable, Literal

import httpx
import logfire

from . import config
from .models import ChatMessage
from .utils import create_message

SendMessage = Callable[[str], Awaitable[str]]


class RelayClient:
    """Posts chat messages to the relay endpoint and returns the text to display."""

    def __init__(self, http_client: httpx.AsyncClient, path: str = "/api/chat"):
        self.http_client = http_client
        self.path = path

    async def send_message(self, text: str) -> str:
        """Return the relay reply for `text`, or a client-side error message."""
        try:
            response = await self.http_client.post(self.path, json={"message": text})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logfire.warn("Error calling the chat relay: {error}", error=str(e))
            return config.CONNECTION_ERROR_REPLY

        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply:
            return config.EMPTY_RESULT_REPLY
        if not response.is_success:
            logfire.info("Chat relay answered with status {status_code}", status_code=response.status_code)
        return reply


class ChatSession:
    """Conversation log behind a single-flight gate.

    A submission is admitted only when the text is not blank and no earlier
    message is still waiting for its reply. An admitted submission appends
    the user message, then exactly one bot message once the relay answers.
    """

    def __init__(self, send_message: SendMessage, greeting: str = config.GREETING):
        self._send_message = send_message
        self._messages: list[ChatMessage] = [create_message(greeting, "bot")]
        self.awaiting = False

    @property
    def messages(self) -> list[ChatMessage]:
        """Copy of the conversation log, oldest first."""
        return list(self._messages)

    def _append(self, text: str, sender: Literal["user", "bot"]) -> ChatMessage:
        message = create_message(text, sender, previous_id=self._messages[-1]["id"])
        self._messages.append(message)
        return message

    async def submit(self, text: str) -> bool:
        """Send `text` to the relay; returns False when the submission is rejected."""
        if not text.strip() or self.awaiting:
            return False

        self._append(text, "user")
        self.awaiting = True
        try:
            try:
                reply = await self._send_message(text)
            except Exception:
                logfire.exception("Error sending message")
                reply = config.CONNECTION_ERROR_REPLY
            self._append(reply, "bot")
        finally:
            self.awaiting = False
        return True
