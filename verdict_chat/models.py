"""Data models for the chat app."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel
from typing_extensions import TypedDict


class ChatMessage(TypedDict):
    """Format of messages held by the chat client and sent to the browser."""

    id: str
    text: str
    sender: Literal["user", "bot"]
    timestamp: str


class RelayRequest(BaseModel):
    """Body of `POST /api/chat`."""

    message: str


@dataclass(frozen=True)
class RelayResult:
    """Normalized answer of the relay: always a displayable reply."""

    reply: str
    http_status: int = 200
