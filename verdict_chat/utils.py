"""Utility functions for the chat app."""

import time
from datetime import datetime
from typing import Literal

from .models import ChatMessage


def format_timestamp(moment: datetime | None = None) -> str:
    """Display time of a message, e.g. `03:07 PM`."""
    moment = moment or datetime.now().astimezone()
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{moment:%I:%M} {suffix}"


def next_message_id(previous: str | None = None) -> str:
    """Time-derived id, strictly greater than `previous` within one session."""
    now = time.time_ns() // 1_000_000
    if previous is not None and previous.isdigit():
        now = max(now, int(previous) + 1)
    return str(now)


def create_message(
    text: str,
    sender: Literal["user", "bot"],
    previous_id: str | None = None,
) -> ChatMessage:
    """Create a ChatMessage stamped with the current time."""
    return {
        "id": next_message_id(previous_id),
        "text": text,
        "sender": sender,
        "timestamp": format_timestamp(),
    }
