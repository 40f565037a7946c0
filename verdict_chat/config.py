"""Settings for the chat app.

The Gemini API key comes from the environment (optionally via a `.env` file)
and is looked up each time a request is handled.
"""

import os

from dotenv import load_dotenv

load_dotenv()

API_KEY_ENV_VAR = "GEMINI_API_KEY"

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODEL = "gemini-pro"

# Finish reasons (and prompt block reasons) that mean the content was filtered
SAFETY_FINISH_REASONS = frozenset({"SAFETY", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"})

GREETING = "Hello! I'm Verdict AI. How can I assist you today?"

CONFIG_MISSING_REPLY = "Server Error: API Key not configured."
INTERNAL_ERROR_REPLY = "Internal Server Error: Could not process the request."
UPSTREAM_ERROR_PREFIX = "Gemini API Error: "
SAFETY_BLOCKED_REPLY = "Sorry, your message was blocked by safety filters."
EMPTY_RESULT_REPLY = "Sorry, I didn't get that."
INVALID_REQUEST_REPLY = "Invalid request: expected a JSON body with a 'message' string."
CONNECTION_ERROR_REPLY = "⚠️ Error: Could not connect to Gemini API."


def get_api_key() -> str | None:
    """Return the configured Gemini API key, or None when it is unset or blank."""
    return os.environ.get(API_KEY_ENV_VAR, "").strip() or None


def generate_content_url(model: str = GEMINI_MODEL) -> str:
    """URL of the `generateContent` method for `model`, without the key."""
    return f"{GEMINI_API_BASE}/models/{model}:generateContent"
