"""Verdict AI: a small web chat that relays messages to the Gemini API."""
