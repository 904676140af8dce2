"""Shared response handling for OpenAI-compatible endpoints."""

import httpx


def error_message(response: httpx.Response) -> str:
    """Best-effort provider error text: ``error.message`` or the HTTP reason."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.reason_phrase or f"HTTP {response.status_code}"
