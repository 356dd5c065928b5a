"""Thin HTTP client for the notes API backend.

All functions return parsed JSON (dicts/lists) or raise on failure.
Uses requests (synchronous) since Streamlit reruns are synchronous.
"""

from __future__ import annotations

import os
from typing import Any

import requests

BASE_URL = os.getenv("NOTES_API_URL", "http://localhost:8000")
_TIMEOUT = 10  # seconds


def list_notes() -> list[dict[str, Any]]:
    """GET /notes — all notes, newest first."""
    resp = requests.get(f"{BASE_URL}/notes", timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def create_note(title: str, content: str) -> dict[str, Any]:
    """POST /notes — create a note."""
    resp = requests.post(
        f"{BASE_URL}/notes",
        json={"title": title, "content": content},
        timeout=_TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


def update_note(note_id: int, title: str, content: str) -> dict[str, Any]:
    """PUT /notes/{id} — overwrite a note's title and content."""
    resp = requests.put(
        f"{BASE_URL}/notes/{note_id}",
        json={"title": title, "content": content},
        timeout=_TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


def delete_note(note_id: int) -> None:
    """DELETE /notes/{id} — remove a note."""
    resp = requests.delete(f"{BASE_URL}/notes/{note_id}", timeout=_TIMEOUT)
    resp.raise_for_status()


def summarize(content: str) -> str:
    """POST /summarize — summary text for a note's content."""
    resp = requests.post(
        f"{BASE_URL}/summarize", json={"content": content}, timeout=_TIMEOUT
    )
    resp.raise_for_status()
    return resp.json()["summary"]


def get_health() -> dict[str, Any]:
    """GET /health — backend status."""
    resp = requests.get(f"{BASE_URL}/health", timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def error_message(exc: Exception) -> str:
    """Turn a failed API call into a message fit for the page."""
    if isinstance(exc, requests.ConnectionError):
        return (
            "Cannot reach the notes API. "
            "Make sure the FastAPI server is running on port 8000."
        )
    if isinstance(exc, requests.Timeout):
        return "Request timed out. The server may be overloaded."
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        try:
            return exc.response.json()["error"]
        except (ValueError, KeyError, TypeError):
            pass
    return f"Request failed: {exc}"
