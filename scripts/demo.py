#!/usr/bin/env python3
"""
Notes end-to-end demo

Walks a running notes API through one full note lifecycle: create a
note, list it, summarize it, delete it, and confirm the listing no
longer contains it.
"""

import sys

import requests

API_URL = "http://localhost:8000"
TIMEOUT = 10

# ---------------------------------------------------------------------------
# ANSI colours
# ---------------------------------------------------------------------------
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"
CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"


def banner(text: str) -> None:
    """Print a bold cyan banner."""
    width = 60
    print()
    print(f"{CYAN}{BOLD}{'=' * width}{RESET}")
    print(f"{CYAN}{BOLD}  {text}{RESET}")
    print(f"{CYAN}{BOLD}{'=' * width}{RESET}")
    print()


def step(number: int, title: str) -> None:
    """Print a step header."""
    print(f"\n{YELLOW}{BOLD}--- Step {number}: {title} ---{RESET}\n")


def info(msg: str) -> None:
    print(f"  {DIM}{msg}{RESET}")


def success(msg: str) -> None:
    print(f"  {GREEN}{msg}{RESET}")


def fail(msg: str) -> None:
    """Print an error and exit."""
    print(f"  {RED}{BOLD}{msg}{RESET}")
    sys.exit(1)


def list_notes() -> list[dict]:
    resp = requests.get(f"{API_URL}/notes", timeout=TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def main() -> None:
    banner("Notes API — end-to-end demo")

    try:
        before = {n["id"] for n in list_notes()}
    except requests.RequestException as e:
        fail(f"Cannot reach the notes API at {API_URL}: {e}")

    step(1, "Create a note")
    resp = requests.post(
        f"{API_URL}/notes",
        json={"title": "Shopping", "content": "Buy milk and eggs"},
        timeout=TIMEOUT,
    )
    resp.raise_for_status()
    note = resp.json()
    success(f"Created note {note['id']} on {note['date']}")

    step(2, "List notes")
    notes = list_notes()
    info(f"{len(notes)} notes, newest first")
    if not notes or notes[0]["id"] != note["id"]:
        fail("New note is not at the top of the listing")
    success(f"Top note: {notes[0]['title']}")

    step(3, "Summarize the note")
    resp = requests.post(
        f"{API_URL}/summarize", json={"content": note["content"]}, timeout=TIMEOUT
    )
    resp.raise_for_status()
    success(f"Summary: {resp.json()['summary']}")

    step(4, "Delete the note")
    requests.delete(f"{API_URL}/notes/{note['id']}", timeout=TIMEOUT).raise_for_status()
    remaining = {n["id"] for n in list_notes()}
    if note["id"] in remaining:
        fail("Deleted note is still listed")
    if remaining != before:
        fail("Listing changed beyond the deleted note")
    success("Note deleted; listing is back to where it started")

    banner("Demo complete")


if __name__ == "__main__":
    main()
