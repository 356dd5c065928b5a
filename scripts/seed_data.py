"""Seed the notes service with the sample notes.

Posts three sample notes through the HTTP API so the UI has something
to show. Requires the notes API to be running.

Usage:
    python scripts/seed_data.py [--base-url http://localhost:8000]
"""

from __future__ import annotations

import argparse
import sys

import requests

DEFAULT_BASE_URL = "http://localhost:8000"
TIMEOUT = 10

# Each entry: (title, content)
SAMPLE_NOTES: list[tuple[str, str]] = [
    (
        "The Art of Programming",
        "Programming is both a science and an art form. Like any craft, it "
        "requires technical knowledge and precision, but also creativity and "
        "intuition. The best programmers are those who can balance these "
        "aspects, creating code that is not only functional but also elegant "
        "and maintainable.\n\n"
        "Just as a writer crafts stories with words, a programmer writes "
        "solutions with code. Each line serves a purpose, each function tells "
        "a story, and the whole program comes together like chapters in a "
        "book. The joy of programming comes from solving complex problems "
        "with simple, beautiful solutions.",
    ),
    (
        "Web Development Journey",
        "Starting my journey in web development has been an exciting "
        "adventure. From learning HTML and CSS basics to diving into "
        "JavaScript and React, each step has opened new possibilities. The "
        "web is an incredibly dynamic platform, constantly evolving with new "
        "technologies and approaches.\n\n"
        "One of the most fascinating aspects is how different technologies "
        "work together. Frontend frameworks like React make building "
        "interactive interfaces intuitive, while backend technologies handle "
        "data and business logic. Understanding how these pieces fit together "
        "is like solving a complex puzzle, where each piece has its own "
        "unique role.",
    ),
    (
        "Future of AI in Technology",
        "Artificial Intelligence is revolutionizing the way we approach "
        "software development and problem-solving. From automated testing to "
        "code generation, AI tools are becoming an integral part of a "
        "developer's toolkit. These advancements are not replacing "
        "programmers but rather augmenting their capabilities and "
        "productivity.\n\n"
        "The future looks even more promising as AI continues to evolve. "
        "We're seeing the emergence of systems that can understand context, "
        "generate complex code structures, and even debug applications. "
        "However, it's crucial to remember that human creativity and "
        "critical thinking remain essential in guiding these tools and "
        "ensuring they produce meaningful results.",
    ),
]


def check_health(base_url: str) -> bool:
    """Verify the notes API is reachable and its store is healthy."""
    try:
        resp = requests.get(f"{base_url}/health", timeout=TIMEOUT)
        data = resp.json()
        return data.get("status") == "healthy"
    except Exception as e:
        print(f"  Health check failed: {e}")
        return False


def create_note(base_url: str, title: str, content: str) -> dict:
    """Create one note and return it."""
    resp = requests.post(
        f"{base_url}/notes",
        json={"title": title, "content": content},
        timeout=TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


def main() -> None:
    """Create every sample note in order."""
    parser = argparse.ArgumentParser(description="Seed sample notes")
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Notes API base URL (default: {DEFAULT_BASE_URL})",
    )
    args = parser.parse_args()
    base_url = args.base_url.rstrip("/")
    total = len(SAMPLE_NOTES)

    print(f"\n  Seeding notes via {base_url}")
    print("  " + "=" * 58)

    print(f"\n  [0/{total}] Checking API health...")
    if not check_health(base_url):
        print("  FAIL: Notes API is not healthy. Is the server running?")
        sys.exit(1)
    print("  OK: Notes API is healthy.\n")

    failures = 0
    for i, (title, content) in enumerate(SAMPLE_NOTES, 1):
        try:
            note = create_note(base_url, title, content)
            print(f"  [{i}/{total}] Created note {note['id']}: {title}")
        except requests.RequestException as e:
            failures += 1
            print(f"  [{i}/{total}] ERROR creating '{title}': {e}")

    print()
    print(f"  Done! {total - failures}/{total} notes created.")
    print("    - Streamlit UI:  http://localhost:8501")
    print("    - API Docs:      http://localhost:8000/docs")
    print()
    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
