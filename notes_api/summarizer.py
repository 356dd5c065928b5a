"""Note summarization.

The current summary is a placeholder: the first ``SUMMARY_LENGTH`` characters
of the content followed by ``ELLIPSIS``. The marker is appended even when the
content is shorter than ``SUMMARY_LENGTH``.
"""

from __future__ import annotations

import logging
from typing import Any

from notes_api.errors import SummarizationError

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 100
ELLIPSIS = "..."


def summarize(content: str) -> str:
    """Return the summary of *content*."""
    if not isinstance(content, str):
        raise SummarizationError("content must be a string")
    return f"{content[:SUMMARY_LENGTH]}{ELLIPSIS}"


def content_from_payload(payload: Any) -> str:
    """Extract the ``content`` field from a decoded summarize request body."""
    if not isinstance(payload, dict):
        raise SummarizationError("Request body must be a JSON object")
    if "content" not in payload:
        raise SummarizationError("Missing 'content' field")
    content = payload["content"]
    if not isinstance(content, str):
        raise SummarizationError("'content' must be a string")
    return content
