"""Prometheus metrics for the notes API.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Note store metrics
# ---------------------------------------------------------------------------

NOTE_OPERATIONS = Counter(
    "notes_store_operations_total",
    "Total note store operations",
    ["operation", "status"],  # list/create/update/delete, success/error
)

SUMMARIES = Counter(
    "notes_summaries_total",
    "Total summarize requests",
    ["status"],
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS = Counter(
    "notes_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_DURATION = Histogram(
    "notes_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
