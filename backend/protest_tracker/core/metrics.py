"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

auth_attempts = Counter(
    "auth_attempts_total",
    "Registration and login attempts",
    ["action", "result"],  # register/login, success/conflict/invalid
)

engagement_updates = Counter(
    "engagement_updates_total",
    "Like and follow counter updates",
    ["target", "direction"],  # protest/organizer, up/down
)

protest_writes = Counter(
    "protest_writes_total",
    "Protest create/update/delete operations",
    ["operation"],
)

schema_init = Counter(
    "schema_init_total",
    "Schema initialization outcomes",
    ["result"],  # success, failure
)


def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


def record_auth_attempt(action: str, result: str) -> None:
    auth_attempts.labels(action=action, result=result).inc()


def record_engagement(target: str, increase: bool) -> None:
    engagement_updates.labels(target=target, direction="up" if increase else "down").inc()


def record_protest_write(operation: str) -> None:
    protest_writes.labels(operation=operation).inc()


def record_schema_init(success: bool) -> None:
    schema_init.labels(result="success" if success else "failure").inc()
