from __future__ import annotations

from prometheus_client import Counter, Histogram


TOKENS_ISSUED_TOTAL = Counter(
    "tokenbroker_tokens_issued_total",
    "Total tokens handed out",
    ["endpoint"],
)

TOKEN_REQUESTS_REJECTED_TOTAL = Counter(
    "tokenbroker_token_requests_rejected_total",
    "Token requests answered with a client error",
    ["endpoint", "reason"],
)

SECRET_LOOKUPS_TOTAL = Counter(
    "tokenbroker_secret_lookups_total",
    "Key Vault secret reads",
    ["secret", "outcome"],
)

HTTP_REQUEST_DURATION = Histogram(
    "tokenbroker_http_request_duration_seconds",
    "HTTP request latency seconds",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
