"""
Prometheus Metrics for the Bank API service.

This module defines all metrics exposed at the /metrics endpoint.
Metrics are categorized into:

1. Account Metrics - accounts created and deleted
2. Security Metrics - login outcomes and authorization gate decisions
3. HTTP Metrics - request counts and latencies
"""
from prometheus_client import Counter, Histogram, Info

# =============================================================================
# SERVICE INFO
# =============================================================================

SERVICE_INFO = Info(
    "bank_service",
    "Service information"
)
SERVICE_INFO.info({
    "version": "0.1.0",
    "service": "bank-api",
})

# =============================================================================
# ACCOUNT METRICS
# =============================================================================

ACCOUNTS_CREATED = Counter(
    "bank_accounts_created_total",
    "Total accounts created"
)

ACCOUNTS_DELETED = Counter(
    "bank_accounts_deleted_total",
    "Total accounts deleted"
)

# Counter: account number collisions during creation
ACCOUNT_NUMBER_COLLISIONS = Counter(
    "bank_account_number_collisions_total",
    "Account number draws rejected because the number was taken"
)

# =============================================================================
# SECURITY METRICS
# =============================================================================

LOGIN_TOTAL = Counter(
    "bank_login_total",
    "Login attempts by outcome",
    ["outcome"]  # success, failed
)

TOKENS_ISSUED = Counter(
    "bank_tokens_issued_total",
    "Signed tokens issued"
)

AUTHORIZATION_TOTAL = Counter(
    "bank_authorization_total",
    "Authorization gate decisions",
    ["outcome"]  # allowed, invalid_token, owner_mismatch, bad_request
)

# =============================================================================
# HTTP METRICS (Standard)
# =============================================================================

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

HTTP_REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_request(method: str, endpoint: str, status: int, latency_seconds: float) -> None:
    """Record a completed HTTP request."""
    HTTP_REQUESTS.labels(method=method, endpoint=endpoint, status=status).inc()
    HTTP_REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(latency_seconds)


def record_login(success: bool) -> None:
    """Record a login attempt."""
    LOGIN_TOTAL.labels(outcome="success" if success else "failed").inc()


def record_authorization(outcome: str) -> None:
    """Record an authorization gate decision."""
    AUTHORIZATION_TOTAL.labels(outcome=outcome).inc()
