"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License metrics
licenses_saved_total = Counter(
    "plugin_licenses_saved_total",
    "Total plugin licenses saved",
    ["operation"],
)

licenses_claimed_total = Counter(
    "plugin_licenses_claimed_total",
    "Total plugin licenses claimed",
    ["method"],
)

licenses_deleted_total = Counter(
    "plugin_licenses_deleted_total",
    "Total plugin licenses deleted",
)

licenses_reminded_total = Counter(
    "plugin_licenses_reminded_total",
    "Total plugin licenses flagged as reminded",
)

licenses_expired_total = Counter(
    "plugin_licenses_expired_total",
    "Total plugin licenses flagged as expired",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
