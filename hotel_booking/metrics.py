"""
Prometheus metrics for reservation admission and lifecycle operations.

Metrics are module-level singletons registered on the default prometheus_client
registry; the embedding service decides how to expose them (e.g. a /metrics
route serving ``prometheus_client.generate_latest()``).

Metric Types:
    - Counter: Cumulative metrics that only increase (e.g., total creates)
    - Histogram: Observations bucketed by value (e.g., operation latency)

Example:
    >>> from hotel_booking.metrics import reservation_operations
    >>> reservation_operations.labels(operation="create", outcome="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Lifecycle Metrics
# =============================================================================

reservation_operations = Counter(
    "booking_reservation_operations_total",
    "Total reservation operations by outcome",
    ["operation", "outcome"],
)
"""
Counter for reservation operations.

Labels:
    operation: create, update, cancel, confirm
    outcome: success, validation, not_found, forbidden, conflict, storage, deadline
"""

reservation_operation_duration = Histogram(
    "booking_reservation_operation_duration_seconds",
    "Duration of reservation write operations in seconds",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)
"""
Histogram for reservation write duration, including the locked
check-and-write section.

Labels:
    operation: create, update, cancel, confirm
"""

# =============================================================================
# Availability Metrics
# =============================================================================

availability_checks = Counter(
    "booking_availability_checks_total",
    "Total availability checks performed",
    ["result"],
)
"""
Counter for availability checks.

Labels:
    result: available or unavailable
"""
