"""Prometheus metrics definitions for Satchel."""

from functools import wraps

from prometheus_client import Counter, Histogram

archive_operations = Counter(
    "satchel_archive_operations_total",
    "Archive reads and writes",
    ["operation"],  # read, write
)

archive_write_duration = Histogram(
    "satchel_archive_write_duration_seconds",
    "Time to encode a container and write its archive",
)

# Graceful-degradation tracking on reload
dropped_keys = Counter(
    "satchel_dropped_keys_total",
    "Key groups dropped on reload because the tag is unknown",
)

dropped_items = Counter(
    "satchel_dropped_items_total",
    "Items dropped on reload because their blob failed to decode",
    ["key"],
)

# Error tracking
operation_errors = Counter(
    "satchel_operation_errors_total",
    "Total errors by operation",
    ["operation", "error_type"],
)


def track_operation(operation: str, metric: Histogram | None = None):
    """Decorator for counting an archive operation and its errors.

    Args:
        operation: Name of the operation for labeling
        metric: Optional Histogram to time the operation with

    Example:
        @track_operation("write", archive_write_duration)
        def write_container(container, path):
            ...
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            archive_operations.labels(operation=operation).inc()
            try:
                if metric is None:
                    return func(*args, **kwargs)
                with metric.time():
                    return func(*args, **kwargs)
            except Exception as e:
                operation_errors.labels(
                    operation=operation,
                    error_type=type(e).__name__,
                ).inc()
                raise

        return wrapper

    return decorator
