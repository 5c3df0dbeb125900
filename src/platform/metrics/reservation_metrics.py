from contextlib import contextmanager
import time
from typing import Iterator

from prometheus_client import Counter, Histogram

from src.platform.exception.exceptions import ConflictError


class ReservationMetrics:
    """
    Reservation engine metrics

    Tracks booking outcomes, conflicts, dashboard cache effectiveness and
    post-commit side-effect failures
    """

    def __init__(self):
        # ========== Booking Metrics ==========
        self.reservation_operations = Counter(
            'reservation_operations_total',
            'Reservation mutations by outcome',
            ['operation', 'result'],  # operation: create/update/move/cancel
        )

        self.reservation_operation_duration = Histogram(
            'reservation_operation_duration_seconds',
            'Reservation mutation duration',
            ['operation'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        )

        self.reservation_conflicts = Counter(
            'reservation_conflicts_total',
            'Rejected writes because the table was already booked',
            ['operation', 'source'],  # source: precheck/storage
        )

        # ========== Dashboard Cache Metrics ==========
        self.dashboard_cache_requests = Counter(
            'dashboard_cache_requests_total',
            'Dashboard summary cache lookups',
            ['result'],  # hit/miss
        )

        self.dashboard_cache_errors = Counter(
            'dashboard_cache_errors_total',
            'Swallowed dashboard cache failures',
            ['operation'],  # get/set/invalidate
        )

        # ========== Side Effect Metrics ==========
        self.side_effect_jobs = Counter(
            'side_effect_jobs_total',
            'Post-commit side-effect jobs by outcome',
            ['job', 'result'],  # result: success/failed/dropped
        )

    # ========== Helper Methods ==========

    def record_reservation_operation(self, *, operation: str, result: str, duration: float):
        self.reservation_operations.labels(operation=operation, result=result).inc()
        self.reservation_operation_duration.labels(operation=operation).observe(duration)

    @contextmanager
    def track_operation(self, operation: str) -> Iterator[None]:
        """Time a reservation mutation and record it as success, conflict or error"""
        start = time.perf_counter()
        try:
            yield
        except ConflictError:
            self.record_reservation_operation(
                operation=operation, result='conflict', duration=time.perf_counter() - start
            )
            raise
        except Exception:
            self.record_reservation_operation(
                operation=operation, result='error', duration=time.perf_counter() - start
            )
            raise
        self.record_reservation_operation(
            operation=operation, result='success', duration=time.perf_counter() - start
        )

    def record_conflict(self, *, operation: str, source: str):
        self.reservation_conflicts.labels(operation=operation, source=source).inc()

    def record_cache_lookup(self, *, hit: bool):
        self.dashboard_cache_requests.labels(result='hit' if hit else 'miss').inc()

    def record_cache_error(self, *, operation: str):
        self.dashboard_cache_errors.labels(operation=operation).inc()

    def record_side_effect(self, *, job: str, result: str):
        self.side_effect_jobs.labels(job=job, result=result).inc()


# Global metrics instance (prometheus collectors register once per process)
metrics = ReservationMetrics()
