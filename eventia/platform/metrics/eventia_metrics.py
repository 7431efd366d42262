from prometheus_client import Counter, Histogram


class EventiaMetrics:
    """
    Registration Core Metrics Collector

    Tracks cache effectiveness and seat registration outcomes
    """

    def __init__(self):
        # ========== Cache Metrics ==========
        self.cache_lookups = Counter(
            'eventia_cache_lookups_total',
            'Cache-aside lookups',
            ['result'],  # result: hit/miss/error
        )

        self.cache_failures = Counter(
            'eventia_cache_failures_total',
            'Swallowed cache backend failures',
            ['operation'],  # operation: get/set/delete
        )

        # ========== Registration Business Metrics ==========
        self.attendance_registrations = Counter(
            'eventia_attendance_registrations_total',
            'Attendance registration attempts',
            ['outcome'],  # outcome: success or error kind
        )

        self.registration_duration = Histogram(
            'eventia_registration_duration_seconds',
            'Registration transaction duration',
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

    def record_cache_lookup(self, *, result: str) -> None:
        self.cache_lookups.labels(result=result).inc()

    def record_cache_failure(self, *, operation: str) -> None:
        self.cache_failures.labels(operation=operation).inc()

    def record_registration(self, *, outcome: str, duration: float | None = None) -> None:
        self.attendance_registrations.labels(outcome=outcome).inc()
        if duration is not None:
            self.registration_duration.observe(duration)


# Global metrics instance
metrics = EventiaMetrics()
