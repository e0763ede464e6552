"""
Prometheus metrics for secretsmith operations.
"""
from prometheus_client import Counter, Histogram, Info, CollectorRegistry


class Metrics:
    """
    Centralized metrics for secret generation and key derivation.
    """

    def __init__(self, service_name: str = "secretsmith", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # Application Info
        self.app_info = Info(
            "secretsmith",
            "Library information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        # Secret generation
        self.secrets_generated_total = Counter(
            "secretsmith_secrets_generated_total",
            "Total secrets generated",
            ["kind"],
            registry=self.registry,
        )

        self.secret_length = Histogram(
            "secretsmith_secret_length",
            "Requested secret length in characters, bytes or bits",
            ["kind"],
            buckets=(8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096, 8192, 16384),
            registry=self.registry,
        )

        # Key derivation
        self.derivations_total = Counter(
            "secretsmith_derivations_total",
            "Total iterative key derivations",
            ["algorithm"],
            registry=self.registry,
        )

        self.derivation_duration = Histogram(
            "secretsmith_derivation_duration_seconds",
            "Iterative key derivation duration in seconds",
            ["algorithm"],
            registry=self.registry,
        )

        # Errors
        self.errors_total = Counter(
            "secretsmith_errors_total",
            "Total rejected or failed operations",
            ["error_type"],
            registry=self.registry,
        )

    def record_secret_generated(self, kind: str, length: int):
        """Record a generated secret."""
        self.secrets_generated_total.labels(kind=kind).inc()
        self.secret_length.labels(kind=kind).observe(length)

    def record_derivation(self, algorithm: str, duration_seconds: float):
        """Record a completed key derivation."""
        self.derivations_total.labels(algorithm=algorithm).inc()
        self.derivation_duration.labels(algorithm=algorithm).observe(duration_seconds)

    def record_error(self, error_type: str):
        """Record a rejected or failed operation."""
        self.errors_total.labels(error_type=error_type).inc()
