"""Prometheus metrics for observability."""

import time
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


@dataclass
class _Metric:
    name: str
    help: str
    labels: tuple[str, ...] = ()

    kind = "untyped"

    def _key(self, labels: dict[str, str]) -> tuple[str, ...]:
        return tuple(labels.get(label, "") for label in self.labels)

    def _render_labels(self, values: tuple[str, ...], extra: str = "") -> str:
        pairs = [f'{label}="{value}"' for label, value in zip(self.labels, values)]
        if extra:
            pairs.append(extra)
        return "{" + ",".join(pairs) + "}" if pairs else ""

    def header(self) -> list[str]:
        return [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} {self.kind}"]

    def samples(self) -> list[str]:
        raise NotImplementedError


@dataclass
class Counter(_Metric):
    """Monotonic counter."""

    kind = "counter"
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        self._values[self._key(labels)] += amount

    def get(self, **labels: str) -> float:
        return self._values.get(self._key(labels), 0.0)

    def samples(self) -> list[str]:
        return [f"{self.name}{self._render_labels(k)} {v}" for k, v in self._values.items()]


@dataclass
class Gauge(_Metric):
    """Value that can go up and down."""

    kind = "gauge"
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        self._values[self._key(labels)] += amount

    def dec(self, amount: float = 1.0, **labels: str) -> None:
        self._values[self._key(labels)] -= amount

    def get(self, **labels: str) -> float:
        return self._values.get(self._key(labels), 0.0)

    def samples(self) -> list[str]:
        return [f"{self.name}{self._render_labels(k)} {v}" for k, v in self._values.items()]


@dataclass
class Histogram(_Metric):
    """Histogram with fixed buckets (seconds)."""

    kind = "histogram"
    buckets: tuple[float, ...] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
    _counts: dict[tuple, dict[float, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    _sums: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))
    _totals: dict[tuple, int] = field(default_factory=lambda: defaultdict(int))

    def observe(self, value: float, **labels: str) -> None:
        key = self._key(labels)
        self._sums[key] += value
        self._totals[key] += 1
        for bucket in self.buckets:
            if value <= bucket:
                self._counts[key][bucket] += 1

    def samples(self) -> list[str]:
        lines = []
        for key, total in self._totals.items():
            for bucket in self.buckets:
                # Buckets are already cumulative: observe() increments every bucket >= value
                count = self._counts[key].get(bucket, 0)
                le = 'le="%s"' % bucket
                lines.append(f"{self.name}_bucket{self._render_labels(key, le)} {count}")
            inf = 'le="+Inf"'
            lines.append(f"{self.name}_bucket{self._render_labels(key, inf)} {total}")
            lines.append(f"{self.name}_sum{self._render_labels(key)} {self._sums[key]}")
            lines.append(f"{self.name}_count{self._render_labels(key)} {total}")
        return lines


class MetricsRegistry:
    """Registry for all metrics."""

    def __init__(self) -> None:
        # HTTP metrics
        self.http_requests_total = Counter(
            name="http_requests_total",
            help="Total number of HTTP requests",
            labels=("method", "path", "status"),
        )
        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            help="HTTP request duration in seconds",
            labels=("method", "path"),
        )
        self.http_requests_in_progress = Gauge(
            name="http_requests_in_progress",
            help="Number of HTTP requests in progress",
            labels=("method",),
        )

        # Authentication
        self.oauth_logins_total = Counter(
            name="oauth_logins_total",
            help="OAuth callback outcomes",
            labels=("outcome",),
        )
        self.lark_api_requests_total = Counter(
            name="lark_api_requests_total",
            help="Requests made to the Lark open platform",
            labels=("endpoint", "status"),
        )

        # Assessments
        self.assessments_completed_total = Counter(
            name="assessments_completed_total",
            help="Maturity assessments marked completed",
        )

    def _all(self) -> list[_Metric]:
        return [m for m in self.__dict__.values() if isinstance(m, _Metric)]

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus exposition format."""
        lines: list[str] = []
        for metric in self._all():
            lines.extend(metric.header())
            lines.extend(metric.samples())
        return "\n".join(lines) + "\n"


# Global metrics registry
metrics = MetricsRegistry()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = self._normalize_path(request.url.path)

        metrics.http_requests_in_progress.inc(method=method)

        start_time = time.monotonic()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
        finally:
            duration = time.monotonic() - start_time
            metrics.http_requests_total.inc(method=method, path=path, status=status)
            metrics.http_request_duration_seconds.observe(duration, method=method, path=path)
            metrics.http_requests_in_progress.dec(method=method)

        return response

    @staticmethod
    def _normalize_path(path: str) -> str:
        """Replace numeric path segments so IDs do not explode label cardinality."""
        return "/".join(":id" if part.isdigit() else part for part in path.split("/"))
