"""
Prometheus metrics for the synthesis pipeline.

Metrics live in a private CollectorRegistry so that importing tts_vault in
a process that already uses the default registry never clashes.

Metrics exposed:
    tts_vault_requests_total{operation,status}     synthesize/lookup outcomes
    tts_vault_stage_duration_seconds{stage}        synth/upload/catalog_put/lookup
    tts_vault_audio_bytes_total                    bytes written to storage
    tts_vault_reused_total                         requests served from the catalog
    tts_vault_orphaned_artifacts_total             objects left without a record

Usage:
    from tts_vault.core.metrics import metrics

    metrics.record_request("synthesize", "success")
    metrics.observe_stage("upload", 0.21)
    content, content_type = metrics.get_metrics_response()
"""
from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class VaultMetrics:
    """
    Counters and histograms for pipeline operations.

    All prometheus_client operations are thread-safe, so one instance is
    shared by every request thread.
    """

    def __init__(self) -> None:
        self._registry = CollectorRegistry()

        self._requests_total = Counter(
            "tts_vault_requests_total",
            "Pipeline operations by outcome",
            ["operation", "status"],
            registry=self._registry,
        )
        self._stage_duration = Histogram(
            "tts_vault_stage_duration_seconds",
            "Duration of each remote pipeline stage",
            ["stage"],
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self._registry,
        )
        self._audio_bytes_total = Counter(
            "tts_vault_audio_bytes_total",
            "Audio bytes written to artifact storage",
            registry=self._registry,
        )
        self._reused_total = Counter(
            "tts_vault_reused_total",
            "Synthesis requests answered from an existing catalog record",
            registry=self._registry,
        )
        self._orphaned_total = Counter(
            "tts_vault_orphaned_artifacts_total",
            "Stored artifacts left without a catalog record",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def record_request(self, operation: str, status: str) -> None:
        """
        Count a finished pipeline operation.

        Args:
            operation: "synthesize", "lookup", "list_voices", ...
            status: "success" or an ErrorCode value.
        """
        self._requests_total.labels(operation=operation, status=status).inc()

    def observe_stage(self, stage: str, seconds: float) -> None:
        self._stage_duration.labels(stage=stage).observe(seconds)

    def add_audio_bytes(self, count: int) -> None:
        if count > 0:
            self._audio_bytes_total.inc(count)

    def inc_reused(self) -> None:
        self._reused_total.inc()

    def inc_orphaned(self) -> None:
        self._orphaned_total.inc()

    def get_sample(self, name: str, labels: dict | None = None) -> float:
        """Current value of a sample, 0.0 if it has not been recorded yet."""
        value = self._registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0

    def get_metrics_response(self) -> tuple[bytes, str]:
        """Prometheus exposition body and content type for /metrics."""
        return generate_latest(self._registry), CONTENT_TYPE_LATEST


# Process-wide instance: from tts_vault.core.metrics import metrics
metrics = VaultMetrics()
