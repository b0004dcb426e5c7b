"""Tests for the Prometheus metrics wrapper."""
from prometheus_client import CONTENT_TYPE_LATEST

from tts_vault.core.metrics import VaultMetrics, metrics


class TestVaultMetrics:
    """Counters, histograms and the exposition body."""

    def test_record_request(self):
        m = VaultMetrics()
        labels = {"operation": "synthesize", "status": "success"}
        assert m.get_sample("tts_vault_requests_total", labels) == 0.0

        m.record_request("synthesize", "success")
        m.record_request("synthesize", "success")

        assert m.get_sample("tts_vault_requests_total", labels) == 2.0

    def test_observe_stage(self):
        m = VaultMetrics()
        m.observe_stage("upload", 0.2)
        m.observe_stage("upload", 0.3)

        assert m.get_sample("tts_vault_stage_duration_seconds_count", {"stage": "upload"}) == 2.0
        assert m.get_sample("tts_vault_stage_duration_seconds_sum", {"stage": "upload"}) == 0.5

    def test_audio_bytes_ignores_empty(self):
        m = VaultMetrics()
        m.add_audio_bytes(0)
        m.add_audio_bytes(128)
        assert m.get_sample("tts_vault_audio_bytes_total") == 128.0

    def test_reused_and_orphaned(self):
        m = VaultMetrics()
        m.inc_reused()
        m.inc_orphaned()
        m.inc_orphaned()
        assert m.get_sample("tts_vault_reused_total") == 1.0
        assert m.get_sample("tts_vault_orphaned_artifacts_total") == 2.0

    def test_instances_are_isolated(self):
        a, b = VaultMetrics(), VaultMetrics()
        a.inc_reused()
        assert b.get_sample("tts_vault_reused_total") == 0.0

    def test_metrics_response(self):
        m = VaultMetrics()
        m.record_request("lookup", "NOT_FOUND")

        body, content_type = m.get_metrics_response()

        assert content_type == CONTENT_TYPE_LATEST
        text = body.decode("utf-8")
        assert "tts_vault_requests_total" in text
        assert 'status="NOT_FOUND"' in text
        assert "tts_vault_stage_duration_seconds" in text

    def test_process_instance(self):
        assert isinstance(metrics, VaultMetrics)
