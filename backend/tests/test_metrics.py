"""
Tests for the metrics registry selection
"""
from blogdemo.core.metrics import build_registry
from prometheus_client import REGISTRY, CollectorRegistry


def test_default_registry_outside_multiprocess_mode(monkeypatch):
    monkeypatch.delenv("PROMETHEUS_MULTIPROC_DIR", raising=False)

    assert build_registry() is REGISTRY


def test_fresh_registry_in_multiprocess_mode(monkeypatch, tmp_path):
    monkeypatch.setenv("PROMETHEUS_MULTIPROC_DIR", str(tmp_path))

    registry = build_registry()

    assert isinstance(registry, CollectorRegistry)
    assert registry is not REGISTRY
