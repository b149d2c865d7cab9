"""EMF metric emission tests."""
from __future__ import annotations

import json
import logging

from backend.killswitch import metrics


def test_put_metric_logs_emf_payload(caplog):
    with caplog.at_level(logging.INFO, logger=metrics.LOGGER.name):
        metrics.put_metric(action="apply_scp", result="error", step="attach-scp", latency_ms=12.5, target_account_id="123456789012")

    record = next(r for r in caplog.records if r.getMessage().startswith("EMF "))
    payload = json.loads(record.getMessage()[len("EMF "):])
    assert payload["_aws"]["CloudWatchMetrics"][0]["Namespace"] == metrics.NAMESPACE
    assert payload["Action"] == "apply_scp"
    assert payload["Step"] == "attach-scp"
    assert payload["Latency"] == 12.5


def test_put_metric_drops_unset_fields(caplog):
    with caplog.at_level(logging.INFO, logger=metrics.LOGGER.name):
        metrics.put_metric(action="", result="success", step="complete", latency_ms=1.0)

    record = next(r for r in caplog.records if r.getMessage().startswith("EMF "))
    payload = json.loads(record.getMessage()[len("EMF "):])
    assert "TargetAccountId" not in payload
    assert payload["Action"] == "unknown"
