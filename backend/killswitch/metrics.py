"""Utility helpers for emitting AWS EMF metrics."""
from __future__ import annotations

import json
import logging
import time

LOGGER = logging.getLogger(__name__)

NAMESPACE = "AccountKillSwitch"
DIMENSIONS = [["Action", "Result", "Step"]]


def put_metric(
    *,
    action: str,
    result: str,
    step: str,
    latency_ms: float,
    target_account_id: str | None = None,
) -> None:
    """Emit an Embedded Metric Format (EMF) log entry for a dispatched request."""
    metric = {
        "_aws": {
            "Timestamp": int(time.time() * 1000),
            "CloudWatchMetrics": [
                {
                    "Namespace": NAMESPACE,
                    "Dimensions": DIMENSIONS,
                    "Metrics": [{"Name": "Latency", "Unit": "Milliseconds"}],
                }
            ],
        },
        "Action": action or "unknown",
        "Result": result,
        "Step": step,
        "Latency": latency_ms,
        "TargetAccountId": target_account_id,
    }
    LOGGER.info("EMF %s", json.dumps({k: v for k, v in metric.items() if v is not None}))
