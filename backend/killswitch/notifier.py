"""Formats and publishes SNS notifications for kill switch outcomes."""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .types import RemediationSummary

LOGGER = logging.getLogger(__name__)
SNS_TOPIC_ENV = "SNS_TOPIC_ARN"


def publish(topic_arn: str | None, subject: str, summary_dict: Mapping[str, Any]) -> None:
    """Publish the provided summary payload to the configured SNS topic."""
    message = json.dumps(dict(summary_dict), default=str, ensure_ascii=False)
    LOGGER.info("Publishing kill switch summary subject=%s payload=%s", subject, message)

    if not topic_arn:
        LOGGER.debug("SNS topic not configured; skipping publish")
        return

    client = boto3.client("sns")
    try:
        client.publish(
            TopicArn=topic_arn,
            Message=message,
            Subject=subject[:100],  # SNS limits subjects to 100 characters
        )
    except (BotoCoreError, ClientError) as exc:  # pragma: no cover - network path
        LOGGER.error("Failed to publish kill switch summary: %s", exc)


def publish_summary(summary: RemediationSummary, topic_arn: str | None = None) -> None:
    """Serialize a RemediationSummary and publish it to SNS."""
    topic_arn = topic_arn or os.getenv(SNS_TOPIC_ENV)
    publish(topic_arn, render_subject(summary), format_summary(summary))


def render_subject(summary: RemediationSummary) -> str:
    status = summary.status.upper()
    return f"[KillSwitch] {summary.action} {summary.target_account_id or 'unknown'} :: {status}"


def format_summary(summary: RemediationSummary) -> dict[str, Any]:
    return {
        "action": summary.action,
        "account": summary.target_account_id,
        "region": summary.region,
        "role": summary.target_role_name,
        "status": summary.status,
        "message": summary.message,
        "error": summary.error,
        "errorType": summary.error_type,
        "step": summary.step,
        "duration_ms": summary.duration_ms,
        "context": dict(summary.context),
    }
