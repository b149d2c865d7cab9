"""AWS Lambda entrypoint that validates kill switch requests and dispatches them."""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Callable, Mapping

from . import config, iam_lib, metrics, notifier, scp_lib
from .errors import InvalidActionError, KillSwitchError, ValidationError
from .types import ActionKind, Event, RemediationRequest, RemediationSummary

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.INFO)

# Used for session setup whenever a request omits its region.
DEFAULT_REGION = "us-east-1"

SWITCH_CONFIG_PATH = os.getenv(config.SWITCH_CONFIG_PATH_ENV, config.DEFAULT_SWITCH_CONFIG_PATH)
SNS_TOPIC_ARN = os.getenv(notifier.SNS_TOPIC_ENV, "") or None

# Request attribute -> key in the inbound event payload.
WIRE_FIELDS = {
    "action": "action",
    "target_account_id": "target_account_id",
    "assumed_role_name": "role_to_assume",
    "target_identity_name": "target_role_name",
    "org_management_account_id": "org_management_account",
    "region": "region",
}

BASE_REQUIRED_FIELDS = ("target_account_id", "assumed_role_name")

REQUIRED_FIELDS: dict[ActionKind, tuple[str, ...]] = {
    ActionKind.APPLY_SCP: ("org_management_account_id",),
    ActionKind.DETACH_POLICIES: ("target_identity_name",),
    ActionKind.DELETE_ROLE: ("target_identity_name",),
}


def lambda_handler(event: Event, context: Any) -> dict[str, Any]:
    """AWS Lambda handler for direct kill switch invocations."""
    return handle_event(event, config_path=SWITCH_CONFIG_PATH)


def handle_event(event: Event, *, config_path: str | None = None) -> dict[str, Any]:
    """Dispatch ``event`` and shape the outcome into a status response."""
    LOGGER.debug("Received event keys: %s", sorted(event))
    start = time.perf_counter()
    action = str(event.get("action") or "unknown")
    account_id = str(event.get(WIRE_FIELDS["target_account_id"]) or "")
    region = _clean(event.get("region")) or DEFAULT_REGION

    try:
        message = dispatch(event, config_path=config_path)
    except KillSwitchError as exc:
        duration_ms = (time.perf_counter() - start) * 1000
        LOGGER.error("Kill switch %s failed at %s: %s", action, exc.step, exc)
        metrics.put_metric(action=action, result="error", step=exc.step, latency_ms=duration_ms, target_account_id=account_id)
        notifier.publish_summary(
            RemediationSummary(
                action=action,
                target_account_id=account_id,
                region=region,
                status="error",
                error=str(exc),
                error_type=type(exc).__name__,
                step=exc.step,
                target_role_name=event.get(WIRE_FIELDS["target_identity_name"]),
                duration_ms=duration_ms,
                context=exc.context,
            ),
            topic_arn=SNS_TOPIC_ARN,
        )
        return {"status": "error", "action": action, **exc.to_dict()}

    duration_ms = (time.perf_counter() - start) * 1000
    LOGGER.info("Kill switch %s succeeded: %s", action, message)
    metrics.put_metric(action=action, result="success", step="complete", latency_ms=duration_ms, target_account_id=account_id)
    notifier.publish_summary(
        RemediationSummary(
            action=action,
            target_account_id=account_id,
            region=region,
            status="success",
            message=message,
            target_role_name=event.get(WIRE_FIELDS["target_identity_name"]),
            duration_ms=duration_ms,
        ),
        topic_arn=SNS_TOPIC_ARN,
    )
    return {"status": "success", "action": action, "message": message}


def parse_request(event: Mapping[str, Any]) -> RemediationRequest:
    """Validate an inbound payload and build an immutable request from it."""
    values = {attr: _clean(event.get(key)) for attr, key in WIRE_FIELDS.items()}

    missing = [WIRE_FIELDS[attr] for attr in BASE_REQUIRED_FIELDS if not values[attr]]
    if missing:
        verb = "are" if len(missing) > 1 else "is"
        raise ValidationError(f"{' and '.join(missing)} {verb} required", field=",".join(missing))

    try:
        action = ActionKind(values["action"])
    except ValueError:
        raise InvalidActionError(
            f"invalid action {values['action']!r}; expected one of {', '.join(ActionKind.values())}",
            action=values["action"],
        ) from None

    for attr in REQUIRED_FIELDS[action]:
        if not values[attr]:
            raise ValidationError(f"{WIRE_FIELDS[attr]} is required for {action.value} action", field=WIRE_FIELDS[attr])

    return RemediationRequest(
        action=action,
        target_account_id=values["target_account_id"],
        assumed_role_name=values["assumed_role_name"],
        region=values["region"] or DEFAULT_REGION,
        target_identity_name=values["target_identity_name"],
        org_management_account_id=values["org_management_account_id"],
    )


def validate_request(request: RemediationRequest) -> RemediationRequest:
    """Apply the payload validation rules to an already built request."""
    payload = {key: getattr(request, attr) for attr, key in WIRE_FIELDS.items()}
    if isinstance(request.action, ActionKind):
        payload["action"] = request.action.value
    return parse_request(payload)


def dispatch(request: RemediationRequest | Mapping[str, Any], *, config_path: str | None = None) -> str:
    """Run the remediation described by ``request`` and return its success message.

    Raw payloads and request objects are validated first. Failures surface as
    ``KillSwitchError`` subclasses naming the step that failed.
    """
    if isinstance(request, RemediationRequest):
        request = validate_request(request)
    else:
        request = parse_request(request)
    LOGGER.info(
        "Dispatching %s for account %s in %s",
        request.action.value,
        request.target_account_id,
        request.region,
    )
    executor = _EXECUTORS[request.action]
    return executor(request, config_path or SWITCH_CONFIG_PATH)


def _run_apply_scp(request: RemediationRequest, config_path: str) -> str:
    switch_config = config.load_switch_config(config_path)
    return scp_lib.apply_scp(
        request.org_management_account_id,
        request.target_account_id,
        request.assumed_role_name,
        switch_config.scp_policy,
        region=request.region,
    )


def _run_role_remediation(request: RemediationRequest, config_path: str) -> str:
    return iam_lib.remediate_role(
        request.action,
        request.target_account_id,
        request.assumed_role_name,
        request.target_identity_name,
        region=request.region,
    )


_EXECUTORS: dict[ActionKind, Callable[[RemediationRequest, str], str]] = {
    ActionKind.APPLY_SCP: _run_apply_scp,
    ActionKind.DETACH_POLICIES: _run_role_remediation,
    ActionKind.DELETE_ROLE: _run_role_remediation,
}


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def format_response(response: Mapping[str, Any]) -> str:
    return json.dumps(dict(response), default=str)
