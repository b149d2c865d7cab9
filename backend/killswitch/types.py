"""Typed value objects shared across kill switch modules."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, MutableMapping

import boto3


class ActionKind(str, enum.Enum):
    """The closed set of remediation actions the kill switch performs."""

    APPLY_SCP = "apply_scp"
    DETACH_POLICIES = "detach_policies"
    DELETE_ROLE = "delete_role"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


@dataclass(frozen=True, slots=True)
class RemediationRequest:
    """A validated remediation request. Built by ``handler.parse_request``."""

    action: ActionKind
    target_account_id: str
    assumed_role_name: str
    region: str
    target_identity_name: str | None = None
    org_management_account_id: str | None = None


@dataclass(frozen=True, slots=True)
class ScopedCredentials:
    """Short-lived credentials bound to a single assumed role."""

    role_arn: str
    access_key_id: str = field(repr=False)
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expiration: datetime | None = None

    def session(self, region: str) -> boto3.Session:
        return boto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            aws_session_token=self.session_token,
            region_name=region,
        )


@dataclass(slots=True)
class SwitchConfig:
    """Parsed switch configuration file."""

    version: str | None
    scp_policy: str


@dataclass(slots=True)
class RemediationSummary:
    """Aggregated outcome for a kill switch invocation."""

    action: str
    target_account_id: str
    region: str
    status: str
    message: str | None = None
    error: str | None = None
    error_type: str | None = None
    step: str | None = None
    target_role_name: str | None = None
    duration_ms: float | None = None
    context: Mapping[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.status.lower() == "success"


Event = MutableMapping[str, Any]
"""Alias for raw Lambda invocation payloads."""
