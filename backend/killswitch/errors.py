"""Exception taxonomy for kill switch failures.

Every error names the step that failed and carries the identifiers an operator
needs to finish or reconcile the remediation by hand. Nothing here is retried.
"""
from __future__ import annotations

from typing import Any


class KillSwitchError(Exception):
    """Base class for all failures reported to the caller."""

    step = "unknown"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = {key: value for key, value in context.items() if value is not None}

    def to_dict(self) -> dict[str, Any]:
        return {
            "errorType": type(self).__name__,
            "error": self.message,
            "step": self.step,
            "context": dict(self.context),
        }


class ValidationError(KillSwitchError):
    """Missing or invalid request fields, detected before any cloud call."""

    step = "validate-request"


class InvalidActionError(ValidationError):
    """The requested action is not one of the supported actions."""

    step = "validate-action"


class ConfigError(KillSwitchError):
    """The containment policy document is missing, unreadable or malformed."""

    step = "load-config"


class CredentialError(KillSwitchError):
    """Role assumption was refused by STS."""

    step = "assume-role"


class ListError(KillSwitchError):
    """Enumerating managed or inline policies on the role failed."""

    step = "list-policies"


class DetachError(KillSwitchError):
    """Detaching a managed policy from the role failed."""

    step = "detach-policy"


class InlinePolicyDeleteError(KillSwitchError):
    """Deleting an inline policy from the role failed."""

    step = "delete-inline-policy"


class IdentityDeleteError(KillSwitchError):
    """Deleting the role itself failed."""

    step = "delete-role"


class PolicyCreationError(KillSwitchError):
    """Creating the service control policy failed."""

    step = "create-scp"


class PolicyAttachError(KillSwitchError):
    """Attaching the created service control policy to the account failed.

    The policy already exists in the organization at this point and is left in
    place; ``context["policy_id"]`` identifies it for manual cleanup.
    """

    step = "attach-scp"
