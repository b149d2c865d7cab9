"""Create a restrictive service control policy and attach it to an account."""
from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError, ClientError

from . import credentials
from .errors import PolicyAttachError, PolicyCreationError
from .types import ScopedCredentials

LOGGER = logging.getLogger(__name__)

SCP_NAME = "HighlyRestrictiveSCP"
SCP_DESCRIPTION = "Highly Restrictive SCP"
SCP_TYPE = "SERVICE_CONTROL_POLICY"


def apply_scp(
    management_account_id: str,
    target_account_id: str,
    assumed_role: str,
    policy_document: str,
    *,
    region: str,
) -> str:
    """Create the containment SCP from the management account and attach it.

    Creation and attachment are separate calls. If attachment fails the policy
    stays in the organization and the raised ``PolicyAttachError`` carries its id.
    """
    scoped = credentials.assume_role(management_account_id, assumed_role, region=region)
    client = _organizations_client(scoped, region)

    LOGGER.info("Creating SCP %s from management account %s", SCP_NAME, management_account_id)
    try:
        response = client.create_policy(
            Content=policy_document,
            Description=SCP_DESCRIPTION,
            Name=SCP_NAME,
            Type=SCP_TYPE,
        )
    except (ClientError, BotoCoreError) as exc:
        raise PolicyCreationError(
            f"error creating SCP: {exc}",
            account_id=management_account_id,
            target_account_id=target_account_id,
        ) from exc
    policy_id = response["Policy"]["PolicySummary"]["Id"]

    LOGGER.info("Attaching SCP %s to account %s", policy_id, target_account_id)
    try:
        client.attach_policy(PolicyId=policy_id, TargetId=target_account_id)
    except (ClientError, BotoCoreError) as exc:
        LOGGER.warning("SCP %s was created but is not attached; manual cleanup may be needed", policy_id)
        raise PolicyAttachError(
            f"error attaching SCP {policy_id} to account {target_account_id}: {exc}",
            policy_id=policy_id,
            target_account_id=target_account_id,
        ) from exc

    return f"SCP applied to account {target_account_id} with policy ID {policy_id}"


def _organizations_client(scoped: ScopedCredentials, region: str):
    return scoped.session(region).client("organizations")
