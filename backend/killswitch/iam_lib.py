"""Strip an IAM role of its managed and inline policies, optionally deleting it."""
from __future__ import annotations

import logging
from typing import Sequence

from botocore.exceptions import BotoCoreError, ClientError

from . import credentials
from .errors import DetachError, IdentityDeleteError, InlinePolicyDeleteError, ListError
from .types import ActionKind, ScopedCredentials

LOGGER = logging.getLogger(__name__)


def remediate_role(
    action: ActionKind,
    target_account_id: str,
    assumed_role: str,
    role_name: str,
    *,
    region: str,
) -> str:
    """Detach every grant from ``role_name`` and delete it for ``delete_role``.

    Steps run strictly in order and stop at the first failure. Nothing already
    detached or deleted is restored when a later step fails.
    """
    if action not in (ActionKind.DETACH_POLICIES, ActionKind.DELETE_ROLE):
        raise ValueError(f"{action} is not a role remediation action")

    scoped = credentials.assume_role(target_account_id, assumed_role, region=region)
    client = _iam_client(scoped, region)

    for policy_arn in list_attached_policies(client, role_name, target_account_id):
        LOGGER.info("Detaching %s from role %s in account %s", policy_arn, role_name, target_account_id)
        try:
            client.detach_role_policy(RoleName=role_name, PolicyArn=policy_arn)
        except (ClientError, BotoCoreError) as exc:
            raise DetachError(
                f"error detaching policy {policy_arn} from role {role_name} in account {target_account_id}: {exc}",
                account_id=target_account_id,
                role_name=role_name,
                policy_arn=policy_arn,
            ) from exc

    for policy_name in list_inline_policies(client, role_name, target_account_id):
        LOGGER.info("Deleting inline policy %s from role %s in account %s", policy_name, role_name, target_account_id)
        try:
            client.delete_role_policy(RoleName=role_name, PolicyName=policy_name)
        except (ClientError, BotoCoreError) as exc:
            raise InlinePolicyDeleteError(
                f"error deleting inline policy {policy_name} from role {role_name} in account {target_account_id}: {exc}",
                account_id=target_account_id,
                role_name=role_name,
                policy_name=policy_name,
            ) from exc

    if action is ActionKind.DELETE_ROLE:
        LOGGER.info("Deleting role %s in account %s", role_name, target_account_id)
        try:
            client.delete_role(RoleName=role_name)
        except (ClientError, BotoCoreError) as exc:
            raise IdentityDeleteError(
                f"error deleting role {role_name} in account {target_account_id}: {exc}",
                account_id=target_account_id,
                role_name=role_name,
            ) from exc
        return f"Role {role_name} and its policies are detached and deleted in account {target_account_id}"
    return f"Policies detached from role {role_name} in account {target_account_id}"


def list_attached_policies(client, role_name: str, account_id: str) -> Sequence[str]:
    """Return the ARNs of every managed policy attached to the role."""
    arns: list[str] = []
    try:
        for page in client.get_paginator("list_attached_role_policies").paginate(RoleName=role_name):
            arns.extend(policy["PolicyArn"] for policy in page.get("AttachedPolicies", []))
    except (ClientError, BotoCoreError) as exc:
        raise ListError(
            f"error listing attached policies for role {role_name} in account {account_id}: {exc}",
            account_id=account_id,
            role_name=role_name,
            listing="attached",
        ) from exc
    LOGGER.debug("Role %s has %d attached managed policies", role_name, len(arns))
    return arns


def list_inline_policies(client, role_name: str, account_id: str) -> Sequence[str]:
    """Return the names of every inline policy embedded in the role."""
    names: list[str] = []
    try:
        for page in client.get_paginator("list_role_policies").paginate(RoleName=role_name):
            names.extend(page.get("PolicyNames", []))
    except (ClientError, BotoCoreError) as exc:
        raise ListError(
            f"error listing inline policies for role {role_name} in account {account_id}: {exc}",
            account_id=account_id,
            role_name=role_name,
            listing="inline",
        ) from exc
    LOGGER.debug("Role %s has %d inline policies", role_name, len(names))
    return names


def _iam_client(scoped: ScopedCredentials, region: str):
    return scoped.session(region).client("iam")
