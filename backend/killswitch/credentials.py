"""STS role assumption for acting inside a target or management account."""
from __future__ import annotations

import logging
import os

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import CredentialError
from .types import ScopedCredentials

LOGGER = logging.getLogger(__name__)

ROLE_SESSION_NAME_ENV = "ROLE_SESSION_NAME"
DEFAULT_ROLE_SESSION_NAME = "killswitch"


def partition_for_region(region: str | None) -> str:
    """Return the ARN partition that owns ``region``."""
    region = region or ""
    if region.startswith("cn-"):
        return "aws-cn"
    if region.startswith("us-gov-"):
        return "aws-us-gov"
    return "aws"


def role_arn(account_id: str, role_name: str, partition: str = "aws") -> str:
    return f"arn:{partition}:iam::{account_id}:role/{role_name}"


def assume_role(
    account_id: str,
    role_name: str,
    *,
    region: str,
    partition: str | None = None,
    session_name: str | None = None,
) -> ScopedCredentials:
    """Assume ``role_name`` in ``account_id`` and return the temporary credentials."""
    arn = role_arn(account_id, role_name, partition or partition_for_region(region))
    session_name = session_name or os.getenv(ROLE_SESSION_NAME_ENV) or DEFAULT_ROLE_SESSION_NAME
    LOGGER.info("Assuming role %s (session %s)", arn, session_name)
    client = _sts_client(region)
    try:
        response = client.assume_role(RoleArn=arn, RoleSessionName=session_name)
    except (ClientError, BotoCoreError) as exc:
        LOGGER.error("Failed to assume role %s: %s", arn, exc)
        raise CredentialError(f"error assuming role {arn}: {exc}", role_arn=arn, account_id=account_id) from exc

    creds = response["Credentials"]
    return ScopedCredentials(
        role_arn=arn,
        access_key_id=creds["AccessKeyId"],
        secret_access_key=creds["SecretAccessKey"],
        session_token=creds["SessionToken"],
        expiration=creds.get("Expiration"),
    )


def _sts_client(region: str):
    return boto3.client("sts", region_name=region)
