"""Role assumption tests for the credential broker."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

boto3 = pytest.importorskip("boto3")
pytest.importorskip("botocore")
from botocore.stub import Stubber

from backend.killswitch import credentials
from backend.killswitch.errors import CredentialError
from backend.killswitch.types import ScopedCredentials


ACCOUNT_ID = "123456789012"
SESSION_EXPIRY = datetime(2030, 1, 1, tzinfo=timezone.utc)


def _stubbed_sts(monkeypatch, regions: list[str] | None = None):
    client = boto3.client("sts", region_name="us-east-1")

    def _factory(region):
        if regions is not None:
            regions.append(region)
        return client

    monkeypatch.setattr(credentials, "_sts_client", _factory)
    return client


def _assume_role_response(arn: str) -> dict[str, object]:
    return {
        "Credentials": {
            "AccessKeyId": "ASIAEXAMPLEEXAMPLE",
            "SecretAccessKey": "super-secret-value",
            "SessionToken": "session-token-value",
            "Expiration": SESSION_EXPIRY,
        },
        "AssumedRoleUser": {"AssumedRoleId": "AROAEXAMPLE:killswitch", "Arn": arn},
    }


@pytest.mark.parametrize(
    ("region", "partition"),
    [
        ("us-east-1", "aws"),
        ("eu-central-1", "aws"),
        ("cn-north-1", "aws-cn"),
        ("us-gov-west-1", "aws-us-gov"),
        (None, "aws"),
    ],
)
def test_partition_for_region(region, partition):
    assert credentials.partition_for_region(region) == partition


def test_role_arn_is_interpolated():
    assert credentials.role_arn(ACCOUNT_ID, "SecurityAdmin") == f"arn:aws:iam::{ACCOUNT_ID}:role/SecurityAdmin"
    assert credentials.role_arn(ACCOUNT_ID, "Admin", "aws-cn") == f"arn:aws-cn:iam::{ACCOUNT_ID}:role/Admin"


def test_assume_role_returns_scoped_credentials(monkeypatch):
    regions: list[str] = []
    client = _stubbed_sts(monkeypatch, regions)
    arn = f"arn:aws:iam::{ACCOUNT_ID}:role/SecurityAdmin"
    with Stubber(client) as stubber:
        stubber.add_response(
            "assume_role",
            _assume_role_response(arn),
            {"RoleArn": arn, "RoleSessionName": credentials.DEFAULT_ROLE_SESSION_NAME},
        )
        scoped = credentials.assume_role(ACCOUNT_ID, "SecurityAdmin", region="eu-west-1")

    assert regions == ["eu-west-1"]
    assert scoped.role_arn == arn
    assert scoped.access_key_id == "ASIAEXAMPLEEXAMPLE"
    assert scoped.expiration == SESSION_EXPIRY
    assert "super-secret-value" not in repr(scoped)
    assert "session-token-value" not in repr(scoped)


def test_session_name_can_be_overridden_by_environment(monkeypatch):
    monkeypatch.setenv(credentials.ROLE_SESSION_NAME_ENV, "incident-4711")
    client = _stubbed_sts(monkeypatch)
    arn = f"arn:aws-us-gov:iam::{ACCOUNT_ID}:role/SecurityAdmin"
    with Stubber(client) as stubber:
        stubber.add_response("assume_role", _assume_role_response(arn), {"RoleArn": arn, "RoleSessionName": "incident-4711"})
        scoped = credentials.assume_role(ACCOUNT_ID, "SecurityAdmin", region="us-gov-west-1")
        stubber.assert_no_pending_responses()

    assert scoped.role_arn == arn


def test_assume_role_refusal_raises_credential_error(monkeypatch):
    client = _stubbed_sts(monkeypatch)
    with Stubber(client) as stubber:
        stubber.add_client_error(
            "assume_role",
            service_error_code="AccessDenied",
            service_message="is not authorized to perform: sts:AssumeRole",
        )
        with pytest.raises(CredentialError) as excinfo:
            credentials.assume_role(ACCOUNT_ID, "MissingRole", region="us-east-1")

    error = excinfo.value
    assert "sts:AssumeRole" in str(error)
    assert error.context["role_arn"] == f"arn:aws:iam::{ACCOUNT_ID}:role/MissingRole"
    assert error.step == "assume-role"


def test_scoped_session_uses_temporary_credentials():
    scoped = ScopedCredentials(
        role_arn=f"arn:aws:iam::{ACCOUNT_ID}:role/SecurityAdmin",
        access_key_id="ASIAEXAMPLEEXAMPLE",
        secret_access_key="secret",
        session_token="token",
    )
    session = scoped.session("ap-southeast-2")
    frozen = session.get_credentials().get_frozen_credentials()

    assert session.region_name == "ap-southeast-2"
    assert frozen.access_key == "ASIAEXAMPLEEXAMPLE"
    assert frozen.token == "token"
