"""Loading of the switch configuration file holding the containment SCP."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError
from .types import SwitchConfig

LOGGER = logging.getLogger(__name__)

SWITCH_CONFIG_PATH_ENV = "SWITCH_CONFIG_PATH"
DEFAULT_SWITCH_CONFIG_PATH = "switch.conf"


def load_switch_config(path: str | Path) -> SwitchConfig:
    """Read and parse the switch configuration at ``path``.

    Expected shape::

        {"switchConfigVersion": "...", "switchPolicies": {"scpPolicy": {...}}}
    """
    path = Path(path)
    LOGGER.info("Loading switch configuration from %s", path)
    try:
        payload = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"error loading config file {path}: {exc}", path=str(path)) from exc
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"error loading config file {path}: {exc}", path=str(path)) from exc
    return load_from_dict(data, source=str(path))


def load_from_dict(data: Any, *, source: str = "<memory>") -> SwitchConfig:
    if not isinstance(data, Mapping):
        raise ConfigError(f"config {source} must be a JSON object", path=source)
    policies = data.get("switchPolicies")
    if not isinstance(policies, Mapping) or policies.get("scpPolicy") is None:
        raise ConfigError(f"config {source} is missing switchPolicies.scpPolicy", path=source)
    version = data.get("switchConfigVersion")
    LOGGER.debug("Switch configuration version %s", version)
    return SwitchConfig(version=str(version) if version is not None else None, scp_policy=_policy_text(policies["scpPolicy"]))


def _policy_text(document: Any) -> str:
    # a document stored as a JSON string is passed through unchanged
    if isinstance(document, str):
        return document
    return json.dumps(document)
