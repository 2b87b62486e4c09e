"""
Ledger configuration (``restoration_kernel.config``).

Responsibility
--------------
Loads ``LedgerSettings`` from a YAML file and/or ``RESTORATION_*``
environment variables.  Settings choose the store backend, the database
URL, the log level, and the validation policy.

Architecture position
---------------------
**Config layer** -- consumed by ``restoration_kernel.bootstrap`` only.
Stores and domain code never read configuration directly; they receive
constructed collaborators (policy, session factory).

Invariants enforced
-------------------
* Every parsed value is validated; unknown backends, policies, or log
  levels raise ``ConfigurationError``.  No silent fallback for a value
  that was supplied but is invalid.
* ``LedgerSettings`` is a frozen dataclass.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid value  -> ``ConfigurationError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from restoration_kernel.exceptions import ConfigurationError

BACKENDS = ("memory", "sql")
POLICIES = ("permissive", "strict")

_ENV_PREFIX = "RESTORATION_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LedgerSettings:
    """Runtime settings for building a ledger store."""

    backend: str = "memory"
    database_url: str = "sqlite://"
    echo: bool = False
    log_level: str = "INFO"
    policy: str = "permissive"
    cap_funding_at_goal: bool = False
    owner_only_minting: bool = True

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigurationError("backend", f"expected one of {BACKENDS}, got {self.backend!r}")
        if self.policy not in POLICIES:
            raise ConfigurationError("policy", f"expected one of {POLICIES}, got {self.policy!r}")
        level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError("log_level", f"unknown level {self.log_level!r}")
        object.__setattr__(self, "log_level", level)
        if self.backend == "sql" and not self.database_url:
            raise ConfigurationError("database_url", "required for the sql backend")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(name, f"expected a boolean, got {value!r}")


def parse_settings(data: Mapping[str, Any], base: LedgerSettings | None = None) -> LedgerSettings:
    """
    Build settings from a mapping, overriding ``base`` (or the defaults).

    Unknown keys raise ``ConfigurationError`` so typos do not pass silently.
    """
    known = {f.name: f for f in fields(LedgerSettings)}
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            raise ConfigurationError(key, "unknown setting")
        if known[key].type in (bool, "bool"):
            overrides[key] = _parse_bool(key, value)
        else:
            overrides[key] = str(value)
    return replace(base or LedgerSettings(), **overrides)


def load_settings(path: Path | str) -> LedgerSettings:
    """
    Load settings from a YAML file.

    The file may hold the settings at the top level or under a ``ledger``
    key.  An empty file yields the defaults.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    section = data.get("ledger", data)
    if not isinstance(section, dict):
        raise ConfigurationError("ledger", "section must be a mapping")
    return parse_settings(section)


def settings_from_env(
    base: LedgerSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> LedgerSettings:
    """
    Apply ``RESTORATION_<FIELD>`` environment overrides to ``base``.

    ``RESTORATION_CONFIG`` names a YAML file loaded before the overrides
    when no ``base`` is given.
    """
    env = os.environ if environ is None else environ
    if base is None:
        config_path = env.get(f"{_ENV_PREFIX}CONFIG")
        base = load_settings(config_path) if config_path else LedgerSettings()

    overrides = {
        f.name: env[f"{_ENV_PREFIX}{f.name.upper()}"]
        for f in fields(LedgerSettings)
        if f"{_ENV_PREFIX}{f.name.upper()}" in env
    }
    return parse_settings(overrides, base) if overrides else base
