"""Offline probe that replays a recorded host snapshot.

Snapshot documents are YAML::

    accounts:
      Guest: {enabled: false}
    registry:
      'SOFTWARE\\Microsoft\\Windows\\CurrentVersion\\Policies\\System':
        InactivityTimeoutSecs: 900
    account_policy: |
      Minimum password length:                              14
      Length of password history maintained:                24
      Lockout threshold:                                    5
      Lockout duration (minutes):                           15
    security_policy: |
      [System Access]
      PasswordComplexity = 1
    event_logs:
      Security: {overwrite_policy: OverwriteAsNeeded, max_size_bytes: 4294967296}

A section or entry that is missing is reported the same way the live probe
reports an absent resource.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..models.observation import EventLogInfo, LocalAccount
from .base import BaseProbe, ObservationFailure, RegistryValue


def _lookup(mapping: Optional[dict], key: str):
    """Case-insensitive dict lookup, matching Windows name semantics."""
    if not mapping:
        return None
    if key in mapping:
        return mapping[key]
    folded = key.casefold()
    for candidate, value in mapping.items():
        if str(candidate).casefold() == folded:
            return value
    return None


class SnapshotProbe(BaseProbe):
    name = "snapshot"

    def __init__(self, snapshot: dict, probe_config: Optional[dict] = None):
        super().__init__(probe_config)
        self.snapshot = snapshot or {}

    @classmethod
    def from_file(cls, path: Union[str, Path], probe_config: Optional[dict] = None) -> "SnapshotProbe":
        snapshot_path = Path(path)
        try:
            content = yaml.safe_load(snapshot_path.read_text(encoding="utf-8-sig"))
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Cannot load snapshot {snapshot_path}: {e}") from e
        if content is not None and not isinstance(content, dict):
            raise ValueError(f"Snapshot {snapshot_path} must be a mapping")
        return cls(content or {}, probe_config)

    def get_local_account(self, name: str) -> Optional[LocalAccount]:
        entry = _lookup(self.snapshot.get("accounts"), name)
        if entry is None:
            return None
        try:
            return LocalAccount(name=name, **entry)
        except (TypeError, ValidationError) as e:
            raise ObservationFailure(f"Invalid account entry for {name}: {e}") from e

    def get_registry_value(self, key_path: str, value_name: str) -> Optional[RegistryValue]:
        key = _lookup(self.snapshot.get("registry"), key_path)
        if key is None:
            return None
        return _lookup(key, value_name)

    def get_account_policy(self) -> str:
        return self._text_section("account_policy")

    def get_security_policy(self) -> str:
        return self._text_section("security_policy")

    def get_event_log(self, name: str) -> Optional[EventLogInfo]:
        entry = _lookup(self.snapshot.get("event_logs"), name)
        if entry is None:
            return None
        try:
            return EventLogInfo(name=name, **entry)
        except (TypeError, ValidationError) as e:
            raise ObservationFailure(f"Invalid event log entry for {name}: {e}") from e

    def _text_section(self, section: str) -> str:
        text = self.snapshot.get(section)
        if text is None:
            raise ObservationFailure(f"Snapshot has no {section} section")
        return str(text)
