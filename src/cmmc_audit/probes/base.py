"""System observation abstraction.

A probe answers the handful of read-only questions the control checks ask
about a host. The live implementation queries Windows; the snapshot
implementation replays a recorded document.
"""

from __future__ import annotations

from typing import Optional, Protocol, Union, runtime_checkable

from ..models.observation import EventLogInfo, LocalAccount

RegistryValue = Union[int, str]


class ObservationFailure(Exception):
    """A system query could not be completed."""


@runtime_checkable
class SystemProbe(Protocol):
    """Protocol that all probes must implement. Every method is read-only."""

    name: str

    def get_local_account(self, name: str) -> Optional[LocalAccount]: ...

    def get_registry_value(self, key_path: str, value_name: str) -> Optional[RegistryValue]: ...

    def get_account_policy(self) -> str: ...

    def get_security_policy(self) -> str: ...

    def get_event_log(self, name: str) -> Optional[EventLogInfo]: ...


class BaseProbe:
    """Base class with shared config handling."""

    name: str = "base"

    def __init__(self, probe_config: Optional[dict] = None):
        self.config = probe_config or {}

    def get_local_account(self, name: str) -> Optional[LocalAccount]:
        raise NotImplementedError

    def get_registry_value(self, key_path: str, value_name: str) -> Optional[RegistryValue]:
        raise NotImplementedError

    def get_account_policy(self) -> str:
        raise NotImplementedError

    def get_security_policy(self) -> str:
        raise NotImplementedError

    def get_event_log(self, name: str) -> Optional[EventLogInfo]:
        raise NotImplementedError


def get_probe(config: dict, probe_override: Optional[str] = None) -> BaseProbe:
    """Factory function to create the configured probe."""
    probe_config = dict(config.get("probe") or {})
    probe_name = probe_override or probe_config.get("type", "windows")

    if probe_name == "windows":
        from .windows import WindowsProbe
        return WindowsProbe(probe_config)
    elif probe_name == "snapshot":
        from .snapshot import SnapshotProbe
        snapshot_path = probe_config.get("snapshot")
        if not snapshot_path:
            raise ValueError("Snapshot probe requires probe.snapshot to be set")
        return SnapshotProbe.from_file(snapshot_path, probe_config)
    else:
        raise ValueError(f"Unknown probe: {probe_name}")
