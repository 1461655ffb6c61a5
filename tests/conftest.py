"""Shared fixtures for cmmc-audit tests."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Callable

import pytest
import yaml

from cmmc_audit.core.checks import INACTIVITY_KEY
from cmmc_audit.models.result import ControlCheckResult, ControlStatus
from cmmc_audit.probes.snapshot import SnapshotProbe

NET_ACCOUNTS_TEMPLATE = """\
Force user logoff how long after time expires?:       Never
Minimum password age (days):                          1
Maximum password age (days):                          60
Minimum password length:                              {min_length}
Length of password history maintained:                {history}
Lockout threshold:                                    {threshold}
Lockout duration (minutes):                           {duration}
Lockout observation window (minutes):                 15
Computer role:                                        WORKSTATION
The command completed successfully.
"""

SECEDIT_TEMPLATE = """\
[Unicode]
Unicode=yes
[System Access]
MinimumPasswordAge = 1
MaximumPasswordAge = 60
MinimumPasswordLength = 14
PasswordComplexity = {complexity}
PasswordHistorySize = 24
LockoutBadCount = 10
[Version]
signature="$CHICAGO$"
Revision=1
"""


@pytest.fixture
def account_policy_text() -> Callable[..., str]:
    """Build `net accounts` output; defaults are compliant."""

    def build(min_length="14", history="24", threshold="10", duration="15") -> str:
        return NET_ACCOUNTS_TEMPLATE.format(
            min_length=min_length, history=history, threshold=threshold, duration=duration
        )

    return build


@pytest.fixture
def security_policy_text() -> Callable[..., str]:
    """Build a secedit INF export; defaults are compliant."""

    def build(complexity="1") -> str:
        return SECEDIT_TEMPLATE.format(complexity=complexity)

    return build


@pytest.fixture
def compliant_snapshot(account_policy_text, security_policy_text) -> dict:
    """A snapshot document in which every control passes."""
    return {
        "accounts": {"Guest": {"enabled": False}},
        "registry": {INACTIVITY_KEY: {"InactivityTimeoutSecs": 900}},
        "account_policy": account_policy_text(),
        "security_policy": security_policy_text(),
        "event_logs": {
            "Security": {"overwrite_policy": "OverwriteAsNeeded", "max_size_bytes": 4294967296}
        },
    }


@pytest.fixture
def make_probe(compliant_snapshot: dict) -> Callable[..., SnapshotProbe]:
    """Create a SnapshotProbe from the compliant snapshot with sections replaced."""

    def build(**sections) -> SnapshotProbe:
        snapshot = copy.deepcopy(compliant_snapshot)
        for key, value in sections.items():
            if value is None:
                snapshot.pop(key, None)
            else:
                snapshot[key] = value
        return SnapshotProbe(snapshot)

    return build


@pytest.fixture
def snapshot_file(tmp_path: Path, compliant_snapshot: dict) -> Path:
    path = tmp_path / "host-snapshot.yaml"
    path.write_text(yaml.safe_dump(compliant_snapshot), encoding="utf-8")
    return path


@pytest.fixture
def sample_results() -> list[ControlCheckResult]:
    return [
        ControlCheckResult(
            control_family="Access Control",
            control_id="3.1.3",
            description="Guest account must be disabled",
            current_setting="Enabled",
            compliant_setting="Disabled",
            status=ControlStatus.FAIL,
        ),
        ControlCheckResult(
            control_family="Identification & Authentication",
            control_id="3.5.7",
            description="Minimum password length",
            current_setting="14",
            compliant_setting="14 or more characters",
            status=ControlStatus.PASS,
        ),
        ControlCheckResult(
            control_family="Audit & Accountability",
            control_id="3.3.4",
            description='Security log "max size", in bytes',
            current_setting="4294967296 bytes",
            compliant_setting="4294967296 bytes (4 GiB) or greater",
            status=ControlStatus.PASS,
        ),
    ]
