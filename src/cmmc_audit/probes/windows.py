"""Live Windows probe.

Accounts come from PowerShell ``Get-LocalUser``, registry values from
``winreg``, password and lockout policy from ``net accounts`` and
``secedit /export``, and event log metadata from ``wevtutil gl``. Nothing
here changes system state; secedit writes its export into a private
temporary directory.
"""

from __future__ import annotations

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from ..core.policy_text import parse_policy_text
from ..models.observation import EventLogInfo, LocalAccount, OverwritePolicy
from ..utils.sanitize import sanitize_error
from .base import BaseProbe, ObservationFailure, RegistryValue

# wevtutil exit code for "The specified channel could not be found."
ERROR_EVT_CHANNEL_NOT_FOUND = 15007

_ACCOUNT_SCRIPT = (
    "$u = Get-LocalUser -Name '{name}' -ErrorAction SilentlyContinue; "
    "if ($u) {{ $u | Select-Object Name, Enabled | ConvertTo-Json -Compress }}"
)


class WindowsProbe(BaseProbe):
    name = "windows"

    def __init__(self, probe_config: Optional[dict] = None):
        super().__init__(probe_config)
        self.timeout = int(self.config.get("command_timeout", 30))
        self.powershell = self.config.get("powershell", "powershell.exe")

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise ObservationFailure(f"{args[0]} not found on PATH") from None
        except subprocess.TimeoutExpired:
            raise ObservationFailure(f"{args[0]} timed out after {self.timeout}s") from None
        except OSError as e:
            raise ObservationFailure(f"{args[0]} failed: {sanitize_error(str(e))}") from e

    def _run_checked(self, args: list[str]) -> str:
        proc = self._run(args)
        if proc.returncode != 0:
            stderr = sanitize_error(proc.stderr or proc.stdout or "")
            raise ObservationFailure(f"{args[0]} exited with {proc.returncode}: {stderr}")
        return proc.stdout or ""

    def get_local_account(self, name: str) -> Optional[LocalAccount]:
        script = _ACCOUNT_SCRIPT.format(name=name.replace("'", "''"))
        output = self._run_checked(
            [self.powershell, "-NoProfile", "-NonInteractive", "-Command", script]
        ).strip()
        if not output:
            return None
        try:
            data = json.loads(output)
            return LocalAccount(name=str(data["Name"]), enabled=bool(data["Enabled"]))
        except (ValueError, KeyError, TypeError) as e:
            raise ObservationFailure(f"Unexpected Get-LocalUser output: {sanitize_error(output)}") from e

    def get_registry_value(self, key_path: str, value_name: str) -> Optional[RegistryValue]:
        """Read an HKLM value. A missing key or value is reported as None."""
        try:
            import winreg
        except ImportError:
            raise ObservationFailure("Registry access requires Windows") from None

        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key_path, 0, winreg.KEY_READ) as key:
                value, _ = winreg.QueryValueEx(key, value_name)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise ObservationFailure(f"Registry read failed for {key_path}\\{value_name}: {e}") from e
        if isinstance(value, (int, str)):
            return value
        raise ObservationFailure(f"Unsupported registry value type for {value_name}")

    def get_account_policy(self) -> str:
        return self._run_checked(["net", "accounts"])

    def get_security_policy(self) -> str:
        with tempfile.TemporaryDirectory(prefix="cmmc-audit-") as tmp:
            export_path = Path(tmp) / "secpol.inf"
            self._run_checked(
                ["secedit", "/export", "/cfg", str(export_path), "/areas", "SECURITYPOLICY", "/quiet"]
            )
            try:
                # secedit writes UTF-16 with a BOM
                return export_path.read_text(encoding="utf-16")
            except (OSError, UnicodeError) as e:
                raise ObservationFailure(f"Cannot read secedit export: {e}") from e

    def get_event_log(self, name: str) -> Optional[EventLogInfo]:
        proc = self._run(["wevtutil", "gl", name])
        if proc.returncode == ERROR_EVT_CHANNEL_NOT_FOUND:
            return None
        if proc.returncode != 0:
            stderr = sanitize_error(proc.stderr or proc.stdout or "")
            raise ObservationFailure(f"wevtutil exited with {proc.returncode}: {stderr}")
        return parse_wevtutil_log(name, proc.stdout or "")


def parse_wevtutil_log(name: str, text: str) -> EventLogInfo:
    """Build EventLogInfo from ``wevtutil gl`` output.

    retention=false is circular logging (overwrite as needed); retention=true
    keeps events, archiving the file when autoBackup is also set.
    """
    settings = parse_policy_text(text, ":")
    try:
        retention = settings["retention"].lower() == "true"
        auto_backup = settings.get("autoBackup", "false").lower() == "true"
        max_size = int(settings["maxSize"])
    except (KeyError, ValueError) as e:
        raise ObservationFailure(f"Unexpected wevtutil output for {name}") from e

    if not retention:
        policy = OverwritePolicy.OVERWRITE_AS_NEEDED
    elif auto_backup:
        policy = OverwritePolicy.ARCHIVE_WHEN_FULL
    else:
        policy = OverwritePolicy.DO_NOT_OVERWRITE
    return EventLogInfo(name=name, overwrite_policy=policy, max_size_bytes=max_size)
