"""CMMC 2.0 / NIST SP 800-171 control check definitions.

Each check observes one piece of system state through a probe, normalizes
it into a comparable value plus a display string, and applies a fixed
threshold. When the observed resource is absent, or the observation fails,
the check's own absence result is used instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..models.observation import EventLogInfo, LocalAccount, OverwritePolicy
from ..probes.base import SystemProbe
from .policy_text import get_policy_value, is_never, parse_policy_number, parse_policy_text

ACCESS_CONTROL = "Access Control"
IDENTIFICATION_AUTHENTICATION = "Identification & Authentication"
AUDIT_ACCOUNTABILITY = "Audit & Accountability"

NOT_FOUND = "Not Found"
NOT_CONFIGURED = "Not Configured"
LOG_NOT_FOUND = "Log Not Found"
DISABLED = "Disabled"
ENABLED = "Enabled"

INACTIVITY_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Policies\System"
INACTIVITY_VALUE = "InactivityTimeoutSecs"

MAX_INACTIVITY_SECONDS = 900
MIN_PASSWORD_HISTORY = 24
MIN_PASSWORD_LENGTH = 14
MAX_LOCKOUT_THRESHOLD = 10
MIN_LOCKOUT_DURATION_MINUTES = 15
MIN_SECURITY_LOG_BYTES = 4 * 1024 ** 3  # 4 GiB

# Labels printed by `net accounts`
LABEL_PASSWORD_HISTORY = "Length of password history maintained"
LABEL_MIN_PASSWORD_LENGTH = "Minimum password length"
LABEL_LOCKOUT_THRESHOLD = "Lockout threshold"
LABEL_LOCKOUT_DURATION = "Lockout duration (minutes)"
# Key in the secedit [System Access] section
LABEL_PASSWORD_COMPLEXITY = "PasswordComplexity"

Evaluation = tuple[str, bool]


@dataclass(frozen=True)
class ControlCheck:
    """One row of the check table.

    ``observe`` returns None when the resource is absent and raises
    ObservationFailure when it cannot be read; both lead to
    ``absent_setting`` / ``absent_passes``.
    """

    family: str
    control_id: str
    description: str
    compliant_setting: str
    observe: Callable[[SystemProbe, dict], Optional[Any]]
    evaluate: Callable[[Any], Evaluation]
    absent_setting: str = NOT_CONFIGURED
    absent_passes: bool = False


# --- Observers ---------------------------------------------------------------


def _observe_guest_account(probe: SystemProbe, options: dict) -> Optional[LocalAccount]:
    return probe.get_local_account(options.get("guest_account", "Guest"))


def _observe_inactivity_timeout(probe: SystemProbe, options: dict) -> Optional[int]:
    value = probe.get_registry_value(INACTIVITY_KEY, INACTIVITY_VALUE)
    if value is None:
        return None
    return parse_policy_number(str(value))


def _account_policy_value(label: str) -> Callable[[SystemProbe, dict], str]:
    def observe(probe: SystemProbe, options: dict) -> str:
        settings = parse_policy_text(probe.get_account_policy(), ":")
        return get_policy_value(settings, label)

    return observe


def _account_policy_number(label: str) -> Callable[[SystemProbe, dict], int]:
    read = _account_policy_value(label)

    def observe(probe: SystemProbe, options: dict) -> int:
        return parse_policy_number(read(probe, options))

    return observe


def _observe_password_complexity(probe: SystemProbe, options: dict) -> int:
    settings = parse_policy_text(probe.get_security_policy(), "=")
    return parse_policy_number(get_policy_value(settings, LABEL_PASSWORD_COMPLEXITY))


def _observe_security_log(probe: SystemProbe, options: dict) -> Optional[EventLogInfo]:
    return probe.get_event_log(options.get("security_log", "Security"))


# --- Evaluators --------------------------------------------------------------


def evaluate_guest_account(account: LocalAccount) -> Evaluation:
    if account.enabled:
        return ENABLED, False
    return DISABLED, True


def evaluate_inactivity_timeout(seconds: int) -> Evaluation:
    # 0 removes the limit entirely
    if seconds <= 0:
        return DISABLED, False
    return f"{seconds} seconds", seconds <= MAX_INACTIVITY_SECONDS


def evaluate_password_complexity(flag: int) -> Evaluation:
    if flag == 1:
        return ENABLED, True
    return DISABLED, False


def evaluate_password_history(count: int) -> Evaluation:
    return str(count), count >= MIN_PASSWORD_HISTORY


def evaluate_min_password_length(length: int) -> Evaluation:
    return str(length), length >= MIN_PASSWORD_LENGTH


def evaluate_lockout_threshold(raw: str) -> Evaluation:
    """A lockout that never triggers is non-compliant, whatever the numbers say."""
    if is_never(raw):
        return DISABLED, False
    threshold = parse_policy_number(raw)
    if threshold == 0:
        return DISABLED, False
    return str(threshold), threshold <= MAX_LOCKOUT_THRESHOLD


def evaluate_lockout_duration(minutes: int) -> Evaluation:
    return f"{minutes} minutes", minutes >= MIN_LOCKOUT_DURATION_MINUTES


def evaluate_log_overwrite_policy(log: EventLogInfo) -> Evaluation:
    policy = log.overwrite_policy
    return policy.label, policy == OverwritePolicy.OVERWRITE_AS_NEEDED


def evaluate_log_max_size(log: EventLogInfo) -> Evaluation:
    return f"{log.max_size_bytes} bytes", log.max_size_bytes >= MIN_SECURITY_LOG_BYTES


# --- Check table (run in this order) ----------------------------------------

CHECKS: tuple[ControlCheck, ...] = (
    ControlCheck(
        family=ACCESS_CONTROL,
        control_id="3.1.3",
        description="Guest account must be disabled",
        compliant_setting="Disabled",
        observe=_observe_guest_account,
        evaluate=evaluate_guest_account,
        absent_setting=NOT_FOUND,
        absent_passes=True,
    ),
    ControlCheck(
        family=ACCESS_CONTROL,
        control_id="3.1.11",
        description="Session lock after inactivity (machine inactivity limit)",
        compliant_setting=f"1 to {MAX_INACTIVITY_SECONDS} seconds",
        observe=_observe_inactivity_timeout,
        evaluate=evaluate_inactivity_timeout,
    ),
    ControlCheck(
        family=IDENTIFICATION_AUTHENTICATION,
        control_id="3.5.7",
        description="Password must meet complexity requirements",
        compliant_setting="Enabled",
        observe=_observe_password_complexity,
        evaluate=evaluate_password_complexity,
    ),
    ControlCheck(
        family=IDENTIFICATION_AUTHENTICATION,
        control_id="3.5.7",
        description="Enforce password history",
        compliant_setting=f"{MIN_PASSWORD_HISTORY} or more passwords remembered",
        observe=_account_policy_number(LABEL_PASSWORD_HISTORY),
        evaluate=evaluate_password_history,
    ),
    ControlCheck(
        family=IDENTIFICATION_AUTHENTICATION,
        control_id="3.5.7",
        description="Minimum password length",
        compliant_setting=f"{MIN_PASSWORD_LENGTH} or more characters",
        observe=_account_policy_number(LABEL_MIN_PASSWORD_LENGTH),
        evaluate=evaluate_min_password_length,
    ),
    ControlCheck(
        family=IDENTIFICATION_AUTHENTICATION,
        control_id="3.5.8",
        description="Account lockout threshold",
        compliant_setting=f"{MAX_LOCKOUT_THRESHOLD} or fewer invalid attempts (not disabled)",
        observe=_account_policy_value(LABEL_LOCKOUT_THRESHOLD),
        evaluate=evaluate_lockout_threshold,
    ),
    ControlCheck(
        family=IDENTIFICATION_AUTHENTICATION,
        control_id="3.5.8",
        description="Account lockout duration",
        compliant_setting=f"{MIN_LOCKOUT_DURATION_MINUTES} or more minutes",
        observe=_account_policy_number(LABEL_LOCKOUT_DURATION),
        evaluate=evaluate_lockout_duration,
    ),
    ControlCheck(
        family=AUDIT_ACCOUNTABILITY,
        control_id="3.3.4",
        description="Security event log retention method",
        compliant_setting=OverwritePolicy.OVERWRITE_AS_NEEDED.label,
        observe=_observe_security_log,
        evaluate=evaluate_log_overwrite_policy,
        absent_setting=LOG_NOT_FOUND,
    ),
    ControlCheck(
        family=AUDIT_ACCOUNTABILITY,
        control_id="3.3.4",
        description="Security event log maximum size",
        compliant_setting=f"{MIN_SECURITY_LOG_BYTES} bytes (4 GiB) or greater",
        observe=_observe_security_log,
        evaluate=evaluate_log_max_size,
        absent_setting=LOG_NOT_FOUND,
    ),
)
