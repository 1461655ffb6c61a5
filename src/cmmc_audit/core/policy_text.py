"""Parsing of free-text policy dumps (net accounts, secedit INF, wevtutil).

All three tools emit ``label<separator>value`` lines. The text is turned into
a label -> value mapping and settings are looked up by exact label.
"""

from __future__ import annotations

from ..probes.base import ObservationFailure


def parse_policy_text(text: str, separator: str = ":") -> dict[str, str]:
    """Map each trimmed label to its trimmed value.

    Lines are split on the first separator only. Lines without a separator
    or with an empty label (section headers, banners) are skipped. A label
    seen twice keeps its first value.
    """
    settings: dict[str, str] = {}
    for line in (text or "").splitlines():
        label, sep, value = line.partition(separator)
        if not sep:
            continue
        label = label.strip()
        if not label or label in settings:
            continue
        settings[label] = value.strip()
    return settings


def get_policy_value(settings: dict[str, str], label: str) -> str:
    """Look up a setting by exact label."""
    try:
        return settings[label]
    except KeyError:
        raise ObservationFailure(f"Policy setting not found: {label}") from None


def parse_policy_number(value: str) -> int:
    """Parse a numeric policy value. The literal "None" means 0."""
    value = (value or "").strip()
    if value.lower() == "none":
        return 0
    try:
        return int(value)
    except ValueError:
        raise ObservationFailure(f"Expected a number, got {value!r}") from None


def is_never(value: str) -> bool:
    """True for the "Never" sentinel net accounts prints for disabled settings."""
    return (value or "").strip().lower() == "never"
