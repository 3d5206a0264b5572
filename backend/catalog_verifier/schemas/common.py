"""Enums and helpers shared by every verdict schema."""

from enum import Enum


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class Importance(str, Enum):
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


BLOCKING_SEVERITIES = frozenset({Severity.CRITICAL, Severity.HIGH})

_IMPORTANCE_BY_SEVERITY = {
    Severity.CRITICAL: Importance.CRITICAL,
    Severity.HIGH: Importance.HIGH,
    Severity.MEDIUM: Importance.MEDIUM,
    Severity.LOW: Importance.LOW,
    Severity.INFO: Importance.LOW,
}


def importance_for(severity: Severity) -> Importance:
    return _IMPORTANCE_BY_SEVERITY[severity]


def clamp_confidence(value: float) -> float:
    """Clamp a 0-100 confidence into range."""
    return max(0.0, min(100.0, float(value)))
