"""Severity levels attached to invalid cross-references."""

from enum import Enum


class Severity(str, Enum):
    """How bad a broken reference is."""

    ERROR = "error"
    WARNING = "warning"
    CRITICAL = "critical"
