"""Core entity definitions for the triage system.

This module contains enums and basic types that are used across
the codebase, placed here to avoid circular imports.
"""

from enum import IntEnum
from typing import Dict, Tuple

from triage.core.errors import InvalidSeverity


class Severity(IntEnum):
    """Triage severity levels. Lower value = more urgent.

    The numeric value is the rank used by the waiting-list heap; labels
    only exist at the command boundary.
    """
    IMMEDIATE = 1   # Life-threatening, seen at once
    EMERGENCY = 2   # Could become life-threatening
    URGENT = 3      # Serious but stable
    MINIMAL = 4     # Minor injury or illness

    @property
    def label(self) -> str:
        """Canonical lowercase label, e.g. ``"urgent"``."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "Severity":
        """Map an exact, case-sensitive label to a Severity.

        Args:
            label: One of ``SEVERITY_LABELS``.

        Returns:
            The matching Severity.

        Raises:
            InvalidSeverity: If the label is not recognised.
        """
        try:
            return _BY_LABEL[label]
        except (KeyError, TypeError):
            raise InvalidSeverity(label, SEVERITY_LABELS) from None


_BY_LABEL: Dict[str, Severity] = {s.label: s for s in Severity}

# Ordered most to least urgent
SEVERITY_LABELS: Tuple[str, ...] = tuple(s.label for s in Severity)
