"""Patient entity definition."""

from dataclasses import dataclass, replace

from triage.core.entities import Severity


@dataclass(frozen=True, eq=False)
class Patient:
    """A patient waiting to be seen.

    Patients are only created by the waiting list when they are admitted,
    and are never mutated afterwards; a severity change swaps in a new
    record with the same name and arrival number.

    Attributes:
        severity: Triage severity (lower = more urgent).
        name: Patient's full name, may contain spaces.
        arrival_sequence: Order of arrival in the ED, starting at 1.
    """

    severity: Severity
    name: str
    arrival_sequence: int

    def compare(self, other: "Patient") -> int:
        """Three-way comparison on (severity, arrival_sequence).

        Returns:
            -1 if this patient is to be seen before ``other``, 1 if after,
            0 if both severity and arrival number match.
        """
        mine = (int(self.severity), self.arrival_sequence)
        theirs = (int(other.severity), other.arrival_sequence)
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        return 0

    def __lt__(self, other: "Patient") -> bool:
        return self.compare(other) < 0

    def __le__(self, other: "Patient") -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: "Patient") -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: "Patient") -> bool:
        return self.compare(other) >= 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Patient):
            return NotImplemented
        return self.compare(other) == 0

    def __hash__(self) -> int:
        return hash((int(self.severity), self.arrival_sequence))

    def display_severity(self) -> str:
        """Lowercase label of the current severity, e.g. ``"emergency"``."""
        return self.severity.label

    def with_severity(self, severity: Severity) -> "Patient":
        """Copy of this patient with a new severity."""
        return replace(self, severity=severity)

    def __str__(self) -> str:
        return f"{self.name} {{ pri={self.display_severity()}, arrive={self.arrival_sequence} }}"
