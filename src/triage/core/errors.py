"""Error taxonomy for the waiting list.

Every error here is recoverable: the queue is left exactly as it was
before the failing call, and the command layer reports the message and
carries on.
"""

from typing import Iterable


class TriageError(Exception):
    """Base class for all waiting-list errors."""


class InvalidSeverity(TriageError, ValueError):
    """A severity label is not one of the four canonical values.

    Attributes:
        label: The rejected label.
        valid: The accepted labels, most to least urgent.
    """

    def __init__(self, label, valid: Iterable[str]):
        self.label = label
        self.valid = tuple(valid)
        quoted = [f"'{v}'" for v in self.valid]
        choices = ", ".join(quoted[:-1]) + f" or {quoted[-1]}"
        super().__init__(f"invalid priority code (must be {choices}).")


class EmptyQueue(TriageError, IndexError):
    """Peek or remove attempted while nobody is waiting."""

    def __init__(self):
        super().__init__("there are no patients waiting.")


class PatientNotFound(TriageError, LookupError):
    """No waiting patient holds the requested arrival sequence.

    Attributes:
        arrival_sequence: The arrival number that was looked up.
    """

    def __init__(self, arrival_sequence: int):
        self.arrival_sequence = arrival_sequence
        super().__init__("no patient with the given id was found.")
