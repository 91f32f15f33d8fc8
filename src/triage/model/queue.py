"""Emergency-room waiting list backed by a binary min-heap.

Patients are kept in a plain list laid out as an implicit binary tree
(parent of ``i`` at ``(i - 1) // 2``, children at ``2i + 1`` and
``2i + 2``). The root is always the patient to be called next: lowest
severity rank first, earliest arrival within a rank.

Example usage:
    from triage.model.queue import PatientPriorityQueue

    queue = PatientPriorityQueue()
    queue.admit("urgent", "Alice")
    queue.admit("immediate", "Bob")
    queue.peek().name            # "Bob"
    queue.remove_highest().name  # "Bob"

The queue is not thread-safe. Callers that share one between threads
must hold a single lock around every call.
"""

import logging
from dataclasses import dataclass
from typing import IO, Iterator, List

from triage.core.entities import Severity
from triage.core.errors import EmptyQueue, PatientNotFound
from triage.model.patient import Patient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriorityChange:
    """Outcome of a successful severity change.

    Attributes:
        name: Name of the patient whose severity changed.
        arrival_sequence: The patient's arrival number.
        old_severity: Severity before the change.
        new_severity: Severity after the change.
    """
    name: str
    arrival_sequence: int
    old_severity: Severity
    new_severity: Severity

    def describe(self) -> str:
        return f"Changed patient {self.name}'s priority to {self.new_severity.label}"


class PatientPriorityQueue:
    """Min-heap of waiting patients with in-place severity changes.

    Attributes:
        next_arrival: Arrival number the next admitted patient will get.
    """

    def __init__(self):
        self._patients: List[Patient] = []
        self.next_arrival = 1

    # ---- public API ----

    def admit(self, severity_label: str, name: str) -> Patient:
        """Add a patient to the waiting list.

        Args:
            severity_label: One of ``immediate``, ``emergency``, ``urgent``
                or ``minimal``.
            name: Patient's name.

        Returns:
            The admitted Patient, carrying its assigned arrival number.

        Raises:
            InvalidSeverity: If the label is not recognised. Nothing is
                admitted and no arrival number is consumed.
        """
        severity = Severity.from_label(severity_label)
        patient = Patient(severity, name, self.next_arrival)
        self.next_arrival += 1

        self._patients.append(patient)
        self._sift_up(len(self._patients) - 1)
        logger.debug(f"Admitted {patient}")
        return patient

    def peek(self) -> Patient:
        """Return the next patient to be called without removing them.

        Raises:
            EmptyQueue: If nobody is waiting.
        """
        if not self._patients:
            raise EmptyQueue()
        return self._patients[0]

    def remove_highest(self) -> Patient:
        """Remove and return the next patient to be called.

        Raises:
            EmptyQueue: If nobody is waiting.
        """
        if not self._patients:
            raise EmptyQueue()

        result = self._patients[0]
        last = self._patients.pop()
        if self._patients:
            self._patients[0] = last
            if len(self._patients) > 1:
                self._sift_down(0)

        logger.debug(f"Removed {result}")
        return result

    def size(self) -> int:
        return len(self._patients)

    def __len__(self) -> int:
        return self.size()

    def __bool__(self) -> bool:
        return bool(self._patients)

    def __contains__(self, arrival_sequence: object) -> bool:
        return any(p.arrival_sequence == arrival_sequence for p in self._patients)

    def enumerate_heap_order(self) -> Iterator[Patient]:
        """Yield waiting patients in raw heap-array order.

        Only the first patient yielded is guaranteed to be next in line.
        Each call starts a fresh pass over the current contents.
        """
        yield from self._patients

    def __iter__(self) -> Iterator[Patient]:
        return self.enumerate_heap_order()

    def sorted_patients(self) -> List[Patient]:
        """Waiting patients in the order they will be called."""
        return sorted(self._patients)

    def update_priority(self, arrival_sequence: int, new_severity_label: str) -> PriorityChange:
        """Change the severity of a waiting patient and repair the heap.

        Args:
            arrival_sequence: Arrival number of the patient to change.
            new_severity_label: New severity label.

        Returns:
            PriorityChange describing what changed.

        Raises:
            InvalidSeverity: If the label is not recognised.
            PatientNotFound: If no waiting patient has that arrival number.
        """
        new_severity = Severity.from_label(new_severity_label)

        index = self._find(arrival_sequence)
        old = self._patients[index]
        self._patients[index] = old.with_severity(new_severity)

        if new_severity < old.severity:
            self._sift_up(index)
        else:
            self._sift_down(index)

        change = PriorityChange(
            name=old.name,
            arrival_sequence=old.arrival_sequence,
            old_severity=old.severity,
            new_severity=new_severity,
        )
        logger.debug(
            f"Patient {arrival_sequence} severity {old.severity.label} -> {new_severity.label}"
        )
        return change

    def save(self, stream: IO[str]) -> int:
        """Write the waiting list as re-playable ``add`` commands.

        Lines are written in arrival order so that loading the file back
        rebuilds the same call order.

        Args:
            stream: Text stream to write to.

        Returns:
            Number of patients written.
        """
        by_arrival = sorted(self._patients, key=lambda p: p.arrival_sequence)
        for patient in by_arrival:
            stream.write(f"add {patient.display_severity()} {patient.name}\n")
        return len(by_arrival)

    # ---- internals ----

    def _find(self, arrival_sequence: int) -> int:
        for i, patient in enumerate(self._patients):
            if patient.arrival_sequence == arrival_sequence:
                return i
        raise PatientNotFound(arrival_sequence)

    @staticmethod
    def _parent(index: int) -> int:
        return (index - 1) // 2

    @staticmethod
    def _left_child(index: int) -> int:
        return 2 * index + 1

    @staticmethod
    def _right_child(index: int) -> int:
        return 2 * index + 2

    def _swap(self, i: int, j: int) -> None:
        self._patients[i], self._patients[j] = self._patients[j], self._patients[i]

    def _sift_up(self, index: int) -> None:
        patients = self._patients
        while index > 0:
            parent = self._parent(index)
            if patients[parent] > patients[index]:
                self._swap(parent, index)
                index = parent
            else:
                break

    def _sift_down(self, index: int) -> None:
        patients = self._patients
        size = len(patients)
        while True:
            left = self._left_child(index)
            right = self._right_child(index)

            if left >= size:
                return
            if right >= size or patients[left] <= patients[right]:
                min_child = left
            else:
                min_child = right

            if patients[min_child] < patients[index]:
                self._swap(min_child, index)
                index = min_child
            else:
                return
