"""Waiting-list model layer: patient records and the priority queue."""

from triage.model.patient import Patient
from triage.model.queue import PatientPriorityQueue, PriorityChange

__all__ = [
    "Patient",
    "PatientPriorityQueue",
    "PriorityChange",
]
