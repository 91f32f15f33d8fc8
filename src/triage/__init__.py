"""
Triage - Emergency Room Waiting List.

A severity-ordered patient queue for hospital emergency departments,
with an interactive command shell.
"""

__version__ = "0.1.0"

from triage.core.entities import Severity
from triage.model.patient import Patient
from triage.model.queue import PatientPriorityQueue, PriorityChange

__all__ = ["Severity", "Patient", "PatientPriorityQueue", "PriorityChange", "__version__"]
