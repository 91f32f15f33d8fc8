"""Event logging during a triage session."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from triage.core.entities import Severity
from triage.model.patient import Patient
from triage.model.queue import PriorityChange


@dataclass
class CallRecord:
    """
    Record of a patient being called to be seen.

    Attributes:
        arrival_sequence: Patient's arrival number.
        name: Patient's name.
        severity: Severity held when the patient was called.
        admitted_at: Session tick of admission.
        seen_at: Session tick of the call.
    """
    arrival_sequence: int
    name: str
    severity: Severity
    admitted_at: int
    seen_at: int

    @property
    def wait(self) -> int:
        """Ticks spent waiting."""
        return self.seen_at - self.admitted_at


@dataclass
class ResultsCollector:
    """Collect and compute session metrics.

    Time is a logical clock: the command layer advances it by one tick
    per processed command, so waits are measured in commands.

    Attributes:
        admissions: Arrival number -> tick of admission.
        admitted_by_severity: Count of admissions per severity at intake.
        calls: Patients called, in call order.
        change_log: Severity changes as (tick, change), in order.
    """

    admissions: Dict[int, int] = field(default_factory=dict)
    admitted_by_severity: Dict[Severity, int] = field(
        default_factory=lambda: {s: 0 for s in Severity}
    )
    calls: List[CallRecord] = field(default_factory=list)
    change_log: List[Tuple[int, PriorityChange]] = field(default_factory=list)

    def record_admission(self, tick: int, patient: Patient) -> None:
        """Record a patient joining the waiting list."""
        self.admissions[patient.arrival_sequence] = tick
        self.admitted_by_severity[patient.severity] += 1

    def record_call(self, tick: int, patient: Patient) -> None:
        """Record a patient being called.

        Patients admitted before the collector existed count as admitted
        at the call tick.
        """
        admitted_at = self.admissions.get(patient.arrival_sequence, tick)
        self.calls.append(CallRecord(
            arrival_sequence=patient.arrival_sequence,
            name=patient.name,
            severity=patient.severity,
            admitted_at=admitted_at,
            seen_at=tick,
        ))

    def record_change(self, tick: int, change: PriorityChange) -> None:
        """Record a severity change."""
        self.change_log.append((tick, change))

    @property
    def changes(self) -> int:
        return len(self.change_log)

    @property
    def admitted(self) -> int:
        return len(self.admissions)

    @property
    def seen(self) -> int:
        return len(self.calls)

    def compute_metrics(self) -> Dict[str, Optional[float]]:
        """Compute session KPIs.

        Returns:
            Dictionary containing:
            - admitted, seen, waiting, changes: Counts
            - mean_wait, median_wait, p95_wait, max_wait: Waits in ticks,
              None until somebody has been seen
            - admitted_<label>, seen_<label>: Per-severity counts
            - <label>_mean_wait: Per-severity mean wait, None if none seen
        """
        waits = np.array([c.wait for c in self.calls], dtype=float)
        ranks = np.array([int(c.severity) for c in self.calls], dtype=int)
        seen_ids = {c.arrival_sequence for c in self.calls}

        if len(waits) > 0:
            mean_wait = float(np.mean(waits))
            median_wait = float(np.percentile(waits, 50))
            p95_wait = float(np.percentile(waits, 95))
            max_wait = float(np.max(waits))
        else:
            mean_wait = median_wait = p95_wait = max_wait = None

        metrics: Dict[str, Optional[float]] = {
            "admitted": self.admitted,
            "seen": self.seen,
            "waiting": len(set(self.admissions) - seen_ids),
            "changes": self.changes,
            "mean_wait": mean_wait,
            "median_wait": median_wait,
            "p95_wait": p95_wait,
            "max_wait": max_wait,
        }

        for severity in Severity:
            label = severity.label
            sev_waits = waits[ranks == int(severity)]
            metrics[f"admitted_{label}"] = self.admitted_by_severity[severity]
            metrics[f"seen_{label}"] = int(len(sev_waits))
            metrics[f"{label}_mean_wait"] = float(np.mean(sev_waits)) if len(sev_waits) > 0 else None

        return metrics

    def to_dataframe(self) -> pd.DataFrame:
        """Call records as a DataFrame, one row per patient seen."""
        columns = ["arrival_sequence", "name", "severity", "admitted_at", "seen_at", "wait"]
        rows = [
            {
                "arrival_sequence": c.arrival_sequence,
                "name": c.name,
                "severity": c.severity.label,
                "admitted_at": c.admitted_at,
                "seen_at": c.seen_at,
                "wait": c.wait,
            }
            for c in self.calls
        ]
        return pd.DataFrame(rows, columns=columns)
