"""Results layer: session event logging and KPI computation."""

from triage.results.collector import ResultsCollector, CallRecord

__all__ = ["ResultsCollector", "CallRecord"]
