"""Core foundation layer: severity levels, errors, configuration."""

from triage.core.entities import Severity, SEVERITY_LABELS
from triage.core.errors import (
    TriageError,
    InvalidSeverity,
    EmptyQueue,
    PatientNotFound,
)
from triage.core.config import TriageConfig, load_config, save_config

__all__ = [
    "Severity",
    "SEVERITY_LABELS",
    "TriageError",
    "InvalidSeverity",
    "EmptyQueue",
    "PatientNotFound",
    "TriageConfig",
    "load_config",
    "save_config",
]
