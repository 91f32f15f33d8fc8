"""Pytest fixtures for triage tests."""

import pytest

from triage.model.queue import PatientPriorityQueue


@pytest.fixture
def default_seed() -> int:
    """Default random seed for reproducible tests."""
    return 42


@pytest.fixture
def empty_queue() -> PatientPriorityQueue:
    """A freshly constructed waiting list."""
    return PatientPriorityQueue()


@pytest.fixture
def populated_queue() -> PatientPriorityQueue:
    """Five patients across all severities.

    Arrival numbers: Ann=1 (urgent), Ben=2 (minimal), Cat=3 (immediate),
    Dev=4 (urgent), Eve=5 (emergency).
    """
    queue = PatientPriorityQueue()
    queue.admit("urgent", "Ann")
    queue.admit("minimal", "Ben")
    queue.admit("immediate", "Cat")
    queue.admit("urgent", "Dev")
    queue.admit("emergency", "Eve")
    return queue
