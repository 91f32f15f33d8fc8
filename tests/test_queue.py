"""Tests for PatientPriorityQueue."""

import io

import pytest

from triage.core.entities import Severity
from triage.core.errors import EmptyQueue, InvalidSeverity, PatientNotFound
from triage.model.queue import PatientPriorityQueue, PriorityChange


def names(patients):
    return [p.name for p in patients]


class TestAdmit:
    """Test admission and arrival numbering."""

    def test_admit_returns_patient(self, empty_queue):
        patient = empty_queue.admit("urgent", "Alice")

        assert patient.name == "Alice"
        assert patient.severity == Severity.URGENT
        assert patient.arrival_sequence == 1

    def test_arrival_numbers_increase(self, empty_queue):
        arrivals = [empty_queue.admit("minimal", f"p{i}").arrival_sequence for i in range(5)]
        assert arrivals == [1, 2, 3, 4, 5]
        assert empty_queue.next_arrival == 6

    def test_arrival_numbers_never_reused(self, empty_queue):
        """Removing patients does not give their numbers back."""
        empty_queue.admit("urgent", "Alice")
        empty_queue.admit("urgent", "Bob")
        empty_queue.remove_highest()
        empty_queue.remove_highest()

        assert empty_queue.admit("urgent", "Carol").arrival_sequence == 3

    def test_invalid_severity_rejected(self, empty_queue):
        """Nothing is admitted and no number is consumed."""
        with pytest.raises(InvalidSeverity):
            empty_queue.admit("critical", "Alice")

        assert empty_queue.size() == 0
        assert empty_queue.admit("urgent", "Alice").arrival_sequence == 1

    def test_name_with_spaces(self, empty_queue):
        empty_queue.admit("urgent", "Mary Jo Smith")
        assert empty_queue.peek().name == "Mary Jo Smith"

    def test_queues_do_not_share_counters(self):
        first = PatientPriorityQueue()
        second = PatientPriorityQueue()
        first.admit("urgent", "Alice")
        first.admit("urgent", "Bob")

        assert second.admit("urgent", "Carol").arrival_sequence == 1


class TestPeekAndRemove:
    """Test peek/remove ordering."""

    def test_round_trip_scenario(self, empty_queue):
        """Immediate beats urgent; urgent ties go to the earlier arrival."""
        empty_queue.admit("urgent", "Alice")
        empty_queue.admit("immediate", "Bob")
        empty_queue.admit("urgent", "Carol")

        assert empty_queue.peek().name == "Bob"
        assert empty_queue.remove_highest().name == "Bob"
        assert empty_queue.peek().name == "Alice"

    def test_removal_order(self, populated_queue):
        order = [populated_queue.remove_highest().name for _ in range(5)]
        assert order == ["Cat", "Eve", "Ann", "Dev", "Ben"]

    def test_peek_does_not_mutate(self, populated_queue):
        before = list(populated_queue)
        populated_queue.peek()
        populated_queue.peek()

        assert list(populated_queue) == before
        assert populated_queue.size() == 5

    def test_remove_matches_peek(self, populated_queue):
        while populated_queue:
            expected = populated_queue.peek()
            assert populated_queue.remove_highest() is expected

    def test_remove_single_element(self, empty_queue):
        empty_queue.admit("minimal", "Alice")
        assert empty_queue.remove_highest().name == "Alice"
        assert empty_queue.size() == 0

    def test_remove_two_elements(self, empty_queue):
        empty_queue.admit("minimal", "Alice")
        empty_queue.admit("immediate", "Bob")

        assert empty_queue.remove_highest().name == "Bob"
        assert empty_queue.remove_highest().name == "Alice"

    def test_empty_queue_scenario(self, empty_queue):
        with pytest.raises(EmptyQueue):
            empty_queue.peek()
        with pytest.raises(EmptyQueue):
            empty_queue.remove_highest()

    def test_empty_after_draining(self, populated_queue):
        for _ in range(5):
            populated_queue.remove_highest()
        with pytest.raises(EmptyQueue):
            populated_queue.remove_highest()

    def test_empty_queue_is_index_error(self, empty_queue):
        with pytest.raises(IndexError):
            empty_queue.peek()


class TestSize:
    """Test size bookkeeping."""

    def test_size_tracks_admit_and_remove(self, empty_queue):
        assert empty_queue.size() == 0
        empty_queue.admit("urgent", "Alice")
        empty_queue.admit("urgent", "Bob")
        assert empty_queue.size() == 2
        assert len(empty_queue) == 2

        empty_queue.remove_highest()
        assert empty_queue.size() == 1

    def test_size_unchanged_by_peek_update_and_failures(self, populated_queue):
        populated_queue.peek()
        populated_queue.update_priority(2, "immediate")
        with pytest.raises(PatientNotFound):
            populated_queue.update_priority(9999, "urgent")
        with pytest.raises(InvalidSeverity):
            populated_queue.admit("bogus", "Zed")

        assert populated_queue.size() == 5


class TestEnumerate:
    """Test heap-order enumeration."""

    def test_heap_order(self, populated_queue):
        """Raw array order, only the root is guaranteed first."""
        assert names(populated_queue.enumerate_heap_order()) == ["Cat", "Eve", "Ann", "Ben", "Dev"]

    def test_enumeration_is_lazy_and_restartable(self, populated_queue):
        first = populated_queue.enumerate_heap_order()
        assert next(first).name == "Cat"

        assert len(list(populated_queue.enumerate_heap_order())) == 5
        assert len(list(populated_queue.enumerate_heap_order())) == 5

    def test_enumeration_reflects_current_state(self, populated_queue):
        populated_queue.remove_highest()
        assert "Cat" not in names(populated_queue)
        assert len(list(populated_queue)) == 4

    def test_enumerate_empty(self, empty_queue):
        assert list(empty_queue.enumerate_heap_order()) == []

    def test_sorted_patients(self, populated_queue):
        assert names(populated_queue.sorted_patients()) == ["Cat", "Eve", "Ann", "Dev", "Ben"]
        assert populated_queue.size() == 5

    def test_contains_arrival_number(self, populated_queue):
        assert 3 in populated_queue
        assert 9999 not in populated_queue


class TestUpdatePriority:
    """Test in-place severity changes."""

    def test_update_scenario(self, empty_queue):
        """Raising Dan to immediate puts him at the front."""
        dan = empty_queue.admit("minimal", "Dan")
        empty_queue.admit("urgent", "Erin")

        change = empty_queue.update_priority(dan.arrival_sequence, "immediate")

        assert empty_queue.peek().name == "Dan"
        assert change == PriorityChange(
            name="Dan",
            arrival_sequence=1,
            old_severity=Severity.MINIMAL,
            new_severity=Severity.IMMEDIATE,
        )
        assert change.describe() == "Changed patient Dan's priority to immediate"

    def test_lowering_priority_sifts_down(self, populated_queue):
        """Cat drops from immediate to minimal and goes behind Ben."""
        populated_queue.update_priority(3, "minimal")

        assert populated_queue.peek().name == "Eve"
        order = [populated_queue.remove_highest().name for _ in range(5)]
        assert order == ["Eve", "Ann", "Dev", "Ben", "Cat"]

    def test_raising_interior_node_sifts_up(self, populated_queue):
        populated_queue.update_priority(4, "emergency")
        order = [populated_queue.remove_highest().name for _ in range(5)]
        assert order == ["Cat", "Dev", "Eve", "Ann", "Ben"]

    def test_same_severity_is_harmless(self, populated_queue):
        before = list(populated_queue)
        change = populated_queue.update_priority(1, "urgent")

        assert list(populated_queue) == before
        assert change.old_severity == change.new_severity == Severity.URGENT

    def test_keeps_name_and_arrival(self, populated_queue):
        populated_queue.update_priority(2, "immediate")
        ben = populated_queue.peek()

        assert ben.name == "Ben"
        assert ben.arrival_sequence == 2
        assert ben.severity == Severity.IMMEDIATE

    def test_tie_after_change_uses_arrival(self, populated_queue):
        """Ben (arrived 2nd) raised to immediate goes ahead of Cat (3rd)."""
        populated_queue.update_priority(2, "immediate")
        assert names(populated_queue.sorted_patients())[:2] == ["Ben", "Cat"]

    def test_not_found_scenario(self, populated_queue):
        before = list(populated_queue)

        with pytest.raises(PatientNotFound) as exc_info:
            populated_queue.update_priority(9999, "urgent")

        assert exc_info.value.arrival_sequence == 9999
        assert list(populated_queue) == before

    def test_removed_patient_not_found(self, populated_queue):
        populated_queue.remove_highest()  # Cat, arrival 3
        with pytest.raises(PatientNotFound):
            populated_queue.update_priority(3, "minimal")

    def test_invalid_severity_checked_first(self, populated_queue):
        """An unknown label is reported even for an unknown patient."""
        before = list(populated_queue)

        with pytest.raises(InvalidSeverity):
            populated_queue.update_priority(9999, "Immediate")

        assert list(populated_queue) == before


class TestSave:
    """Test the re-playable command log."""

    def test_save_in_arrival_order(self, populated_queue):
        buffer = io.StringIO()
        count = populated_queue.save(buffer)

        assert count == 5
        assert buffer.getvalue().splitlines() == [
            "add urgent Ann",
            "add minimal Ben",
            "add immediate Cat",
            "add urgent Dev",
            "add emergency Eve",
        ]

    def test_save_reflects_changes(self, populated_queue):
        populated_queue.update_priority(2, "emergency")
        populated_queue.remove_highest()

        buffer = io.StringIO()
        populated_queue.save(buffer)

        assert buffer.getvalue().splitlines() == [
            "add urgent Ann",
            "add emergency Ben",
            "add urgent Dev",
            "add emergency Eve",
        ]

    def test_save_does_not_mutate(self, populated_queue):
        before = list(populated_queue)
        populated_queue.save(io.StringIO())
        assert list(populated_queue) == before

    def test_replay_rebuilds_call_order(self, populated_queue):
        buffer = io.StringIO()
        populated_queue.save(buffer)

        rebuilt = PatientPriorityQueue()
        for line in buffer.getvalue().splitlines():
            _, label, name = line.split(" ", 2)
            rebuilt.admit(label, name)

        assert names(rebuilt.sorted_patients()) == names(populated_queue.sorted_patients())

    def test_save_empty(self, empty_queue):
        buffer = io.StringIO()
        assert empty_queue.save(buffer) == 0
        assert buffer.getvalue() == ""
