"""
Tests for help queue inspection helpers.


Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from unittest.mock import Mock

import pytest

from helpqueue.core.types import Student
from helpqueue.exceptions import AlreadyQueuedError
from helpqueue.queue import HelpQueue, WaitStatistics


class TestHelpQueueMetrics:
    """Test read-only metrics."""

    def setup_method(self):
        """Set up an in-memory queue that never writes backups."""
        self.queue = HelpQueue(Mock(), clock=lambda: 50.0)
        self.queue.save_backup = Mock(return_value=True)
        self.queue.state.students.update({
            "jsmith": Student("john", "smith", [(30.0, "a"), (90.0, "b")]),
            "adoe": Student("ann", "doe", [(60.0, "c")]),
            "bkim": Student("bo", "kim"),
        })

    def test_statistics(self):
        """Test count, mean and maximum of completed waits."""
        assert self.queue.wait_statistics() == WaitStatistics(
            helped=3, average_seconds=60.0, longest_seconds=90.0
        )

    def test_statistics_without_history(self):
        """Test empty histories give zeroed statistics."""
        for student in self.queue.state.students.values():
            student.queue_times.clear()
        assert self.queue.wait_statistics() == WaitStatistics(0, 0.0, 0.0)

    def test_positions(self):
        """Test positions and queue length follow the queue."""
        self.queue.add("bkim")
        self.queue.add("adoe")
        assert self.queue.get_queue_length() == 2
        assert self.queue.get_position("adoe") == 1
        assert self.queue.get_position("jsmith") is None
        self.queue.save_backup.assert_called()

    def test_add_reports_helper_positions(self):
        """Test add answers with the same positions the helpers report."""
        assert self.queue.add("bkim") == self.queue.get_queue_length() == 1
        with pytest.raises(AlreadyQueuedError) as exc_info:
            self.queue.add("bkim")
        assert exc_info.value.position == self.queue.get_position("bkim") == 0

    def test_list_waiting_missing_student(self):
        """Test a dangling queue entry is reported as an internal error."""
        self.queue.add("bkim")
        self.queue.state.students.clear()
        with pytest.raises(RuntimeError):
            self.queue.list_waiting()
