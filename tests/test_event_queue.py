"""Tests for the future event list."""

import unittest

from flowsim.core.event_queue import EventQueue
from flowsim.core.exceptions import InvalidOperationError

from helpers import RecordingEvent


class TestEventQueue(unittest.TestCase):
    """Test cases for EventQueue."""

    def setUp(self):
        """Set up test fixtures."""
        self.queue = EventQueue()
        self.log = []

    def _event(self, label):
        return RecordingEvent(self.log, label)

    def test_empty_queue(self):
        """Test empty queue behavior."""
        self.assertTrue(self.queue.is_empty())
        self.assertEqual(self.queue.size(), 0)
        self.assertEqual(len(self.queue), 0)
        self.assertIsNone(self.queue.peek())
        self.assertIsNone(self.queue.peek_time())

    def test_pop_empty_raises(self):
        """Test popping an empty queue raises IndexError."""
        with self.assertRaises(IndexError):
            self.queue.pop()

    def test_time_ordering(self):
        """Test events come out in ascending time order."""
        self.queue.push(self._event("c"), 3.0)
        self.queue.push(self._event("a"), 1.0)
        self.queue.push(self._event("b"), 2.0)

        labels = [self.queue.pop().label for _ in range(3)]
        self.assertEqual(labels, ["a", "b", "c"])
        self.assertTrue(self.queue.is_empty())

    def test_simultaneous_events_are_fifo(self):
        """Test events with equal time come out in push order."""
        for label in ["first", "second", "third", "fourth"]:
            self.queue.push(self._event(label), 5.0)
        self.queue.push(self._event("earlier"), 4.0)

        labels = [self.queue.pop().label for _ in range(5)]
        self.assertEqual(labels, ["earlier", "first", "second", "third", "fourth"])

    def test_push_assigns_sequence_and_time(self):
        """Test push stamps the event with an increasing id and its time."""
        first = self._event("a")
        second = self._event("b")
        id1 = self.queue.push(first, 2.0)
        id2 = self.queue.push(second, 1.0)

        self.assertLess(id1, id2)
        self.assertEqual(first.event_id, id1)
        self.assertEqual(first.execution_time, 2.0)
        self.assertTrue(second.is_scheduled)
        self.assertEqual(self.queue.peek(), second)
        self.assertEqual(self.queue.peek_time(), 1.0)

    def test_event_is_single_use(self):
        """Test pushing an already scheduled event raises."""
        event = self._event("a")
        self.queue.push(event, 1.0)
        self.queue.pop()

        with self.assertRaises(InvalidOperationError):
            self.queue.push(event, 2.0)

    def test_clear(self):
        """Test clear removes all events."""
        self.queue.push(self._event("a"), 1.0)
        self.queue.push(self._event("b"), 2.0)
        self.queue.clear()

        self.assertTrue(self.queue.is_empty())
        self.assertIn("size=0", repr(self.queue))


if __name__ == '__main__':
    unittest.main()
