"""Tests for the FIFO queue component."""

import math
import unittest

from flowsim.core.exceptions import MissingArgumentError, OutOfRangeError
from flowsim.modeling.events import DequeueEvent, EnqueueEvent, UpdateToDequeueEvent
from flowsim.modeling.queue import QueueConfig, SimQueue

from helpers import StubRunContext


class TestQueueConfig(unittest.TestCase):
    """Test cases for QueueConfig."""

    def test_default_is_unbounded(self):
        """Test the default capacity is infinite."""
        self.assertEqual(QueueConfig().capacity, math.inf)

    def test_invalid_capacity(self):
        """Test non-positive and fractional capacities are rejected."""
        for capacity in (0, -1, 2.5):
            with self.assertRaises(OutOfRangeError):
                QueueConfig(capacity=capacity)

    def test_whole_float_capacity_becomes_int(self):
        """Test a whole float capacity is normalised to int."""
        self.assertEqual(QueueConfig(capacity=3.0).capacity, 3)


class TestSimQueue(unittest.TestCase):
    """Test cases for SimQueue."""

    def setUp(self):
        """Set up test fixtures."""
        self.context = StubRunContext()
        self.queue = SimQueue(QueueConfig(capacity=2, record_history=True), name="line", model_id=4)
        self.queue.initialize(self.context)

        self.enqueued = []
        self.dequeued = []
        self.balked = []
        self.changes = []
        self.queue.load_enqueued.subscribe(lambda load, t: self.enqueued.append((load, t)))
        self.queue.load_dequeued.subscribe(lambda load, t: self.dequeued.append((load, t)))
        self.queue.load_balked.subscribe(lambda load, t: self.balked.append((load, t)))
        self.queue.state_changed.subscribe(self.changes.append)

    def _enqueue_now(self, load):
        accepted = self.queue.try_schedule_enqueue(load, self.context)
        self.context.run_until(self.context.clock_time)
        return accepted

    def test_initial_state(self):
        """Test a new queue is empty and allows dequeue."""
        self.assertEqual(self.queue.occupancy, 0)
        self.assertEqual(self.queue.vacancy, 2)
        self.assertTrue(self.queue.to_dequeue)
        self.assertEqual(self.queue.waiting_items, [])
        self.assertEqual(self.queue.occupancy_metric.current_count, 0)

    def test_creation_logged_at_info(self):
        """Test queue creation is logged at info level."""
        with self.assertLogs("flowsim.SimQueue", level="INFO") as logs:
            SimQueue(QueueConfig(capacity=4), name="logged")
        self.assertIn("Queue 'logged' created with capacity 4", logs.output[0])

    def test_try_schedule_enqueue_schedules_event(self):
        """Test enqueue is deferred to an event at the current clock."""
        self.context.clock_time = 3.0
        self.assertTrue(self.queue.try_schedule_enqueue("a", self.context))

        self.assertEqual(self.queue.occupancy, 0)
        scheduled = self.context.scheduled_of(EnqueueEvent)
        self.assertEqual(scheduled[0][0], 3.0)
        self.assertEqual(scheduled[0][1].load, "a")

        self.context.step()
        self.assertEqual(self.queue.waiting_items, ["a"])
        self.assertEqual(self.enqueued, [("a", 3.0)])
        self.assertEqual(self.changes, [3.0])

    def test_full_queue_balks(self):
        """Test capacity-1 queue: A enqueued, B balks, occupancy stays 1."""
        queue = SimQueue(QueueConfig(capacity=1), name="single")
        queue.initialize(self.context)
        balked = []
        queue.load_balked.subscribe(lambda load, t: balked.append(load))

        self.assertTrue(queue.try_schedule_enqueue("A", self.context))
        self.context.run_until(0.0)
        self.assertFalse(queue.try_schedule_enqueue("B", self.context))

        self.assertEqual(queue.occupancy, 1)
        self.assertEqual(balked, ["B"])
        self.assertEqual(len(self.context.scheduled_of(EnqueueEvent)), 1)

    def test_enqueue_race_drops_load(self):
        """Test an enqueue executing on a queue filled meanwhile balks."""
        queue = SimQueue(QueueConfig(capacity=1), name="race")
        queue.initialize(self.context)
        balked = []
        queue.load_balked.subscribe(lambda load, t: balked.append(load))

        self.assertTrue(queue.try_schedule_enqueue("A", self.context))
        self.assertTrue(queue.try_schedule_enqueue("B", self.context))
        self.context.run_until(0.0)

        self.assertEqual(queue.waiting_items, ["A"])
        self.assertEqual(balked, ["B"])

    def test_occupancy_plus_vacancy_is_capacity(self):
        """Test the capacity invariant holds through enqueues and dequeues."""
        for load in ("a", "b", "c"):
            self._enqueue_now(load)
            self.assertEqual(self.queue.occupancy + self.queue.vacancy, 2)
        self.queue.trigger_dequeue_attempt(self.context)
        self.context.step()
        self.assertEqual(self.queue.occupancy + self.queue.vacancy, 2)
        self.assertEqual(len(self.balked), 1)

    def test_missing_arguments(self):
        """Test None load or context is rejected."""
        with self.assertRaises(MissingArgumentError):
            self.queue.try_schedule_enqueue(None, self.context)
        with self.assertRaises(MissingArgumentError):
            self.queue.try_schedule_enqueue("a", None)
        with self.assertRaises(MissingArgumentError):
            self.queue.schedule_update_to_dequeue(False, None)

    def test_dequeue_is_fifo(self):
        """Test loads leave in arrival order."""
        self._enqueue_now("first")
        self.context.clock_time = 1.0
        self._enqueue_now("second")

        self.context.clock_time = 4.0
        self.queue.trigger_dequeue_attempt(self.context)
        self.context.step()

        self.assertEqual(self.dequeued, [("first", 4.0)])
        self.assertEqual(self.queue.waiting_items, ["second"])
        self.assertEqual(self.queue.occupancy_metric.current_count, 1)

    def test_trigger_dequeue_only_when_possible(self):
        """Test no dequeue is scheduled for an empty or blocked queue."""
        self.queue.trigger_dequeue_attempt(self.context)
        self.assertEqual(self.context.scheduled_of(DequeueEvent), [])

        self._enqueue_now("a")
        self.queue._handle_update_to_dequeue(False, 0.0)
        self.queue.trigger_dequeue_attempt(self.context)
        self.assertEqual(self.context.scheduled_of(DequeueEvent), [])

    def test_handle_dequeue_when_disabled_does_nothing(self):
        """Test a dequeue event executing while blocked leaves the load waiting."""
        self._enqueue_now("a")
        self.queue.schedule_update_to_dequeue(False, self.context)
        self.queue.trigger_dequeue_attempt(self.context)
        self.assertEqual(len(self.context.scheduled_of(DequeueEvent)), 1)

        self.context.run_until(0.0)

        self.assertEqual(self.queue.waiting_items, ["a"])
        self.assertEqual(self.dequeued, [])

    def test_schedule_update_to_dequeue(self):
        """Test the permission change goes through an event."""
        self.context.clock_time = 2.0
        self.queue.schedule_update_to_dequeue(False, self.context)
        self.assertTrue(self.queue.to_dequeue)

        events = self.context.scheduled_of(UpdateToDequeueEvent)
        self.assertEqual(events[0][0], 2.0)
        self.context.step()
        self.assertFalse(self.queue.to_dequeue)
        self.assertEqual(self.changes, [2.0])

        self.queue._handle_update_to_dequeue(False, 3.0)
        self.assertEqual(self.changes, [2.0])

    def test_unbounded_queue_never_balks(self):
        """Test an unbounded queue accepts every load."""
        queue = SimQueue(QueueConfig(), name="unbounded")
        queue.initialize(self.context)
        for i in range(50):
            self.assertTrue(queue.try_schedule_enqueue(i, self.context))
        self.context.run_until(0.0)
        self.assertEqual(queue.occupancy, 50)
        self.assertEqual(queue.vacancy, math.inf)

    def test_warmed_up_restarts_metric_only(self):
        """Test warm-up keeps waiting loads and restarts the occupancy metric."""
        self._enqueue_now("a")
        self._enqueue_now("b")
        self.context.clock_time = 10.0

        self.queue.warmed_up(10.0)

        self.assertEqual(self.queue.occupancy, 2)
        metric = self.queue.occupancy_metric
        self.assertEqual(metric.initial_time, 10.0)
        self.assertEqual(metric.current_count, 2)
        self.assertEqual(metric.total_active_duration, 0.0)
        self.assertEqual(metric.history, [(10.0, 2.0)])


if __name__ == '__main__':
    unittest.main()
