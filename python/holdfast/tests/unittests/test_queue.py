import io
import unittest

from holdfast.datastructures.allocators import FailingAllocator
from holdfast.datastructures.errors import (AllocationFailureError,
                                            EmptyError, InvalidArgumentError,
                                            NotFoundError)
from holdfast.datastructures.protocols import ObjectProtocol
from holdfast.datastructures.queues import Queue
from holdfast.tests.unittests.tracking import Box, TrackingProtocol


class TestQueue(unittest.TestCase):
    def test_first_in_first_out(self):
        queue: Queue[int] = Queue(ObjectProtocol())
        for value in (10, 20, 30):
            queue.enqueue(value)
        self.assertEqual(queue.peek(), 10)
        self.assertEqual(queue.dequeue(), 10)
        self.assertEqual(queue.dequeue(), 20)
        self.assertEqual(queue.length, 1)
        self.assertEqual(queue.dequeue(), 30)
        with self.assertRaises(EmptyError) as context:
            queue.dequeue()
        self.assertTrue(str(context.exception).startswith("Queue: "))

    def test_peek_empty(self):
        queue: Queue[int] = Queue(ObjectProtocol())
        with self.assertRaises(EmptyError):
            queue.peek()
        self.assertTrue(queue.is_empty)

    def test_enqueue_after_drain(self):
        queue: Queue[int] = Queue(ObjectProtocol())
        queue.enqueue(1)
        queue.dequeue()
        queue.enqueue(2)
        queue.enqueue(3)
        self.assertEqual(list(queue), [2, 3])

    def test_dequeue_transfers_ownership(self):
        protocol = TrackingProtocol()
        box = Box(1)
        queue = Queue(protocol)
        queue.enqueue(box)
        self.assertIs(queue.dequeue(), box)
        queue.destroy()
        self.assertEqual(protocol.destroy_count(box), 0)

    def test_failed_enqueue_returns_handle(self):
        protocol = TrackingProtocol()
        allocator = FailingAllocator()
        queue = Queue(protocol, allocator=allocator)
        allocator.fail_next()
        box = Box(1)
        with self.assertRaises(AllocationFailureError) as context:
            queue.enqueue(box)
        self.assertIs(context.exception.handle, box)
        self.assertEqual(protocol.destroy_count(box), 0)
        self.assertTrue(queue.is_empty)

    def test_enqueue_none(self):
        queue: Queue[int] = Queue(ObjectProtocol())
        with self.assertRaises(InvalidArgumentError):
            queue.enqueue(None)

    def test_find_and_contains(self):
        queue: Queue[str] = Queue(ObjectProtocol())
        for item in "abc":
            queue.enqueue(item)
        self.assertEqual(queue.find("b"), 1)
        self.assertIn("c", queue)
        self.assertFalse(queue.contains("d"))
        with self.assertRaises(NotFoundError):
            queue.find("d")

    def test_clone_and_equals(self):
        queue: Queue[int] = Queue(ObjectProtocol())
        for value in (1, 2, 3):
            queue.enqueue(value)
        copy_ = queue.clone()
        self.assertTrue(queue.equals(copy_))
        copy_.dequeue()
        self.assertFalse(queue.equals(copy_))
        self.assertEqual(list(queue), [1, 2, 3])
        self.assertFalse(queue.equals(None))

    def test_clear(self):
        protocol = TrackingProtocol()
        queue = Queue(protocol)
        for value in range(3):
            queue.enqueue(Box(value))
        queue.clear()
        self.assertTrue(queue.is_empty)
        self.assertEqual(protocol.total_destroyed, 3)

    def test_for_each_and_render(self):
        queue: Queue[int] = Queue(ObjectProtocol())
        queue.enqueue(4)
        queue.enqueue(5)
        visited = []
        queue.for_each(lambda handle, index: visited.append((index, handle)))
        self.assertEqual(visited, [(0, 4), (1, 5)])
        sink = io.StringIO()
        queue.render(sink)
        self.assertEqual(sink.getvalue(), "[4, 5]\n")
        self.assertEqual(str(queue), "[4, 5]")

    def test_destroy(self):
        protocol = TrackingProtocol()
        with Queue(protocol) as queue:
            queue.enqueue(Box(1))
        self.assertTrue(queue.is_destroyed)
        self.assertEqual(protocol.total_destroyed, 1)
        with self.assertRaises(InvalidArgumentError):
            queue.enqueue(Box(2))


if __name__ == "__main__":
    unittest.main()
