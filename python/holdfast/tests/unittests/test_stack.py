import io
import unittest

from holdfast.datastructures.allocators import FailingAllocator
from holdfast.datastructures.errors import (AllocationFailureError,
                                            EmptyError, ErrorKind,
                                            InvalidArgumentError)
from holdfast.datastructures.protocols import ObjectProtocol
from holdfast.datastructures.stacks import Stack
from holdfast.tests.unittests.tracking import Box, TrackingProtocol


class TestStack(unittest.TestCase):
    def test_last_in_first_out(self):
        stack: Stack[str] = Stack(4, ObjectProtocol())
        for item in "abc":
            stack.push(item)
        self.assertEqual(stack.peek(), "c")
        self.assertEqual(stack.pop(), "c")
        self.assertEqual(stack.pop(), "b")
        self.assertFalse(stack.is_empty)
        self.assertEqual(stack.pop(), "a")
        self.assertTrue(stack.is_empty)
        with self.assertRaises(EmptyError) as context:
            stack.pop()
        self.assertEqual(context.exception.kind, ErrorKind.EMPTY)
        self.assertTrue(str(context.exception).startswith("Stack: "))

    def test_peek_empty(self):
        stack: Stack[int] = Stack(4, ObjectProtocol())
        with self.assertRaises(EmptyError):
            stack.peek()
        with self.assertRaises(IndexError):
            stack.peek()

    def test_create_with_zero_capacity(self):
        with self.assertRaises(InvalidArgumentError):
            Stack(0, ObjectProtocol())

    def test_grows_past_initial_capacity(self):
        stack: Stack[int] = Stack(4, ObjectProtocol())
        for value in range(10):
            stack.push(value)
        self.assertEqual(len(stack), 10)
        self.assertEqual([stack.pop() for _ in range(10)],
                         list(range(9, -1, -1)))

    def test_pop_transfers_ownership(self):
        protocol = TrackingProtocol()
        box = Box(1)
        stack = Stack(4, protocol)
        stack.push(box)
        self.assertIs(stack.pop(), box)
        stack.destroy()
        self.assertEqual(protocol.destroy_count(box), 0)

    def test_failed_push_returns_handle(self):
        protocol = TrackingProtocol()
        allocator = FailingAllocator()
        stack = Stack(4, protocol, allocator=allocator)
        for value in range(4):
            stack.push(Box(value))
        allocator.fail_next()
        box = Box(4)
        with self.assertRaises(AllocationFailureError) as context:
            stack.push(box)
        self.assertIs(context.exception.handle, box)
        self.assertEqual(protocol.destroy_count(box), 0)
        self.assertEqual(len(stack), 4)

    def test_push_none(self):
        stack: Stack[int] = Stack(4, ObjectProtocol())
        with self.assertRaises(InvalidArgumentError):
            stack.push(None)

    def test_clone_and_equals(self):
        protocol = TrackingProtocol()
        stack = Stack(4, protocol)
        for value in range(3):
            stack.push(Box(value))
        copy_ = stack.clone()
        self.assertTrue(stack.equals(copy_))
        self.assertEqual(stack, copy_)
        copy_.pop()
        self.assertFalse(stack.equals(copy_))
        self.assertFalse(stack.equals(None))

    def test_clone_failure(self):
        protocol = TrackingProtocol(clone_budget=1)
        stack = Stack(4, protocol)
        stack.push(Box(1))
        stack.push(Box(2))
        with self.assertRaises(AllocationFailureError):
            stack.clone()
        self.assertEqual(protocol.total_destroyed, 1)
        self.assertEqual(len(stack), 2)

    def test_fill(self):
        stack: Stack[int] = Stack(4, ObjectProtocol())
        stack.fill(7)
        self.assertEqual(list(stack), [7, 7, 7, 7])

    def test_for_each_and_render(self):
        stack: Stack[int] = Stack(4, ObjectProtocol())
        stack.push(1)
        stack.push(2)
        visited = []
        stack.for_each(lambda handle, index: visited.append((index, handle)))
        self.assertEqual(visited, [(0, 1), (1, 2)])
        sink = io.StringIO()
        stack.render(sink)
        self.assertEqual(sink.getvalue(), "[1, 2]\n")

    def test_destroy(self):
        protocol = TrackingProtocol()
        with Stack(4, protocol) as stack:
            stack.push(Box(1))
            stack.push(Box(2))
        self.assertTrue(stack.is_destroyed)
        self.assertEqual(protocol.total_destroyed, 2)
        stack.destroy()
        self.assertEqual(protocol.total_destroyed, 2)
        with self.assertRaises(InvalidArgumentError):
            stack.push(Box(3))
        self.assertEqual(repr(stack), "Stack(destroyed)")


if __name__ == "__main__":
    unittest.main()
