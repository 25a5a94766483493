import io
import unittest

from holdfast.datastructures.allocators import FailingAllocator
from holdfast.datastructures.errors import (AllocationFailureError,
                                            EmptyError, InvalidArgumentError,
                                            NotFoundError, OutOfBoundsError)
from holdfast.datastructures.linkedlists import (CircularList, DoublyList,
                                                 SinglyList)
from holdfast.datastructures.protocols import (CallbackProtocol,
                                               ObjectProtocol)
from holdfast.tests.unittests.tracking import Box, TrackingProtocol


class _LinkedSequenceTests:
    list_type = None

    def make(self, *values, protocol=None, allocator=None):
        list_ = self.list_type(protocol or ObjectProtocol(),
                               allocator=allocator)
        for value in values:
            list_.append(value)
        return list_

    def test_append_and_prepend(self):
        list_ = self.make(2, 3)
        list_.prepend(1)
        list_.append(4)
        self.assertEqual(list(list_), [1, 2, 3, 4])
        self.assertEqual(len(list_), 4)
        self.assertEqual(list_.head(), 1)
        self.assertEqual(list_.tail(), 4)

    def test_insert(self):
        list_ = self.make(1, 4)
        list_.insert(1, 2)
        list_.insert(2, 3)
        list_.insert(4, 5)
        list_.insert(0, 0)
        self.assertEqual(list(list_), [0, 1, 2, 3, 4, 5])
        with self.assertRaises(OutOfBoundsError) as context:
            list_.insert(7, 6)
        self.assertEqual(context.exception.handle, 6)
        with self.assertRaises(InvalidArgumentError):
            list_.insert(0, None)
        self.assertEqual(len(list_), 6)

    def test_get(self):
        list_ = self.make(*range(7))
        self.assertEqual([list_.get(index) for index in range(7)],
                         list(range(7)))
        self.assertEqual(list_[3], 3)
        with self.assertRaises(OutOfBoundsError):
            list_.get(7)
        with self.assertRaises(OutOfBoundsError):
            list_.get(-1)

    def test_clone_at(self):
        protocol = TrackingProtocol()
        boxes = [Box(value) for value in range(3)]
        list_ = self.make(*boxes, protocol=protocol)
        copy_ = list_.clone_at(1)
        self.assertIsNot(copy_, boxes[1])
        self.assertEqual(copy_.value, 1)
        copy_.value = 10
        self.assertEqual(list_.get(1).value, 1)
        self.assertEqual(len(list_), 3)
        with self.assertRaises(OutOfBoundsError):
            list_.clone_at(3)

    def test_clone_at_failures(self):
        list_ = self.make(Box(1), protocol=TrackingProtocol(clone_budget=0))
        with self.assertRaises(AllocationFailureError):
            list_.clone_at(0)
        no_clone = self.make(1, protocol=CallbackProtocol(
            destroy=lambda handle: None,
            compare=lambda left, right: 0
        ))
        with self.assertRaises(InvalidArgumentError):
            no_clone.clone_at(0)

    def test_remove(self):
        protocol = TrackingProtocol()
        boxes = [Box(value) for value in range(4)]
        list_ = self.make(*boxes, protocol=protocol)
        list_.remove(3)
        list_.remove(1)
        list_.remove(0)
        self.assertEqual([box.value for box in list_], [2])
        self.assertEqual(list_.head().value, 2)
        self.assertEqual(list_.tail().value, 2)
        for index in (0, 1, 3):
            self.assertEqual(protocol.destroy_count(boxes[index]), 1)
        with self.assertRaises(OutOfBoundsError):
            list_.remove(1)
        list_.remove(0)
        self.assertTrue(list_.is_empty)
        list_.append(Box(9))
        self.assertEqual(list_.tail().value, 9)

    def test_empty_ends(self):
        list_ = self.make()
        for operation in (list_.head, list_.tail,
                          list_.detach_head, list_.detach_tail):
            with self.assertRaises(EmptyError):
                operation()

    def test_detach_transfers_ownership(self):
        protocol = TrackingProtocol()
        boxes = [Box(value) for value in range(3)]
        list_ = self.make(*boxes, protocol=protocol)
        self.assertIs(list_.detach_head(), boxes[0])
        self.assertIs(list_.detach_tail(), boxes[2])
        self.assertEqual(list(list_), [boxes[1]])
        list_.destroy()
        self.assertEqual(protocol.destroy_count(boxes[0]), 0)
        self.assertEqual(protocol.destroy_count(boxes[1]), 1)
        self.assertEqual(protocol.destroy_count(boxes[2]), 0)

    def test_find_and_contains(self):
        list_ = self.make(5, 6, 7, 6)
        self.assertEqual(list_.find(6), 1)
        self.assertTrue(list_.contains(7))
        self.assertIn(5, list_)
        self.assertNotIn(8, list_)
        with self.assertRaises(NotFoundError):
            list_.find(8)

    def test_update(self):
        protocol = TrackingProtocol()
        old, new = Box(1), Box(2)
        list_ = self.make(Box(0), old, protocol=protocol)
        list_.update(1, new)
        self.assertIs(list_.get(1), new)
        self.assertEqual(protocol.destroy_count(old), 1)
        with self.assertRaises(OutOfBoundsError):
            list_.update(2, Box(3))

    def test_swap(self):
        list_ = self.make(1, 2, 3, 4)
        list_.swap(0, 3)
        list_.swap(1, 1)
        self.assertEqual(list(list_), [4, 2, 3, 1])
        with self.assertRaises(OutOfBoundsError):
            list_.swap(0, 4)

    def test_reverse(self):
        list_ = self.make(1, 2, 3, 4)
        list_.reverse()
        self.assertEqual(list(list_), [4, 3, 2, 1])
        self.assertEqual(list_.head(), 4)
        self.assertEqual(list_.tail(), 1)
        list_.append(0)
        self.assertEqual(list(list_), [4, 3, 2, 1, 0])
        single = self.make(1)
        single.reverse()
        self.assertEqual(list(single), [1])

    def test_for_each(self):
        list_ = self.make("a", "b")
        visited = []
        list_.for_each(lambda handle, index: visited.append((index, handle)))
        self.assertEqual(visited, [(0, "a"), (1, "b")])

    def test_equals(self):
        list_a = self.make(1, 2, 3)
        list_b = self.make(1, 2, 3)
        self.assertTrue(list_a.equals(list_b))
        self.assertEqual(list_a, list_b)
        list_b.update(2, 4)
        self.assertFalse(list_a.equals(list_b))
        self.assertFalse(list_a.equals(self.make(1, 2)))
        self.assertFalse(list_a.equals(None))

    def test_clone_is_independent(self):
        protocol = TrackingProtocol()
        list_ = self.make(Box(1), Box(2), protocol=protocol)
        copy_ = list_.clone()
        self.assertIs(type(copy_), self.list_type)
        self.assertTrue(list_.equals(copy_))
        copy_.head().value = 10
        self.assertEqual(list_.head().value, 1)
        copy_.destroy()
        list_.destroy()
        self.assertEqual(protocol.total_destroyed, 4)
        self.assertEqual(protocol.double_destroyed, [])

    def test_clone_node_failure_destroys_copies(self):
        protocol = TrackingProtocol()
        allocator = FailingAllocator()
        boxes = [Box(value) for value in range(4)]
        list_ = self.make(*boxes, protocol=protocol, allocator=allocator)
        allocator.fail_after(2)
        with self.assertRaises(AllocationFailureError):
            list_.clone()
        self.assertEqual(protocol.total_destroyed, 3)
        for box in boxes:
            self.assertEqual(protocol.destroy_count(box), 0)
        self.assertEqual(len(list_), 4)

    def test_clone_element_failure_destroys_copies(self):
        protocol = TrackingProtocol(clone_budget=1)
        list_ = self.make(Box(1), Box(2), protocol=protocol)
        with self.assertRaises(AllocationFailureError):
            list_.clone()
        self.assertEqual(protocol.total_destroyed, 1)

    def test_failed_admission_returns_handle(self):
        protocol = TrackingProtocol()
        allocator = FailingAllocator()
        list_ = self.make(Box(0), protocol=protocol, allocator=allocator)
        allocator.fail_next()
        box = Box(1)
        with self.assertRaises(AllocationFailureError) as context:
            list_.append(box)
        self.assertIs(context.exception.handle, box)
        self.assertEqual(protocol.destroy_count(box), 0)
        self.assertEqual(len(list_), 1)

    def test_clear_and_destroy(self):
        protocol = TrackingProtocol()
        boxes = [Box(value) for value in range(3)]
        list_ = self.make(*boxes, protocol=protocol)
        list_.clear()
        self.assertTrue(list_.is_empty)
        list_.append(Box(3))
        list_.destroy()
        list_.destroy()
        self.assertTrue(list_.is_destroyed)
        self.assertEqual(protocol.total_destroyed, 4)
        self.assertEqual(protocol.double_destroyed, [])
        with self.assertRaises(InvalidArgumentError):
            list_.append(Box(4))

    def test_protocol_without_compare(self):
        with self.assertRaises(InvalidArgumentError):
            self.list_type(CallbackProtocol(destroy=lambda handle: None))

    def test_render(self):
        list_ = self.make(1, 2, 3)
        sink = io.StringIO()
        list_.render(sink)
        self.assertEqual(sink.getvalue(), "[1, 2, 3]\n")
        self.assertEqual(str(list_), "[1, 2, 3]")


class TestSinglyList(_LinkedSequenceTests, unittest.TestCase):
    list_type = SinglyList


class TestDoublyList(_LinkedSequenceTests, unittest.TestCase):
    list_type = DoublyList

    def test_reversed(self):
        list_ = self.make(1, 2, 3)
        self.assertEqual(list(reversed(list_)), [3, 2, 1])
        list_.reverse()
        self.assertEqual(list(reversed(list_)), [1, 2, 3])


class TestCircularList(_LinkedSequenceTests, unittest.TestCase):
    list_type = CircularList

    def test_rotate(self):
        list_ = self.make(1, 2, 3, 4)
        list_.rotate()
        self.assertEqual(list(list_), [2, 3, 4, 1])
        list_.rotate(-1)
        self.assertEqual(list(list_), [1, 2, 3, 4])
        list_.rotate(6)
        self.assertEqual(list(list_), [3, 4, 1, 2])
        self.assertEqual(list_.tail(), 2)
        list_.rotate(4)
        self.assertEqual(list(list_), [3, 4, 1, 2])
        with self.assertRaises(InvalidArgumentError):
            list_.rotate(1.5)

    def test_rotate_empty(self):
        list_ = self.make()
        list_.rotate(3)
        self.assertTrue(list_.is_empty)


if __name__ == "__main__":
    unittest.main()
