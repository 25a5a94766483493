import io
import math
import unittest

from holdfast.datastructures.errors import (AllocationFailureError,
                                            InvalidArgumentError)
from holdfast.datastructures.protocols import (CallbackProtocol, Capability,
                                               ElementProtocol,
                                               NumberProtocol,
                                               ObjectProtocol, clone_element)


class _CompareOnly(ElementProtocol):
    def compare(self, left, right, /):
        return 0


class _NoMemory(ObjectProtocol):
    def clone(self, handle, /):
        raise MemoryError


class TestCapabilities(unittest.TestCase):
    def test_subclass_capabilities(self):
        protocol = _CompareOnly()
        self.assertTrue(protocol.supports(Capability.COMPARE))
        self.assertFalse(protocol.supports(Capability.DESTROY))
        self.assertEqual(protocol.missing(Capability.DESTROY,
                                          Capability.COMPARE,
                                          Capability.CLONE),
                         (Capability.DESTROY, Capability.CLONE))
        with self.assertRaises(NotImplementedError):
            protocol.destroy(1)

    def test_require(self):
        ObjectProtocol().require(*Capability, component="Test")
        with self.assertRaises(InvalidArgumentError) as context:
            _CompareOnly().require(Capability.DESTROY, component="Test")
        self.assertIn("destroy", str(context.exception))

    def test_callback_protocol(self):
        destroyed = []
        protocol = CallbackProtocol(destroy=destroyed.append,
                                    compare=lambda left, right: left - right)
        self.assertTrue(protocol.supports(Capability.DESTROY))
        self.assertFalse(protocol.supports(Capability.RENDER))
        protocol.destroy(3)
        self.assertEqual(destroyed, [3])
        self.assertLess(protocol.compare(1, 2), 0)
        with self.assertRaises(NotImplementedError):
            protocol.clone(1)


class TestReadyMadeProtocols(unittest.TestCase):
    def test_object_protocol(self):
        protocol = ObjectProtocol()
        self.assertEqual(protocol.compare("a", "b"), -1)
        self.assertEqual(protocol.compare(2, 2), 0)
        value = [[1], [2]]
        copy_ = protocol.clone(value)
        self.assertEqual(copy_, value)
        self.assertIsNot(copy_[0], value[0])
        sink = io.StringIO()
        protocol.render("x", 0, sink)
        self.assertEqual(sink.getvalue(), "'x'")

    def test_number_protocol(self):
        protocol = NumberProtocol()
        sink = io.StringIO()
        protocol.render(2.5, 0, sink)
        protocol.render(7.0, 1, sink)
        self.assertEqual(sink.getvalue(), "2.57")
        self.assertEqual(NumberProtocol.coerce(3), 3.0)
        with self.assertRaises(InvalidArgumentError):
            NumberProtocol.coerce("3")
        with self.assertRaises(InvalidArgumentError):
            NumberProtocol.coerce(False)

    def test_number_protocol_orders_nan_last(self):
        protocol = NumberProtocol()
        self.assertEqual(protocol.compare(math.nan, math.nan), 0)
        self.assertGreater(protocol.compare(math.nan, 1.0), 0)
        self.assertLess(protocol.compare(1.0, math.nan), 0)
        self.assertLess(protocol.compare(-math.inf, 0.0), 0)
        self.assertEqual(protocol.compare(0.0, -0.0), 0)

    def test_number_protocol_stores_negative_zero_as_zero(self):
        value = NumberProtocol.coerce(-0.0)
        self.assertEqual(math.copysign(1.0, value), 1.0)
        sink = io.StringIO()
        NumberProtocol().render(value, 0, sink)
        self.assertEqual(sink.getvalue(), "0")

    def test_clone_element(self):
        self.assertEqual(clone_element(ObjectProtocol(), [1]), [1])
        with self.assertRaises(AllocationFailureError):
            clone_element(CallbackProtocol(clone=lambda handle: None), 1)
        with self.assertRaises(AllocationFailureError):
            clone_element(_NoMemory(), 1)


if __name__ == "__main__":
    unittest.main()
