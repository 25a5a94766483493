from collections import Counter

from holdfast.datastructures.protocols import ObjectProtocol


class Box:
    """A mutable element whose identity is distinct from its value."""

    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Box({self.value!r})"


class TrackingProtocol(ObjectProtocol):
    """
    Element protocol over boxes that records every destroy call.

    If `clone_budget` is not None, cloning succeeds that many times and
    then reports allocation failure by returning None.
    """

    def __init__(self, clone_budget=None):
        self.destroyed = Counter()
        self.clone_budget = clone_budget

    def destroy(self, handle, /):
        self.destroyed[id(handle)] += 1

    def compare(self, left, right, /):
        return (left.value > right.value) - (left.value < right.value)

    def render(self, handle, index, sink, /):
        sink.write(str(handle.value))

    def clone(self, handle, /):
        if self.clone_budget is not None:
            if self.clone_budget == 0:
                return None
            self.clone_budget -= 1
        return Box(handle.value)

    def destroy_count(self, handle):
        return self.destroyed[id(handle)]

    @property
    def total_destroyed(self):
        return sum(self.destroyed.values())

    @property
    def double_destroyed(self):
        return [key for key, count in self.destroyed.items() if count > 1]
