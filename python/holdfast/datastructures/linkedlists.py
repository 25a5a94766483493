###############################################################################
# Copyright (C) 2023 Oliver Michael Kamperis
# Email: olliekampo@gmail.com
#
# This program is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free Software
# Foundation, either version 3 of the License, or any later version.
#
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE. See the GNU General Public License for details.
#
# You should have received a copy of the GNU General Public License along with
# this program. If not, see <https://www.gnu.org/licenses/>.

"""
Module containing node-linked sequence data structures.

There are three linked sequences; a singly linked list, a doubly linked
list, and a singly linked ring (circular list). They share their public
interface through `LinkedSequence`, and differ only in how their nodes are
linked. Like vectors, they own the element handles they admit.

These data structures are for algorithmic use. They are not thread-safe.
"""

import io
import logging
import sys
import types
from abc import ABCMeta, abstractmethod
from typing import Any, Callable, Generic, Iterator, TypeVar

from holdfast.auxiliary.typingutils import SupportsWrite
from holdfast.datastructures.allocators import DEFAULT_ALLOCATOR, Allocator
from holdfast.datastructures.errors import (AllocationFailureError,
                                            ContainerError, EmptyError,
                                            InvalidArgumentError,
                                            NotFoundError)
from holdfast.datastructures.protocols import (Capability, ElementProtocol,
                                               clone_element)
from holdfast.datastructures.vectors import check_index

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "LinkedSequence",
    "SinglyList",
    "DoublyList",
    "CircularList"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


ET = TypeVar("ET")


class _SinglyNode:
    """A node with a forward link."""

    __slots__ = ("handle", "next")

    def __init__(self, handle: Any) -> None:
        self.handle: Any = handle
        self.next: "_SinglyNode | None" = None


class _DoublyNode:
    """A node with forward and backward links."""

    __slots__ = ("handle", "next", "prev")

    def __init__(self, handle: Any) -> None:
        self.handle: Any = handle
        self.next: "_DoublyNode | None" = None
        self.prev: "_DoublyNode | None" = None


class LinkedSequence(Generic[ET], metaclass=ABCMeta):
    """
    Base class for node-linked sequences of element handles.

    Sub-classes define how nodes are linked by implementing `_new_node`,
    `_nodes`, `_node_at`, `_link`, `_unlink`, `_reverse_links` and
    `_drop_links`. Positions are counted from the head.
    """

    __slots__ = {
        "__protocol": "The element protocol.",
        "__allocator": "The allocator of nodes.",
        "__length": "The number of nodes in the sequence.",
        "__destroyed": "Whether the sequence is destroyed."
    }

    _LIST_LOGGER = logging.getLogger("HoldfastLinkedList")

    def __init__(
        self,
        protocol: ElementProtocol[ET],
        *,
        allocator: Allocator | None = None
    ) -> None:
        """
        Create a new empty linked sequence.

        Parameters
        ----------
        `protocol: ElementProtocol[ET]` - The element protocol. It must
        provide the destroy and compare capabilities.

        `allocator: Allocator | None = None` - The allocator of nodes. If not
        given or None, the default allocator is used.

        Raises
        ------
        `InvalidArgumentError` - If the protocol does not provide the
        required capabilities.
        """
        if not isinstance(protocol, ElementProtocol):
            raise InvalidArgumentError(
                f"{self._name}: An element protocol is required. "
                f"Got; {protocol!r} of {type(protocol)}."
            )
        protocol.require(Capability.DESTROY, Capability.COMPARE,
                         component=self._name)
        if allocator is None:
            allocator = DEFAULT_ALLOCATOR
        self.__protocol: ElementProtocol[ET] = protocol
        self.__allocator: Allocator = allocator
        self.__length: int = 0
        self.__destroyed: bool = False

    @property
    def _name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    def _new_node(self, handle: ET) -> Any:
        """Allocate a new unlinked node holding the handle."""
        ...

    @abstractmethod
    def _nodes(self) -> Iterator[Any]:
        """Iterate over the nodes from head to tail."""
        ...

    @abstractmethod
    def _node_at(self, index: int) -> Any:
        """Get the node at a valid index."""
        ...

    @abstractmethod
    def _link(self, index: int, node: Any) -> None:
        """Link an unlinked node in at a valid insertion index."""
        ...

    @abstractmethod
    def _unlink(self, index: int) -> Any:
        """Unlink and return the node at a valid index."""
        ...

    @abstractmethod
    def _reverse_links(self) -> None:
        """Reverse the order of the nodes."""
        ...

    @abstractmethod
    def _drop_links(self) -> None:
        """Forget all nodes."""
        ...

    def _check_live(self) -> None:
        """Raise an error if the list is destroyed."""
        if self.__destroyed:
            raise InvalidArgumentError(f"{self._name}: The list is destroyed.")

    def __enter__(self) -> "LinkedSequence[ET]":
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None
    ) -> None:
        self.destroy()

    @property
    def protocol(self) -> ElementProtocol[ET]:
        """The element protocol of the list."""
        return self.__protocol

    @property
    def allocator(self) -> Allocator:
        """The allocator of the list's nodes."""
        return self.__allocator

    @property
    def is_destroyed(self) -> bool:
        """Whether the list has been destroyed."""
        return self.__destroyed

    @property
    def length(self) -> int:
        """The number of handles in the list."""
        self._check_live()
        return self.__length

    @property
    def is_empty(self) -> bool:
        """Whether the list holds no handles."""
        return self.length == 0

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[ET]:
        self._check_live()
        for node in self._nodes():
            yield node.handle

    def __getitem__(self, index: int) -> ET:
        return self.get(index)

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LinkedSequence):
            return self.equals(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.__destroyed:
            return f"{self._name}(destroyed)"
        return f"{self._name}(length={self.__length})"

    def __str__(self) -> str:
        if self.__destroyed:
            return repr(self)
        if not self.__protocol.supports(Capability.RENDER):
            return "[" + ", ".join(repr(handle) for handle in self) + "]"
        sink = io.StringIO()
        self.render(sink)
        return sink.getvalue().rstrip("\n")

    def destroy(self) -> None:
        """
        Destroy every handle in the list and release its nodes.

        Destroying a destroyed list does nothing. Every other operation on a
        destroyed list raises `InvalidArgumentError`.
        """
        if self.__destroyed:
            return
        try:
            self.clear()
        finally:
            self.__destroyed = True

    def clear(self) -> None:
        """Destroy every handle in the list, leaving it empty."""
        self._check_live()
        handles = [node.handle for node in self._nodes()]
        self._drop_links()
        self.__length = 0
        for handle in handles:
            self.__protocol.destroy(handle)

    def delete_element(self, handle: ET) -> None:
        """Destroy a handle owned by the caller with the list's protocol."""
        if handle is not None:
            self.__protocol.destroy(handle)

    def insert(self, index: int, handle: ET) -> None:
        """
        Insert a handle at the given index.

        Raises
        ------
        `InvalidArgumentError` - If the handle is None.

        `OutOfBoundsError` - If the index is greater than the length.

        `AllocationFailureError` - If the node cannot be allocated.
        """
        self._check_live()
        if handle is None:
            raise InvalidArgumentError(
                f"{self._name}: Cannot admit a None handle."
            )
        index = check_index(self._name, index, self.__length + 1,
                            handle=handle)
        try:
            node = self._new_node(handle)
        except AllocationFailureError as error:
            self._LIST_LOGGER.debug(
                "%s: Admission failed allocating a node; %s",
                self._name, error
            )
            raise AllocationFailureError(
                f"{self._name}: Failed to allocate a node; {error}",
                handle=handle
            ) from error
        self._link(index, node)
        self.__length += 1

    def append(self, handle: ET) -> None:
        """Append a handle at the tail. Raises as for `insert`."""
        self.insert(self.length, handle)

    def prepend(self, handle: ET) -> None:
        """Prepend a handle at the head. Raises as for `insert`."""
        self.insert(0, handle)

    def remove(self, index: int) -> None:
        """
        Destroy the handle at the given index and unlink its node.

        Raises
        ------
        `OutOfBoundsError` - If the index is not below the length.
        """
        self._check_live()
        index = check_index(self._name, index, self.__length)
        node = self._unlink(index)
        self.__length -= 1
        self.__protocol.destroy(node.handle)

    def detach_head(self) -> ET:
        """
        Unlink the head node and transfer its handle to the caller.

        The handle is not destroyed.

        Raises
        ------
        `EmptyError` - If the list is empty.
        """
        self._check_live()
        if self.__length == 0:
            raise EmptyError(f"{self._name}: Detach from empty list.")
        node = self._unlink(0)
        self.__length -= 1
        return node.handle

    def detach_tail(self) -> ET:
        """
        Unlink the tail node and transfer its handle to the caller.

        The handle is not destroyed.

        Raises
        ------
        `EmptyError` - If the list is empty.
        """
        self._check_live()
        if self.__length == 0:
            raise EmptyError(f"{self._name}: Detach from empty list.")
        node = self._unlink(self.__length - 1)
        self.__length -= 1
        return node.handle

    def get(self, index: int) -> ET:
        """
        Get a borrowed reference to the handle at the given index.

        Raises
        ------
        `OutOfBoundsError` - If the index is not below the length.
        """
        self._check_live()
        return self._node_at(
            check_index(self._name, index, self.__length)
        ).handle

    def clone_at(self, index: int) -> ET:
        """
        Get a deep copy of the handle at the given index.

        The copy is owned by the caller; the list is unchanged.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot clone.

        `OutOfBoundsError` - If the index is not below the length.

        `AllocationFailureError` - If the copy cannot be allocated.
        """
        self._check_live()
        self.__protocol.require(Capability.CLONE, component=self._name)
        node = self._node_at(check_index(self._name, index, self.__length))
        return clone_element(self.__protocol, node.handle)

    def head(self) -> ET:
        """
        Get a borrowed reference to the handle at the head.

        Raises
        ------
        `EmptyError` - If the list is empty.
        """
        self._check_live()
        if self.__length == 0:
            raise EmptyError(f"{self._name}: The list is empty.")
        return self._node_at(0).handle

    def tail(self) -> ET:
        """
        Get a borrowed reference to the handle at the tail.

        Raises
        ------
        `EmptyError` - If the list is empty.
        """
        self._check_live()
        if self.__length == 0:
            raise EmptyError(f"{self._name}: The list is empty.")
        return self._node_at(self.__length - 1).handle

    def find(self, key: ET) -> int:
        """
        Find the first index whose handle compares equal to the key.

        Raises
        ------
        `NotFoundError` - If no handle compares equal to the key.
        """
        self._check_live()
        compare = self.__protocol.compare
        for index, node in enumerate(self._nodes()):
            if compare(node.handle, key) == 0:
                return index
        raise NotFoundError(f"{self._name}: Key not found.")

    def contains(self, key: ET) -> bool:
        """Whether any handle compares equal to the key."""
        try:
            self.find(key)
        except NotFoundError:
            return False
        return True

    def update(self, index: int, handle: ET) -> None:
        """
        Replace the handle at the given index, destroying the old handle.

        Raises
        ------
        `InvalidArgumentError` - If the handle is None.

        `OutOfBoundsError` - If the index is not below the length.
        """
        self._check_live()
        if handle is None:
            raise InvalidArgumentError(
                f"{self._name}: Cannot admit a None handle."
            )
        node = self._node_at(
            check_index(self._name, index, self.__length, handle=handle)
        )
        old_handle = node.handle
        node.handle = handle
        self.__protocol.destroy(old_handle)

    def swap(self, index_a: int, index_b: int) -> None:
        """
        Swap the handles at the given indices.

        Raises
        ------
        `OutOfBoundsError` - If either index is not below the length.
        """
        self._check_live()
        node_a = self._node_at(check_index(self._name, index_a,
                                           self.__length))
        node_b = self._node_at(check_index(self._name, index_b,
                                           self.__length))
        node_a.handle, node_b.handle = node_b.handle, node_a.handle

    def reverse(self) -> None:
        """Reverse the order of the list in-place."""
        self._check_live()
        if self.__length > 1:
            self._reverse_links()

    def for_each(self, function: Callable[[ET, int], Any]) -> None:
        """
        Call the function with every handle and its index, from the head.

        The function may mutate the elements but must not add or remove
        handles.
        """
        self._check_live()
        for index, node in enumerate(self._nodes()):
            function(node.handle, index)

    def equals(self, other: "LinkedSequence[ET] | None") -> bool:
        """
        Structural equality with another linked sequence.

        The lists are equal if they have the same length and every pair of
        handles at the same position compares equal under this list's
        protocol.
        """
        self._check_live()
        if other is None or not isinstance(other, LinkedSequence):
            return False
        if len(self) != len(other):
            return False
        compare = self.__protocol.compare
        return all(
            compare(handle_a, handle_b) == 0
            for handle_a, handle_b in zip(self, other)
        )

    def clone(self) -> "LinkedSequence[ET]":
        """
        Create a deep copy of the list, with the same protocol and
        allocator.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot clone.

        `AllocationFailureError` - If any element or node cannot be
        allocated. Every element copied so far is destroyed, and this list
        is unchanged.
        """
        self._check_live()
        self.__protocol.require(Capability.CLONE, component=self._name)
        copy_ = type(self)(self.__protocol, allocator=self.__allocator)
        try:
            for handle in self:
                element = clone_element(self.__protocol, handle)
                try:
                    copy_.append(element)
                except ContainerError:
                    self.__protocol.destroy(element)
                    raise
        except Exception:
            self._LIST_LOGGER.debug(
                "%s: Clone failed after %s of %s elements; destroying the "
                "copies.", self._name, len(copy_), self.__length
            )
            copy_.destroy()
            raise
        return copy_

    def render(self, sink: SupportsWrite[str] | None = None) -> None:
        """
        Write a bracketed, comma separated rendering of the list to the
        sink, followed by a newline.

        If the sink is not given or None, standard output is used.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot render.
        """
        self._check_live()
        self.__protocol.require(Capability.RENDER, component=self._name)
        if sink is None:
            sink = sys.stdout
        sink.write("[")
        for index, node in enumerate(self._nodes()):
            if index > 0:
                sink.write(", ")
            self.__protocol.render(node.handle, index, sink)
        sink.write("]\n")


class SinglyList(LinkedSequence[ET]):
    """
    A singly linked list.

    The list is anchored at its head, and caches its tail node so that
    appending is constant time.

    Example Usage
    -------------
    ```
    >>> from holdfast.datastructures.linkedlists import SinglyList
    >>> from holdfast.datastructures.protocols import ObjectProtocol
    >>> items: SinglyList[str] = SinglyList(ObjectProtocol())
    >>> for item in "abc":
    ...     items.append(item)
    >>> items.reverse()
    >>> str(items)
    "['c', 'b', 'a']"
    >>> items.detach_head()
    'c'
    ```
    """

    __slots__ = {
        "__head": "The first node, or None if the list is empty.",
        "__tail": "The last node, or None if the list is empty."
    }

    def __init__(
        self,
        protocol: ElementProtocol[ET],
        *,
        allocator: Allocator | None = None
    ) -> None:
        """Create a new empty singly linked list."""
        super().__init__(protocol, allocator=allocator)
        self.__head: _SinglyNode | None = None
        self.__tail: _SinglyNode | None = None

    def _new_node(self, handle: ET) -> _SinglyNode:
        return self.allocator.allocate_node(_SinglyNode, handle)

    def _nodes(self) -> Iterator[_SinglyNode]:
        node = self.__head
        while node is not None:
            yield node
            node = node.next

    def _node_at(self, index: int) -> _SinglyNode:
        if index == len(self) - 1:
            return self.__tail
        node = self.__head
        for _ in range(index):
            node = node.next
        return node

    def _link(self, index: int, node: _SinglyNode) -> None:
        if index == 0:
            node.next = self.__head
            self.__head = node
            if self.__tail is None:
                self.__tail = node
        elif index == len(self):
            self.__tail.next = node
            self.__tail = node
        else:
            previous = self._node_at(index - 1)
            node.next = previous.next
            previous.next = node

    def _unlink(self, index: int) -> _SinglyNode:
        if index == 0:
            node = self.__head
            self.__head = node.next
            if self.__head is None:
                self.__tail = None
        else:
            previous = self._node_at(index - 1)
            node = previous.next
            previous.next = node.next
            if node is self.__tail:
                self.__tail = previous
        node.next = None
        return node

    def _reverse_links(self) -> None:
        previous = None
        node = self.__head
        self.__tail = node
        while node is not None:
            next_ = node.next
            node.next = previous
            previous = node
            node = next_
        self.__head = previous

    def _drop_links(self) -> None:
        self.__head = None
        self.__tail = None


class DoublyList(LinkedSequence[ET]):
    """
    A doubly linked list.

    Nodes are reached from whichever end is closer, and both ends can be
    detached in constant time. Iterating with `reversed` walks from the
    tail to the head.
    """

    __slots__ = {
        "__head": "The first node, or None if the list is empty.",
        "__tail": "The last node, or None if the list is empty."
    }

    def __init__(
        self,
        protocol: ElementProtocol[ET],
        *,
        allocator: Allocator | None = None
    ) -> None:
        """Create a new empty doubly linked list."""
        super().__init__(protocol, allocator=allocator)
        self.__head: _DoublyNode | None = None
        self.__tail: _DoublyNode | None = None

    def __reversed__(self) -> Iterator[ET]:
        self._check_live()
        node = self.__tail
        while node is not None:
            yield node.handle
            node = node.prev

    def _new_node(self, handle: ET) -> _DoublyNode:
        return self.allocator.allocate_node(_DoublyNode, handle)

    def _nodes(self) -> Iterator[_DoublyNode]:
        node = self.__head
        while node is not None:
            yield node
            node = node.next

    def _node_at(self, index: int) -> _DoublyNode:
        length = len(self)
        if index < length // 2:
            node = self.__head
            for _ in range(index):
                node = node.next
        else:
            node = self.__tail
            for _ in range(length - 1 - index):
                node = node.prev
        return node

    def _link(self, index: int, node: _DoublyNode) -> None:
        if len(self) == 0:
            self.__head = node
            self.__tail = node
        elif index == 0:
            node.next = self.__head
            self.__head.prev = node
            self.__head = node
        elif index == len(self):
            node.prev = self.__tail
            self.__tail.next = node
            self.__tail = node
        else:
            following = self._node_at(index)
            node.prev = following.prev
            node.next = following
            following.prev.next = node
            following.prev = node

    def _unlink(self, index: int) -> _DoublyNode:
        node = self._node_at(index)
        if node.prev is None:
            self.__head = node.next
        else:
            node.prev.next = node.next
        if node.next is None:
            self.__tail = node.prev
        else:
            node.next.prev = node.prev
        node.prev = None
        node.next = None
        return node

    def _reverse_links(self) -> None:
        node = self.__head
        while node is not None:
            node.prev, node.next = node.next, node.prev
            node = node.prev
        self.__head, self.__tail = self.__tail, self.__head

    def _drop_links(self) -> None:
        self.__head = None
        self.__tail = None


class CircularList(LinkedSequence[ET]):
    """
    A singly linked ring.

    The ring is anchored at its tail node, whose forward link is the head
    node. Rotating the ring moves the anchor without moving any handles.
    """

    __slots__ = {
        "__tail": "The last node, or None if the ring is empty."
    }

    def __init__(
        self,
        protocol: ElementProtocol[ET],
        *,
        allocator: Allocator | None = None
    ) -> None:
        """Create a new empty circular list."""
        super().__init__(protocol, allocator=allocator)
        self.__tail: _SinglyNode | None = None

    def _new_node(self, handle: ET) -> _SinglyNode:
        return self.allocator.allocate_node(_SinglyNode, handle)

    def _nodes(self) -> Iterator[_SinglyNode]:
        if self.__tail is None:
            return
        node = self.__tail.next
        for _ in range(len(self)):
            yield node
            node = node.next

    def _node_at(self, index: int) -> _SinglyNode:
        if index == len(self) - 1:
            return self.__tail
        node = self.__tail.next
        for _ in range(index):
            node = node.next
        return node

    def _link(self, index: int, node: _SinglyNode) -> None:
        if self.__tail is None:
            node.next = node
            self.__tail = node
            return
        previous = self.__tail if index == 0 else self._node_at(index - 1)
        node.next = previous.next
        previous.next = node
        if index == len(self):
            self.__tail = node

    def _unlink(self, index: int) -> _SinglyNode:
        if len(self) == 1:
            node = self.__tail
            self.__tail = None
        else:
            previous = self.__tail if index == 0 else self._node_at(index - 1)
            node = previous.next
            previous.next = node.next
            if node is self.__tail:
                self.__tail = previous
        node.next = None
        return node

    def _reverse_links(self) -> None:
        head = self.__tail.next
        previous = self.__tail
        node = head
        for _ in range(len(self)):
            next_ = node.next
            node.next = previous
            previous = node
            node = next_
        self.__tail = head

    def _drop_links(self) -> None:
        if self.__tail is not None:
            # Break the ring so the nodes can be collected.
            self.__tail.next = None
        self.__tail = None

    def rotate(self, steps: int = 1) -> None:
        """
        Rotate the ring so the handle at index `steps` becomes the head.

        Negative steps rotate the other way.

        Raises
        ------
        `InvalidArgumentError` - If steps is not an integer.
        """
        length = self.length
        if isinstance(steps, bool) or not isinstance(steps, int):
            raise InvalidArgumentError(
                f"CircularList: Steps must be an integer. Got; {steps!r}."
            )
        if length > 1 and steps % length != 0:
            self.__tail = self._node_at((steps - 1) % length)
