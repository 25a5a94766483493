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
Module containing the first-in-first-out queue adapter over singly linked
lists.

The queue is for algorithmic use. It is not thread-safe, and not intended
to be used in multi-threaded or multi-process applications. Use the Python
standard library `queue` module instead for such purposes.
"""

import logging
import types
from typing import Any, Callable, Generic, Iterator, TypeVar

from holdfast.auxiliary.typingutils import SupportsWrite
from holdfast.datastructures.allocators import Allocator
from holdfast.datastructures.errors import NotFoundError, translated
from holdfast.datastructures.linkedlists import SinglyList
from holdfast.datastructures.protocols import ElementProtocol

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Queue",
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


ET = TypeVar("ET")


class Queue(Generic[ET]):
    """
    A first-in-first-out queue of element handles.

    The queue wraps a singly linked list, whose head is the front of the
    queue and whose tail is the back. Dequeuing detaches the head node and
    transfers its handle to the caller, without destroying it.

    Example Usage
    -------------
    ```
    >>> from holdfast.datastructures.protocols import ObjectProtocol
    >>> from holdfast.datastructures.queues import Queue
    >>> queue: Queue[int] = Queue(ObjectProtocol())
    >>> for value in (10, 20, 30):
    ...     queue.enqueue(value)
    >>> queue.peek()
    10
    >>> queue.dequeue(), queue.dequeue(), len(queue)
    (10, 20, 1)
    ```
    """

    __slots__ = {
        "__list": "The singly linked list holding the queue's handles."
    }

    __QUEUE_LOGGER = logging.getLogger("HoldfastQueue")

    def __init__(
        self,
        protocol: ElementProtocol[ET],
        *,
        allocator: Allocator | None = None
    ) -> None:
        """
        Create a new empty queue.

        The arguments are as for `SinglyList`.

        Raises
        ------
        `InvalidArgumentError` - If the protocol does not provide the
        required capabilities.
        """
        with translated("Queue"):
            self.__list: SinglyList[ET] = SinglyList(
                protocol,
                allocator=allocator
            )

    @classmethod
    def _from_list(cls, list_: SinglyList[ET]) -> "Queue[ET]":
        queue = cls.__new__(cls)
        queue.__list = list_
        return queue

    def __enter__(self) -> "Queue[ET]":
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None
    ) -> None:
        self.destroy()

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[ET]:
        """Iterate over the handles from the front to the back."""
        with translated("Queue"):
            yield from self.__list

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Queue):
            return self.equals(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.__list.is_destroyed:
            return f"{self.__class__.__name__}(destroyed)"
        return f"{self.__class__.__name__}(length={len(self.__list)})"

    def __str__(self) -> str:
        return str(self.__list)

    @property
    def protocol(self) -> ElementProtocol[ET]:
        """The element protocol of the queue."""
        return self.__list.protocol

    @property
    def is_destroyed(self) -> bool:
        """Whether the queue has been destroyed."""
        return self.__list.is_destroyed

    @property
    def length(self) -> int:
        """The number of handles in the queue."""
        with translated("Queue"):
            return self.__list.length

    @property
    def is_empty(self) -> bool:
        """Whether the queue holds no handles."""
        with translated("Queue"):
            return self.__list.is_empty

    def destroy(self) -> None:
        """Destroy every handle in the queue and release its storage."""
        self.__list.destroy()

    def clear(self) -> None:
        """Destroy every handle in the queue."""
        with translated("Queue"):
            self.__list.clear()

    def delete_element(self, handle: ET) -> None:
        """Destroy a handle owned by the caller with the queue's protocol."""
        self.__list.delete_element(handle)

    def enqueue(self, handle: ET) -> None:
        """
        Add a handle to the back of the queue.

        If the enqueue fails, the raised error carries the handle back to
        the caller, who keeps ownership of it.

        Raises
        ------
        `InvalidArgumentError` - If the handle is None.

        `AllocationFailureError` - If the node cannot be allocated.
        """
        with translated("Queue"):
            self.__list.append(handle)

    def dequeue(self) -> ET:
        """
        Remove the handle at the front of the queue and transfer its
        ownership to the caller.

        The handle is not destroyed.

        Raises
        ------
        `EmptyError` - If the queue is empty.
        """
        with translated("Queue", front_access=True):
            return self.__list.detach_head()

    def peek(self) -> ET:
        """
        Get a borrowed reference to the handle at the front of the queue.

        Raises
        ------
        `EmptyError` - If the queue is empty.
        """
        with translated("Queue", front_access=True):
            return self.__list.head()

    def find(self, key: ET) -> int:
        """
        Find the position, counted from the front, of the first handle that
        compares equal to the key.

        Raises
        ------
        `NotFoundError` - If no handle compares equal to the key.
        """
        with translated("Queue"):
            return self.__list.find(key)

    def contains(self, key: ET) -> bool:
        """Whether any handle in the queue compares equal to the key."""
        try:
            self.find(key)
        except NotFoundError:
            return False
        return True

    def for_each(self, function: Callable[[ET, int], Any]) -> None:
        """Call the function with every handle and its position."""
        with translated("Queue"):
            self.__list.for_each(function)

    def equals(self, other: "Queue[ET] | None") -> bool:
        """Structural equality with another queue."""
        if other is None or not isinstance(other, Queue):
            return False
        with translated("Queue"):
            return self.__list.equals(other.__list)

    def clone(self) -> "Queue[ET]":
        """
        Create a deep copy of the queue.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot clone.

        `AllocationFailureError` - If any element or node cannot be
        allocated. The queue is unchanged.
        """
        with translated("Queue"):
            list_ = self.__list.clone()
        self.__QUEUE_LOGGER.debug(
            "Queue: Cloned queue of %s handles.", len(list_)
        )
        return self._from_list(list_)

    def render(self, sink: SupportsWrite[str] | None = None) -> None:
        """
        Write a rendering of the queue, from front to back, to the sink.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot render.
        """
        with translated("Queue"):
            self.__list.render(sink)
