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

"""Module containing the last-in-first-out stack adapter over vectors."""

import logging
import types
from typing import Any, Callable, Generic, Iterator, TypeVar

from holdfast.auxiliary.typingutils import SupportsWrite
from holdfast.datastructures.allocators import Allocator
from holdfast.datastructures.errors import EmptyError, translated
from holdfast.datastructures.policy import CapacityPolicy
from holdfast.datastructures.protocols import ElementProtocol
from holdfast.datastructures.vectors import Vector

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Stack",
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


ET = TypeVar("ET")


class Stack(Generic[ET]):
    """
    A last-in-first-out stack of element handles.

    The stack wraps a vector, whose last handle is the top of the stack.
    Errors raised by the vector are translated to the stack's errors;
    popping or peeking an empty stack raises `EmptyError`.

    Example Usage
    -------------
    ```
    >>> from holdfast.datastructures.protocols import ObjectProtocol
    >>> from holdfast.datastructures.stacks import Stack
    >>> stack: Stack[str] = Stack(4, ObjectProtocol())
    >>> for item in "abc":
    ...     stack.push(item)
    >>> stack.peek()
    'c'
    >>> [stack.pop() for _ in range(3)]
    ['c', 'b', 'a']
    >>> stack.pop()
    Traceback (most recent call last):
    ...
    EmptyError: Stack: Pop from empty stack.
    ```
    """

    __slots__ = {
        "__vector": "The vector holding the stack's handles."
    }

    __STACK_LOGGER = logging.getLogger("HoldfastStack")

    def __init__(
        self,
        initial_capacity: int,
        protocol: ElementProtocol[ET],
        *,
        policy: CapacityPolicy | None = None,
        allocator: Allocator | None = None
    ) -> None:
        """
        Create a new empty stack.

        The arguments are as for `Vector`.

        Raises
        ------
        `InvalidArgumentError` - If the initial capacity is not a positive
        integer, or the protocol does not provide the required capabilities.

        `AllocationFailureError` - If the stack cannot be allocated.
        """
        with translated("Stack"):
            self.__vector: Vector[ET] = Vector(
                initial_capacity,
                protocol,
                policy=policy,
                allocator=allocator
            )

    @classmethod
    def _from_vector(cls, vector: Vector[ET]) -> "Stack[ET]":
        stack = cls.__new__(cls)
        stack.__vector = vector
        return stack

    def __enter__(self) -> "Stack[ET]":
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
        """Iterate over the handles from the bottom to the top."""
        with translated("Stack"):
            yield from self.__vector

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Stack):
            return self.equals(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.__vector.is_destroyed:
            return f"{self.__class__.__name__}(destroyed)"
        return f"{self.__class__.__name__}(length={len(self.__vector)})"

    def __str__(self) -> str:
        return str(self.__vector)

    @property
    def protocol(self) -> ElementProtocol[ET]:
        """The element protocol of the stack."""
        return self.__vector.protocol

    @property
    def is_destroyed(self) -> bool:
        """Whether the stack has been destroyed."""
        return self.__vector.is_destroyed

    @property
    def length(self) -> int:
        """The number of handles on the stack."""
        with translated("Stack"):
            return self.__vector.length

    @property
    def is_empty(self) -> bool:
        """Whether the stack holds no handles."""
        with translated("Stack"):
            return self.__vector.is_empty

    def destroy(self) -> None:
        """Destroy every handle on the stack and release its storage."""
        self.__vector.destroy()

    def clear(self) -> None:
        """Destroy every handle on the stack, keeping its capacity."""
        with translated("Stack"):
            self.__vector.clear()

    def delete_element(self, handle: ET) -> None:
        """Destroy a handle owned by the caller with the stack's protocol."""
        self.__vector.delete_element(handle)

    def push(self, handle: ET) -> None:
        """
        Push a handle onto the top of the stack.

        If the push fails, the raised error carries the handle back to the
        caller, who keeps ownership of it.

        Raises
        ------
        `InvalidArgumentError` - If the handle is None.

        `AllocationFailureError` - If the stack cannot grow.
        """
        with translated("Stack"):
            self.__vector.push(handle)

    def pop(self) -> ET:
        """
        Pop the handle at the top of the stack and transfer its ownership
        to the caller.

        Raises
        ------
        `EmptyError` - If the stack is empty.
        """
        with translated("Stack", front_access=True):
            if self.__vector.is_empty:
                raise EmptyError("Pop from empty stack.")
            return self.__vector.pop()

    def peek(self) -> ET:
        """
        Get a borrowed reference to the handle at the top of the stack.

        Raises
        ------
        `EmptyError` - If the stack is empty.
        """
        with translated("Stack", front_access=True):
            if self.__vector.is_empty:
                raise EmptyError("Peek at empty stack.")
            return self.__vector.get(len(self.__vector) - 1)

    def fill(self, template: ET) -> None:
        """
        Replace the contents of the stack with copies of the template, one
        for every slot of its capacity.

        Raises
        ------
        `InvalidArgumentError` - If the template is None, or the protocol
        cannot clone.

        `AllocationFailureError` - If any copy cannot be allocated. The
        stack is unchanged.
        """
        with translated("Stack"):
            self.__vector.fill(template)

    def for_each(self, function: Callable[[ET, int], Any]) -> None:
        """Call the function with every handle and its depth from bottom."""
        with translated("Stack"):
            self.__vector.for_each(function)

    def equals(self, other: "Stack[ET] | None") -> bool:
        """Structural equality with another stack."""
        if other is None or not isinstance(other, Stack):
            return False
        with translated("Stack"):
            return self.__vector.equals(other.__vector)

    def clone(self) -> "Stack[ET]":
        """
        Create a deep copy of the stack.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot clone.

        `AllocationFailureError` - If any element cannot be allocated. The
        stack is unchanged.
        """
        with translated("Stack"):
            vector = self.__vector.clone()
        self.__STACK_LOGGER.debug(
            "Stack: Cloned stack of %s handles.", len(vector)
        )
        return self._from_vector(vector)

    def render(self, sink: SupportsWrite[str] | None = None) -> None:
        """
        Write a rendering of the stack, from bottom to top, to the sink.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot render.
        """
        with translated("Stack"):
            self.__vector.render(sink)
