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
Module containing the growable vector data structure.

The vector is the foundation of the holdfast containers; stacks and
matrices are built on top of it. A vector owns the element handles it
admits, and releases them through its element protocol.

These data structures are for algorithmic use. They are not thread-safe.
"""

import collections.abc
import functools
import io
import logging
import sys
import types
from typing import Any, Callable, Generic, Iterator, Protocol, TypeVar

import numpy as np

from holdfast.auxiliary.typingutils import SupportsWrite
from holdfast.datastructures.allocators import DEFAULT_ALLOCATOR, Allocator
from holdfast.datastructures.errors import (AllocationFailureError,
                                            ContainerError,
                                            InvalidArgumentError,
                                            NotFoundError, OutOfBoundsError)
from holdfast.datastructures.policy import DEFAULT_POLICY, CapacityPolicy
from holdfast.datastructures.protocols import (Capability, ElementProtocol,
                                               clone_element)

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Vector",
    "is_equal",
    "check_index"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


ET = TypeVar("ET")


class _SupportsEquals(Protocol):
    def equals(self, other: Any, /) -> bool:
        ...


def is_equal(
    container_a: _SupportsEquals | None,
    container_b: _SupportsEquals | None
) -> bool:
    """
    Structural equality of two containers, either of which may be None.

    Two None containers are equal, a None container is not equal to any
    other container, and otherwise the containers' `equals` method decides.
    """
    if container_a is None or container_b is None:
        return container_a is container_b
    return container_a.equals(container_b)


def check_index(
    component: str,
    index: Any,
    bound: int,
    **handle: Any
) -> int:
    """
    Check that an index addresses a position below the given bound.

    Any `handle` keyword argument is attached to the raised error, to
    return it to the caller.

    Raises
    ------
    `InvalidArgumentError` - If the index is not an integer.

    `OutOfBoundsError` - If the index is negative or not below the bound.
    """
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise InvalidArgumentError(
            f"{component}: Index must be an integer. "
            f"Got; {index!r} of {type(index)}.",
            **handle
        )
    if index < 0 or index >= bound:
        raise OutOfBoundsError(
            f"{component}: Index {index} out of range for bound {bound}.",
            **handle
        )
    return int(index)


class Vector(collections.abc.Sequence, Generic[ET]):
    """
    A growable indexed sequence of element handles.

    The vector stores handles in a buffer whose capacity grows by the
    policy's growth factor when a full vector admits another handle, and
    shrinks when the length falls below the policy's shrink threshold. The
    capacity never falls below the policy's minimum capacity.

    Admission operations (`insert`, `push`, `set`) transfer ownership of the
    handle to the vector only if they succeed. If they fail, the raised
    error carries the handle back to the caller in its `handle` attribute,
    and the vector has not destroyed it. Every failed mutation leaves the
    vector exactly as it was.

    Example Usage
    -------------
    ```
    >>> from holdfast.datastructures.protocols import ObjectProtocol
    >>> from holdfast.datastructures.vectors import Vector
    >>> vector: Vector[int] = Vector(4, ObjectProtocol())
    >>> for value in (3, 1, 2):
    ...     vector.push(value)
    >>> vector.sort()
    >>> str(vector)
    '[1, 2, 3]'
    >>> vector.binary_search_sorted(2)
    1
    >>> vector.pop()
    3
    ```
    """

    __slots__ = {
        "__buffer": "The buffer of element handles, None once destroyed.",
        "__length": "The number of admitted handles.",
        "__protocol": "The element protocol.",
        "__policy": "The capacity policy.",
        "__allocator": "The allocator of buffers."
    }

    __VECTOR_LOGGER = logging.getLogger("HoldfastVector")

    def __init__(
        self,
        initial_capacity: int,
        protocol: ElementProtocol[ET],
        *,
        policy: CapacityPolicy | None = None,
        allocator: Allocator | None = None
    ) -> None:
        """
        Create a new empty vector.

        Parameters
        ----------
        `initial_capacity: int` - The initial capacity of the vector. The
        vector is created with at least the policy's minimum capacity.

        `protocol: ElementProtocol[ET]` - The element protocol. It must
        provide the destroy and compare capabilities.

        `policy: CapacityPolicy | None = None` - The capacity policy. If not
        given or None, the default policy is used.

        `allocator: Allocator | None = None` - The allocator of buffers. If
        not given or None, the default allocator is used.

        Raises
        ------
        `InvalidArgumentError` - If the initial capacity is not a positive
        integer, exceeds the policy's maximum capacity, or the protocol does
        not provide the required capabilities.

        `AllocationFailureError` - If the buffer cannot be allocated.
        """
        if policy is None:
            policy = DEFAULT_POLICY
        if allocator is None:
            allocator = DEFAULT_ALLOCATOR
        if (isinstance(initial_capacity, bool)
                or not isinstance(initial_capacity, int)
                or initial_capacity <= 0):
            raise InvalidArgumentError(
                "Vector: Initial capacity must be a positive integer. "
                f"Got; {initial_capacity!r}."
            )
        if not isinstance(protocol, ElementProtocol):
            raise InvalidArgumentError(
                "Vector: An element protocol is required. "
                f"Got; {protocol!r} of {type(protocol)}."
            )
        protocol.require(Capability.DESTROY, Capability.COMPARE,
                         component="Vector")
        capacity = max(initial_capacity, policy.min_capacity)
        if capacity > policy.max_capacity:
            raise InvalidArgumentError(
                f"Vector: Initial capacity {capacity} exceeds the maximum "
                f"capacity {policy.max_capacity}."
            )
        self.__protocol: ElementProtocol[ET] = protocol
        self.__policy: CapacityPolicy = policy
        self.__allocator: Allocator = allocator
        self.__length: int = 0
        self.__buffer: np.ndarray | None = allocator.allocate(capacity)

    def __enter__(self) -> "Vector[ET]":
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None
    ) -> None:
        self.destroy()

    def __live(self) -> np.ndarray:
        """Get the buffer, raising an error if the vector is destroyed."""
        if self.__buffer is None:
            raise InvalidArgumentError("Vector: The vector is destroyed.")
        return self.__buffer

    def __release(self, start: int, stop: int) -> None:
        """Destroy the handles in the given range and clear their slots."""
        buffer = self.__buffer
        for index in range(start, stop):
            handle = buffer[index]
            buffer[index] = None
            self.__protocol.destroy(handle)

    @property
    def protocol(self) -> ElementProtocol[ET]:
        """The element protocol of the vector."""
        return self.__protocol

    @property
    def policy(self) -> CapacityPolicy:
        """The capacity policy of the vector."""
        return self.__policy

    @property
    def allocator(self) -> Allocator:
        """The allocator of the vector's buffers."""
        return self.__allocator

    @property
    def is_destroyed(self) -> bool:
        """Whether the vector has been destroyed."""
        return self.__buffer is None

    @property
    def length(self) -> int:
        """The number of handles in the vector."""
        self.__live()
        return self.__length

    @property
    def capacity(self) -> int:
        """The number of handles the vector can hold without growing."""
        return len(self.__live())

    @property
    def is_empty(self) -> bool:
        """Whether the vector holds no handles."""
        return self.length == 0

    @property
    def is_full(self) -> bool:
        """Whether the vector's length equals its capacity."""
        return self.length == self.capacity

    def __len__(self) -> int:
        return self.length

    def __iter__(self) -> Iterator[ET]:
        buffer = self.__live()
        for index in range(self.__length):
            yield buffer[index]

    def __getitem__(self, index: int) -> ET:  # type: ignore[override]
        return self.get(index)

    def __contains__(self, key: object) -> bool:
        try:
            self.find(key)  # type: ignore[arg-type]
        except NotFoundError:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Vector):
            return self.equals(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.__buffer is None:
            return f"{self.__class__.__name__}(destroyed)"
        return (f"{self.__class__.__name__}(length={self.__length}, "
                f"capacity={len(self.__buffer)})")

    def __str__(self) -> str:
        if self.__buffer is None:
            return repr(self)
        if not self.__protocol.supports(Capability.RENDER):
            return "[" + ", ".join(repr(handle) for handle in self) + "]"
        sink = io.StringIO()
        self.render(sink)
        return sink.getvalue().rstrip("\n")

    def destroy(self) -> None:
        """
        Destroy every handle in the vector and release its buffer.

        Destroying a destroyed vector does nothing. Every other operation on
        a destroyed vector raises `InvalidArgumentError`.
        """
        if self.__buffer is None:
            return
        try:
            self.__release(0, self.__length)
        finally:
            self.__length = 0
            self.__buffer = None

    def clear(self) -> None:
        """Destroy every handle in the vector, keeping its capacity."""
        self.__live()
        try:
            self.__release(0, self.__length)
        finally:
            self.__length = 0

    def delete_element(self, handle: ET) -> None:
        """
        Destroy a handle owned by the caller with the vector's protocol.

        Useful for disposing of handles returned by failed admissions.
        """
        if handle is not None:
            self.__protocol.destroy(handle)

    def get(self, index: int) -> ET:
        """
        Get a borrowed reference to the handle at the given index.

        Ownership of the handle stays with the vector.

        Raises
        ------
        `OutOfBoundsError` - If the index is not below the length.
        """
        buffer = self.__live()
        return buffer[check_index("Vector", index, self.__length)]

    def set(self, index: int, handle: ET) -> None:
        """
        Replace the handle at the given index, destroying the old handle.

        Setting the index equal to the length appends the handle.

        Raises
        ------
        `InvalidArgumentError` - If the handle is None.

        `OutOfBoundsError` - If the index is greater than the length.

        `AllocationFailureError` - If appending requires growing the vector
        and the allocation fails.
        """
        buffer = self.__live()
        self.__admissible(handle)
        index = check_index("Vector", index, self.__length + 1,
                            handle=handle)
        if index == self.__length:
            self.insert(index, handle)
            return
        old_handle = buffer[index]
        buffer[index] = handle
        self.__protocol.destroy(old_handle)

    def insert(self, index: int, handle: ET) -> None:
        """
        Insert a handle at the given index, shifting later handles right.

        If the vector is full, its capacity is first multiplied by the
        policy's growth factor.

        Raises
        ------
        `InvalidArgumentError` - If the handle is None.

        `OutOfBoundsError` - If the index is greater than the length, or if
        growing would exceed the maximum capacity.

        `AllocationFailureError` - If growing the vector fails.
        """
        buffer = self.__live()
        self.__admissible(handle)
        index = check_index("Vector", index, self.__length + 1,
                            handle=handle)
        if self.__length == len(buffer):
            try:
                self.reserve(len(buffer) * self.__policy.growth_factor)
            except ContainerError as error:
                self.__VECTOR_LOGGER.debug(
                    "Vector: Admission failed while growing from "
                    "capacity %s; %s", len(buffer), error
                )
                raise type(error)(
                    f"Vector: Failed to grow for admission; {error}",
                    handle=handle
                ) from error
            buffer = self.__buffer
        length = self.__length
        if index < length:
            buffer[index + 1:length + 1] = buffer[index:length].copy()
        buffer[index] = handle
        self.__length = length + 1

    def remove(self, index: int) -> None:
        """
        Destroy the handle at the given index, shifting later handles left.

        The vector may shrink afterwards.

        Raises
        ------
        `OutOfBoundsError` - If the index is not below the length.
        """
        buffer = self.__live()
        index = check_index("Vector", index, self.__length)
        length = self.__length
        self.__protocol.destroy(buffer[index])
        buffer[index:length - 1] = buffer[index + 1:length].copy()
        buffer[length - 1] = None
        self.__length = length - 1
        self.shrink_to_fit()

    def push(self, handle: ET) -> None:
        """
        Append a handle to the end of the vector.

        Raises
        ------
        As for `insert`.
        """
        self.insert(self.length, handle)

    def pop(self) -> ET:
        """
        Remove the last handle and transfer its ownership to the caller.

        The handle is not destroyed. The vector may shrink afterwards.

        Raises
        ------
        `OutOfBoundsError` - If the vector is empty.
        """
        buffer = self.__live()
        if self.__length == 0:
            raise OutOfBoundsError("Vector: Pop from empty vector.")
        self.__length -= 1
        handle = buffer[self.__length]
        buffer[self.__length] = None
        self.shrink_to_fit()
        return handle

    def find(self, key: ET) -> int:
        """
        Find the first index whose handle compares equal to the key.

        Raises
        ------
        `NotFoundError` - If no handle compares equal to the key.
        """
        buffer = self.__live()
        compare = self.__protocol.compare
        for index in range(self.__length):
            if compare(buffer[index], key) == 0:
                return index
        raise NotFoundError("Vector: Key not found.")

    def binary_search_sorted(self, key: ET) -> int:
        """
        Find an index whose handle compares equal to the key, by binary
        search.

        The vector must be sorted in non-decreasing order under the
        protocol's comparison, otherwise the result is unspecified. If
        several handles compare equal to the key, any of their indices may
        be returned.

        Raises
        ------
        `NotFoundError` - If no handle compares equal to the key.
        """
        buffer = self.__live()
        compare = self.__protocol.compare
        low, high = 0, self.__length - 1
        while low <= high:
            middle = low + ((high - low) // 2)
            order = compare(buffer[middle], key)
            if order == 0:
                return middle
            if order < 0:
                low = middle + 1
            else:
                high = middle - 1
        raise NotFoundError("Vector: Key not found.")

    def sort(self) -> None:
        """Stable sort of the vector in non-decreasing order."""
        buffer = self.__live()
        ordered = sorted(
            buffer[:self.__length],
            key=functools.cmp_to_key(self.__protocol.compare)
        )
        for index, handle in enumerate(ordered):
            buffer[index] = handle

    def reserve(self, capacity: int) -> None:
        """
        Grow the vector's buffer to exactly the given capacity.

        Raises
        ------
        `InvalidArgumentError` - If the capacity is not an integer.

        `OutOfBoundsError` - If the capacity is not greater than the current
        capacity, or is greater than the policy's maximum capacity.

        `AllocationFailureError` - If the allocation fails. The vector is
        unchanged.
        """
        buffer = self.__live()
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise InvalidArgumentError(
                f"Vector: Capacity must be an integer. Got; {capacity!r}."
            )
        if capacity <= len(buffer) or capacity > self.__policy.max_capacity:
            raise OutOfBoundsError(
                f"Vector: Cannot reserve capacity {capacity}; it must be "
                f"greater than {len(buffer)} and at most "
                f"{self.__policy.max_capacity}."
            )
        self.__buffer = self.__allocator.reallocate(buffer, capacity)
        self.__VECTOR_LOGGER.debug(
            "Vector: Reserved capacity %s (was %s).", capacity, len(buffer)
        )

    def shrink_to_fit(self) -> None:
        """
        Shrink the vector's buffer if its length is below the policy's
        shrink threshold.

        Does nothing otherwise. If the allocation fails, the vector is left
        unchanged and no error is raised.
        """
        buffer = self.__live()
        target = self.__policy.shrink_target(self.__length, len(buffer))
        if target == len(buffer):
            return
        try:
            self.__buffer = self.__allocator.reallocate(buffer, target)
        except AllocationFailureError as error:
            self.__VECTOR_LOGGER.debug(
                "Vector: Ignoring failure to shrink from capacity %s to "
                "%s; %s", len(buffer), target, error
            )
            return
        self.__VECTOR_LOGGER.debug(
            "Vector: Shrunk capacity to %s (was %s).", target, len(buffer)
        )

    def equals(self, other: "Vector[ET] | None") -> bool:
        """
        Structural equality with another vector.

        The vectors are equal if they have the same length and every pair
        of handles at the same index compares equal under this vector's
        protocol.
        """
        buffer = self.__live()
        if other is None or not isinstance(other, Vector):
            return False
        other_buffer = other.__live()
        if self.__length != other.__length:
            return False
        compare = self.__protocol.compare
        return all(
            compare(buffer[index], other_buffer[index]) == 0
            for index in range(self.__length)
        )

    def clone(self) -> "Vector[ET]":
        """
        Create a deep copy of the vector.

        The copy has the same protocol, policy, allocator and capacity, and
        holds fresh handles produced by the protocol's clone capability.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot clone.

        `AllocationFailureError` - If the copy's buffer or any element
        cannot be allocated. Every element copied so far is destroyed, and
        this vector is unchanged.
        """
        buffer = self.__live()
        self.__protocol.require(Capability.CLONE, component="Vector")
        copy_: Vector[ET] = Vector(
            len(buffer),
            self.__protocol,
            policy=self.__policy,
            allocator=self.__allocator
        )
        copy_buffer = copy_.__buffer
        try:
            for index in range(self.__length):
                copy_buffer[index] = clone_element(self.__protocol,
                                                   buffer[index])
                copy_.__length += 1
        except Exception:
            self.__VECTOR_LOGGER.debug(
                "Vector: Clone failed after %s of %s elements; destroying "
                "the copies.", copy_.__length, self.__length
            )
            copy_.destroy()
            raise
        return copy_

    def for_each(self, function: Callable[[ET, int], Any]) -> None:
        """
        Call the function with every handle and its index, in order.

        The function may mutate the elements but must not add or remove
        handles.
        """
        buffer = self.__live()
        for index in range(self.__length):
            function(buffer[index], index)

    def fill(self, template: ET) -> None:
        """
        Replace the contents of the vector with copies of the template, one
        for every slot of its capacity.

        The template itself remains owned by the caller.

        Raises
        ------
        `InvalidArgumentError` - If the template is None, or the protocol
        cannot clone.

        `AllocationFailureError` - If any copy cannot be allocated. The
        copies made so far are destroyed and the vector is unchanged.
        """
        buffer = self.__live()
        if template is None:
            raise InvalidArgumentError("Vector: Fill template is None.")
        self.__protocol.require(Capability.CLONE, component="Vector")
        copies: list[ET] = []
        try:
            for _ in range(len(buffer)):
                copies.append(clone_element(self.__protocol, template))
        except Exception:
            self.__VECTOR_LOGGER.debug(
                "Vector: Fill failed after %s of %s copies; destroying the "
                "copies.", len(copies), len(buffer)
            )
            for copy_ in copies:
                self.__protocol.destroy(copy_)
            raise
        self.__release(0, self.__length)
        for index, copy_ in enumerate(copies):
            buffer[index] = copy_
        self.__length = len(buffer)

    def render(self, sink: SupportsWrite[str] | None = None) -> None:
        """
        Write a bracketed, comma separated rendering of the vector to the
        sink, followed by a newline.

        If the sink is not given or None, standard output is used.

        Raises
        ------
        `InvalidArgumentError` - If the protocol cannot render.
        """
        buffer = self.__live()
        self.__protocol.require(Capability.RENDER, component="Vector")
        if sink is None:
            sink = sys.stdout
        sink.write("[")
        for index in range(self.__length):
            if index > 0:
                sink.write(", ")
            self.__protocol.render(buffer[index], index, sink)
        sink.write("]\n")

    def __admissible(self, handle: ET) -> None:
        if handle is None:
            raise InvalidArgumentError("Vector: Cannot admit a None handle.")


if __name__ == "__main__":
    from holdfast.datastructures.protocols import ObjectProtocol

    vector: Vector[int] = Vector(4, ObjectProtocol())
    for value in (3, 1, 4, 1, 5, 9, 2, 6):
        vector.push(value)
    vector.render()
    vector.sort()
    vector.render()
    print(repr(vector), vector.binary_search_sorted(4))
