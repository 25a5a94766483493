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
Module containing the allocators used by holdfast containers.

All handle buffers and list nodes are requested through an allocator, so
that allocation failure is observable and can be driven deterministically
in tests with a `FailingAllocator`.
"""

import logging
from typing import Any, Callable, TypeVar

import numpy as np

from holdfast.datastructures.errors import AllocationFailureError

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Allocator",
    "FailingAllocator",
    "DEFAULT_ALLOCATOR"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


NT = TypeVar("NT")


class Allocator:
    """
    Allocator of handle buffers and list nodes.

    Buffers are one-dimensional numpy arrays of dtype `object`, whose unused
    slots hold None.
    """

    __slots__ = ()

    _ALLOCATOR_LOGGER = logging.getLogger("HoldfastAllocator")

    def _request(self, kind: str, size: int) -> None:
        """
        Hook called before every allocation.

        Subclasses may raise `AllocationFailureError` to refuse the request.
        """

    def allocate(self, capacity: int) -> np.ndarray:
        """
        Allocate a new buffer with the given number of slots.

        Raises
        ------
        `AllocationFailureError` - If the allocation is refused.
        """
        self._request("buffer", capacity)
        try:
            return np.empty(capacity, dtype=object)
        except (MemoryError, ValueError) as error:
            raise AllocationFailureError(
                f"Failed to allocate a buffer of {capacity} slots."
            ) from error

    def reallocate(self, buffer: np.ndarray, capacity: int) -> np.ndarray:
        """
        Allocate a new buffer with the given number of slots, holding the
        common prefix of the given buffer.

        The given buffer is left unchanged.

        Raises
        ------
        `AllocationFailureError` - If the allocation is refused.
        """
        new_buffer = self.allocate(capacity)
        common = min(len(buffer), capacity)
        new_buffer[:common] = buffer[:common]
        return new_buffer

    def allocate_node(self, node_type: Callable[..., NT], *args: Any) -> NT:
        """
        Allocate a new list node.

        Raises
        ------
        `AllocationFailureError` - If the allocation is refused.
        """
        self._request("node", 1)
        try:
            return node_type(*args)
        except MemoryError as error:
            raise AllocationFailureError(
                "Failed to allocate a list node."
            ) from error


class FailingAllocator(Allocator):
    """
    Allocator that refuses requests on demand.

    Used to test the behaviour of containers when allocation fails.

    Example Usage
    -------------
    ```
    >>> allocator = FailingAllocator()
    >>> vector = Vector(4, ObjectProtocol(), allocator=allocator)
    >>> allocator.fail_next()
    >>> for value in range(5):
    ...     vector.push(value)
    Traceback (most recent call last):
    ...
    AllocationFailureError: ...
    ```
    """

    __slots__ = {
        "__succeed": "Number of requests to allow before failing.",
        "__fail": "Number of requests to refuse once armed.",
        "__requests": "Total number of requests made.",
        "__refused": "Total number of requests refused."
    }

    def __init__(self) -> None:
        """Create a new failing allocator, which initially never fails."""
        self.__succeed: int = 0
        self.__fail: int = 0
        self.__requests: int = 0
        self.__refused: int = 0

    @property
    def requests(self) -> int:
        """The total number of allocation requests made."""
        return self.__requests

    @property
    def refused(self) -> int:
        """The total number of allocation requests refused."""
        return self.__refused

    @property
    def armed(self) -> bool:
        """Whether some future request will be refused."""
        return self.__fail > 0

    def fail_next(self, count: int = 1) -> None:
        """Refuse the next `count` allocation requests."""
        self.fail_after(0, count)

    def fail_after(self, successes: int, count: int = 1) -> None:
        """
        Allow the next `successes` allocation requests, then refuse the
        following `count` requests.
        """
        if successes < 0 or count < 0:
            raise ValueError("Counts must be non-negative. "
                             f"Got; successes={successes}, count={count}.")
        self.__succeed = successes
        self.__fail = count

    def disarm(self) -> None:
        """Stop refusing allocation requests."""
        self.__succeed = 0
        self.__fail = 0

    def _request(self, kind: str, size: int) -> None:
        self.__requests += 1
        if self.__fail == 0:
            return
        if self.__succeed > 0:
            self.__succeed -= 1
            return
        self.__fail -= 1
        self.__refused += 1
        self._ALLOCATOR_LOGGER.debug(
            "Refusing %s allocation request of size %s.", kind, size
        )
        raise AllocationFailureError(
            f"Allocation of {kind} of size {size} refused."
        )


DEFAULT_ALLOCATOR = Allocator()
