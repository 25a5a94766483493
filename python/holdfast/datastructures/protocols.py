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
Module defining element protocols.

An element protocol is the set of per-element-type capabilities that a
container uses to manage the elements it owns; destroying, comparing,
rendering and cloning them. Containers store element handles (references
to element values) and never inspect the values themselves.

There are three ways to obtain a protocol:
- subclass `ElementProtocol` and override the capabilities needed,
- build a `CallbackProtocol` from plain callables,
- use one of the ready-made `ObjectProtocol` or `NumberProtocol`.

Example Usage
-------------
```
>>> from holdfast.datastructures.protocols import (CallbackProtocol,
...                                               Capability)
>>> protocol = CallbackProtocol(
...     destroy=lambda handle: None,
...     compare=lambda left, right: (left > right) - (left < right)
... )
>>> protocol.supports(Capability.CLONE)
False
```
"""

import copy
import enum
import math
from numbers import Real
from typing import Any, Callable, Generic, TypeVar

from holdfast.auxiliary.typingutils import SupportsWrite
from holdfast.datastructures.errors import (AllocationFailureError,
                                            InvalidArgumentError)

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Capability",
    "ElementProtocol",
    "CallbackProtocol",
    "ObjectProtocol",
    "NumberProtocol",
    "clone_element"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


ET = TypeVar("ET")


@enum.unique
class Capability(enum.Enum):
    """The capabilities an element protocol may provide."""

    DESTROY = "destroy"
    COMPARE = "compare"
    RENDER = "render"
    CLONE = "clone"


class ElementProtocol(Generic[ET]):
    """
    Base class for element protocols.

    Subclasses provide a capability by overriding the method of the same
    name. Capabilities that are not overridden are absent, and calling them
    raises `NotImplementedError`.
    """

    __slots__ = ()

    def destroy(self, handle: ET, /) -> None:
        """
        Release any resources owned by the element behind the handle.

        Containers invoke this at most once for each handle they own.
        """
        raise NotImplementedError

    def compare(self, left: ET, right: ET, /) -> int:
        """
        Compare two elements, returning a negative number if `left` orders
        before `right`, zero if they are equal, and a positive number
        otherwise.
        """
        raise NotImplementedError

    def render(self, handle: ET, index: int, sink: SupportsWrite[str], /
               ) -> None:
        """Write a human-readable rendering of the element to the sink."""
        raise NotImplementedError

    def clone(self, handle: ET, /) -> ET | None:
        """
        Return a deep, independent copy of the element.

        Returning None, or raising `MemoryError`, reports that the copy
        could not be allocated.
        """
        raise NotImplementedError

    def supports(self, capability: Capability, /) -> bool:
        """Whether the protocol provides the given capability."""
        method = getattr(type(self), capability.value)
        return method is not getattr(ElementProtocol, capability.value)

    def missing(self, *capabilities: Capability) -> tuple[Capability, ...]:
        """Get the given capabilities that the protocol does not provide."""
        return tuple(
            capability
            for capability in capabilities
            if not self.supports(capability)
        )

    def require(self, *capabilities: Capability, component: str) -> None:
        """
        Require that the protocol provides the given capabilities.

        Raises
        ------
        `InvalidArgumentError` - If any of the capabilities are absent.
        """
        if missing := self.missing(*capabilities):
            names = ", ".join(capability.value for capability in missing)
            raise InvalidArgumentError(
                f"{component}: Element protocol is missing the required "
                f"capabilities; {names}."
            )


class CallbackProtocol(ElementProtocol[ET]):
    """An element protocol built from plain callables."""

    __slots__ = {
        "__callbacks": "Maps capabilities to the callables that provide them."
    }

    def __init__(
        self, *,
        destroy: Callable[[ET], None] | None = None,
        compare: Callable[[ET, ET], int] | None = None,
        render: Callable[[ET, int, SupportsWrite[str]], None] | None = None,
        clone: Callable[[ET], ET | None] | None = None
    ) -> None:
        """
        Create a new element protocol from callables.

        Any callable not given (or given as None) is an absent capability.
        """
        self.__callbacks: dict[Capability, Callable[..., Any]] = {
            capability: callback
            for capability, callback in (
                (Capability.DESTROY, destroy),
                (Capability.COMPARE, compare),
                (Capability.RENDER, render),
                (Capability.CLONE, clone)
            )
            if callback is not None
        }

    def __repr__(self) -> str:
        names = ", ".join(capability.value for capability in self.__callbacks)
        return f"{self.__class__.__name__}({names})"

    def __call(self, capability: Capability, *args: Any) -> Any:
        if (callback := self.__callbacks.get(capability)) is None:
            raise NotImplementedError(
                f"Element protocol does not provide '{capability.value}'."
            )
        return callback(*args)

    def destroy(self, handle: ET, /) -> None:
        self.__call(Capability.DESTROY, handle)

    def compare(self, left: ET, right: ET, /) -> int:
        return self.__call(Capability.COMPARE, left, right)

    def render(self, handle: ET, index: int, sink: SupportsWrite[str], /
               ) -> None:
        self.__call(Capability.RENDER, handle, index, sink)

    def clone(self, handle: ET, /) -> ET | None:
        return self.__call(Capability.CLONE, handle)

    def supports(self, capability: Capability, /) -> bool:
        return capability in self.__callbacks


class ObjectProtocol(ElementProtocol[ET]):
    """
    Element protocol for ordinary Python values.

    Destroying is a no-op (the garbage collector releases the value),
    comparison uses the rich comparison operators, rendering writes the
    value's `repr`, and cloning uses `copy.deepcopy`.
    """

    __slots__ = ()

    def destroy(self, handle: ET, /) -> None:
        pass

    def compare(self, left: ET, right: ET, /) -> int:
        return (left > right) - (left < right)  # type: ignore[operator]

    def render(self, handle: ET, index: int, sink: SupportsWrite[str], /
               ) -> None:
        sink.write(repr(handle))

    def clone(self, handle: ET, /) -> ET | None:
        return copy.deepcopy(handle)


class NumberProtocol(ObjectProtocol[float]):
    """
    Element protocol for real numbers, stored as floats.

    NaN compares equal only to NaN, and orders after every other number.
    Negative zero is stored as zero.
    """

    __slots__ = ()

    def compare(self, left: float, right: float, /) -> int:
        left_nan = math.isnan(left)
        right_nan = math.isnan(right)
        if left_nan or right_nan:
            return left_nan - right_nan
        return (left > right) - (left < right)

    def render(self, handle: float, index: int, sink: SupportsWrite[str], /
               ) -> None:
        sink.write(f"{handle:g}")

    def clone(self, handle: float, /) -> float:
        return float(handle)

    @staticmethod
    def coerce(value: Real, /) -> float:
        """
        Convert a real number to a stored cell value.

        Raises
        ------
        `InvalidArgumentError` - If the value is not a real number.
        """
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidArgumentError(
                f"Expected a real number. Got; {value!r} of {type(value)}."
            )
        return float(value) + 0.0


def clone_element(protocol: ElementProtocol[ET], handle: ET) -> ET:
    """
    Clone an element with the given protocol.

    Raises
    ------
    `AllocationFailureError` - If the clone returns None or raises
    `MemoryError`.
    """
    try:
        copy_ = protocol.clone(handle)
    except AllocationFailureError:
        raise
    except MemoryError as error:
        raise AllocationFailureError("Failed to clone element.") from error
    if copy_ is None:
        raise AllocationFailureError("Failed to clone element.")
    return copy_
