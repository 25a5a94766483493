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
Module defining the error taxonomy shared by all holdfast containers.

Every failing container operation raises a `ContainerError` whose `kind`
is one of the members of `ErrorKind`. Failed admission operations return
ownership of the caller's handle through the error's `handle` attribute.
"""

import contextlib
import enum
import logging
from typing import Any, Callable, Iterator, ParamSpec, TypeVar

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "ErrorKind",
    "ContainerError",
    "NotFoundError",
    "OutOfBoundsError",
    "InvalidArgumentError",
    "AllocationFailureError",
    "EmptyError",
    "GenericFailureError",
    "error_for",
    "attempt",
    "translated"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


SP = ParamSpec("SP")
RT = TypeVar("RT")

_NO_HANDLE = object()
_TRANSLATION_LOGGER = logging.getLogger("HoldfastErrors")


@enum.unique
class ErrorKind(enum.Enum):
    """Enumeration of the outcomes of a container operation."""

    SUCCESS = "success"
    NOT_FOUND = "not found"
    OUT_OF_BOUNDS = "out of bounds"
    INVALID_ARGUMENT = "invalid argument"
    ALLOCATION_FAILURE = "allocation failure"
    EMPTY = "empty"
    GENERIC_FAILURE = "generic failure"


class ContainerError(Exception):
    """
    Base class for all errors raised by holdfast containers.

    If the error was raised by a failed admission, the caller's handle is
    available as `handle`, and the caller remains responsible for it.
    """

    kind: ErrorKind = ErrorKind.GENERIC_FAILURE

    def __init__(self, message: str, *, handle: Any = _NO_HANDLE) -> None:
        super().__init__(message)
        self.__handle: Any = handle

    @property
    def has_handle(self) -> bool:
        """Whether the error returns a handle to the caller."""
        return self.__handle is not _NO_HANDLE

    @property
    def handle(self) -> Any:
        """The handle whose admission failed, or None if there is none."""
        if self.__handle is _NO_HANDLE:
            return None
        return self.__handle


class NotFoundError(ContainerError, LookupError):
    """Raised when a search finds no match."""

    kind = ErrorKind.NOT_FOUND


class OutOfBoundsError(ContainerError, IndexError):
    """Raised when an index refers to a position that cannot be addressed."""

    kind = ErrorKind.OUT_OF_BOUNDS


class InvalidArgumentError(ContainerError, ValueError):
    """
    Raised when a mandatory input is missing, a required element protocol
    capability is absent, a size precondition is violated, or the container
    has been destroyed.
    """

    kind = ErrorKind.INVALID_ARGUMENT


class AllocationFailureError(ContainerError, MemoryError):
    """Raised when the underlying allocator refuses a request."""

    kind = ErrorKind.ALLOCATION_FAILURE


class EmptyError(ContainerError, IndexError):
    """Raised by front-removal and peek operations on an empty container."""

    kind = ErrorKind.EMPTY


class GenericFailureError(ContainerError):
    """Raised when an adapter receives an inner error it cannot map."""

    kind = ErrorKind.GENERIC_FAILURE


_ERROR_TYPES: dict[ErrorKind, type[ContainerError]] = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.OUT_OF_BOUNDS: OutOfBoundsError,
    ErrorKind.INVALID_ARGUMENT: InvalidArgumentError,
    ErrorKind.ALLOCATION_FAILURE: AllocationFailureError,
    ErrorKind.EMPTY: EmptyError,
    ErrorKind.GENERIC_FAILURE: GenericFailureError
}

# Kinds that adapters re-raise under their own name.
_PASS_THROUGH: frozenset[ErrorKind] = frozenset({
    ErrorKind.NOT_FOUND,
    ErrorKind.OUT_OF_BOUNDS,
    ErrorKind.INVALID_ARGUMENT,
    ErrorKind.ALLOCATION_FAILURE
})


def error_for(kind: ErrorKind) -> type[ContainerError]:
    """
    Get the error type raised for the given error kind.

    Raises
    ------
    `ValueError` - If `kind` is `ErrorKind.SUCCESS`.
    """
    if kind is ErrorKind.SUCCESS:
        raise ValueError("Success is not an error kind.")
    return _ERROR_TYPES[kind]


def attempt(
    func: Callable[SP, RT],
    *args: SP.args,
    **kwargs: SP.kwargs
) -> tuple[ErrorKind, RT | None]:
    """
    Call a container operation and return its outcome as a status pair.

    Returns `(ErrorKind.SUCCESS, result)` if the call succeeds, otherwise
    `(error.kind, None)` for any `ContainerError` raised by the call. Other
    exceptions propagate.
    """
    try:
        return ErrorKind.SUCCESS, func(*args, **kwargs)
    except ContainerError as error:
        return error.kind, None


def _translate(
    error: ContainerError,
    component: str,
    front_access: bool
) -> ContainerError:
    """Map an inner-layer error to the error raised by an adapter."""
    kind = error.kind
    if front_access and kind in (ErrorKind.OUT_OF_BOUNDS, ErrorKind.EMPTY):
        kind = ErrorKind.EMPTY
    elif kind not in _PASS_THROUGH:
        kind = ErrorKind.GENERIC_FAILURE
    if error.has_handle:
        return _ERROR_TYPES[kind](f"{component}: {error}",
                                  handle=error.handle)
    return _ERROR_TYPES[kind](f"{component}: {error}")


@contextlib.contextmanager
def translated(component: str, front_access: bool = False) -> Iterator[None]:
    """
    Context manager that translates inner container errors for an adapter.

    Not-found, out-of-bounds, invalid-argument and allocation errors keep
    their kind. If `front_access` is True, out-of-bounds and empty errors
    become `EmptyError`. Any other kind becomes `GenericFailureError`.

    Parameters
    ----------
    `component: str` - The name of the adapter, used to prefix messages.

    `front_access: bool = False` - Whether the wrapped call is a front
    removal or peek operation.
    """
    try:
        yield
    except ContainerError as error:
        translated_error = _translate(error, component, front_access)
        _TRANSLATION_LOGGER.debug(
            "%s: Translated %s to %s.",
            component, error.kind.name, translated_error.kind.name
        )
        raise translated_error from error
