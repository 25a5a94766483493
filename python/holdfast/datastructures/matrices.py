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

"""Module containing a dense two-dimensional matrix of real numbers."""

import io
import logging
import sys
import types
from numbers import Real
from typing import Iterator

import numpy as np
import numpy.typing as npt

from holdfast.auxiliary.moreitertools import (ichunk_sequence,
                                              row_major_index,
                                              row_major_position)
from holdfast.auxiliary.typingutils import SupportsWrite
from holdfast.datastructures.allocators import Allocator
from holdfast.datastructures.errors import InvalidArgumentError, translated
from holdfast.datastructures.policy import DEFAULT_POLICY
from holdfast.datastructures.protocols import NumberProtocol
from holdfast.datastructures.vectors import Vector, check_index

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "Matrix",
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


_CELL_PROTOCOL = NumberProtocol()

# The cell vector is always exactly full, so it never needs a minimum
# capacity above one cell.
_CELL_POLICY = DEFAULT_POLICY.replace(min_capacity=1)


def _positive_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidArgumentError(
            f"Matrix: The number of {name} must be an integer. "
            f"Got; {value!r}."
        )
    if value <= 0:
        raise InvalidArgumentError(
            f"Matrix: The number of {name} must be positive. Got; {value}."
        )
    return int(value)


class Matrix:
    """
    A dense matrix of real numbers, stored in row-major order.

    The cell at `(row, column)` is stored at linear index
    `row * columns + column` of a single vector of floats, which is always
    full; its length and capacity are both `rows * columns`.

    Example Usage
    -------------
    ```
    >>> from holdfast.datastructures.matrices import Matrix
    >>> matrix = Matrix(2, 3)
    >>> matrix[1, 2] = 7
    >>> matrix.find(7)
    (1, 2)
    >>> str(matrix)
    '[[0, 0, 0], [0, 0, 7]]'
    >>> copy_ = matrix.clone()
    >>> copy_[0, 0] = 1
    >>> matrix.equals(copy_)
    False
    ```
    """

    __slots__ = {
        "__rows": "The number of rows.",
        "__columns": "The number of columns.",
        "__cells": "The vector of cells in row-major order."
    }

    __MATRIX_LOGGER = logging.getLogger("HoldfastMatrix")

    def __init__(
        self,
        rows: int,
        columns: int,
        *,
        allocator: Allocator | None = None
    ) -> None:
        """
        Create a new matrix with every cell set to zero.

        Raises
        ------
        `InvalidArgumentError` - If either dimension is not a positive
        integer, or the matrix has more cells than a vector may hold.

        `AllocationFailureError` - If the cells cannot be allocated.
        """
        rows = _positive_dimension("rows", rows)
        columns = _positive_dimension("columns", columns)
        with translated("Matrix"):
            cells: Vector[float] = Vector(
                rows * columns,
                _CELL_PROTOCOL,
                policy=_CELL_POLICY,
                allocator=allocator
            )
            try:
                cells.fill(0.0)
            except Exception:
                cells.destroy()
                raise
        self.__rows: int = rows
        self.__columns: int = columns
        self.__cells: Vector[float] = cells
        self.__MATRIX_LOGGER.debug(
            "Matrix: Created %s by %s matrix.", rows, columns
        )

    @classmethod
    def _from_cells(
        cls,
        rows: int,
        columns: int,
        cells: Vector[float]
    ) -> "Matrix":
        matrix = cls.__new__(cls)
        matrix.__rows = rows
        matrix.__columns = columns
        matrix.__cells = cells
        return matrix

    @classmethod
    def from_numpy(
        cls,
        array: npt.ArrayLike,
        *,
        allocator: Allocator | None = None
    ) -> "Matrix":
        """
        Create a matrix from a two-dimensional array-like of real numbers.

        Raises
        ------
        `InvalidArgumentError` - If the array is not two-dimensional, has a
        zero dimension, or cannot be converted to floats.
        """
        try:
            values = np.asarray(array, dtype=float)
        except (TypeError, ValueError) as error:
            raise InvalidArgumentError(
                f"Matrix: Cannot convert array to real numbers; {error}"
            ) from error
        if values.ndim != 2:
            raise InvalidArgumentError(
                "Matrix: Array must be two-dimensional. "
                f"Got; {values.ndim} dimensions."
            )
        matrix = cls(*values.shape, allocator=allocator)
        for index, value in enumerate(values.flat):
            matrix.__cells.set(index, NumberProtocol.coerce(float(value)))
        return matrix

    def __enter__(self) -> "Matrix":
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None
    ) -> None:
        self.destroy()

    def __getitem__(self, position: tuple[int, int]) -> float:
        row, column = position
        return self.get(row, column)

    def __setitem__(self, position: tuple[int, int], value: Real) -> None:
        row, column = position
        self.set(row, column, value)

    def __iter__(self) -> Iterator[list[float]]:
        """Iterate over the rows of the matrix."""
        with translated("Matrix"):
            cells = list(self.__cells)
        for row in ichunk_sequence(cells, self.__columns):
            yield list(row)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Matrix):
            return self.equals(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.__cells.is_destroyed:
            return f"{self.__class__.__name__}(destroyed)"
        return (f"{self.__class__.__name__}(rows={self.__rows}, "
                f"columns={self.__columns})")

    def __str__(self) -> str:
        if self.__cells.is_destroyed:
            return repr(self)
        sink = io.StringIO()
        self.render(sink)
        return sink.getvalue().rstrip("\n")

    @property
    def rows(self) -> int:
        """The number of rows."""
        return self.__rows

    @property
    def columns(self) -> int:
        """The number of columns."""
        return self.__columns

    @property
    def dimensions(self) -> tuple[int, int]:
        """The number of rows and columns."""
        return self.__rows, self.__columns

    @property
    def is_destroyed(self) -> bool:
        """Whether the matrix has been destroyed."""
        return self.__cells.is_destroyed

    def __index(self, row: int, column: int) -> int:
        row = check_index("Matrix", row, self.__rows)
        column = check_index("Matrix", column, self.__columns)
        return row_major_index(row, column, self.__columns)

    def destroy(self) -> None:
        """Release the matrix's cells."""
        self.__cells.destroy()

    def get(self, row: int, column: int) -> float:
        """
        Get the value of a cell.

        Raises
        ------
        `OutOfBoundsError` - If the row or column is out of range.
        """
        index = self.__index(row, column)
        with translated("Matrix"):
            return self.__cells.get(index)

    def set(self, row: int, column: int, value: Real) -> None:
        """
        Set the value of a cell.

        Raises
        ------
        `InvalidArgumentError` - If the value is not a real number.

        `OutOfBoundsError` - If the row or column is out of range.
        """
        with translated("Matrix"):
            value = NumberProtocol.coerce(value)
        index = self.__index(row, column)
        with translated("Matrix"):
            self.__cells.set(index, value)

    def fill(self, value: Real) -> None:
        """
        Set every cell to the given value.

        Raises
        ------
        `InvalidArgumentError` - If the value is not a real number.
        """
        with translated("Matrix"):
            self.__cells.fill(NumberProtocol.coerce(value))

    def find(self, key: Real) -> tuple[int, int]:
        """
        Find the first cell, in row-major order, equal to the key.

        Raises
        ------
        `InvalidArgumentError` - If the key is not a real number.

        `NotFoundError` - If no cell is equal to the key.
        """
        with translated("Matrix"):
            index = self.__cells.find(NumberProtocol.coerce(key))
        return row_major_position(index, self.__columns)

    def equals(self, other: "Matrix | None") -> bool:
        """
        Structural equality with another matrix.

        The matrices are equal if they have the same dimensions and every
        pair of cells at the same position are equal.
        """
        if other is None or not isinstance(other, Matrix):
            return False
        if self.dimensions != other.dimensions:
            return False
        with translated("Matrix"):
            return self.__cells.equals(other.__cells)

    def clone(self) -> "Matrix":
        """
        Create a deep copy of the matrix.

        Raises
        ------
        `AllocationFailureError` - If the copy cannot be allocated.
        """
        with translated("Matrix"):
            cells = self.__cells.clone()
        return self._from_cells(self.__rows, self.__columns, cells)

    def to_numpy(self) -> np.ndarray:
        """Get a copy of the matrix as a two-dimensional numpy array."""
        with translated("Matrix"):
            values = np.fromiter(self.__cells, dtype=float,
                                 count=self.__rows * self.__columns)
        return values.reshape(self.__rows, self.__columns)

    def render(self, sink: SupportsWrite[str] | None = None) -> None:
        """
        Write a rendering of the matrix to the sink, as a bracketed list of
        bracketed rows, followed by a newline.

        If the sink is not given or None, standard output is used.
        """
        if sink is None:
            sink = sys.stdout
        protocol = _CELL_PROTOCOL
        sink.write("[")
        for row_index, row in enumerate(self):
            if row_index > 0:
                sink.write(", ")
            sink.write("[")
            for column_index, value in enumerate(row):
                if column_index > 0:
                    sink.write(", ")
                protocol.render(
                    value,
                    row_major_index(row_index, column_index, self.__columns),
                    sink
                )
            sink.write("]")
        sink.write("]\n")
