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

"""Module defining additional functions for operating on iterables."""

__all__ = (
    "ichunk_sequence",
    "row_major_index",
    "row_major_position"
)

import math
from typing import Iterator, Sequence, TypeVar

_VT = TypeVar("_VT")


def ichunk_sequence(
    sequence: Sequence[_VT],
    size: int,
    quantity: int | None = None
) -> Iterator[Sequence[_VT]]:
    """
    Yield an iterator of chunks of a sequence of a given size and quantity.

    The chunks are returned as slices of the argument sequence. If
    `quantity` is not None, then only at most `quantity` chunks are yielded.
    Otherwise, if `quantity` is None, then yield chunks until the sequence is
    exhausted. If the length of the sequence is not divisible by `size`, then
    the last chunk will be shorter than `size`.

    Example Usage
    -------------
    ```
    >>> from holdfast.auxiliary.moreitertools import ichunk_sequence

    ## Chunk a sequence into chunks of size 3, yielding at most 2 chunks.
    >>> for chunk in ichunk_sequence(range(11), 3, 2):
    ...     print(list(chunk))
    [0, 1, 2]
    [3, 4, 5]

    ## Chunk a sequence into chunks of size 3, yielding chunks until the
    ## sequence is exhausted.
    >>> for chunk in ichunk_sequence(range(11), 3, None):
    ...     print(list(chunk))
    [0, 1, 2]
    [3, 4, 5]
    [6, 7, 8]
    [9, 10]
    ```
    """
    if not isinstance(sequence, Sequence):
        raise TypeError(f"Input must be a sequence. Got; {type(sequence)}.")
    if size <= 0:
        raise ValueError(f"Chunk size must be positive. Got; {size}.")
    if quantity is not None:
        if size * quantity > len(sequence):
            raise ValueError("Size and quantity are too large. "
                             f"Got; size={size}, quantity={quantity}, "
                             f"sequence length={len(sequence)}.")
    else:
        quantity = math.ceil(len(sequence) / size)
    yield from (sequence[index:index + size]
                for index in range(0, quantity * size, size))


def row_major_index(row: int, column: int, columns: int) -> int:
    """Get the linear index of a cell of a grid stored in row-major order."""
    return (row * columns) + column


def row_major_position(index: int, columns: int) -> tuple[int, int]:
    """Get the (row, column) of a linear index of a row-major grid."""
    return divmod(index, columns)
