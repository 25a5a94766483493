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

"""Module defining structural types used for type hinting and checking."""

# Useful links for typing:
#      - Type hints: https://docs.python.org/3/library/typing.html
#      - Nominal versus structural typing: https://docs.python.org/3/library/typing.html#nominal-vs-structural-subtyping
#          - Protocols: https://docs.python.org/3/library/typing.html#typing.Protocol,
# https://peps.python.org/pep-0544/

from typing import Protocol, TypeVar, runtime_checkable

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"

__all__ = (
    "SupportsWrite",
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


_T_contra = TypeVar("_T_contra", contravariant=True)


@runtime_checkable
class SupportsWrite(Protocol[_T_contra]):
    """
    Protocol for type hinting and checking support for a `write` method,
    such as text streams used as rendering sinks.
    """

    def write(self, __s: _T_contra) -> object:
        ...
