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

"""Module defining the growth and shrink policy of vectors."""

import dataclasses
import os
import tomllib
from dataclasses import dataclass
from typing import Any

from holdfast.datastructures.errors import InvalidArgumentError

__copyright__ = "Copyright (C) 2023 Oliver Michael Kamperis"
__license__ = "GPL-3.0"
__version__ = "1.0.0"

__all__ = (
    "CapacityPolicy",
    "load_capacity_policy",
    "DEFAULT_POLICY"
)


def __dir__() -> tuple[str, ...]:
    """Get the names of module attributes."""
    return __all__


@dataclass(frozen=True)
class CapacityPolicy:
    """
    The growth and shrink policy of a vector.

    Items
    -----
    `growth_factor: int = 2` - The factor the capacity is multiplied by when
    a full vector admits another element.

    `shrink_factor: int = 2` - The factor the capacity is divided by when a
    vector shrinks.

    `shrink_threshold_divisor: int = 4` - A vector shrinks when its length is
    less than its capacity divided by this.

    `min_capacity: int = 4` - The smallest capacity a vector ever has.

    `max_capacity: int = 2 ** 30` - The largest capacity a vector may reserve.
    """

    growth_factor: int = 2
    shrink_factor: int = 2
    shrink_threshold_divisor: int = 4
    min_capacity: int = 4
    max_capacity: int = 2 ** 30

    def __post_init__(self) -> None:
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(
                    f"Capacity policy item '{field.name}' must be an "
                    f"integer. Got; {value!r}."
                )
        if self.growth_factor < 2:
            raise InvalidArgumentError(
                "Growth factor must be at least 2. "
                f"Got; {self.growth_factor}."
            )
        if self.shrink_factor < 2:
            raise InvalidArgumentError(
                "Shrink factor must be at least 2. "
                f"Got; {self.shrink_factor}."
            )
        if self.shrink_threshold_divisor < self.shrink_factor:
            raise InvalidArgumentError(
                "Shrink threshold divisor must be at least the shrink factor. "
                f"Got; divisor={self.shrink_threshold_divisor}, "
                f"factor={self.shrink_factor}."
            )
        if self.min_capacity < 1:
            raise InvalidArgumentError(
                f"Minimum capacity must be positive. Got; {self.min_capacity}."
            )
        if self.max_capacity < self.min_capacity:
            raise InvalidArgumentError(
                "Maximum capacity must be at least the minimum capacity. "
                f"Got; max={self.max_capacity}, min={self.min_capacity}."
            )

    def replace(self, **changes: int) -> "CapacityPolicy":
        """Return a copy of the policy with the given items replaced."""
        return dataclasses.replace(self, **changes)

    def shrink_target(self, length: int, capacity: int) -> int:
        """
        Get the capacity a vector of the given length and capacity should
        shrink to.

        The capacity is divided by the shrink factor for as long as the
        length is below the shrink threshold and the capacity is above the
        minimum, so the result is stable at a fixed length.
        """
        target = capacity
        while (length < target // self.shrink_threshold_divisor
               and target > self.min_capacity):
            target = max(target // self.shrink_factor, self.min_capacity)
        return target


def _policy_from_table(table: dict[str, Any], source: str) -> CapacityPolicy:
    """Build a capacity policy from a parsed TOML table."""
    if not isinstance(table, dict):
        raise InvalidArgumentError(
            f"Missing '[capacity]' table in capacity policy file {source}."
        )
    known = {field.name for field in dataclasses.fields(CapacityPolicy)}
    if unknown := set(table) - known:
        raise InvalidArgumentError(
            f"Unknown capacity policy items {sorted(unknown)} in {source}."
        )
    return CapacityPolicy(**table)


def load_capacity_policy(path: str | os.PathLike[str] | None = None
                         ) -> CapacityPolicy:
    """
    Load a capacity policy from a TOML file.

    The file must contain a `[capacity]` table whose keys are the items of
    `CapacityPolicy`. Items that are not given take their default values.
    If `path` is None, the packaged default policy file is loaded.

    Raises
    ------
    `InvalidArgumentError` - If the file is not valid TOML, has no
    `[capacity]` table, contains unknown items, or describes an invalid
    policy.
    """
    if path is None:
        path = os.path.join(
            os.path.dirname(os.path.realpath(__file__)),
            "capacity.toml"
        )
    with open(path, "rb") as file:
        try:
            document = tomllib.load(file)
        except tomllib.TOMLDecodeError as error:
            raise InvalidArgumentError(
                f"Invalid capacity policy file {path}: {error}"
            ) from error
    return _policy_from_table(document.get("capacity"), str(path))


DEFAULT_POLICY: CapacityPolicy = load_capacity_policy()
