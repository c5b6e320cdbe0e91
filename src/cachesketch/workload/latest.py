"""Zipfian generator skewed toward the most recent item.

Models "recently written blocks are hot": with a basis of N items the
generator favors N - 1, then N - 2, and so on, by reflecting a
Zipfian draw around the newest item. ``grow()`` appends items, which
pushes the hot spot forward and makes the underlying Zipfian extend
its zeta sum.
"""
from __future__ import annotations

from typing import Iterator

from cachesketch.errors import InvalidArgumentError
from cachesketch.workload.zipf import DEFAULT_ZIPFIAN_CONSTANT, ZipfianGenerator


class LatestGenerator:
    """Values in [0, basis - 1] skewed toward basis - 1.

    Parameters:
        basis: Number of items currently in the keyspace.
        zipfian: Underlying generator. Defaults to a new one over
            [0, basis - 1]; pass one in to share an RNG stream. A supplied
            generator must start at 0 and cover at least ``basis`` items.
        zipfian_constant: Skew for the default generator. Ignored when
            ``zipfian`` is given.
        seed: Seed for the default generator. Ignored when ``zipfian``
            is given.
    """

    __slots__ = ("_basis", "_zipfian", "_last_value")

    def __init__(
        self,
        basis: int,
        zipfian: ZipfianGenerator | None = None,
        zipfian_constant: float = DEFAULT_ZIPFIAN_CONSTANT,
        seed: int | None = None,
    ) -> None:
        if basis < 1:
            raise InvalidArgumentError(f"basis must be >= 1, got {basis}")
        if zipfian is not None and (zipfian.base != 0 or zipfian.items < basis):
            raise InvalidArgumentError(
                f"zipfian must cover [0, {basis - 1}], got base={zipfian.base} "
                f"items={zipfian.items}"
            )
        self._basis = basis
        self._zipfian = zipfian if zipfian is not None else ZipfianGenerator(
            0, basis - 1, zipfian_constant=zipfian_constant, seed=seed,
        )
        self._last_value = basis - 1
        self.next_value()

    @property
    def basis(self) -> int:
        return self._basis

    @property
    def zipfian(self) -> ZipfianGenerator:
        return self._zipfian

    @property
    def last_value(self) -> int:
        return self._last_value

    def grow(self, count: int = 1) -> None:
        """Add ``count`` newer items to the keyspace."""
        if count < 0:
            raise InvalidArgumentError(f"count must be non-negative, got {count}")
        self._basis += count

    def next_value(self) -> int:
        newest = self._basis - 1
        value = newest - self._zipfian.next_long(newest)
        self._last_value = value
        return value

    def take(self, n: int) -> list[int]:
        return [self.next_value() for _ in range(n)]

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.next_value()
