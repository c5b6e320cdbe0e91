"""Zipfian integer generator for synthetic cache workloads.

Produces integers in [min_value, max_value] where small values are far
more popular than large ones: with the default constant 0.99 the first
item is drawn roughly as often as the next several hundred combined.
Block-cache traces look like this, so it is the input we use to check
the cardinality estimator against realistic skew.

Algorithm from Gray et al., "Quickly Generating Billion-Record
Synthetic Databases", SIGMOD 1994. The expensive part is zeta(n), the
generalized harmonic number; it is computed once at construction and
extended incrementally if a caller asks for a larger item count later.

Each generator owns its RNG and all derived constants, so independent
generators can run side by side (including on different threads).
"""
from __future__ import annotations

import logging
import math
import random
from typing import Iterator

from cachesketch.errors import InvalidArgumentError

log = logging.getLogger(__name__)

DEFAULT_ZIPFIAN_CONSTANT = 0.99


class ZipfianGenerator:
    """Zipf-distributed integers over an inclusive range.

    Parameters:
        min_value: Smallest value generated (the most popular one).
        max_value: Largest value generated.
        zipfian_constant: Skew theta, strictly between 0 and 1.
        seed: Seed for this generator's private ``random.Random``.
    """

    __slots__ = (
        "_rng", "_items", "_base", "_theta", "_alpha",
        "_zeta2theta", "_zetan", "_eta", "_zeta_item_count",
        "_recompute_count", "_last_value",
    )

    def __init__(
        self,
        min_value: int,
        max_value: int,
        zipfian_constant: float = DEFAULT_ZIPFIAN_CONSTANT,
        seed: int | None = None,
    ) -> None:
        if max_value < min_value:
            raise InvalidArgumentError(
                f"max_value must be >= min_value, got {min_value}..{max_value}"
            )
        if not (0.0 < zipfian_constant < 1.0):
            raise InvalidArgumentError(
                f"zipfian_constant must be in (0, 1), got {zipfian_constant}"
            )
        self._rng = random.Random(seed)
        self._items = max_value - min_value + 1
        self._base = min_value
        self._theta = zipfian_constant
        self._alpha = 1.0 / (1.0 - self._theta)
        self._zeta2theta = self.zeta(0, 2)
        self._zetan = self.zeta(0, self._items)
        self._zeta_item_count = self._items
        self._eta = self._compute_eta()
        self._recompute_count = 0
        self._last_value = min_value
        self.next_value()

    @property
    def items(self) -> int:
        return self._items

    @property
    def base(self) -> int:
        return self._base

    @property
    def theta(self) -> float:
        return self._theta

    @property
    def zetan(self) -> float:
        return self._zetan

    @property
    def zeta_item_count(self) -> int:
        """Item count that the current zetan was computed for."""
        return self._zeta_item_count

    @property
    def recompute_count(self) -> int:
        """How many times zetan was extended for a larger item count."""
        return self._recompute_count

    @property
    def last_value(self) -> int:
        return self._last_value

    def zeta(self, start: int, n: int, initial_sum: float = 0.0) -> float:
        """Generalized harmonic sum of 1/(i+1)^theta for i in [start, n).

        Pass a previous result as ``initial_sum`` to extend it.
        """
        total = initial_sum
        for i in range(start, n):
            total += 1.0 / math.pow(i + 1, self._theta)
        return total

    def _compute_eta(self) -> float:
        denominator = 1.0 - self._zeta2theta / self._zetan
        if denominator == 0.0:
            # Exactly two items: every draw resolves before eta is used.
            return 0.0
        return (1.0 - math.pow(2.0 / self._items, 1.0 - self._theta)) / denominator

    def next_long(self, item_count: int) -> int:
        """Draw a value from the first ``item_count`` items.

        Growing ``item_count`` past what zetan covers extends zetan
        incrementally and records the recomputation. A smaller count
        reuses the existing zetan.
        """
        if item_count > self._zeta_item_count:
            log.warning(
                "incrementally recomputing zipfian zeta: item_count=%d "
                "zeta_item_count=%d",
                item_count, self._zeta_item_count,
            )
            self._zetan = self.zeta(self._zeta_item_count, item_count, self._zetan)
            self._zeta_item_count = item_count
            self._eta = self._compute_eta()
            self._recompute_count += 1

        u = self._rng.random()
        uz = u * self._zetan
        if uz < 1.0:
            value = self._base
        elif uz < 1.0 + math.pow(0.5, self._theta):
            value = self._base + 1
        else:
            value = self._base + int(
                item_count * math.pow(self._eta * u - self._eta + 1.0, self._alpha)
            )
        self._last_value = value
        return value

    def next_value(self) -> int:
        return self.next_long(self._items)

    def take(self, n: int) -> list[int]:
        """Draw ``n`` values as a list."""
        return [self.next_value() for _ in range(n)]

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.next_value()
