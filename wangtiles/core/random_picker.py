"""
Wang Tiles - Weighted Random Picker

Picks values with probability proportional to their weight.
"""

from __future__ import annotations

import random
from typing import Generic, TypeVar

T = TypeVar("T")


class RandomPicker(Generic[T]):
    """
    Weighted random choice over a growing list of values.

    Values added with a weight of 0 or less are never picked, so a picker
    that only received such values is empty.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng if rng is not None else random.Random()
        self._values: list[T] = []
        self._thresholds: list[float] = []
        self._sum = 0.0

    def add(self, value: T, probability: float = 1.0) -> None:
        if probability <= 0:
            return
        self._sum += probability
        self._values.append(value)
        self._thresholds.append(self._sum)

    @property
    def total(self) -> float:
        return self._sum

    def is_empty(self) -> bool:
        return not self._values

    def __len__(self) -> int:
        return len(self._values)

    def pick(self) -> T:
        if not self._values:
            raise IndexError("Cannot pick from an empty RandomPicker")
        return self._rng.choices(self._values, cum_weights=self._thresholds, k=1)[0]
