from __future__ import annotations

import math
from dataclasses import dataclass

from metrik.models.enums import Level


@dataclass(frozen=True)
class LevelClassifier:
    """A monotonic step function from a non-negative rate to a :class:`Level`.

    ``breakpoints`` are the inclusive upper bounds of every band except the
    last, in strictly ascending order.  ``levels`` holds one more entry than
    ``breakpoints``: the level of each band from the lowest rate upwards.

    A rate equal to a breakpoint belongs to the band *below* it, so::

        LevelClassifier((1.0,), (Level.low, Level.high)).classify(1.0)  # Level.low

    Level ranks must move in one direction only.  Ascending ranks model
    "higher is better" metrics such as deployment frequency; descending ranks
    model "lower is better" metrics such as lead time.
    """

    breakpoints: tuple[float, ...]
    levels: tuple[Level, ...]

    def __post_init__(self) -> None:
        if len(self.levels) != len(self.breakpoints) + 1:
            raise ValueError(
                f"Expected {len(self.breakpoints) + 1} levels for "
                f"{len(self.breakpoints)} breakpoints, got {len(self.levels)}"
            )
        if any(lo >= hi for lo, hi in zip(self.breakpoints, self.breakpoints[1:])):
            raise ValueError(f"Breakpoints must be strictly ascending: {self.breakpoints!r}")

        ranks = [level.rank for level in self.levels]
        ascending = all(a <= b for a, b in zip(ranks, ranks[1:]))
        descending = all(a >= b for a, b in zip(ranks, ranks[1:]))
        if not (ascending or descending):
            raise ValueError(f"Levels must be monotonic: {[lv.value for lv in self.levels]}")

    @classmethod
    def higher_is_better(cls, low_max: float, medium_max: float, high_max: float) -> LevelClassifier:
        """Four bands where larger rates earn better levels."""
        return cls(
            breakpoints=(low_max, medium_max, high_max),
            levels=(Level.low, Level.medium, Level.high, Level.elite),
        )

    @classmethod
    def lower_is_better(cls, elite_max: float, high_max: float, medium_max: float) -> LevelClassifier:
        """Four bands where smaller rates earn better levels."""
        return cls(
            breakpoints=(elite_max, high_max, medium_max),
            levels=(Level.elite, Level.high, Level.medium, Level.low),
        )

    def classify(self, rate: float) -> Level:
        """Return the level of the band that contains *rate*."""
        if math.isnan(rate):
            raise ValueError("Cannot classify a NaN rate")
        for upper, level in zip(self.breakpoints, self.levels):
            if rate <= upper:
                return level
        return self.levels[-1]
