"""The die rolled by the game loop. The engine itself never rolls."""

from __future__ import annotations

import random
from dataclasses import dataclass, field


@dataclass
class Dice:
    sides: int = 6
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def seeded(cls, seed: int | None, sides: int = 6) -> Dice:
        return cls(sides=sides, rng=random.Random(seed))

    def roll(self) -> int:
        return self.rng.randint(1, self.sides)
