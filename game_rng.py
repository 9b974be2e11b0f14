"""Deterministic random number generator for labyrinth generation.

Every generation stage draws from one explicitly constructed :class:`GameRNG`
instance.  Nothing in the project touches the global ``random`` module for
content decisions, so a seed plus grid dimensions fully determine the output.
"""

from __future__ import annotations

import random
from typing import Any, List, Optional

import numpy as np

_SEED_MASK = 0xFFFFFFFFFFFFFFFF


def _entropy_for(seed: int) -> int:
    # numpy rejects negative seeds; fold signed 64-bit values onto unsigned.
    return seed & _SEED_MASK


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(_entropy_for(self.initial_seed))

    def get_int(self, a: int, b: int) -> int:
        if a > b:
            raise ValueError("a <= b")
        return int(self.rng.integers(a, b + 1))

    def shuffle(self, seq: List[Any]) -> None:
        self.rng.shuffle(seq)


__all__ = ["GameRNG"]
