"""
Example API — Id Generator Interface
======================================

What:  Abstract capability that hands out ids for newly created examples,
       plus the random default and a deterministic stub.
Why:   POST /api/examples returns a random id. Tests need to replace that
       random source with something predictable instead of asserting on it.
How:   The app factory stores one IdGenerator on `app.state.id_generator`;
       ExampleService receives it per request.

Implementations:
    - RandomIdGenerator:   uniform integer in [low, high], own random.Random
                           (no shared process-wide random state)
    - SequenceIdGenerator: cycles through a fixed list of ids (tests)
"""

import itertools
import random
from abc import ABC, abstractmethod
from typing import Iterable, Optional


class IdGenerator(ABC):
    """
    Contract:
        - next_id() returns an integer id for a new example
        - Implementations never return the reserved built-in id on purpose;
          callers do not check for collisions (nothing is persisted)
    """

    @abstractmethod
    def next_id(self) -> int:
        """Return the id for the next created example."""
        ...


class RandomIdGenerator(IdGenerator):
    """Draws ids uniformly from the inclusive range [low, high]."""

    def __init__(self, low: int = 2, high: int = 100, seed: Optional[int] = None):
        if low > high:
            raise ValueError(f"Empty id range: low={low} > high={high}")
        self.low = low
        self.high = high
        self._random = random.Random(seed)

    def next_id(self) -> int:
        return self._random.randint(self.low, self.high)


class SequenceIdGenerator(IdGenerator):
    """Returns the given ids in order, starting over when exhausted."""

    def __init__(self, ids: Iterable[int]):
        ids = list(ids)
        if not ids:
            raise ValueError("SequenceIdGenerator needs at least one id")
        self._ids = itertools.cycle(ids)

    def next_id(self) -> int:
        return next(self._ids)
