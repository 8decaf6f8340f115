"""
Seeded randomness for a collapse run.

Every random draw of a run comes from one Sampler, so the same seed always
replays the same sequence of draws. Nothing in the engine touches the
module-level `random` state.
"""

import random


def new_seed() -> int:
    """Draw a fresh seed from the OS, for callers that were not given one."""
    return random.SystemRandom().getrandbits(63)


class Sampler:
    """
    A reproducible pseudo-random source owned by one run.

    Attributes:
        seed: The seed the stream was started from
        draws: Number of values drawn so far (useful when comparing runs)
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.draws = 0
        self._rng = random.Random(seed)

    def randrange(self, stop: int) -> int:
        """Uniform integer in [0, stop)."""
        if stop <= 0:
            raise ValueError(f"Cannot draw from an empty range (stop={stop})")
        self.draws += 1
        return self._rng.randrange(stop)

    def fork(self) -> int:
        """Draw a 63-bit seed for a derived run (used for caller-level retries)."""
        self.draws += 1
        return self._rng.getrandbits(63)

    def __repr__(self) -> str:
        return f"Sampler(seed={self.seed}, draws={self.draws})"
