"""
AutoBackup - Endpoint Selector
==============================

Spreads relay traffic across the configured webhook pool.

Author: حَـــــنَّـــــا
"""

import random
from typing import Optional, Sequence


class EndpointSelector:
    """Uniform random choice over the webhook pool."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        # Seed the generator in tests for reproducible picks
        self._rng = rng or random.Random()

    def select(self, pool: Sequence[str]) -> str:
        """Pick one endpoint, or "" when the pool is empty."""
        if not pool:
            return ""
        return pool[self._rng.randrange(len(pool))]


__all__ = ["EndpointSelector"]
