"""Reviewer selection policy.

Reviewers are drawn uniformly at random without replacement. The draw uses
the operating system's CSPRNG (``secrets.SystemRandom``) so review load is
spread without the correlation a seeded PRNG can show across many calls.

Example usage:
    >>> selector = SecureRandomSelector()
    >>> selector.pick(["u2", "u3", "u4"], 2)
    ['u4', 'u2']
"""

from __future__ import annotations

import random
import secrets
from collections.abc import Sequence


class SecureRandomSelector:
    """Uniform random reviewer selection backed by ``secrets.SystemRandom``.

    Attributes:
        rng: Random source. Defaults to the OS CSPRNG; tests may inject a
            seeded ``random.Random`` for reproducible draws.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else secrets.SystemRandom()

    def pick(self, candidates: Sequence[str], n: int) -> list[str]:
        """Pick up to ``n`` distinct candidates.

        Args:
            candidates: Candidate user IDs. Duplicates are collapsed.
            n: Number of reviewers wanted.

        Returns:
            An empty list when ``n <= 0`` or there are no candidates, every
            candidate when there are at most ``n``, otherwise exactly ``n``
            candidates sampled uniformly without replacement.
        """
        pool = list(dict.fromkeys(candidates))
        if n <= 0 or not pool:
            return []
        if len(pool) <= n:
            return pool
        return self.rng.sample(pool, n)
