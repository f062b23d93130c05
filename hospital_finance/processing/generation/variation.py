"""Bounded random variation of base figures."""

import math
import random
from typing import Optional

DEFAULT_VARIATION_PERCENT = 15.0


class VariationGenerator:
    """Perturb base values uniformly within a percentage band.

    The random source is injectable so catalogs can be reproduced: pass a
    seeded ``random.Random`` (or use ``for_key``) in tests, leave it unset in
    production for a fresh catalog per process.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        default_percent: float = DEFAULT_VARIATION_PERCENT,
    ):
        if default_percent < 0:
            raise ValueError("default_percent must not be negative")
        self.rng = rng if rng is not None else random.Random()
        self.default_percent = default_percent

    @classmethod
    def for_key(
        cls,
        seed: Optional[int],
        *parts: object,
        default_percent: float = DEFAULT_VARIATION_PERCENT,
    ) -> "VariationGenerator":
        """Generator whose stream depends only on ``seed`` and ``parts``.

        With ``seed=None`` the stream is unseeded.
        """
        if seed is None:
            return cls(random.Random(), default_percent)
        key = ":".join([str(seed)] + [str(part) for part in parts])
        return cls(random.Random(key), default_percent)

    def vary(self, base: float, pct: Optional[float] = None) -> int:
        """Return ``base`` moved by up to ``pct`` percent, rounded half up.

        Works the same for negative bases: the band is always
        ``|base| * pct / 100`` wide on either side.
        """
        if pct is None:
            pct = self.default_percent
        if pct < 0:
            raise ValueError("pct must not be negative")

        spread = base * (pct / 100)
        value = base + (self.rng.random() - 0.5) * 2 * spread
        return math.floor(value + 0.5)

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.rng.random() < probability

    def choice(self, options):
        return self.rng.choice(options)
