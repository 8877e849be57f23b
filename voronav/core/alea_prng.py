"""
Seedable Alea PRNG used for every random decision in a scene.

Site placement, region colors and hover phase jumps all draw from one
instance owned by the scene, so a fixed seed reproduces a whole session.
"""

TWO_POW_32 = 0x100000000
TWO_POW_NEG_32 = 2.3283064365386963e-10


def _uint32(n):
    return int(n) & 0xFFFFFFFF


def _make_mash():
    """Baagøe's Mash hash; keeps its running state between calls."""
    n = 0xEFC8249D

    def mash(data) -> float:
        nonlocal n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * TWO_POW_32
        return _uint32(n) * TWO_POW_NEG_32

    return mash


class AleaPRNG:
    """
    Johannes Baagøe's Alea generator.

    Small state, fast, and identical output for identical seeds across
    platforms, which is all the scene needs from a random source.
    """

    def __init__(self, seed="default"):
        """Initialize with a seed string, number or iterable of those."""
        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _make_mash()
        state = [mash(" "), mash(" "), mash(" ")]
        for part in parts:
            for i in range(3):
                state[i] -= mash(part)
                if state[i] < 0:
                    state[i] += 1

        self.s0, self.s1, self.s2 = state
        self.c = 1

    def random(self) -> float:
        """Next number in [0, 1)."""
        t = 2091639 * self.s0 + self.c * TWO_POW_NEG_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Random float in [low, high)."""
        return low + self.random() * (high - low)
