# sim/rng.py
"""
XorShift32
----------
Tiny deterministic generator used for decorative geometry. Each plant seeds
its own instance from `createdAt`, so a plant keeps the same vine shape for
its whole life regardless of when it is rendered.
"""

MASK32 = 0xFFFFFFFF
SEED_MIX = 0x9E3779B9


class XorShift32:
    def __init__(self, seed):
        self.state = int(seed) & MASK32
        if self.state == 0:
            # xorshift has a fixed point at zero
            self.state = SEED_MIX

    @classmethod
    def from_created_at(cls, created_at_ms):
        return cls(int((created_at_ms or 0) // 1000) ^ SEED_MIX)

    def next_u32(self):
        x = self.state
        x ^= (x << 13) & MASK32
        x ^= x >> 17
        x ^= (x << 5) & MASK32
        self.state = x
        return x

    def random(self):
        """Float in [0, 1)."""
        return self.next_u32() / 4294967296.0

    def chance(self, p):
        return self.random() < p
