"""
Biquad unit: one second-order recursive filter section for one channel lane.

    y(n) = a0*x(n) + a1*x(n-1) + a2*x(n-2) - b1*y(n-1) - b2*y(n-2)

Output is "wet" only. The wet/dry blend (filtered*c0 + input*d0) is applied
by whoever drives the unit, see BiQuad.mix().
"""

# Smallest positive/negative normal single-precision floats. Outputs strictly
# between these and zero are flushed to 0.0 to avoid denormal arithmetic.
FLT_MIN_PLUS = 1.175494351e-38
FLT_MIN_MINUS = -1.175494351e-38


def flush_denormal(value: float) -> float:
    if 0.0 < value < FLT_MIN_PLUS or FLT_MIN_MINUS < value < 0.0:
        return 0.0
    return value


class BiQuad:
    """
    Coefficients, wet/dry mix and delay state of a single biquad section.

    Delay state is most-recent-first: xz1/xz2 are the last two raw inputs,
    yz1/yz2 the last two raw (pre-mix) outputs. A unit has exactly one
    writer; do not share it between concurrently processed streams.
    """

    __slots__ = ("a0", "a1", "a2", "b1", "b2", "c0", "d0", "xz1", "xz2", "yz1", "yz2")

    def __init__(self):
        self.init()

    def init(self) -> None:
        """Zero all coefficients, set full wet mix and flush the delays."""
        self.a0 = 0.0
        self.a1 = 0.0
        self.a2 = 0.0
        self.b1 = 0.0
        self.b2 = 0.0

        self.c0 = 1.0
        self.d0 = 0.0

        self.flush_delays()

    def flush_delays(self) -> None:
        """Zero the delay state, keeping the coefficients."""
        self.xz1 = 0.0
        self.xz2 = 0.0
        self.yz1 = 0.0
        self.yz2 = 0.0

    def process(self, input: float) -> float:
        yn = (
            self.a0 * input
            + self.a1 * self.xz1
            + self.a2 * self.xz2
            - self.b1 * self.yz1
            - self.b2 * self.yz2
        )
        yn = flush_denormal(yn)

        self.yz2 = self.yz1
        self.yz1 = yn

        self.xz2 = self.xz1
        self.xz1 = input

        return yn

    def mix(self, input: float, filtered: float) -> float:
        return filtered * self.c0 + input * self.d0

    @property
    def coefficients(self):
        """(a0, a1, a2, b1, b2)"""
        return (self.a0, self.a1, self.a2, self.b1, self.b2)

    @property
    def state(self):
        """(xz1, xz2, yz1, yz2)"""
        return (self.xz1, self.xz2, self.yz1, self.yz2)

    def set_state(self, xz1: float, xz2: float, yz1: float, yz2: float) -> None:
        self.xz1 = float(xz1)
        self.xz2 = float(xz2)
        self.yz1 = float(yz1)
        self.yz2 = float(yz2)

    def copy(self) -> "BiQuad":
        clone = BiQuad()
        for name in self.__slots__:
            setattr(clone, name, getattr(self, name))
        return clone

    def __repr__(self) -> str:
        return (
            f"BiQuad(a0={self.a0!r}, a1={self.a1!r}, a2={self.a2!r}, "
            f"b1={self.b1!r}, b2={self.b2!r}, c0={self.c0!r}, d0={self.d0!r})"
        )
