"""
JIT-compiled biquad kernel. Needs the optional numba dependency
(pip install audio-util[accel]); load it through kernels.get_kernel("numba").
"""
import numpy as np
from numba import njit

from audio_util.dsp.biquad import FLT_MIN_MINUS, FLT_MIN_PLUS, BiQuad
from audio_util.dsp.kernels import Kernel


@njit(cache=True)
def _biquad_run(samples, coeffs, state):
    """Same recurrence and denormal flush as BiQuad.process, in place."""
    a0, a1, a2, b1, b2, c0, d0 = coeffs[0], coeffs[1], coeffs[2], coeffs[3], coeffs[4], coeffs[5], coeffs[6]
    xz1, xz2, yz1, yz2 = state[0], state[1], state[2], state[3]

    for i in range(samples.shape[0]):
        x = samples[i]
        yn = a0 * x + a1 * xz1 + a2 * xz2 - b1 * yz1 - b2 * yz2
        if yn > 0.0 and yn < FLT_MIN_PLUS:
            yn = 0.0
        if yn < 0.0 and yn > FLT_MIN_MINUS:
            yn = 0.0

        yz2 = yz1
        yz1 = yn
        xz2 = xz1
        xz1 = x

        samples[i] = yn * c0 + x * d0

    state[0] = xz1
    state[1] = xz2
    state[2] = yz1
    state[3] = yz2


class NumbaKernel(Kernel):
    """JIT-compiled per-sample loop; the first call pays the compile cost."""

    name = "numba"

    def process(self, bq: BiQuad, samples: np.ndarray) -> None:
        if samples.shape[0] == 0:
            return

        coeffs = np.array([bq.a0, bq.a1, bq.a2, bq.b1, bq.b2, bq.c0, bq.d0], dtype=np.float64)
        state = np.array(bq.state, dtype=np.float64)

        _biquad_run(samples, coeffs, state)

        bq.set_state(state[0], state[1], state[2], state[3])
