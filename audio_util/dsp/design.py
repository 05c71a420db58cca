"""
Coefficient design for the three filter families.

Each function derives (a0, a1, a2, b1, b2) from musical parameters, writes
them into a BiQuad, sets full wet mix (c0=1, d0=0) and flushes the delays,
so a freshly designed unit is ready to process. Functions are pure in their
inputs; calling one twice with the same arguments yields the same unit.

Preconditions: 0 < frequency < sample_rate / 2 (tan(pi/2) diverges at
Nyquist) and q > 0 for the parametric EQ. They are not checked unless
strict=True, in which case InvalidParameterError is raised. Unchecked
designs never raise: arithmetic follows IEEE rules, so out-of-range
parameters give inf/nan coefficients.
"""
import math
from typing import Optional

import numpy as np

from audio_util.dsp.biquad import BiQuad
from audio_util.validation import validate_frequency, validate_peq

SQRT2 = math.sqrt(2.0)


def _prewarp(sample_rate: float, frequency: float) -> np.float64:
    """tan(pi * f / fs)"""
    return np.tan(np.pi * np.float64(frequency) / np.float64(sample_rate))


def _finish(bq: BiQuad, a0, a1, a2, b1, b2) -> BiQuad:
    bq.a0 = float(a0)
    bq.a1 = float(a1)
    bq.a2 = float(a2)
    bq.b1 = float(b1)
    bq.b2 = float(b2)

    bq.c0 = 1.0
    bq.d0 = 0.0
    bq.flush_delays()
    return bq


def design_hpf_coefficients(
    sample_rate: float,
    frequency: float,
    bq: Optional[BiQuad] = None,
    strict: bool = False,
) -> BiQuad:
    """
    Butterworth 2nd-order high-pass.

    Args:
        sample_rate: Sample rate in Hz
        frequency: Cutoff frequency in Hz
        bq: Unit to overwrite; a new one is created when omitted
        strict: Validate 0 < frequency < Nyquist first

    Returns:
        The designed unit
    """
    if strict:
        validate_frequency(sample_rate, frequency)

    if bq is None:
        bq = BiQuad()

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        C = _prewarp(sample_rate, frequency)
        C_squared = C * C

        a0 = 1.0 / (1.0 + SQRT2 * C + C_squared)
        b1 = 2.0 * a0 * (C_squared - 1.0)
        b2 = a0 * (1.0 - SQRT2 * C + C_squared)

    return _finish(bq, a0, -2.0 * a0, a0, b1, b2)


def design_lpf_coefficients(
    sample_rate: float,
    frequency: float,
    bq: Optional[BiQuad] = None,
    strict: bool = False,
) -> BiQuad:
    """
    Butterworth 2nd-order low-pass.

    Args:
        sample_rate: Sample rate in Hz
        frequency: Cutoff frequency in Hz
        bq: Unit to overwrite; a new one is created when omitted
        strict: Validate 0 < frequency < Nyquist first

    Returns:
        The designed unit
    """
    if strict:
        validate_frequency(sample_rate, frequency)

    if bq is None:
        bq = BiQuad()

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        C = 1.0 / _prewarp(sample_rate, frequency)
        C_squared = C * C

        a0 = 1.0 / (1.0 + SQRT2 * C + C_squared)
        b1 = 2.0 * a0 * (1.0 - C_squared)
        b2 = a0 * (1.0 - SQRT2 * C + C_squared)

    return _finish(bq, a0, 2.0 * a0, a0, b1, b2)


def design_peq_coefficients(
    sample_rate: float,
    frequency: float,
    gain: float,
    q: float,
    bq: Optional[BiQuad] = None,
    strict: bool = False,
) -> BiQuad:
    """
    Constant-Q parametric EQ (peaking boost/cut).

    gain >= 0 uses the boost form, gain < 0 the cut form; at gain == 0 both
    reduce to an all-pass identity (a == b), so the switch is seamless.

    Args:
        sample_rate: Sample rate in Hz
        frequency: Center frequency in Hz
        gain: Gain in dB (positive = boost, negative = cut)
        q: Quality factor, higher = narrower band
        bq: Unit to overwrite; a new one is created when omitted
        strict: Validate frequency range and q > 0 first

    Returns:
        The designed unit
    """
    if strict:
        validate_peq(sample_rate, frequency, gain, q)

    if bq is None:
        bq = BiQuad()

    gain = np.float64(gain)
    q = np.float64(q)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        K = _prewarp(sample_rate, frequency)
        V0 = np.power(10.0, gain / 20.0)
        K_squared = K * K

        D0 = 1.0 + (1.0 / q) * K + K_squared
        E0 = 1.0 + (1.0 / (V0 * q)) * K + K_squared
        A = 1.0 + (V0 / q) * K + K_squared
        B = 2.0 * (K_squared - 1.0)
        G = 1.0 - (V0 / q) * K + K_squared
        D = 1.0 - (1.0 / q) * K + K_squared
        E = 1.0 - (1.0 / (V0 * q)) * K + K_squared

        if gain >= 0.0:
            coefficients = (A / D0, B / D0, G / D0, B / D0, D / D0)
        else:
            coefficients = (D0 / E0, B / E0, D / E0, B / E0, E / E0)

    return _finish(bq, *coefficients)


__all__ = [
    "SQRT2",
    "design_hpf_coefficients",
    "design_lpf_coefficients",
    "design_peq_coefficients",
]
