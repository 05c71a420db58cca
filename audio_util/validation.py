import math
import os
from numbers import Real
from typing import List, Optional

from audio_util.exceptions import InvalidParameterError, ValidationError


# Filter selectors accepted on the command line
VALID_FILTER_TYPES = {"hpf", "lpf", "peq"}


def nyquist(sample_rate: float) -> float:
    return sample_rate / 2.0


def check_frequency(sample_rate: float, frequency: float) -> List[str]:
    """
    Collect problems with a cutoff/center frequency for a given sample rate.

    Both Butterworth designs and the parametric EQ evaluate tan(pi*f/fs),
    which diverges at Nyquist, so the usable range is 0 < f < fs/2.
    """
    errors = []

    if not isinstance(sample_rate, Real) or not math.isfinite(sample_rate) or sample_rate <= 0:
        errors.append(f"sample rate must be a positive number, got {sample_rate!r}")
        return errors

    if not isinstance(frequency, Real) or not math.isfinite(frequency) or frequency <= 0:
        errors.append(f"frequency must be positive, got {frequency!r}")
        return errors

    limit = nyquist(sample_rate)
    if frequency >= limit:
        errors.append(
            f"Frequency {frequency:.1f} Hz exceeds Nyquist limit ({limit:.1f} Hz)"
        )

    return errors


def check_peq(sample_rate: float, frequency: float, gain: float, q: float) -> List[str]:
    errors = check_frequency(sample_rate, frequency)

    if not isinstance(gain, Real) or not math.isfinite(gain):
        errors.append(f"gain must be a finite number of dB, got {gain!r}")

    if not isinstance(q, Real) or not math.isfinite(q) or q <= 0:
        errors.append(f"q must be positive, got {q!r}")

    return errors


def validate_frequency(sample_rate: float, frequency: float) -> None:
    """
    Raise InvalidParameterError unless 0 < frequency < sample_rate / 2.
    """
    errors = check_frequency(sample_rate, frequency)
    if errors:
        raise InvalidParameterError("; ".join(errors))


def validate_peq(sample_rate: float, frequency: float, gain: float, q: float) -> None:
    """
    Raise InvalidParameterError unless the parametric EQ parameters are usable.
    """
    errors = check_peq(sample_rate, frequency, gain, q)
    if errors:
        raise InvalidParameterError("; ".join(errors))


def validate_request(
    input_path: Optional[str],
    output_path: Optional[str],
    filter_type: Optional[str],
    frequency: Optional[float],
    q: float = 1.0,
) -> None:
    """
    Validate a command-line filter request before any audio is read.

    Nyquist is checked later, once the input's sample rate is known.

    Raises:
        ValidationError: With every problem found, one per line
    """
    errors = []

    if not input_path:
        errors.append("--input is required")
    if not output_path:
        errors.append("--output is required")

    if not filter_type:
        errors.append("--filter is required")
    elif filter_type.strip().lower() not in VALID_FILTER_TYPES:
        errors.append(
            f"Unknown filter type '{filter_type}'. "
            f"Supported filters: {', '.join(sorted(VALID_FILTER_TYPES))}"
        )

    if frequency is None:
        errors.append("--freq is required")
    elif frequency <= 0.0:
        errors.append("--freq must be positive")

    if filter_type and filter_type.strip().lower() == "peq" and q <= 0.0:
        errors.append("--q must be positive")

    if input_path and not os.path.isfile(input_path):
        errors.append(f"Cannot open input file: {input_path}")

    if errors:
        raise ValidationError("\n".join(errors))


__all__ = [
    "VALID_FILTER_TYPES",
    "ValidationError",
    "nyquist",
    "check_frequency",
    "check_peq",
    "validate_frequency",
    "validate_peq",
    "validate_request",
]
