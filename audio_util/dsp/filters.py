"""
Filter instances: a pair of biquad lanes plus the musical parameters they
were designed from.

Lane 0 ("left") and lane 1 ("right") always carry identical coefficients
after a design or update; they only diverge in delay state, or when a
caller drives them independently through process_channel().

Updating parameters re-runs the design for both lanes, which flushes the
delay state. Expect a discontinuity at the update point.
"""
from enum import Enum
from typing import Any, Dict, Optional, Union

from audio_util.buffer import AudioBuffer
from audio_util.dsp import dispatch
from audio_util.dsp.biquad import BiQuad
from audio_util.dsp.design import (
    design_hpf_coefficients,
    design_lpf_coefficients,
    design_peq_coefficients,
)
from audio_util.dsp.kernels import Kernel, get_kernel
from audio_util.exceptions import ConfigurationError
from audio_util.utils.logger import get_logger

logger = get_logger(__name__)


class FilterType(Enum):
    """Filter families selectable on the command line."""
    HPF = "hpf"
    LPF = "lpf"
    PEQ = "peq"

    @classmethod
    def from_string(cls, filter_str: Union[str, 'FilterType', None]) -> 'FilterType':
        """
        Convert a selector such as "hpf" or " PEQ " to a FilterType.

        Raises:
            ConfigurationError: If the selector is missing or unknown
        """
        if isinstance(filter_str, cls):
            return filter_str
        if filter_str is None:
            raise ConfigurationError("Filter type is required")

        filter_str_lower = filter_str.lower().strip()
        for filter_type in cls:
            if filter_type.value == filter_str_lower:
                return filter_type

        raise ConfigurationError(
            f"Unknown filter type '{filter_str}'. "
            f"Supported filters: {', '.join(f.value for f in cls)}"
        )


class _StereoFilter:
    """
    Two biquad lanes sharing one design.

    Subclasses implement _design(bq, sample_rate) and keep their own
    musical parameters.
    """

    filter_type: FilterType

    def __init__(
        self,
        sample_rate: float,
        kernel: Union[str, Kernel, None] = None,
        strict: bool = False,
    ):
        self.sample_rate = sample_rate
        self.kernel = get_kernel(kernel)
        self.strict = strict
        self.left = BiQuad()
        self.right = BiQuad()

    def _design(self, bq: BiQuad, sample_rate: float) -> None:
        raise NotImplementedError

    def _redesign(self, sample_rate: float) -> None:
        self._design(self.left, sample_rate)
        self._design(self.right, sample_rate)
        self.sample_rate = sample_rate
        logger.debug(
            f"Designed {self.filter_type.value} at {sample_rate} Hz "
            f"{self.parameters}: coefficients {self.left.coefficients}"
        )

    def lane(self, index: int) -> BiQuad:
        """Lane 0 is the left unit; any other index selects the right one."""
        return self.left if index == 0 else self.right

    def flush(self) -> None:
        """Zero both lanes' delay state, keeping coefficients."""
        self.left.flush_delays()
        self.right.flush_delays()

    @property
    def parameters(self) -> Dict[str, Any]:
        raise NotImplementedError

    def process_buffer(self, buffer: Optional[AudioBuffer]) -> None:
        dispatch.process_buffer(self, buffer, self.kernel)

    def process_channel(self, samples, length: Optional[int] = None, lane: int = 0) -> None:
        dispatch.process_channel(self, samples, length, lane, self.kernel)

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.parameters.items())
        return f"{type(self).__name__}(sample_rate={self.sample_rate!r}, {params})"


class HighPassFilter(_StereoFilter):
    filter_type = FilterType.HPF

    def __init__(self, sample_rate: float, frequency: float, kernel=None, strict: bool = False):
        super().__init__(sample_rate, kernel, strict)
        self.frequency = frequency
        self._redesign(sample_rate)

    def _design(self, bq: BiQuad, sample_rate: float) -> None:
        design_hpf_coefficients(sample_rate, self.frequency, bq, strict=self.strict)

    @property
    def parameters(self) -> Dict[str, Any]:
        return {"frequency": self.frequency}

    def update_coefficients(self, sample_rate: float, frequency: float) -> None:
        previous = self.frequency
        self.frequency = frequency
        try:
            self._redesign(sample_rate)
        except Exception:
            self.frequency = previous
            raise


class LowPassFilter(_StereoFilter):
    filter_type = FilterType.LPF

    def __init__(self, sample_rate: float, frequency: float, kernel=None, strict: bool = False):
        super().__init__(sample_rate, kernel, strict)
        self.frequency = frequency
        self._redesign(sample_rate)

    def _design(self, bq: BiQuad, sample_rate: float) -> None:
        design_lpf_coefficients(sample_rate, self.frequency, bq, strict=self.strict)

    @property
    def parameters(self) -> Dict[str, Any]:
        return {"frequency": self.frequency}

    def update_coefficients(self, sample_rate: float, frequency: float) -> None:
        previous = self.frequency
        self.frequency = frequency
        try:
            self._redesign(sample_rate)
        except Exception:
            self.frequency = previous
            raise


class ParametricEQ(_StereoFilter):
    """
    Constant-Q peaking boost/cut.

    Q controls bandwidth independently of gain: lower Q is wider
    (0.5 spans about two octaves), higher Q narrower.
    """
    filter_type = FilterType.PEQ

    def __init__(
        self,
        sample_rate: float,
        frequency: float,
        gain: float = 0.0,
        q: float = 1.0,
        kernel=None,
        strict: bool = False,
    ):
        super().__init__(sample_rate, kernel, strict)
        self.frequency = frequency
        self.gain = gain
        self.q = q
        self._redesign(sample_rate)

    def _design(self, bq: BiQuad, sample_rate: float) -> None:
        design_peq_coefficients(sample_rate, self.frequency, self.gain, self.q, bq, strict=self.strict)

    @property
    def parameters(self) -> Dict[str, Any]:
        return {"frequency": self.frequency, "gain": self.gain, "q": self.q}

    def update_coefficients(
        self,
        sample_rate: float,
        frequency: float,
        gain: Optional[float] = None,
        q: Optional[float] = None,
    ) -> None:
        previous = (self.frequency, self.gain, self.q)
        self.frequency = frequency
        if gain is not None:
            self.gain = gain
        if q is not None:
            self.q = q
        try:
            self._redesign(sample_rate)
        except Exception:
            self.frequency, self.gain, self.q = previous
            raise


FilterInstance = Union[HighPassFilter, LowPassFilter, ParametricEQ]


# =============================================================================
# Functional API
# =============================================================================

def design_hpf(sample_rate: float, frequency: float, *, kernel=None, strict: bool = False) -> HighPassFilter:
    return HighPassFilter(sample_rate, frequency, kernel=kernel, strict=strict)


def design_lpf(sample_rate: float, frequency: float, *, kernel=None, strict: bool = False) -> LowPassFilter:
    return LowPassFilter(sample_rate, frequency, kernel=kernel, strict=strict)


def design_peq(
    sample_rate: float,
    frequency: float,
    gain: float,
    q: float,
    *,
    kernel=None,
    strict: bool = False,
) -> ParametricEQ:
    return ParametricEQ(sample_rate, frequency, gain, q, kernel=kernel, strict=strict)


def design_filter(
    filter_type: Union[str, FilterType],
    sample_rate: float,
    frequency: float,
    gain: float = 0.0,
    q: float = 1.0,
    *,
    kernel=None,
    strict: bool = False,
) -> FilterInstance:
    """
    Build a filter instance from a selector ("hpf", "lpf", "peq").

    gain and q are ignored by the Butterworth designs.
    """
    filter_type = FilterType.from_string(filter_type)

    if filter_type == FilterType.HPF:
        return design_hpf(sample_rate, frequency, kernel=kernel, strict=strict)
    if filter_type == FilterType.LPF:
        return design_lpf(sample_rate, frequency, kernel=kernel, strict=strict)
    return design_peq(sample_rate, frequency, gain, q, kernel=kernel, strict=strict)


def update_coefficients(instance: FilterInstance, sample_rate: float, **params) -> None:
    """Re-derive both lanes in place; flushes delay state."""
    instance.update_coefficients(sample_rate, **params)


def process_buffer(instance: FilterInstance, buffer: Optional[AudioBuffer]) -> None:
    """Filter an interleaved buffer in place; missing/empty buffers are a no-op."""
    if instance is None:
        return
    instance.process_buffer(buffer)


def process_channel(instance: FilterInstance, samples, length: Optional[int] = None, lane: int = 0) -> None:
    """Filter `length` samples of one lane in place."""
    if instance is None:
        return
    instance.process_channel(samples, length, lane)


__all__ = [
    "FilterType",
    "FilterInstance",
    "HighPassFilter",
    "LowPassFilter",
    "ParametricEQ",
    "design_hpf",
    "design_lpf",
    "design_peq",
    "design_filter",
    "update_coefficients",
    "process_buffer",
    "process_channel",
]
