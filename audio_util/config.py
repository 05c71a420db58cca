"""
Configuration dataclass for a filtering run.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from audio_util.dsp.filters import FilterType
from audio_util.dsp.kernels import DEFAULT_KERNEL
from audio_util.validation import validate_frequency, validate_peq, validate_request


@dataclass
class FilterConfig:
    """Configuration for one input -> filter -> output run."""
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    filter: Optional[str] = None
    frequency: Optional[float] = None
    gain: float = 0.0
    q: float = 1.0
    kernel: str = DEFAULT_KERNEL
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def filter_type(self) -> FilterType:
        return FilterType.from_string(self.filter)

    @classmethod
    def from_args(cls, args: Any) -> 'FilterConfig':
        """Create FilterConfig from an argparse namespace."""
        return cls(
            input_path=getattr(args, "input", None),
            output_path=getattr(args, "output", None),
            filter=getattr(args, "filter", None),
            frequency=getattr(args, "freq", None),
            gain=float(getattr(args, "gain", 0.0)),
            q=float(getattr(args, "q", 1.0)),
            kernel=getattr(args, "kernel", None) or DEFAULT_KERNEL,
            log_level=getattr(args, "log_level", None) or "INFO",
            log_file=getattr(args, "log_file", None),
        )

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> 'FilterConfig':
        """
        Create FilterConfig from a settings dictionary, e.g.
        {"filter": "peq", "freq": 1000, "gain": 6.0, "q": 1.0}.
        """
        frequency = settings.get("frequency", settings.get("freq"))
        return cls(
            input_path=settings.get("input"),
            output_path=settings.get("output"),
            filter=settings.get("filter"),
            frequency=float(frequency) if frequency is not None else None,
            gain=float(settings.get("gain", 0.0)),
            q=float(settings.get("q", 1.0)),
            kernel=settings.get("kernel", DEFAULT_KERNEL),
            log_level=settings.get("log_level", "INFO"),
            log_file=settings.get("log_file"),
        )

    def validate(self, sample_rate: Optional[float] = None) -> None:
        """
        Check the request; with a sample rate, also check the frequency
        against Nyquist (and gain/q for the parametric EQ).

        Raises:
            ValidationError: Missing or out-of-range options
            InvalidParameterError: Frequency/Q out of range for sample_rate
        """
        validate_request(self.input_path, self.output_path, self.filter, self.frequency, self.q)

        if sample_rate is None:
            return

        if self.filter_type == FilterType.PEQ:
            validate_peq(sample_rate, self.frequency, self.gain, self.q)
        else:
            validate_frequency(sample_rate, self.frequency)
