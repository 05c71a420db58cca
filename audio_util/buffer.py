"""
Interleaved float64 sample buffer shared by the WAV layer and the filters.
"""
from dataclasses import dataclass

import numpy as np


@dataclass
class AudioBuffer:
    """
    Normalized samples in [-1.0, 1.0], interleaved by channel
    (L0 R0 L1 R1 ... for stereo).

    bit_depth is only kept so the buffer can be written back at the depth
    it was read with; filtering never looks at it.
    """
    data: np.ndarray
    sample_rate: int
    channels: int
    bit_depth: int = 16

    def __post_init__(self):
        if self.data is not None:
            # Same object when already flat float64, so callers keep their view
            data = np.asarray(self.data, dtype=np.float64)
            self.data = data if data.ndim == 1 else data.reshape(-1)

    @classmethod
    def create(cls, length: int, sample_rate: int, channels: int, bit_depth: int = 16) -> 'AudioBuffer':
        """Allocate a silent buffer of `length` samples (all channels)."""
        return cls(
            data=np.zeros(length, dtype=np.float64),
            sample_rate=sample_rate,
            channels=channels,
            bit_depth=bit_depth,
        )

    @property
    def length(self) -> int:
        return 0 if self.data is None else int(self.data.shape[0])

    @property
    def frames(self) -> int:
        if self.channels <= 0:
            return 0
        return self.length // self.channels

    @property
    def duration_sec(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frames / self.sample_rate

    def channel(self, index: int) -> np.ndarray:
        """Strided view of one channel; writes go through to the buffer."""
        return self.data[index::self.channels]
