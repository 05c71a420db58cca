"""
audio-util: biquad filtering (Butterworth high/low-pass, constant-Q
parametric EQ) for interleaved multichannel sample buffers.
"""

__version__ = "1.0.0"

from audio_util.buffer import AudioBuffer
from audio_util.dsp import (
    BiQuad,
    FilterType,
    HighPassFilter,
    LowPassFilter,
    ParametricEQ,
    design_filter,
    design_hpf,
    design_lpf,
    design_peq,
    get_kernel,
    process_buffer,
    process_channel,
    update_coefficients,
)
