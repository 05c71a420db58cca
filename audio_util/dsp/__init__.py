# DSP Module exports
from audio_util.dsp.biquad import BiQuad, FLT_MIN_PLUS, FLT_MIN_MINUS
from audio_util.dsp.design import (
    design_hpf_coefficients,
    design_lpf_coefficients,
    design_peq_coefficients,
)
from audio_util.dsp.filters import (
    FilterType,
    HighPassFilter,
    LowPassFilter,
    ParametricEQ,
    design_hpf,
    design_lpf,
    design_peq,
    design_filter,
    update_coefficients,
    process_buffer,
    process_channel,
)
from audio_util.dsp.kernels import (
    Kernel,
    ScalarKernel,
    LfilterKernel,
    available_kernels,
    get_kernel,
)
