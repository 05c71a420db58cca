"""
Filter instance tests: construction, coefficient updates and the audible
behavior of each filter family on synthetic tones.
"""
import math

import numpy as np
import pytest

from audio_util.buffer import AudioBuffer
from audio_util.dsp.filters import (
    FilterType,
    HighPassFilter,
    LowPassFilter,
    ParametricEQ,
    design_filter,
    design_hpf,
    design_lpf,
    design_peq,
    process_buffer,
    update_coefficients,
)
from audio_util.exceptions import ConfigurationError, InvalidParameterError


SAMPLE_RATE = 44100
TEST_DURATION = 1.0


def _tone(freq: float, channels: int = 1, amplitude: float = 1.0) -> AudioBuffer:
    """Sine tone on every channel, interleaved."""
    frames = int(SAMPLE_RATE * TEST_DURATION)
    t = np.arange(frames) / SAMPLE_RATE
    mono = amplitude * np.sin(2 * np.pi * freq * t)
    data = np.repeat(mono, channels)
    return AudioBuffer(data=data, sample_rate=SAMPLE_RATE, channels=channels)


def _mix(components, channels: int = 1) -> AudioBuffer:
    """Sum of (amplitude, freq) sines."""
    frames = int(SAMPLE_RATE * TEST_DURATION)
    t = np.arange(frames) / SAMPLE_RATE
    mono = sum(amp * np.sin(2 * np.pi * freq * t) for amp, freq in components)
    return AudioBuffer(data=np.repeat(mono, channels), sample_rate=SAMPLE_RATE, channels=channels)


def _rms(data: np.ndarray) -> float:
    return float(np.sqrt(np.mean(data ** 2)))


def _gain_db(before: float, after: float) -> float:
    return 20.0 * math.log10(after / before)


# =============================================================================
# Construction & updates
# =============================================================================

def test_hpf_init():
    hpf = design_hpf(SAMPLE_RATE, 100.0)

    assert isinstance(hpf, HighPassFilter)
    assert hpf.frequency == 100.0
    assert hpf.sample_rate == SAMPLE_RATE
    assert hpf.left.c0 == 1.0 and hpf.left.d0 == 0.0
    assert hpf.right.c0 == 1.0 and hpf.right.d0 == 0.0
    assert hpf.left.a0 != 0.0
    assert hpf.left.coefficients == hpf.right.coefficients


def test_lpf_init():
    lpf = design_lpf(SAMPLE_RATE, 5000.0)

    assert isinstance(lpf, LowPassFilter)
    assert lpf.frequency == 5000.0
    assert lpf.left.a0 != 0.0
    assert lpf.left.coefficients == lpf.right.coefficients


def test_parametric_init():
    peq = design_peq(SAMPLE_RATE, 1000.0, 6.0, 1.0)

    assert isinstance(peq, ParametricEQ)
    assert peq.frequency == 1000.0
    assert peq.gain == 6.0
    assert peq.q == 1.0
    assert peq.left.c0 == 1.0
    assert peq.left.d0 == 0.0
    assert peq.left.a0 != 0.0
    assert peq.right.a0 != 0.0


def test_hpf_update_coefficients():
    hpf = design_hpf(SAMPLE_RATE, 100.0)
    left = hpf.left
    old_a0, old_b1 = hpf.left.a0, hpf.left.b1

    hpf.update_coefficients(SAMPLE_RATE, 200.0)

    assert hpf.frequency == 200.0
    assert hpf.left.a0 != old_a0
    assert hpf.left.b1 != old_b1
    assert hpf.left is left  # updated in place, not reallocated
    assert hpf.right.coefficients == hpf.left.coefficients


def test_parametric_update_coefficients():
    peq = design_peq(SAMPLE_RATE, 1000.0, 6.0, 1.0)
    old_a0 = peq.left.a0

    update_coefficients(peq, SAMPLE_RATE, frequency=2000.0, gain=-3.0, q=2.0)

    assert peq.frequency == 2000.0
    assert peq.gain == -3.0
    assert peq.q == 2.0
    assert peq.left.a0 != old_a0


def test_update_matches_fresh_design():
    lpf = design_lpf(SAMPLE_RATE, 1000.0)
    lpf.update_coefficients(48000, 3000.0)

    fresh = design_lpf(48000, 3000.0)

    assert lpf.sample_rate == 48000
    assert lpf.left.coefficients == fresh.left.coefficients


def test_update_flushes_delay_state():
    hpf = design_hpf(SAMPLE_RATE, 100.0)
    hpf.process_buffer(_tone(1000.0, channels=2))
    assert hpf.left.state != (0.0, 0.0, 0.0, 0.0)

    hpf.update_coefficients(SAMPLE_RATE, 150.0)

    assert hpf.left.state == (0.0, 0.0, 0.0, 0.0)
    assert hpf.right.state == (0.0, 0.0, 0.0, 0.0)


def test_strict_update_rejects_and_keeps_parameters():
    peq = design_peq(SAMPLE_RATE, 1000.0, 6.0, 1.0, strict=True)
    before = peq.left.coefficients

    with pytest.raises(InvalidParameterError):
        peq.update_coefficients(SAMPLE_RATE, 30000.0, gain=3.0)

    assert peq.frequency == 1000.0
    assert peq.gain == 6.0
    assert peq.left.coefficients == before


def test_strict_construction_rejects_nyquist():
    with pytest.raises(InvalidParameterError):
        design_hpf(SAMPLE_RATE, SAMPLE_RATE / 2, strict=True)


def test_design_filter_selector():
    assert isinstance(design_filter("hpf", SAMPLE_RATE, 100.0), HighPassFilter)
    assert isinstance(design_filter(" LPF ", SAMPLE_RATE, 100.0), LowPassFilter)

    peq = design_filter(FilterType.PEQ, SAMPLE_RATE, 1000.0, gain=-3.0, q=0.7)
    assert isinstance(peq, ParametricEQ)
    assert (peq.gain, peq.q) == (-3.0, 0.7)

    with pytest.raises(ConfigurationError):
        design_filter("notch", SAMPLE_RATE, 1000.0)


def test_lane_selector():
    peq = design_peq(SAMPLE_RATE, 1000.0, 6.0, 1.0)

    assert peq.lane(0) is peq.left
    assert peq.lane(1) is peq.right


# =============================================================================
# Signal behavior
# =============================================================================

def test_hpf_end_to_end():
    """100 Hz HPF on 20 Hz + 1000 Hz: the rumble goes, the 1000 Hz stays."""
    buffer = _mix([(0.3, 20.0), (0.7, 1000.0)])
    rms_before = _rms(buffer.data)

    process_buffer(design_hpf(SAMPLE_RATE, 100.0), buffer)
    rms_after = _rms(buffer.data)

    assert rms_after < rms_before
    assert rms_after > 0.1
    assert buffer.length == int(SAMPLE_RATE * TEST_DURATION)


def test_lpf_keeps_low_component():
    buffer = _mix([(0.7, 100.0), (0.3, 10000.0)])
    rms_before = _rms(buffer.data)

    process_buffer(design_lpf(SAMPLE_RATE, 1000.0), buffer)
    rms_after = _rms(buffer.data)

    assert rms_after < rms_before
    assert rms_after > 0.1


def test_lpf_high_freq_attenuation():
    buffer = _tone(10000.0)
    rms_before = _rms(buffer.data)

    design_lpf(SAMPLE_RATE, 1000.0).process_buffer(buffer)

    assert _rms(buffer.data) < rms_before * 0.5


def test_hpf_dc_removal():
    frames = int(SAMPLE_RATE * TEST_DURATION)
    t = np.arange(frames) / SAMPLE_RATE
    buffer = AudioBuffer(
        data=0.5 + 0.2 * np.sin(2 * np.pi * 1000.0 * t),
        sample_rate=SAMPLE_RATE,
        channels=1,
    )
    mean_before = float(np.mean(buffer.data))

    design_hpf(SAMPLE_RATE, 100.0).process_buffer(buffer)
    mean_after = float(np.mean(buffer.data))

    assert abs(mean_after) < abs(mean_before) * 0.1


def test_parametric_boost():
    buffer = _tone(1000.0)
    rms_before = _rms(buffer.data)

    design_peq(SAMPLE_RATE, 1000.0, 6.0, 1.0).process_buffer(buffer)
    gain_db = _gain_db(rms_before, _rms(buffer.data))

    assert 4.0 < gain_db < 8.0


def test_parametric_cut():
    buffer = _tone(1000.0)
    rms_before = _rms(buffer.data)

    design_peq(SAMPLE_RATE, 1000.0, -6.0, 1.0).process_buffer(buffer)
    gain_db = _gain_db(rms_before, _rms(buffer.data))

    assert -8.0 < gain_db < -4.0


def test_parametric_q_factor():
    """A wide band lifts an off-center tone more than a narrow one."""
    narrow = _tone(1100.0)
    wide = _tone(1100.0)
    rms_orig = _rms(narrow.data)

    design_peq(SAMPLE_RATE, 1000.0, 6.0, 5.0).process_buffer(narrow)
    design_peq(SAMPLE_RATE, 1000.0, 6.0, 0.5).process_buffer(wide)

    assert _gain_db(rms_orig, _rms(wide.data)) > _gain_db(rms_orig, _rms(narrow.data))


def test_parametric_far_from_center_is_untouched():
    buffer = _tone(50.0)
    rms_before = _rms(buffer.data)

    design_peq(SAMPLE_RATE, 8000.0, 6.0, 4.0).process_buffer(buffer)

    assert abs(_gain_db(rms_before, _rms(buffer.data))) < 0.5


@pytest.mark.parametrize("filter_factory", [
    lambda: design_hpf(SAMPLE_RATE, 100.0),
    lambda: design_lpf(SAMPLE_RATE, 5000.0),
    lambda: design_peq(SAMPLE_RATE, 1000.0, 6.0, 1.0),
])
def test_stereo_both_channels_processed(filter_factory):
    buffer = _tone(1000.0, channels=2)
    frames = buffer.frames

    filter_factory().process_buffer(buffer)

    left_nonzero = int(np.sum(np.abs(buffer.channel(0)) > 0.01))
    right_nonzero = int(np.sum(np.abs(buffer.channel(1)) > 0.01))
    assert left_nonzero > frames / 2
    assert right_nonzero > frames / 2


def test_flush_keeps_coefficients():
    lpf = design_lpf(SAMPLE_RATE, 800.0)
    lpf.process_buffer(_tone(440.0, channels=2))
    coefficients = lpf.left.coefficients

    lpf.flush()

    assert lpf.left.state == (0.0, 0.0, 0.0, 0.0)
    assert lpf.right.state == (0.0, 0.0, 0.0, 0.0)
    assert lpf.left.coefficients == coefficients


def test_repr_names_parameters():
    text = repr(design_peq(48000, 1000.0, 6.0, 1.0))

    assert "ParametricEQ" in text
    assert "gain=6.0" in text
