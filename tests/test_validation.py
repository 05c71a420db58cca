"""
Tests for parameter range checks.
"""
import math

import pytest

from audio_util.exceptions import InvalidParameterError, ValidationError
from audio_util.validation import (
    check_frequency,
    check_peq,
    nyquist,
    validate_frequency,
    validate_peq,
    validate_request,
)


def test_nyquist():
    assert nyquist(44100) == 22050.0
    assert nyquist(8000.0) == 4000.0


@pytest.mark.parametrize("freq", [20.0, 1000.0, 22049.9])
def test_frequency_in_range(freq):
    assert check_frequency(44100, freq) == []
    validate_frequency(44100, freq)


def test_frequency_at_nyquist():
    assert check_frequency(44100, 22050.0) == [
        "Frequency 22050.0 Hz exceeds Nyquist limit (22050.0 Hz)"
    ]


@pytest.mark.parametrize("freq", [0.0, -10.0, math.nan, math.inf])
def test_frequency_not_positive(freq):
    with pytest.raises(InvalidParameterError, match="frequency must be positive"):
        validate_frequency(44100, freq)


@pytest.mark.parametrize("sample_rate", [0, -44100, math.nan])
def test_bad_sample_rate(sample_rate):
    errors = check_frequency(sample_rate, 1000.0)

    assert len(errors) == 1
    assert errors[0].startswith("sample rate must be a positive number")


def test_peq_checks():
    assert check_peq(44100, 1000.0, 6.0, 1.0) == []
    assert check_peq(44100, 1000.0, 0.0, 0.1) == []

    errors = check_peq(44100, 30000.0, math.inf, 0.0)
    assert len(errors) == 3
    assert errors[1].startswith("gain must be a finite number of dB")
    assert errors[2] == "q must be positive, got 0.0"


def test_validate_peq_raises_with_all_messages():
    with pytest.raises(InvalidParameterError) as excinfo:
        validate_peq(48000, 30000.0, 6.0, -1.0)

    message = str(excinfo.value)
    assert "Nyquist" in message
    assert "q must be positive" in message


def test_invalid_parameter_is_validation_error():
    with pytest.raises(ValidationError):
        validate_frequency(44100, 30000.0)


def test_validate_request_accepts_good_request(tmp_path):
    source = tmp_path / "in.wav"
    source.write_bytes(b"")

    validate_request(str(source), "out.wav", "hpf", 100.0)
    validate_request(str(source), "out.wav", " PEQ ", 1000.0, q=0.5)


def test_validate_request_missing_everything():
    with pytest.raises(ValidationError) as excinfo:
        validate_request(None, None, None, None)

    assert str(excinfo.value).splitlines() == [
        "--input is required",
        "--output is required",
        "--filter is required",
        "--freq is required",
    ]


def test_validate_request_unreadable_input(tmp_path):
    missing = str(tmp_path / "nope.wav")

    with pytest.raises(ValidationError, match="Cannot open input file"):
        validate_request(missing, "out.wav", "lpf", 100.0)


def test_q_only_checked_for_peq(tmp_path):
    source = tmp_path / "in.wav"
    source.write_bytes(b"")

    validate_request(str(source), "out.wav", "hpf", 100.0, q=0.0)
    with pytest.raises(ValidationError, match="--q must be positive"):
        validate_request(str(source), "out.wav", "peq", 100.0, q=0.0)
