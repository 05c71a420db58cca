"""
WAV file input/output.

Reads PCM WAV into an interleaved float64 AudioBuffer normalized to
[-1, 1] and writes it back as PCM at the buffer's bit depth. Parsing and
writing go through pydub, which handles 8-bit (unsigned) and 24-bit
(promoted to 32-bit on read) data.
"""
import os

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from audio_util.buffer import AudioBuffer
from audio_util.exceptions import (
    AudioFileNotFoundError,
    AudioMemoryError,
    AudioReadError,
    AudioWriteError,
    InvalidFormatError,
    InvalidParameterError,
    UnsupportedFormatError,
)
from audio_util.utils.logger import get_logger, log_performance

logger = get_logger(__name__)

SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)

_PCM_DTYPES = {
    1: np.int8,
    2: np.int16,
    4: np.int32,
}


# =============================================================================
# Sample Conversion
# =============================================================================

def audiosegment_to_buffer(audio: AudioSegment) -> AudioBuffer:
    """
    Convert an AudioSegment to a normalized, interleaved AudioBuffer.
    """
    samples = np.array(audio.get_array_of_samples(), dtype=np.float64)

    # Normalize to [-1, 1] based on bit depth
    max_val = 2 ** (8 * audio.sample_width - 1)
    samples = samples / max_val

    return AudioBuffer(
        data=samples,
        sample_rate=audio.frame_rate,
        channels=audio.channels,
        bit_depth=8 * audio.sample_width,
    )


def buffer_to_audiosegment(buffer: AudioBuffer) -> AudioSegment:
    """
    Convert a normalized AudioBuffer back to an AudioSegment.

    Samples are clipped to [-1, 1] and scaled by 2**(bits-1) - 1.
    """
    sample_width = buffer.bit_depth // 8
    if sample_width == 3:
        logger.warning("24-bit output is written as 32-bit PCM")
        sample_width = 4

    dtype = _PCM_DTYPES.get(sample_width)
    if dtype is None:
        raise UnsupportedFormatError(f"Unsupported bit depth: {buffer.bit_depth}")

    # Clip to prevent overflow
    samples = np.clip(buffer.data, -1.0, 1.0)

    max_val = 2 ** (8 * sample_width - 1) - 1
    samples_int = (samples * max_val).astype(dtype)

    return AudioSegment(
        data=samples_int.tobytes(),
        sample_width=sample_width,
        frame_rate=buffer.sample_rate,
        channels=buffer.channels
    )


# =============================================================================
# File I/O
# =============================================================================

@log_performance
def read_wave(filepath: str) -> AudioBuffer:
    """
    Read a PCM WAV file.

    Args:
        filepath: Path to the .wav file

    Returns:
        AudioBuffer with normalized interleaved samples

    Raises:
        AudioFileNotFoundError: If the file does not exist
        AudioReadError: If the file cannot be read
        InvalidFormatError: If the file is not a valid WAV file
        UnsupportedFormatError: If the WAV encoding is not PCM
        AudioMemoryError: If the samples do not fit in memory
    """
    if not os.path.isfile(filepath):
        raise AudioFileNotFoundError(f"File not found: {filepath}")

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise AudioReadError(f"Cannot read {filepath}: {e}") from e

    try:
        audio = AudioSegment(data=raw)
    except CouldntDecodeError as e:
        if "audio format" in str(e):
            raise UnsupportedFormatError(f"{filepath}: {e}") from e
        raise InvalidFormatError(f"{filepath}: {e}") from e
    except MemoryError as e:
        raise AudioMemoryError(f"Not enough memory to decode {filepath}") from e

    if audio.sample_width not in _PCM_DTYPES:
        raise UnsupportedFormatError(
            f"{filepath}: unsupported sample width {audio.sample_width} bytes"
        )

    try:
        buffer = audiosegment_to_buffer(audio)
    except MemoryError as e:
        raise AudioMemoryError(f"Not enough memory to convert {filepath}") from e

    logger.debug(
        f"Read {filepath}: {buffer.sample_rate} Hz, {buffer.channels} ch, "
        f"{buffer.bit_depth} bit, {buffer.length} samples"
    )
    return buffer


@log_performance
def write_wave(filepath: str, buffer: AudioBuffer) -> None:
    """
    Write an AudioBuffer as a PCM WAV file.

    Args:
        filepath: Destination path (parent directories must exist)
        buffer: Buffer to write

    Raises:
        InvalidParameterError: If the buffer is empty or malformed
        UnsupportedFormatError: If the bit depth cannot be written
        AudioWriteError: If the file cannot be written
    """
    if buffer is None or buffer.data is None:
        raise InvalidParameterError("Cannot write WAV: buffer is missing")
    if buffer.channels < 1 or buffer.sample_rate <= 0:
        raise InvalidParameterError(
            f"Cannot write WAV: {buffer.channels} channels at {buffer.sample_rate} Hz"
        )
    if buffer.length % buffer.channels != 0:
        raise InvalidParameterError(
            f"Cannot write WAV: {buffer.length} samples is not a whole number "
            f"of {buffer.channels}-channel frames"
        )
    if buffer.bit_depth not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedFormatError(f"Unsupported bit depth: {buffer.bit_depth}")

    audio = buffer_to_audiosegment(buffer)

    try:
        out_f = audio.export(filepath, format="wav")
        out_f.close()
    except OSError as e:
        raise AudioWriteError(f"Cannot write {filepath}: {e}") from e

    logger.debug(f"Wrote {filepath}: {buffer.length} samples at {audio.sample_width * 8} bit")


__all__ = [
    "SUPPORTED_BIT_DEPTHS",
    "audiosegment_to_buffer",
    "buffer_to_audiosegment",
    "read_wave",
    "write_wave",
]
