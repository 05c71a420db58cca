"""
Channel dispatch: route each sample of an interleaved buffer to one of a
filter's two biquad lanes.

- 1 channel:  every sample through lane 0.
- 2 channels: even indices lane 0 (left), odd indices lane 1 (right). A
  dangling final sample of an odd-length buffer is left untouched.
- N > 2:      channel = i % N, lane = channel % 2. All even channels share
  lane 0's delay state and all odd channels share lane 1's, so channels
  are not filtered independently. Kept for output compatibility; true
  multichannel filtering would need one unit per channel.

Within a lane, samples are fed in buffer order, so routing a lane's samples
as one run through the kernel gives exactly the per-sample interleaved
result.
"""
from typing import Optional

import numpy as np

from audio_util.buffer import AudioBuffer
from audio_util.dsp.biquad import BiQuad
from audio_util.dsp.kernels import Kernel, get_kernel


def lane_indices(length: int, channels: int, lane: int) -> np.ndarray:
    """Buffer positions routed to `lane` (0 or 1) for N > 2 channels."""
    positions = np.arange(length)
    return positions[(positions % channels) % 2 == lane]


def _run(kernel: Kernel, bq: BiQuad, samples: np.ndarray) -> None:
    if samples.shape[0] == 0:
        return
    kernel.process(bq, samples)


def process_buffer(instance, buffer: Optional[AudioBuffer], kernel: Optional[Kernel] = None) -> None:
    """
    Filter an interleaved buffer in place.

    A missing buffer, missing data, empty data or a channel count below 1
    is a no-op. Length, channel count and sample rate never change.

    Args:
        instance: Filter instance (anything with .left/.right BiQuad lanes)
        buffer: Buffer to filter
        kernel: Override the instance's kernel
    """
    if instance is None or buffer is None or buffer.data is None:
        return

    data = buffer.data
    length = data.shape[0]
    channels = buffer.channels
    if length == 0 or channels < 1:
        return

    kernel = get_kernel(kernel or getattr(instance, "kernel", None))
    left = instance.left
    right = instance.right

    if channels == 1:
        _run(kernel, left, data)
    elif channels == 2:
        usable = length - (length % 2)
        _run(kernel, left, data[0:usable:2])
        _run(kernel, right, data[1:usable:2])
    else:
        for lane, bq in ((0, left), (1, right)):
            positions = lane_indices(length, channels, lane)
            segment = data[positions]
            _run(kernel, bq, segment)
            data[positions] = segment


def process_channel(
    instance,
    samples,
    length: Optional[int] = None,
    lane: int = 0,
    kernel: Optional[Kernel] = None,
) -> None:
    """
    Filter a run of single-lane samples in place.

    Args:
        instance: Filter instance
        samples: Contiguous samples of one channel (ndarray or list)
        length: Number of leading samples to process; all when None
        lane: 0 selects the left unit, anything else the right unit
        kernel: Override the instance's kernel
    """
    if instance is None or samples is None:
        return

    n = len(samples) if length is None else min(int(length), len(samples))
    if n <= 0:
        return

    kernel = get_kernel(kernel or getattr(instance, "kernel", None))
    bq = instance.left if lane == 0 else instance.right

    work = np.asarray(samples, dtype=np.float64)

    if work is samples:
        _run(kernel, bq, work[:n])
    else:
        segment = np.array(work[:n])
        _run(kernel, bq, segment)
        samples[:n] = segment if isinstance(samples, np.ndarray) else segment.tolist()


__all__ = [
    "lane_indices",
    "process_buffer",
    "process_channel",
]
