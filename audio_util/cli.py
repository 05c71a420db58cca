"""CLI for audio-util -- apply a biquad filter to a WAV file.

Usage:
    audio-util --input audio.wav --filter hpf --freq 100 --output out.wav
    audio-util --input audio.wav --filter lpf --freq 5000 --output out.wav
    audio-util --input audio.wav --filter peq --freq 1000 --gain 6 --q 1 --output out.wav
    python -m audio_util --version

Exit status is 0 on success and 1 on any validation or I/O failure.
"""

from __future__ import annotations

import argparse
import sys

from audio_util import __version__
from audio_util.buffer import AudioBuffer
from audio_util.config import FilterConfig
from audio_util.dsp.filters import FilterType, design_filter
from audio_util.dsp.kernels import available_kernels, get_kernel
from audio_util.exceptions import AudioUtilError, ValidationError, error_string
from audio_util.io.wav import read_wave, write_wave
from audio_util.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

PROGRAM_NAME = "audio-util"

EPILOG = """\
Supported filters:
  hpf   High-pass filter (Butterworth, 2nd order)
  lpf   Low-pass filter (Butterworth, 2nd order)
  peq   Parametric EQ (constant-Q, boost/cut)

Examples:
  # Remove low-frequency rumble (80 Hz cutoff)
  audio-util --input recording.wav --filter hpf --freq 80 --output clean.wav

  # Apply parametric EQ: +6 dB boost at 1000 Hz, Q=1.0
  audio-util --input audio.wav --filter peq --freq 1000 --gain 6.0 --q 1.0 --output boosted.wav
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Audio processing utility with support for various filters.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    required = parser.add_argument_group("required options")
    required.add_argument("--input", metavar="PATH", help="Input WAV file path")
    required.add_argument("--output", metavar="PATH", help="Output WAV file path")
    required.add_argument("--filter", metavar="TYPE", help="Filter type (hpf, lpf, peq)")
    required.add_argument("--freq", metavar="HZ", type=float, help="Filter frequency parameter (Hz)")

    parser.add_argument("--gain", metavar="DB", type=float, default=0.0,
                        help="Gain in dB for parametric EQ (default: 0.0)")
    parser.add_argument("--q", metavar="FACTOR", type=float, default=1.0,
                        help="Q factor for parametric EQ (default: 1.0)")
    parser.add_argument("--kernel", default="scalar",
                        help=f"Execution kernel ({', '.join(available_kernels())}; default: scalar)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", metavar="PATH", help="Also log (at DEBUG) to this file")
    parser.add_argument("-v", "--version", action="version",
                        version=f"{PROGRAM_NAME} version {__version__}")
    return parser


def describe_buffer(buffer: AudioBuffer) -> None:
    logger.info(f"  Sample rate: {buffer.sample_rate} Hz")
    logger.info(f"  Channels: {buffer.channels}")
    logger.info(f"  Bit depth: {buffer.bit_depth} bits")
    logger.info(f"  Duration: {buffer.duration_sec:.2f} seconds")
    logger.info(f"  Samples: {buffer.length}")


def apply_filter(config: FilterConfig, buffer: AudioBuffer) -> None:
    """
    Validate the request against the buffer's sample rate, then filter in place.

    Raises:
        InvalidParameterError: If the frequency is at/above Nyquist or q <= 0
    """
    config.validate(sample_rate=buffer.sample_rate)
    filter_type = config.filter_type

    if filter_type == FilterType.HPF:
        logger.info("Applying high-pass filter:")
        logger.info(f"  Cutoff frequency: {config.frequency:.1f} Hz")
    elif filter_type == FilterType.LPF:
        logger.info("Applying low-pass filter:")
        logger.info(f"  Cutoff frequency: {config.frequency:.1f} Hz")
    else:
        logger.info("Applying parametric EQ:")
        logger.info(f"  Center frequency: {config.frequency:.1f} Hz")
        logger.info(f"  Gain: {config.gain:.1f} dB")
        logger.info(f"  Q factor: {config.q:.2f}")

    instance = design_filter(
        filter_type,
        buffer.sample_rate,
        config.frequency,
        gain=config.gain,
        q=config.q,
        kernel=get_kernel(config.kernel),
        strict=True,
    )
    instance.process_buffer(buffer)
    logger.info("  Filter applied successfully")


def run(config: FilterConfig) -> int:
    """Read, filter and write one file. Returns the process exit code."""
    try:
        config.validate()
        get_kernel(config.kernel)

        logger.info(f"Reading input file: {config.input_path}")
        buffer = read_wave(config.input_path)
        describe_buffer(buffer)

        apply_filter(config, buffer)

        logger.info(f"Writing output file: {config.output_path}")
        write_wave(config.output_path, buffer)
    except ValidationError as e:
        for line in str(e).splitlines():
            logger.error(f"Error: {line}")
        logger.error(f"Try '{PROGRAM_NAME} --help' for more information.")
        return 1
    except AudioUtilError as e:
        logger.error(f"{error_string(e)}: {e}")
        return 1

    logger.info("Processing complete!")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # --help/--version exit 0; argparse usage errors map to 1
        return 0 if e.code in (0, None) else 1

    try:
        setup_logging(level=args.log_level, log_file=args.log_file)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info(f"=== {PROGRAM_NAME} v{__version__} ===")
    return run(FilterConfig.from_args(args))


if __name__ == "__main__":
    sys.exit(main())
