"""
Custom exception classes for audio-util.

The file-level categories mirror the error codes of the command-line tool
(file not found, invalid format, read/write failure, ...). The filter core
itself raises only InvalidParameterError, and only when asked to validate.
"""


class AudioUtilError(Exception):
    """Base exception for all audio-util errors."""
    description = "Unknown error"


class ValidationError(AudioUtilError):
    """Raised when user-supplied parameters fail validation."""
    description = "Validation failed"


class InvalidParameterError(ValidationError):
    """Raised when a filter or buffer parameter is out of range."""
    description = "Invalid parameter"


class ConfigurationError(ValidationError):
    """Raised when a configuration value cannot be resolved."""
    description = "Invalid configuration"


class DSPError(AudioUtilError):
    """Raised when DSP (Digital Signal Processing) operations fail."""
    description = "DSP error"


class KernelUnavailableError(DSPError):
    """Raised when an optional execution kernel's backend is not installed."""
    description = "Execution kernel unavailable"


class FileError(AudioUtilError):
    """Raised when file operations fail."""
    description = "File error"


class AudioFileNotFoundError(FileError):
    description = "File not found"


class InvalidFormatError(FileError):
    description = "Invalid WAV format"


class UnsupportedFormatError(FileError):
    description = "Unsupported audio format"


class AudioReadError(FileError):
    description = "File read error"


class AudioWriteError(FileError):
    description = "File write error"


class AudioMemoryError(FileError):
    description = "Memory allocation error"


def error_string(error: BaseException) -> str:
    """
    Short category description for an error, as printed by the CLI.

    Errors outside the audio-util hierarchy map to "Unknown error".
    """
    if isinstance(error, AudioUtilError):
        return error.description
    return AudioUtilError.description


__all__ = [
    'AudioUtilError',
    'ValidationError',
    'InvalidParameterError',
    'ConfigurationError',
    'DSPError',
    'KernelUnavailableError',
    'FileError',
    'AudioFileNotFoundError',
    'InvalidFormatError',
    'UnsupportedFormatError',
    'AudioReadError',
    'AudioWriteError',
    'AudioMemoryError',
    'error_string',
]
