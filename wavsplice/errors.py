"""Typed errors raised by the processing core and mapped by the web layer."""

from datetime import datetime, timezone


class AudioError(Exception):
    """Base class for every failure the core reports to its callers."""

    kind = "AudioError"
    label = "Audio error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "error": str(self),
            "error_type": self.kind,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class AudioIOError(AudioError):
    kind = "IoError"
    label = "IO Error"


class WavError(AudioError):
    """Raised when the WAV container cannot be decoded or encoded."""

    kind = "WavError"
    label = "Wav Error"


class InvalidFormatError(WavError):
    kind = "InvalidFormat"
    label = "Invalid format"


class InvalidDurationError(AudioError, ValueError):
    kind = "InvalidDuration"
    label = "Invalid duration"
    status_code = 400


class InvalidSpliceCountError(AudioError, ValueError):
    kind = "InvalidSpliceCount"
    label = "Invalid splice count"
    status_code = 400


class ProcessingError(AudioError):
    kind = "ProcessingError"
    label = "Processing error"


class InvalidConfigError(ProcessingError, ValueError):
    """A ProcessingError detected while validating configuration."""

    status_code = 400


class AudioFileNotFoundError(AudioError):
    kind = "FileNotFound"
    label = "File not found"
    status_code = 404
