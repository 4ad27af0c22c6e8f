"""Shared data types used across wavsplice."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class AudioStreamMeta:
    """Format of a PCM source, read once per invocation."""

    sample_rate: int
    channel_count: int
    bit_depth: int
    total_frames: int

    @property
    def total_duration(self) -> float:
        return self.total_frames / self.sample_rate


@dataclass
class ProcessingMetadata:
    processor_type: str
    input_duration: float
    sample_rate: int
    channels: int
    processing_time_ms: int = 0

    def to_dict(self) -> dict:
        return {
            "processor_type": self.processor_type,
            "input_duration": self.input_duration,
            "sample_rate": self.sample_rate,
            "channels": self.channels,
            "processing_time_ms": self.processing_time_ms,
        }


@dataclass
class ProcessingResult:
    """Output files of one successful run plus metadata about it."""

    metadata: ProcessingMetadata
    files: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "files": [str(p) for p in self.files],
            "metadata": self.metadata.to_dict(),
        }
