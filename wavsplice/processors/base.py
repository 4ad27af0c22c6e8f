"""Processor interface shared by the splice and normalize processors."""

from abc import ABC, abstractmethod
from pathlib import Path

from wavsplice.config import ProcessorConfig
from wavsplice.errors import AudioIOError
from wavsplice.models import AudioStreamMeta, ProcessingMetadata, ProcessingResult


class AudioProcessor(ABC):
    """A transformation from one source WAV to a list of output WAVs."""

    @abstractmethod
    def process(
        self, source_path: Path, output_dir: Path, config: ProcessorConfig
    ) -> ProcessingResult:
        """Validate ``config``, transform ``source_path`` and write into ``output_dir``."""

    @abstractmethod
    def validate_config(self, config: ProcessorConfig) -> None:
        """Raise a validation error if ``config`` is unusable. Touches no files."""

    @abstractmethod
    def processor_type(self) -> str:
        """Tag used in metadata and for dispatch."""

    def _build_result(
        self, files: list[Path], meta: AudioStreamMeta, elapsed_seconds: float
    ) -> ProcessingResult:
        return ProcessingResult(
            files=files,
            metadata=ProcessingMetadata(
                processor_type=self.processor_type(),
                input_duration=meta.total_duration,
                sample_rate=meta.sample_rate,
                channels=meta.channel_count,
                processing_time_ms=int(elapsed_seconds * 1000),
            ),
        )


def ensure_output_dir(output_dir: Path) -> Path:
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AudioIOError(f"cannot create output directory {output_dir}: {e}") from e
    return output_dir
