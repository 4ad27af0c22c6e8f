"""Splice processor: random fixed-length clip extraction."""

import logging
import math
import time
from pathlib import Path
from typing import Iterator

import numpy as np

from wavsplice.config import ProcessorConfig, SpliceConfig
from wavsplice.errors import (
    InvalidConfigError,
    InvalidDurationError,
    InvalidSpliceCountError,
    ProcessingError,
)
from wavsplice.models import AudioStreamMeta, ProcessingResult
from wavsplice.processors.base import AudioProcessor, ensure_output_dir
from wavsplice.wavutil import WavSource, write_wav

logger = logging.getLogger(__name__)


def reverse_samples(samples: np.ndarray) -> np.ndarray:
    """Reverse sample-slot order in place.

    Interleaved channels are not separated first, so a stereo clip also has
    its left/right slots swapped.
    """
    samples[:] = samples[::-1]
    return samples


def validate_splice_params(duration: float, count: int) -> None:
    if not duration > 0:
        raise InvalidDurationError("splice duration must be positive")
    if count < 1:
        raise InvalidSpliceCountError("splice count must be >= 1")


def iter_splices(
    source: WavSource,
    duration: float,
    count: int,
    rng: np.random.Generator | None = None,
) -> Iterator[tuple[int, np.ndarray]]:
    """Yield ``(index, samples)`` for ``count`` randomly placed clips.

    Start offsets are drawn uniformly from ``[0, total_duration - duration)``.
    A clip running into end of file comes back short rather than failing.
    Raises ProcessingError up front when the source is not longer than
    ``duration``.
    """
    meta = source.meta
    max_start = meta.total_duration - duration
    if max_start <= 0:
        raise ProcessingError(
            f"splice duration {duration}s must be shorter than the source "
            f"({meta.total_duration:.3f}s)"
        )
    rng = rng or np.random.default_rng()
    frames = int(math.floor(duration * meta.sample_rate))
    return _splices(source, meta, max_start, frames, count, rng)


def _splices(
    source: WavSource,
    meta: AudioStreamMeta,
    max_start: float,
    frames: int,
    count: int,
    rng: np.random.Generator,
) -> Iterator[tuple[int, np.ndarray]]:
    for i in range(count):
        start_seconds = rng.uniform(0.0, max_start)
        start_frame = int(math.floor(start_seconds * meta.sample_rate))
        source.seek(start_frame)
        logger.debug("Splice %d: start=%.3fs (frame %d)", i, start_seconds, start_frame)
        yield i, source.read_frames(frames)


class SpliceProcessor(AudioProcessor):
    def processor_type(self) -> str:
        return "splice"

    def validate_config(self, config: ProcessorConfig) -> None:
        if not isinstance(config, SpliceConfig):
            raise InvalidConfigError("Invalid config for SpliceProcessor")
        validate_splice_params(config.duration, config.count)

    def process(
        self, source_path: Path, output_dir: Path, config: ProcessorConfig
    ) -> ProcessingResult:
        started = time.perf_counter()
        self.validate_config(config)

        output_dir = ensure_output_dir(output_dir)
        logger.info(
            "Processing splice - Duration: %s, Count: %s, Reverse: %s",
            config.duration, config.count, config.reverse,
        )

        files: list[Path] = []
        with WavSource(source_path) as source:
            for i, samples in iter_splices(source, config.duration, config.count):
                if config.reverse:
                    reverse_samples(samples)
                files.append(write_wav(output_dir / f"splice_{i}.wav", samples, source.meta))
            meta = source.meta

        return self._build_result(files, meta, time.perf_counter() - started)
