"""Normalize processor: peak-based gain, whole file or per splice."""

import logging
import time
from pathlib import Path

import numpy as np

from wavsplice.config import NormalizeConfig, ProcessorConfig
from wavsplice.errors import InvalidConfigError, ProcessingError
from wavsplice.models import ProcessingResult
from wavsplice.processors.base import AudioProcessor, ensure_output_dir
from wavsplice.processors.splice import iter_splices
from wavsplice.wavutil import WavSource, write_wav

logger = logging.getLogger(__name__)

INT16_MAX = 32767
INT16_MIN = -32768

# Hybrid mode always extracts 5 clips of 2 seconds; callers cannot change
# this through NormalizeConfig.
HYBRID_SPLICE_DURATION = 2.0
HYBRID_SPLICE_COUNT = 5


def find_peak(samples: np.ndarray) -> float:
    """Largest absolute sample, scaled so that 32767 maps to 1.0."""
    if samples.size == 0:
        return 0.0
    return float(np.max(np.abs(samples.astype(np.int32)))) / INT16_MAX


def apply_gain(samples: np.ndarray, gain: float) -> np.ndarray:
    """Scale ``samples`` in place, saturating at the int16 limits."""
    scaled = np.clip(samples.astype(np.float64) * gain, INT16_MIN, INT16_MAX)
    samples[:] = np.rint(scaled).astype(np.int16)
    return samples


class NormalizeProcessor(AudioProcessor):
    def processor_type(self) -> str:
        return "normalize"

    def validate_config(self, config: ProcessorConfig) -> None:
        if not isinstance(config, NormalizeConfig):
            raise InvalidConfigError("Invalid config for NormalizeProcessor")
        if not 0.0 < config.target_level <= 1.0:
            raise InvalidConfigError(
                "target_level must be between 0.0 and 1.0 (where 1.0 = maximum level)"
            )

    def process(
        self, source_path: Path, output_dir: Path, config: ProcessorConfig
    ) -> ProcessingResult:
        started = time.perf_counter()
        self.validate_config(config)

        output_dir = ensure_output_dir(output_dir)
        logger.info(
            "Processing normalize - Target level: %s, Apply to splices: %s",
            config.target_level, config.apply_to_splices,
        )

        with WavSource(source_path) as source:
            if config.apply_to_splices:
                files = self._normalize_splices(source, output_dir, config.target_level)
            else:
                files = [self._normalize_file(source, output_dir, config.target_level)]
            meta = source.meta

        return self._build_result(files, meta, time.perf_counter() - started)

    def _normalize_file(self, source: WavSource, output_dir: Path, target_level: float) -> Path:
        samples = source.read_all()
        if samples.size == 0:
            raise ProcessingError("No audio data found")

        peak = find_peak(samples)
        if peak == 0.0:
            raise ProcessingError("Audio is silent (no signal detected)")

        gain = target_level / peak
        logger.info(
            "Normalizing: peak=%.3f, target=%.3f, gain=%.3fx", peak, target_level, gain
        )
        apply_gain(samples, gain)
        return write_wav(output_dir / "normalized_audio.wav", samples, source.meta)

    def _normalize_splices(
        self, source: WavSource, output_dir: Path, target_level: float
    ) -> list[Path]:
        files: list[Path] = []
        splices = iter_splices(source, HYBRID_SPLICE_DURATION, HYBRID_SPLICE_COUNT)
        for i, samples in splices:
            if samples.size == 0:
                logger.debug("Splice %d is empty, skipping", i)
                continue

            peak = find_peak(samples)
            if peak > 0.0:
                apply_gain(samples, target_level / peak)
            else:
                logger.warning("Splice %d is silent, writing it unchanged", i)

            files.append(
                write_wav(output_dir / f"normalized_splice_{i}.wav", samples, source.meta)
            )
        return files
