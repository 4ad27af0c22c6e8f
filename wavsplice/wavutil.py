"""PCM WAV codec helpers built on soundfile/libsndfile."""

import logging
from pathlib import Path

import numpy as np
import soundfile as sf

from wavsplice.errors import (
    AudioFileNotFoundError,
    AudioIOError,
    InvalidFormatError,
    WavError,
)
from wavsplice.models import AudioStreamMeta

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("WAV", "WAVEX")
SUPPORTED_SUBTYPE = "PCM_16"
BIT_DEPTH = 16


def _check_format(path: Path, fmt: str, subtype: str) -> None:
    if fmt not in SUPPORTED_FORMATS:
        raise InvalidFormatError(f"{path.name} is not a WAV file (got {fmt})")
    if subtype != SUPPORTED_SUBTYPE:
        raise InvalidFormatError(
            f"{path.name}: unsupported sample format {subtype}; only 16-bit PCM is supported"
        )


def probe(input_path: Path) -> AudioStreamMeta:
    """Read format metadata without decoding samples."""
    input_path = Path(input_path)
    if not input_path.is_file():
        raise AudioFileNotFoundError(str(input_path))
    try:
        info = sf.info(str(input_path))
    except sf.LibsndfileError as e:
        raise WavError(f"{input_path.name}: {e}") from e

    _check_format(input_path, info.format, info.subtype)
    return AudioStreamMeta(
        sample_rate=int(info.samplerate),
        channel_count=int(info.channels),
        bit_depth=BIT_DEPTH,
        total_frames=int(info.frames),
    )


class WavSource:
    """Sequential, seekable reader yielding interleaved int16 samples.

    Use as a context manager::

        with WavSource(path) as src:
            src.seek(44100)
            buf = src.read_frames(88200)
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        if not self.path.is_file():
            raise AudioFileNotFoundError(str(self.path))
        try:
            self._file = sf.SoundFile(str(self.path))
        except sf.LibsndfileError as e:
            raise WavError(f"{self.path.name}: {e}") from e

        try:
            _check_format(self.path, self._file.format, self._file.subtype)
        except InvalidFormatError:
            self._file.close()
            raise

        self.meta = AudioStreamMeta(
            sample_rate=int(self._file.samplerate),
            channel_count=int(self._file.channels),
            bit_depth=BIT_DEPTH,
            total_frames=int(self._file.frames),
        )

    def __enter__(self) -> "WavSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._file.close()

    def seek(self, frame_index: int) -> None:
        try:
            self._file.seek(frame_index)
        except (sf.LibsndfileError, ValueError) as e:
            raise WavError(f"cannot seek {self.path.name} to frame {frame_index}: {e}") from e

    def read_frames(self, frames: int) -> np.ndarray:
        """Read up to ``frames`` frames; fewer come back at end of file."""
        try:
            data = self._file.read(frames, dtype="int16", always_2d=True)
        except sf.LibsndfileError as e:
            raise WavError(f"{self.path.name}: {e}") from e
        return data.reshape(-1)

    def read_all(self) -> np.ndarray:
        self.seek(0)
        return self.read_frames(-1)


def write_wav(output_path: Path, samples: np.ndarray, meta: AudioStreamMeta) -> Path:
    """Write interleaved int16 ``samples`` using the source format in ``meta``.

    Failing to create the file raises AudioIOError; an encoder failure
    raises WavError.
    """
    frames = np.asarray(samples, dtype=np.int16).reshape(-1, meta.channel_count)
    try:
        f = open(output_path, "wb")
    except OSError as e:
        raise AudioIOError(f"cannot create {output_path}: {e}") from e
    with f:
        try:
            sf.write(
                f,
                frames,
                meta.sample_rate,
                subtype=SUPPORTED_SUBTYPE,
                format="WAV",
            )
        except sf.LibsndfileError as e:
            raise WavError(f"cannot write {output_path}: {e}") from e
    logger.debug("Wrote %d frames to %s", len(frames), output_path)
    return output_path
