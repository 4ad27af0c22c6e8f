"""Shared test fixtures."""

import logging
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SAMPLE_RATE = 44100


def write_pcm16(path: Path, samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> Path:
    """Write int16 samples, shape (frames,) or (frames, channels), as 16-bit WAV."""
    sf.write(str(path), np.asarray(samples, dtype=np.int16), sample_rate, subtype="PCM_16")
    return path


def read_pcm16(path: Path) -> tuple[np.ndarray, int]:
    data, sr = sf.read(str(path), dtype="int16", always_2d=True)
    return data, sr


def noise(seconds: float, channels: int = 1, amplitude: int = 16000, seed: int = 0) -> np.ndarray:
    """Random int16 samples, so every window of the signal is distinguishable."""
    rng = np.random.default_rng(seed)
    frames = int(seconds * SAMPLE_RATE)
    shape = (frames,) if channels == 1 else (frames, channels)
    return rng.integers(-amplitude, amplitude + 1, size=shape, dtype=np.int16)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def sample_config_path() -> Path:
    return FIXTURES_DIR / "sample_config.json"


@pytest.fixture
def mono_samples() -> np.ndarray:
    return noise(10.0)


@pytest.fixture
def mono_wav(tmp_path, mono_samples) -> Path:
    """10 seconds of 44.1 kHz mono noise."""
    return write_pcm16(tmp_path / "source.wav", mono_samples)


@pytest.fixture
def stereo_wav(tmp_path) -> Path:
    """5 seconds of 44.1 kHz stereo noise."""
    return write_pcm16(tmp_path / "stereo.wav", noise(5.0, channels=2, seed=1))


@pytest.fixture
def silent_wav(tmp_path) -> Path:
    return write_pcm16(tmp_path / "silent.wav", np.zeros(3 * SAMPLE_RATE, dtype=np.int16))


@pytest.fixture
def half_scale_wav(tmp_path) -> Path:
    """4 seconds of 440 Hz sine peaking at half scale."""
    t = np.arange(4 * SAMPLE_RATE) / SAMPLE_RATE
    samples = np.rint(0.5 * 32767 * np.sin(2 * np.pi * 440 * t)).astype(np.int16)
    return write_pcm16(tmp_path / "half.wav", samples)
