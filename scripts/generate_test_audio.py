#!/usr/bin/env python3
"""Generate a synthetic WAV file for manual wavsplice runs.

Produces a 10-second, 44.1 kHz, 16-bit mono file at half scale:
  0-3s   440 Hz tone
  3-5s   silence
  5-8s   880 Hz tone
  8-10s  660 Hz tone
"""

import sys
from pathlib import Path

import numpy as np
import soundfile as sf

SAMPLE_RATE = 44100


def _tone(freq: float, seconds: float) -> np.ndarray:
    t = np.arange(int(seconds * SAMPLE_RATE)) / SAMPLE_RATE
    return 0.5 * np.sin(2 * np.pi * freq * t)


def generate_test_audio(output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    signal = np.concatenate([
        _tone(440, 3),
        np.zeros(2 * SAMPLE_RATE),
        _tone(880, 3),
        _tone(660, 2),
    ])
    sf.write(str(output), signal, SAMPLE_RATE, subtype="PCM_16")
    print(f"Generated: {output}")


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.wav")
    generate_test_audio(out)
