from __future__ import annotations

import math

import numpy as np

from .config import DEFAULT_SAMPLE_RATE
from .noise import FloatArray


def apply_envelope(
    buffer: FloatArray,
    fade_in: float = 0.0,
    fade_out: float = 0.0,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> FloatArray:
    """Linear fade-in/fade-out; overlapping fades multiply."""
    samples = np.asarray(buffer, dtype=np.float32)
    length = samples.size
    fade_in_samples = min(max(0, math.floor(fade_in * sample_rate)), length)
    fade_out_samples = min(max(0, math.floor(fade_out * sample_rate)), length)

    gain = np.ones(length, dtype=np.float64)
    index = np.arange(length, dtype=np.float64)
    if fade_in_samples:
        head = slice(0, fade_in_samples)
        gain[head] *= index[head] / fade_in_samples
    if fade_out_samples:
        tail = slice(length - fade_out_samples, length)
        gain[tail] *= (length - index[tail]) / fade_out_samples

    return (samples.astype(np.float64) * gain).astype(np.float32)


def convert_to_stereo(mono: FloatArray, spread: float = 0.0) -> FloatArray:
    """Interleave each sample into identical left/right slots.

    ``spread`` is reserved; both channels always get unity gain.
    """
    _ = spread
    samples = np.asarray(mono, dtype=np.float32).reshape(-1)
    return np.repeat(samples, 2)


def to_channels(mono: FloatArray, channels: int) -> FloatArray:
    match channels:
        case 1:
            return np.array(mono, dtype=np.float32).reshape(-1)
        case 2:
            return convert_to_stereo(mono)
        case _:
            raise ValueError(f"Unsupported channel count: {channels}. Valid: [1, 2]")
