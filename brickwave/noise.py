"""
Colored noise generators.

Every generator draws from a ``SeededRandom`` and returns float32 samples. Pink noise uses
Paul Kellett's refined filter bank; brown noise is a clamped leaky integrator.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol, TypeAlias

import numpy as np
from numpy.typing import NDArray
from scipy.signal import lfilter  # type: ignore[import]

from .config import DEFAULT_SAMPLE_RATE, NOISE_TYPES, NoiseType
from .errors import InvalidNoiseTypeError
from .rng import SeededRandom

_LOGGER = logging.getLogger("brickwave.noise")

FloatArray: TypeAlias = NDArray[np.float32]

# (pole, gain) per filter stage
PINK_POLES: tuple[tuple[float, float], ...] = (
    (0.99886, 0.0555179),
    (0.99332, 0.0750759),
    (0.96900, 0.1538520),
    (0.86650, 0.3104856),
    (0.55000, 0.5329522),
    (-0.7616, -0.0168980),
)
PINK_DELAYED_GAIN = 0.115926
PINK_DIRECT_GAIN = 0.5362
PINK_SCALE = 0.11

BROWN_STEP = 0.02
BROWN_LEAK = 0.98


def white_draws(rng: SeededRandom, length: int) -> NDArray[np.float64]:
    """Uniform draws mapped to [-1, 1], kept in double precision."""
    if length <= 0:
        return np.zeros(0, dtype=np.float64)
    draws = np.fromiter((rng.random() for _ in range(length)), dtype=np.float64, count=length)
    return draws * 2.0 - 1.0


class NoiseSynthesizer(Protocol):
    def generate(self, length: int, rng: SeededRandom) -> FloatArray: ...


class WhiteNoise:
    def generate(self, length: int, rng: SeededRandom) -> FloatArray:
        return white_draws(rng, length).astype(np.float32)


class PinkNoise:
    def generate(self, length: int, rng: SeededRandom) -> FloatArray:
        white = white_draws(rng, length)
        if white.size == 0:
            return white.astype(np.float32)

        pink = np.zeros_like(white)
        for pole, gain in PINK_POLES:
            # b[i] = pole * b[i-1] + gain * white[i], b[-1] = 0
            stage = lfilter([gain], [1.0, -pole], white)
            pink += np.asarray(stage, dtype=np.float64)

        # The seventh term lags one sample behind the white input.
        delayed = np.zeros_like(white)
        delayed[1:] = white[:-1] * PINK_DELAYED_GAIN
        pink += delayed
        pink += white * PINK_DIRECT_GAIN
        return (pink * PINK_SCALE).astype(np.float32)


class BrownNoise:
    def generate(self, length: int, rng: SeededRandom) -> FloatArray:
        white = white_draws(rng, length)
        return integrate_brown(white)


def integrate_brown(white: NDArray[np.float64]) -> FloatArray:
    """Leaky, clamped integration of a white innovation sequence."""
    out = np.empty(white.size, dtype=np.float32)
    last = 0.0
    for i, innovation in enumerate(white.tolist()):
        last = max(-1.0, min(1.0, (last + BROWN_STEP * innovation) * BROWN_LEAK))
        out[i] = last
    return out


def synthesizer_for(noise_type: NoiseType) -> NoiseSynthesizer:
    match noise_type:
        case "white":
            return WhiteNoise()
        case "pink":
            return PinkNoise()
        case "brown":
            return BrownNoise()
        case _:
            raise InvalidNoiseTypeError(
                f"Unknown noise type: {noise_type!r}. Valid: {list(NOISE_TYPES)}"
            )


def generate_noise(
    noise_type: NoiseType,
    duration: float,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    seed: int | None = None,
) -> FloatArray:
    """Render ``floor(duration * sample_rate)`` samples of colored noise.

    Duration and sample rate are not validated here; non-positive values yield an
    empty buffer. Unseeded calls are not reproducible.
    """
    synthesizer = synthesizer_for(noise_type)
    length = max(0, math.floor(duration * sample_rate))
    rng = SeededRandom(seed)
    samples = synthesizer.generate(length, rng)
    _LOGGER.debug("Generated %d %s noise samples (seed=%s)", length, noise_type, seed)
    return samples
