import math

import numpy as np
import pytest

from brickwave.errors import InvalidNoiseTypeError
from brickwave.noise import (
    BrownNoise,
    PinkNoise,
    WhiteNoise,
    generate_noise,
    integrate_brown,
    synthesizer_for,
)

WHITE_SEED_ONE = (
    0.027740156757,
    -0.648517393343,
    -0.382696967285,
    0.069067773907,
    0.895255851511,
    -0.656527397063,
    0.404462338148,
    -0.547138637652,
)


def test_white_noise_golden_values() -> None:
    samples = generate_noise("white", 1, 8, seed=1)
    assert samples.dtype == np.float32
    np.testing.assert_allclose(samples, np.array(WHITE_SEED_ONE), rtol=1e-6, atol=1e-7)


@pytest.mark.parametrize("noise_type", ["white", "pink", "brown"])
def test_generation_is_deterministic(noise_type: str) -> None:
    first = generate_noise(noise_type, 0.5, 8000, seed=99)  # type: ignore[arg-type]
    second = generate_noise(noise_type, 0.5, 8000, seed=99)  # type: ignore[arg-type]
    assert first.tobytes() == second.tobytes()


@pytest.mark.parametrize("noise_type", ["white", "pink", "brown"])
def test_different_seeds_differ(noise_type: str) -> None:
    first = generate_noise(noise_type, 0.1, 8000, seed=1)  # type: ignore[arg-type]
    second = generate_noise(noise_type, 0.1, 8000, seed=2)  # type: ignore[arg-type]
    assert not np.array_equal(first, second)


@pytest.mark.parametrize(
    ("duration", "sample_rate"),
    [(1.0, 44_100), (0.333, 22_050), (2.5, 8000), (0.0001, 48_000)],
)
def test_length_is_floor_of_duration_times_rate(duration: float, sample_rate: int) -> None:
    samples = generate_noise("white", duration, sample_rate, seed=5)
    assert samples.size == math.floor(duration * sample_rate)


def test_non_positive_duration_yields_empty_buffer() -> None:
    assert generate_noise("pink", 0, 44_100, seed=1).size == 0
    assert generate_noise("brown", -1, 44_100, seed=1).size == 0


def test_unknown_noise_type_rejected() -> None:
    with pytest.raises(InvalidNoiseTypeError):
        generate_noise("purple", 1, 8000, seed=1)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        synthesizer_for("blue")  # type: ignore[arg-type]


def test_dispatch_returns_one_synthesizer_per_color() -> None:
    assert isinstance(synthesizer_for("white"), WhiteNoise)
    assert isinstance(synthesizer_for("pink"), PinkNoise)
    assert isinstance(synthesizer_for("brown"), BrownNoise)


def test_white_noise_spans_both_signs() -> None:
    samples = generate_noise("white", 1, 8000, seed=3)
    assert samples.min() < -0.9
    assert samples.max() > 0.9
    assert np.all(np.abs(samples) <= 1.0)


def test_brown_first_sample_is_scaled_innovation() -> None:
    samples = generate_noise("brown", 1, 8, seed=1)
    assert samples[0] == pytest.approx(WHITE_SEED_ONE[0] * 0.02 * 0.98, rel=1e-5)


def test_brown_stays_bounded_under_maximal_innovation() -> None:
    rising = integrate_brown(np.ones(100_000, dtype=np.float64))
    falling = integrate_brown(-np.ones(100_000, dtype=np.float64))
    assert np.all(np.abs(rising) <= 1.0)
    assert np.all(np.abs(falling) <= 1.0)
    # Converges on the leak's fixed point rather than wandering off.
    assert rising[-1] == pytest.approx(0.98, abs=1e-4)


def test_brown_clamps_oversized_innovations() -> None:
    out = integrate_brown(np.full(10, 1000.0))
    assert np.all(out == 1.0)
    out = integrate_brown(np.full(10, -1000.0))
    assert np.all(out == -1.0)


def test_pink_first_sample_uses_all_direct_gains() -> None:
    samples = generate_noise("pink", 1, 8, seed=1)
    direct = 0.0555179 + 0.0750759 + 0.1538520 + 0.3104856 + 0.5329522 - 0.0168980 + 0.5362
    assert samples[0] == pytest.approx(WHITE_SEED_ONE[0] * direct * 0.11, rel=1e-5)


def test_pink_second_sample_includes_delayed_term() -> None:
    samples = generate_noise("pink", 1, 8, seed=1)
    w0, w1 = WHITE_SEED_ONE[0], WHITE_SEED_ONE[1]
    poles = (
        (0.99886, 0.0555179),
        (0.99332, 0.0750759),
        (0.96900, 0.1538520),
        (0.86650, 0.3104856),
        (0.55000, 0.5329522),
        (-0.7616, -0.0168980),
    )
    expected = sum(pole * gain * w0 + gain * w1 for pole, gain in poles)
    expected += w0 * 0.115926 + w1 * 0.5362
    assert samples[1] == pytest.approx(expected * 0.11, rel=1e-5)


def test_pink_noise_stays_in_range() -> None:
    samples = generate_noise("pink", 1, 44_100, seed=42)
    assert np.all(np.abs(samples) < 1.0)
    assert float(np.std(samples)) > 0.01
