import numpy as np
import pytest

from brickwave.ambient import LayerResult
from brickwave.errors import InvalidLayerError
from brickwave.mixer import mix_ambient_layers, soft_limit
from brickwave.noise import generate_noise


def _layer(values: np.ndarray, name: str = "test") -> LayerResult:
    return LayerResult(name=name, samples=values, description=name)


def test_mixing_no_layers_scales_base_exactly() -> None:
    base = generate_noise("white", 1, 8000, seed=8)
    mixed = mix_ambient_layers(base, [])
    expected = (base.astype(np.float64) * 0.7).astype(np.float32)
    assert mixed.dtype == np.float32
    assert np.array_equal(mixed, expected)


def test_layer_level_is_split_evenly() -> None:
    base = np.zeros(4, dtype=np.float32)
    layers = [_layer(np.full(4, 0.5), "a"), _layer(np.full(4, 1.0), "b")]
    mixed = mix_ambient_layers(base, layers, base_level=0.7, layer_level=0.3)
    np.testing.assert_allclose(mixed, np.full(4, 0.15 * 0.5 + 0.15 * 1.0), rtol=1e-6)


def test_mix_preserves_length_and_input() -> None:
    base = generate_noise("pink", 0.5, 8000, seed=1)
    snapshot = base.copy()
    layer = _layer(generate_noise("white", 0.5, 8000, seed=2))
    mixed = mix_ambient_layers(base, [layer])
    assert mixed.size == base.size
    assert np.array_equal(base, snapshot)


def test_mixed_output_is_bounded() -> None:
    base = np.ones(16, dtype=np.float32)
    layers = [_layer(np.full(16, 5.0)), _layer(np.full(16, -50.0))]
    for base_level, layer_level in ((1.0, 1.0), (3.0, 0.0), (0.0, 10.0)):
        mixed = mix_ambient_layers(base, layers, base_level=base_level, layer_level=layer_level)
        assert np.all(np.abs(mixed) <= 1.0)


def test_quiet_samples_pass_through_limiter() -> None:
    samples = np.array([0.0, 0.5, -0.95, 0.95], dtype=np.float32)
    assert np.array_equal(soft_limit(samples), samples)


def test_soft_limit_is_sign_preserving_tanh() -> None:
    limited = soft_limit(np.array([2.0, -2.0, 0.96], dtype=np.float32))
    np.testing.assert_allclose(limited, [np.tanh(2.0), -np.tanh(2.0), np.tanh(0.96)], rtol=1e-6)


def test_mismatched_layer_length_rejected() -> None:
    base = np.zeros(10, dtype=np.float32)
    with pytest.raises(InvalidLayerError):
        mix_ambient_layers(base, [_layer(np.zeros(9))])


def test_layer_order_does_not_matter() -> None:
    base = generate_noise("brown", 0.25, 8000, seed=1)
    a = _layer(generate_noise("white", 0.25, 8000, seed=2), "a")
    b = _layer(generate_noise("pink", 0.25, 8000, seed=3), "b")
    np.testing.assert_allclose(
        mix_ambient_layers(base, [a, b]), mix_ambient_layers(base, [b, a]), atol=1e-7
    )


def test_matches_per_addition_float32_rounding_within_tolerance() -> None:
    base = generate_noise("pink", 0.5, 8000, seed=4)
    layers = [
        _layer(generate_noise("white", 0.5, 8000, seed=5), "a"),
        _layer(generate_noise("brown", 0.5, 8000, seed=6), "b"),
    ]
    stepwise = (base * np.float32(0.7)).astype(np.float32)
    for layer in layers:
        stepwise = (stepwise + layer.samples * np.float32(0.15)).astype(np.float32)
    np.testing.assert_allclose(
        mix_ambient_layers(base, layers), soft_limit(stepwise), rtol=0, atol=1e-6
    )
