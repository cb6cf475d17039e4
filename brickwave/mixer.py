from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from .ambient import LayerResult
from .config import DEFAULT_BASE_LEVEL, DEFAULT_LAYER_LEVEL
from .errors import InvalidLayerError
from .noise import FloatArray

_LOGGER = logging.getLogger("brickwave.mixer")

LIMIT_THRESHOLD = 0.95


def soft_limit(samples: FloatArray, threshold: float = LIMIT_THRESHOLD) -> FloatArray:
    """Pass samples louder than ``threshold`` through sign(x) * tanh(|x|)."""
    limited = np.array(samples, dtype=np.float64)
    hot = np.abs(limited) > threshold
    limited[hot] = np.sign(limited[hot]) * np.tanh(np.abs(limited[hot]))
    return limited.astype(np.float32)


def mix_ambient_layers(
    base: FloatArray,
    layers: Sequence[LayerResult],
    base_level: float = DEFAULT_BASE_LEVEL,
    layer_level: float = DEFAULT_LAYER_LEVEL,
) -> FloatArray:
    """Weighted sum of the base and an equal split of ``layer_level`` across layers.

    The sum is accumulated in float64 and rounded to float32 once, so results agree with
    renders that rounded after every addition only to float32 tolerance, not bit for bit.
    """
    base_array = np.asarray(base, dtype=np.float32)
    mixed = base_array.astype(np.float64) * base_level

    if layers:
        weight = layer_level / len(layers)
        for layer in layers:
            if layer.samples.size != base_array.size:
                raise InvalidLayerError(
                    f"Layer {layer.name!r} has {layer.samples.size} samples, "
                    f"base has {base_array.size}"
                )
            mixed += layer.samples.astype(np.float64) * weight

    rounded = mixed.astype(np.float32)
    limited = int(np.count_nonzero(np.abs(rounded) > LIMIT_THRESHOLD))
    _LOGGER.debug(
        "Mixed %d layers over %d samples (%d soft-limited)",
        len(layers),
        base_array.size,
        limited,
    )
    return soft_limit(rounded)
