from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from numpy.typing import DTypeLike, NDArray
from pydantic import BaseModel, ConfigDict, field_validator

from .ambient import LayerResult, generate_ambient_layer
from .audio import write_wav
from .config import RenderOptions
from .envelope import apply_envelope, to_channels
from .mixer import mix_ambient_layers
from .noise import FloatArray, generate_noise

_LOGGER = logging.getLogger("brickwave.render")


class Rendered(BaseModel):
    """Final interleaved samples plus what went into them."""

    samples: FloatArray
    sample_rate: int
    channels: int = 1
    layers: tuple[LayerResult, ...] = ()

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    @field_validator("samples", mode="before")
    @classmethod
    def _freeze_samples(cls, value: object) -> FloatArray:
        samples = np.array(value, dtype=np.float32).reshape(-1)
        samples.setflags(write=False)
        return samples

    @property
    def frames(self) -> int:
        return int(self.samples.size) // self.channels

    @property
    def duration(self) -> float:
        return self.frames / self.sample_rate

    def to_numpy(self) -> FloatArray:
        return self.samples

    def __array__(self, dtype: DTypeLike | None = None) -> NDArray[np.generic]:
        return np.asarray(self.samples, dtype=dtype)

    def save(self, path: str | Path) -> Path:
        target = write_wav(
            path, self.samples, sample_rate=self.sample_rate, channels=self.channels
        )
        _LOGGER.info("Saved %.2fs of audio to %s", self.duration, target)
        return target


def render(
    options: RenderOptions,
    external_layers: Sequence[LayerResult] = (),
) -> Rendered:
    """Noise -> ambient layers -> mix -> envelope -> channels."""
    base = generate_noise(options.noise, options.duration, options.sample_rate, options.seed)
    samples = base

    layers: list[LayerResult] = []
    for kind in options.ambient:
        layer = generate_ambient_layer(
            kind, base, options.sample_rate, options.layer_options(kind)
        )
        _LOGGER.debug("Generated layer %s: %s", layer.name, layer.description)
        layers.append(layer)
    layers.extend(external_layers)

    if layers:
        samples = mix_ambient_layers(base, layers, options.base_level, options.layer_level)

    if options.has_envelope:
        _LOGGER.debug(
            "Applying envelope (fade in: %ss, fade out: %ss)", options.fade_in, options.fade_out
        )
        samples = apply_envelope(samples, options.fade_in, options.fade_out, options.sample_rate)

    interleaved = to_channels(samples, options.channels)
    return Rendered(
        samples=interleaved,
        sample_rate=options.sample_rate,
        channels=options.channels,
        layers=tuple(layers),
    )


def render_to_file(
    options: RenderOptions,
    path: str | Path,
    external_layers: Sequence[LayerResult] = (),
) -> Path:
    return render(options, external_layers).save(path)
