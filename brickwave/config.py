from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidConfigError

_LOGGER = logging.getLogger("brickwave.config")

NoiseType = Literal["white", "pink", "brown"]
AmbientKind = Literal["rain", "birds", "water"]

NOISE_TYPES: tuple[NoiseType, ...] = get_args(NoiseType)
AMBIENT_KINDS: tuple[AmbientKind, ...] = get_args(AmbientKind)

DEFAULT_SAMPLE_RATE = 44_100
DEFAULT_BASE_LEVEL = 0.7
DEFAULT_LAYER_LEVEL = 0.3

# Offsets keep each ambient layer on its own PRNG stream for a given render seed.
LAYER_SEED_OFFSETS: Mapping[AmbientKind, int] = MappingProxyType(
    {
        "rain": 1,
        "birds": 2,
        "water": 3,
    }
)


class LayerOptions(BaseModel):
    """Shape of a single ambient layer."""

    intensity: float = Field(default=0.5, ge=0.0, le=1.0)
    variation: float = Field(default=0.5, ge=0.0, le=1.0)
    seed: int | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class RenderOptions(BaseModel):
    """Everything needed to render one waveform."""

    noise: NoiseType
    duration: float = Field(gt=0.0)
    sample_rate: int = Field(default=DEFAULT_SAMPLE_RATE, gt=0)
    seed: int | None = None
    stereo: bool = False
    fade_in: float = Field(default=0.0, ge=0.0)
    fade_out: float = Field(default=0.0, ge=0.0)

    ambient: tuple[AmbientKind, ...] = ()
    ambient_intensity: float = Field(default=0.5, ge=0.0, le=1.0)
    ambient_variation: float = Field(default=0.5, ge=0.0, le=1.0)
    base_level: float = Field(default=DEFAULT_BASE_LEVEL, ge=0.0)
    layer_level: float = Field(default=DEFAULT_LAYER_LEVEL, ge=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("ambient", mode="before")
    @classmethod
    def _split_ambient(cls, value: object) -> object:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("ambient")
    @classmethod
    def _unique_ambient(cls, value: tuple[AmbientKind, ...]) -> tuple[AmbientKind, ...]:
        if len(set(value)) != len(value):
            raise ValueError(f"ambient layers must be unique, got {list(value)}")
        return value

    @property
    def channels(self) -> int:
        return 2 if self.stereo else 1

    @property
    def sample_count(self) -> int:
        return math.floor(self.duration * self.sample_rate)

    @property
    def has_envelope(self) -> bool:
        return self.fade_in > 0 or self.fade_out > 0

    def layer_options(self, kind: AmbientKind) -> LayerOptions:
        seed = None if self.seed is None else self.seed + LAYER_SEED_OFFSETS[kind]
        return LayerOptions(
            intensity=self.ambient_intensity,
            variation=self.ambient_variation,
            seed=seed,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenderOptions":
        """Validate untrusted input (e.g. parsed JSON) into render options."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            _LOGGER.debug("Rejected render options: %s", exc)
            raise InvalidConfigError(str(exc)) from exc
