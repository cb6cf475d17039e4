from __future__ import annotations

from .ambient import (
    AMBIENT_SYNTHESIZERS,
    LayerResult,
    external_layer,
    generate_ambient_layer,
    generate_bird_layer,
    generate_rain_layer,
    generate_water_layer,
    load_external_layer,
)
from .audio import float_to_pcm16, read_wav, wav_header, write_wav
from .config import (
    AMBIENT_KINDS,
    DEFAULT_SAMPLE_RATE,
    NOISE_TYPES,
    AmbientKind,
    LayerOptions,
    NoiseType,
    RenderOptions,
)
from .envelope import apply_envelope, convert_to_stereo
from .errors import BrickwaveError, InvalidConfigError, InvalidLayerError, InvalidNoiseTypeError
from .logging_utils import configure_logging as _configure_logging
from .mixer import mix_ambient_layers, soft_limit
from .noise import generate_noise
from .render import Rendered, render, render_to_file
from .rng import SeededRandom

__all__ = [
    "AMBIENT_KINDS",
    "AMBIENT_SYNTHESIZERS",
    "DEFAULT_SAMPLE_RATE",
    "NOISE_TYPES",
    "AmbientKind",
    "BrickwaveError",
    "InvalidConfigError",
    "InvalidLayerError",
    "InvalidNoiseTypeError",
    "LayerOptions",
    "LayerResult",
    "NoiseType",
    "RenderOptions",
    "Rendered",
    "SeededRandom",
    "apply_envelope",
    "convert_to_stereo",
    "external_layer",
    "float_to_pcm16",
    "generate_ambient_layer",
    "generate_bird_layer",
    "generate_noise",
    "generate_rain_layer",
    "generate_water_layer",
    "load_external_layer",
    "mix_ambient_layers",
    "read_wav",
    "render",
    "render_to_file",
    "soft_limit",
    "wav_header",
    "write_wav",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
