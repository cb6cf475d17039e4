"""
Ambient texture layers: rain, bird calls and running water.

Each synthesizer walks the base noise sample by sample, lets its absolute amplitude raise the
per-sample event probability, and stamps short parametric events into a zeroed buffer of the
same length. Every layer owns its own ``SeededRandom``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, NamedTuple, TypeAlias

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, field_validator
from scipy.signal import lfilter  # type: ignore[import]

from .config import AMBIENT_KINDS, AmbientKind, LayerOptions
from .errors import InvalidLayerError
from .noise import FloatArray, white_draws
from .rng import SeededRandom

_LOGGER = logging.getLogger("brickwave.ambient")


class LayerResult(BaseModel):
    """A named, read-only layer buffer ready for mixing."""

    name: str
    samples: FloatArray
    description: str

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

    def __len__(self) -> int:
        return int(self.samples.size)


LayerFn: TypeAlias = Callable[[FloatArray, int, LayerOptions], LayerResult]


def _levels(base: FloatArray) -> list[float]:
    return np.abs(np.asarray(base, dtype=np.float32)).astype(np.float64).tolist()


# =============================================================================
# RAIN
# =============================================================================

RAIN_DROPLET_SECONDS = 0.01
RAIN_DECAY = 150.0


def generate_rain_layer(base: FloatArray, sample_rate: int, options: LayerOptions) -> LayerResult:
    """Droplet impacts whose density follows the base noise."""
    rng = SeededRandom(options.seed)
    levels = _levels(base)
    length = len(levels)
    buffer = np.zeros(length, dtype=np.float64)

    droplet_rate = 20.0 + options.intensity * 80.0
    droplet_samples = math.floor(RAIN_DROPLET_SECONDS * sample_rate)
    droplet_t = np.arange(droplet_samples, dtype=np.float64) / sample_rate
    droplet_env = np.exp(-droplet_t * RAIN_DECAY) * (1.0 - droplet_t / RAIN_DROPLET_SECONDS)

    events = 0
    for i, level in enumerate(levels):
        chance = (droplet_rate / sample_rate) * (1.0 + level * options.variation)
        if rng.random() >= chance:
            continue
        size = 0.1 + rng.random() * 0.4
        frequency = 2000.0 + rng.random() * 3000.0
        count = min(droplet_samples, length - i)
        t = droplet_t[:count]
        oscillation = np.sin(2.0 * np.pi * frequency * t)
        noise = white_draws(rng, count) * 0.2
        buffer[i : i + count] += (
            (oscillation * 0.8 + noise * 0.2) * droplet_env[:count] * size * options.intensity
        )
        events += 1

    _LOGGER.debug("Rain layer: %d droplets over %d samples", events, length)
    return LayerResult(
        name="pacific_rain",
        samples=buffer,
        description=f"Pacific Northwest rain (intensity: {options.intensity:.2f})",
    )


# =============================================================================
# BIRDS
# =============================================================================


@dataclass(frozen=True, slots=True)
class BirdCall:
    """Parametric call archetype: base frequency plus random spread, wobble depth, length."""

    name: str
    threshold: float
    base_freq: float
    spread: float
    modulation: float
    seconds: float


BIRD_CALLS: tuple[BirdCall, ...] = (
    BirdCall("warble", 0.3, 2000.0, 1000.0, 200.0, 0.3),
    BirdCall("caw", 0.6, 400.0, 300.0, 50.0, 0.15),
    BirdCall("trill", 1.0, 1500.0, 2000.0, 400.0, 0.1),
)
BIRD_WOBBLE_HZ = 3.0
BIRD_AMPLITUDE = 0.3


def _pick_call(draw: float) -> BirdCall:
    for call in BIRD_CALLS:
        if draw < call.threshold:
            return call
    return BIRD_CALLS[-1]


class BirdEvent(NamedTuple):
    start: int
    call: BirdCall
    frequency: float
    samples: int


def schedule_bird_calls(
    base: FloatArray, sample_rate: int, options: LayerOptions
) -> list[BirdEvent]:
    """Draw call onsets; the scan skips past each call so calls never overlap."""
    rng = SeededRandom(options.seed)
    levels = _levels(base)
    length = len(levels)

    call_rate = 0.5 + options.intensity * 2.0
    # Consumed before scanning so seeded renders line up with earlier outputs.
    rng.random()

    events: list[BirdEvent] = []
    i = 0
    while i < length:
        chance = (call_rate / sample_rate) * (1.0 + levels[i] * options.variation * 2.0)
        if rng.random() < chance:
            call = _pick_call(rng.random())
            frequency = call.base_freq + rng.random() * call.spread
            call_samples = math.floor(call.seconds * sample_rate)
            events.append(BirdEvent(i, call, frequency, call_samples))
            i += call_samples
        i += 1
    return events


def generate_bird_layer(base: FloatArray, sample_rate: int, options: LayerOptions) -> LayerResult:
    """Sparse, non-overlapping bird calls that cluster where the base is loud."""
    length = int(np.asarray(base).size)
    buffer = np.zeros(length, dtype=np.float64)

    events = schedule_bird_calls(base, sample_rate, options)
    for event in events:
        count = min(event.samples, length - event.start)
        t = np.arange(count, dtype=np.float64) / sample_rate
        envelope = np.sin(np.pi * t / event.call.seconds)
        wobble = np.sin(2.0 * np.pi * BIRD_WOBBLE_HZ * t) * event.call.modulation
        signal = np.sin(2.0 * np.pi * (event.frequency + wobble) * t)
        buffer[event.start : event.start + count] += (
            signal * envelope * BIRD_AMPLITUDE * options.intensity
        )

    _LOGGER.debug("Bird layer: %d calls over %d samples", len(events), length)
    return LayerResult(
        name="pacific_birds",
        samples=buffer,
        description=f"Pacific Northwest birds (intensity: {options.intensity:.2f})",
    )


# =============================================================================
# WATER
# =============================================================================

WATER_BASE_FLOW = 0.3
WATER_SMOOTHING = 0.95
WATER_INNOVATION = 0.05
WATER_GAIN = 0.4
BUBBLE_DECAY = 10.0
BUBBLE_AMPLITUDE = 0.2


class Bubble(NamedTuple):
    start: int
    frequency: float
    samples: int


def draw_water_sources(
    length: int, sample_rate: int, options: LayerOptions
) -> tuple[FloatArray, list[Bubble]]:
    """Raw flow noise and bubble onsets, drawn interleaved from one generator."""
    rng = SeededRandom(options.seed)
    bubble_chance = (5.0 + options.intensity * 15.0) / sample_rate
    raw = np.empty(length, dtype=np.float64)
    bubbles: list[Bubble] = []
    for i in range(length):
        raw[i] = rng.random() * 2.0 - 1.0
        if rng.random() < bubble_chance:
            frequency = 800.0 + rng.random() * 1200.0
            seconds = 0.05 + rng.random() * 0.1
            bubbles.append(Bubble(i, frequency, math.floor(seconds * sample_rate)))
    return raw, bubbles


def generate_water_layer(base: FloatArray, sample_rate: int, options: LayerOptions) -> LayerResult:
    """Lowpassed flow noise with bubble bursts added on top."""
    levels = np.abs(np.asarray(base, dtype=np.float32)).astype(np.float64)
    length = int(levels.size)
    raw, bubbles = draw_water_sources(length, sample_rate, options)

    if length:
        # state = state * 0.95 + raw * 0.05
        filtered = np.asarray(
            lfilter([WATER_INNOVATION], [1.0, -WATER_SMOOTHING], raw), dtype=np.float64
        )
    else:
        filtered = raw
    flow = WATER_BASE_FLOW + levels * options.variation * 0.5
    buffer = filtered * flow * options.intensity * WATER_GAIN

    for bubble in bubbles:
        count = min(bubble.samples, length - bubble.start)
        t = np.arange(count, dtype=np.float64) / sample_rate
        burst = np.sin(2.0 * np.pi * bubble.frequency * t) * np.exp(-t * BUBBLE_DECAY)
        buffer[bubble.start : bubble.start + count] += burst * BUBBLE_AMPLITUDE * options.intensity

    _LOGGER.debug("Water layer: %d bubbles over %d samples", len(bubbles), length)
    return LayerResult(
        name="running_water",
        samples=buffer,
        description=f"Running water (intensity: {options.intensity:.2f})",
    )


AMBIENT_SYNTHESIZERS: Mapping[AmbientKind, LayerFn] = MappingProxyType(
    {
        "rain": generate_rain_layer,
        "birds": generate_bird_layer,
        "water": generate_water_layer,
    }
)


def generate_ambient_layer(
    kind: AmbientKind,
    base: FloatArray,
    sample_rate: int,
    options: LayerOptions | None = None,
) -> LayerResult:
    match kind:
        case "rain" | "birds" | "water":
            layer_fn = AMBIENT_SYNTHESIZERS[kind]
        case _:
            raise InvalidLayerError(
                f"Unknown ambient layer: {kind!r}. Valid: {list(AMBIENT_KINDS)}"
            )
    return layer_fn(base, sample_rate, options or LayerOptions())


# =============================================================================
# EXTERNAL LAYERS
# =============================================================================


def external_layer(
    name: str,
    samples: NDArray[np.floating[Any]],
    *,
    sample_rate: int,
    base_sample_rate: int,
    description: str | None = None,
    length: int | None = None,
) -> LayerResult:
    """Package an externally produced waveform so it mixes like a synthesized layer."""
    if sample_rate != base_sample_rate:
        raise InvalidLayerError(
            f"Layer {name!r} is {sample_rate} Hz but the base signal is {base_sample_rate} Hz"
        )
    mono = np.asarray(samples, dtype=np.float32).reshape(-1)
    if length is not None:
        if mono.size > length:
            mono = mono[:length]
        elif mono.size < length:
            mono = np.pad(mono, (0, length - mono.size))
    return LayerResult(
        name=name,
        samples=mono,
        description=description or f"External layer {name}",
    )


def load_external_layer(
    path: str | Path,
    length: int,
    sample_rate: int,
    *,
    name: str | None = None,
) -> LayerResult:
    """Decode an audio file into a layer of ``length`` samples at ``sample_rate``."""
    source = Path(path)
    data, file_rate = sf.read(str(source), dtype="float32", always_2d=True)
    mono = np.asarray(data, dtype=np.float32).mean(axis=1)
    _LOGGER.debug(
        "Loaded external layer %s: %d frames, %d channels at %d Hz",
        source,
        data.shape[0],
        data.shape[1],
        file_rate,
    )
    return external_layer(
        name or source.stem,
        mono,
        sample_rate=int(file_rate),
        base_sample_rate=sample_rate,
        description=f"External layer from {source.name}",
        length=length,
    )
