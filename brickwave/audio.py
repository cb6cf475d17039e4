from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import NamedTuple

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import NDArray

from .config import DEFAULT_SAMPLE_RATE
from .noise import FloatArray

_LOGGER = logging.getLogger("brickwave.audio")

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT_TAG = 1
# RIFF id, RIFF size, WAVE, fmt id, fmt size, format tag, channels, sample rate,
# byte rate, block align, bits per sample, data id, data size
_HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")


class DecodedWav(NamedTuple):
    samples: NDArray[np.int16]
    sample_rate: int
    channels: int


def float_to_pcm16(buffer: FloatArray) -> bytes:
    """Clamp to [-1, 1] and truncate to little-endian int16.

    Negative samples scale by 32768 and non-negative ones by 32767, so both -1.0 and 1.0
    land exactly on the int16 limits.
    """
    samples = np.clip(np.asarray(buffer, dtype=np.float32).reshape(-1), -1.0, 1.0)
    scaled = samples.astype(np.float64)
    scaled = np.where(scaled < 0, scaled * 32768.0, scaled * 32767.0)
    pcm = np.trunc(scaled).astype("<i2")
    return pcm.tobytes()


def wav_header(pcm_length: int, sample_rate: int, channels: int = 1) -> bytes:
    """Canonical 44-byte RIFF/WAVE header for 16-bit linear PCM."""
    block_align = channels * BYTES_PER_SAMPLE
    byte_rate = sample_rate * block_align
    return _HEADER_STRUCT.pack(
        b"RIFF",
        HEADER_SIZE + pcm_length - 8,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        BITS_PER_SAMPLE,
        b"data",
        pcm_length,
    )


def write_wav(
    path: str | Path,
    data: FloatArray,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = 1,
) -> Path:
    """Encode ``data`` (already interleaved) and write header + payload in one call.

    OS errors propagate unchanged; the file is not written atomically.
    """
    target = Path(path)
    pcm = float_to_pcm16(data)
    target.write_bytes(wav_header(len(pcm), sample_rate, channels) + pcm)
    _LOGGER.debug(
        "Wrote %d bytes to %s (%d Hz, %d ch)", HEADER_SIZE + len(pcm), target, sample_rate, channels
    )
    return target


def read_wav(path: str | Path) -> DecodedWav:
    """Decode a PCM container into interleaved int16 samples."""
    data, sample_rate = sf.read(str(path), dtype="int16", always_2d=True)
    frames = np.asarray(data, dtype=np.int16)
    return DecodedWav(
        samples=frames.reshape(-1),
        sample_rate=int(sample_rate),
        channels=int(frames.shape[1]),
    )
