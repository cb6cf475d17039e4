from __future__ import annotations

import secrets

_MULTIPLIER = 1103515245
_INCREMENT = 12345
_MASK = 0x7FFFFFFF


class SeededRandom:
    """Linear congruential generator shared by every synthesizer.

    state = (state * 1103515245 + 12345) mod 2**31, output = state / (2**31 - 1).
    Not suitable for anything but reproducible audio.
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = secrets.randbelow(_MASK)
        self._state = int(seed) & _MASK

    @property
    def state(self) -> int:
        return self._state

    def random(self) -> float:
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MASK
        return self._state / _MASK

    def __repr__(self) -> str:
        return f"SeededRandom(state={self._state})"
