"""Pluggable uniform random source with one independent stream per pixel.

Every pixel of the render target owns a 32-bit generator state, so parallel
kernel iterations never share a generator and a seeded render is reproducible
independent of how Taichi schedules its threads.

Two sources are available:
    - SeededRandom: permuted-congruential streams derived from (seed, pixel).
    - FixedSequenceRandom: every stream replays a fixed list of values. Used
      to make single-ray traces hand-computable in tests.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.core.sampler import SeededRandom, configure_random, next_random
    >>> configure_random(SeededRandom(seed=7))
    >>> @ti.kernel
    ... def draw() -> ti.f64:
    ...     return next_random(0)
"""

import logging
from dataclasses import dataclass

import taichi as ti

from pathtrace.core.settings import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH

logger = logging.getLogger(__name__)

# One stream per pixel of the largest supported render target
MAX_STREAMS = MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT

# Maximum length of a fixed replay sequence
MAX_FIXED_VALUES = 256

MODE_SEEDED = 0
MODE_FIXED = 1

# 2^-24: the top 24 bits of a draw map onto [0, 1) exactly
_INV_2_24 = 1.0 / 16777216.0


@dataclass(frozen=True)
class SeededRandom:
    """Reproducible pseudo-random streams.

    Attributes:
        seed: Any integer; only the low 32 bits are used.
    """

    seed: int = 0


@dataclass(frozen=True)
class FixedSequenceRandom:
    """Deterministic stand-in that cycles through ``values`` on every stream.

    Attributes:
        values: Between 1 and MAX_FIXED_VALUES values, each in [0, 1).
    """

    values: tuple[float, ...] = (0.0,)

    def __post_init__(self) -> None:
        if not 1 <= len(self.values) <= MAX_FIXED_VALUES:
            raise ValueError(
                f"A fixed sequence needs 1 to {MAX_FIXED_VALUES} values, got {len(self.values)}"
            )
        for value in self.values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Fixed random value {value} is outside [0, 1)")


RandomSource = SeededRandom | FixedSequenceRandom


# =============================================================================
# Stream State (Taichi fields)
# =============================================================================

_mode = ti.field(dtype=ti.i32, shape=())
# Generator state in seeded mode, replay cursor in fixed mode
_stream_state = ti.field(dtype=ti.u32, shape=MAX_STREAMS)
_fixed_values = ti.field(dtype=ti.f64, shape=MAX_FIXED_VALUES)
_fixed_count = ti.field(dtype=ti.i32, shape=())


@ti.func
def _advance(state: ti.u32) -> ti.u32:
    """One step of the 32-bit linear congruential state transition."""
    return state * ti.cast(747796405, ti.u32) + ti.cast(1013904223, ti.u32)


@ti.func
def _permute(state: ti.u32) -> ti.u32:
    """PCG RXS-M-XS output permutation."""
    shift = ti.bit_shr(state, ti.cast(28, ti.u32)) + ti.cast(4, ti.u32)
    word = (ti.bit_shr(state, shift) ^ state) * ti.cast(277803737, ti.u32)
    return ti.bit_shr(word, ti.cast(22, ti.u32)) ^ word


@ti.kernel
def _seed_streams(seed: ti.u32):
    seed_hash = _permute(_advance(seed))
    for s in range(MAX_STREAMS):
        _stream_state[s] = _permute(_advance(ti.cast(s, ti.u32) ^ seed_hash))


@ti.func
def stream_index(pixel_i: ti.i32, pixel_j: ti.i32) -> ti.i32:
    """Map a pixel to the index of its private random stream."""
    return pixel_j * MAX_IMAGE_WIDTH + pixel_i


@ti.func
def next_random(stream: ti.i32) -> ti.f64:
    """Draw the next uniform value in [0, 1) from ``stream``.

    Args:
        stream: Stream index, usually ``stream_index(i, j)`` of the pixel
            being rendered. A stream must only be advanced by one kernel
            iteration at a time.

    Returns:
        A double in [0, 1).
    """
    value = ti.cast(0.0, ti.f64)
    if _mode[None] == MODE_FIXED:
        cursor = ti.cast(_stream_state[stream], ti.i32)
        value = _fixed_values[cursor]
        _stream_state[stream] = ti.cast((cursor + 1) % _fixed_count[None], ti.u32)
    else:
        state = _advance(_stream_state[stream])
        _stream_state[stream] = state
        value = ti.cast(ti.bit_shr(_permute(state), ti.cast(8, ti.u32)), ti.f64) * _INV_2_24
    return value


def configure_random(source: RandomSource) -> None:
    """Install ``source`` and reset every stream to its starting point.

    Calling this again with the same source makes a subsequent render replay
    exactly the same random values.

    Args:
        source: A SeededRandom or FixedSequenceRandom.

    Raises:
        TypeError: If ``source`` is not a supported random source.
    """
    if isinstance(source, SeededRandom):
        _mode[None] = MODE_SEEDED
        _seed_streams(source.seed & 0xFFFFFFFF)
        logger.debug("Random streams seeded with %d", source.seed)
    elif isinstance(source, FixedSequenceRandom):
        _mode[None] = MODE_FIXED
        for k, value in enumerate(source.values):
            _fixed_values[k] = value
        _fixed_count[None] = len(source.values)
        _stream_state.fill(0)
        logger.debug("Random streams replay a fixed sequence of %d values", len(source.values))
    else:
        raise TypeError(f"Unsupported random source: {source!r}")
