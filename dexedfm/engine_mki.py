"""Operator engine modelled on the log-sine / exponential lookup of the Mark I chip.

Each operator sample is produced from a log-sine table and an exponential
table, with the envelope added in the log domain. All arithmetic follows
32-bit signed integer semantics so that phases and accumulators wrap the
same way they do in fixed-point hardware.
"""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from itertools import repeat
from typing import Iterable, MutableSequence, Sequence

NEGATIVE_BIT = 0x8000
ENV_BITDEPTH = 14
ENV_MAX = 1 << ENV_BITDEPTH

SINLOG_BITDEPTH = 10
SINLOG_TABLESIZE = 1 << SINLOG_BITDEPTH
SINEXP_BITDEPTH = 10
SINEXP_TABLESIZE = 1 << SINEXP_BITDEPTH

_SINLOG_FILTER = SINLOG_TABLESIZE - 1
_SINEXP_FILTER = 0x3FF
_LEVEL_SHIFT = 28 - ENV_BITDEPTH


def _i32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _f32(value: float) -> float:
    """Round a float to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _round_half_up(value: float) -> int:
    # Table entries are never negative, so half-up equals half-away-from-zero.
    return int(math.floor(value + 0.5))


def _build_sin_log_table() -> tuple[int, ...]:
    resolution = float(SINLOG_TABLESIZE)
    entries = []
    for i in range(SINLOG_TABLESIZE):
        x1 = _f32(math.sin(((0.5 + i) / resolution) * math.pi / 2.0))
        entries.append(_round_half_up(_f32(-1024 * _f32(math.log2(x1)))))
    return tuple(entries)


def _build_sin_exp_table() -> tuple[int, ...]:
    resolution = float(SINEXP_TABLESIZE)
    return tuple(
        _round_half_up(_f32((2.0 ** (i / resolution) - 1) * 4096))
        for i in range(SINEXP_TABLESIZE)
    )


SIN_LOG_TABLE: tuple[int, ...] = _build_sin_log_table()
SIN_EXP_TABLE: tuple[int, ...] = _build_sin_exp_table()


def sin_log(phi: int) -> int:
    """Return the attenuation of a sine at 12-bit phase ``phi``, with the sign in bit 15."""
    phi &= 0xFFFF
    index = phi & _SINLOG_FILTER
    quadrant = phi & (SINLOG_TABLESIZE * 3)
    if quadrant == 0:
        return SIN_LOG_TABLE[index]
    if quadrant == SINLOG_TABLESIZE:
        return SIN_LOG_TABLE[index ^ _SINLOG_FILTER]
    if quadrant == SINLOG_TABLESIZE * 2:
        return SIN_LOG_TABLE[index] | NEGATIVE_BIT
    return SIN_LOG_TABLE[index ^ _SINLOG_FILTER] | NEGATIVE_BIT


def mki_sin(phase: int, env: int) -> int:
    """Return one operator sample for a 32-bit phase and a log-domain envelope."""
    exp_val = (sin_log(_i32(phase) >> (22 - SINLOG_BITDEPTH)) + (env & 0xFFFF)) & 0xFFFF
    negative = bool(exp_val & NEGATIVE_BIT)
    exp_val &= ~NEGATIVE_BIT & 0xFFFF
    result = 4096 + SIN_EXP_TABLE[(exp_val & _SINEXP_FILTER) ^ _SINEXP_FILTER]
    result >>= exp_val >> 10
    if negative:
        return _i32((-result - 1) << 13)
    return result << 13


@dataclass
class OpParams:
    """Per-operator state shared between the voice and the engine."""

    level_in: int = 0
    gain_out: int = 0
    freq: int = 0
    phase: int = 0


class EngineMkI:
    """Renders blocks of operator output with Mark I style log-sine synthesis."""

    def __init__(self, block_size: int) -> None:
        if block_size < 1 or block_size & (block_size - 1):
            raise ValueError(f"block size must be a positive power of two, got {block_size}")
        self.block_size = block_size
        self.lg_n = block_size.bit_length() - 1

    def _gain_step(self, gain1: int, gain2: int) -> int:
        return _i32(gain2 - gain1 + (self.block_size >> 1)) >> self.lg_n

    def _require(self, buffer: Sequence[int], name: str) -> None:
        if len(buffer) < self.block_size:
            raise ValueError(
                f"{name} holds {len(buffer)} samples, block size is {self.block_size}"
            )

    def _render(
        self,
        output: MutableSequence[int],
        modulation: Iterable[int],
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        add: bool,
    ) -> None:
        self._require(output, "output")
        n = self.block_size
        dgain = self._gain_step(gain1, gain2)
        gain = gain1
        phase = phase0
        rendered = []
        for previous, mod in zip(output[:n], modulation):
            gain = _i32(gain + dgain)
            y = mki_sin(_i32(phase + mod), gain)
            rendered.append(_i32(y + previous) if add else y)
            phase = _i32(phase + freq)
        output[:n] = rendered

    def compute(
        self,
        output: MutableSequence[int],
        inputs: Sequence[int],
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        add: bool,
    ) -> None:
        """Render a phase-modulated operator into ``output``, optionally adding to it."""
        self._require(inputs, "inputs")
        self._render(output, inputs[: self.block_size], phase0, freq, gain1, gain2, add)

    def compute_pure(
        self,
        output: MutableSequence[int],
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        add: bool,
    ) -> None:
        """Render an unmodulated operator into ``output``, optionally adding to it."""
        self._render(output, repeat(0), phase0, freq, gain1, gain2, add)

    def compute_fb(
        self,
        output: MutableSequence[int],
        phase0: int,
        freq: int,
        gain1: int,
        gain2: int,
        fb_buf: MutableSequence[int],
        fb_shift: int,
        add: bool,
    ) -> None:
        """Render a self-modulating operator; ``fb_buf`` keeps its last two samples."""
        self._require(output, "output")
        n = self.block_size
        dgain = self._gain_step(gain1, gain2)
        gain = gain1
        phase = phase0
        y0, y = fb_buf[0], fb_buf[1]
        rendered = []
        for previous in output[:n]:
            gain = _i32(gain + dgain)
            scaled_fb = _i32(y0 + y) >> (fb_shift + 1)
            y0 = y
            y = mki_sin(_i32(phase + scaled_fb), gain)
            rendered.append(_i32(y + previous) if add else y)
            phase = _i32(phase + freq)
        output[:n] = rendered
        fb_buf[0], fb_buf[1] = y0, y

    def _compute_fb_chain(
        self,
        output: MutableSequence[int],
        params: Sequence[OpParams],
        count: int,
        gain01: int,
        gain02: int,
        fb_buf: MutableSequence[int],
        fb_shift: int,
    ) -> None:
        """Render a stack of ``count`` operators whose last output feeds the first."""
        self._require(output, "output")
        if len(params) < count:
            raise ValueError(f"feedback chain needs {count} operators, got {len(params)}")
        chain = params[:count]
        phases = [op.phase for op in chain]
        gains = [gain01]
        dgains = [self._gain_step(gain01, gain02)]
        for op in chain[1:]:
            op.gain_out = _i32(ENV_MAX - (op.level_in >> _LEVEL_SHIFT))
            start = ENV_MAX - 1 if op.gain_out == 0 else op.gain_out
            gains.append(start)
            dgains.append(_i32(op.gain_out - start))

        y0, y = fb_buf[0], fb_buf[1]
        rendered = []
        for _ in range(self.block_size):
            scaled_fb = _i32(y0 + y) >> (fb_shift + 1)
            y0 = y
            modulation = scaled_fb
            for k, op in enumerate(chain):
                gains[k] = _i32(gains[k] + dgains[k])
                y = mki_sin(_i32(phases[k] + modulation), gains[k])
                phases[k] = _i32(phases[k] + op.freq)
                modulation = y
            rendered.append(y)
        output[: self.block_size] = rendered
        fb_buf[0], fb_buf[1] = y0, y

    def compute_fb2(
        self,
        output: MutableSequence[int],
        params: Sequence[OpParams],
        gain01: int,
        gain02: int,
        fb_buf: MutableSequence[int],
        fb_shift: int,
    ) -> None:
        """Render a two-operator feedback loop (used by algorithm 6)."""
        self._compute_fb_chain(output, params, 2, gain01, gain02, fb_buf, fb_shift)

    def compute_fb3(
        self,
        output: MutableSequence[int],
        params: Sequence[OpParams],
        gain01: int,
        gain02: int,
        fb_buf: MutableSequence[int],
        fb_shift: int,
    ) -> None:
        """Render a three-operator feedback loop (used by algorithm 4)."""
        self._compute_fb_chain(output, params, 3, gain01, gain02, fb_buf, fb_shift)