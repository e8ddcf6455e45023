"""Operator engine modelled on the OPL-style log-sine / exponential lookup.

Samples come from a 256-entry quarter-wave log-sine table and a 256-entry
exponential table, with the envelope added in the log domain. Phases and
accumulators follow 32-bit signed integer semantics.
"""

from __future__ import annotations

from itertools import repeat
from typing import Iterable, MutableSequence, Sequence

SIGN_BIT = 0x8000

# Quarter-wave attenuation table, 32 entries per row.
SIN_LOG_TABLE: tuple[int, ...] = (
    2137, 1731, 1543, 1419, 1326, 1252, 1190, 1137, 1091, 1050, 1013, 979, 949, 920, 894, 869, 846, 825, 804, 785, 767, 749, 732, 717, 701, 687, 672, 659, 646, 633, 621, 609,  # noqa: E501
    598, 587, 576, 566, 556, 546, 536, 527, 518, 509, 501, 492, 484, 476, 468, 461, 453, 446, 439, 432, 425, 418, 411, 405, 399, 392, 386, 380, 375, 369, 363, 358,  # noqa: E501
    352, 347, 341, 336, 331, 326, 321, 316, 311, 307, 302, 297, 293, 289, 284, 280, 276, 271, 267, 263, 259, 255, 251, 248, 244, 240, 236, 233, 229, 226, 222, 219,  # noqa: E501
    215, 212, 209, 205, 202, 199, 196, 193, 190, 187, 184, 181, 178, 175, 172, 169, 167, 164, 161, 159, 156, 153, 151, 148, 146, 143, 141, 138, 136, 134, 131, 129,  # noqa: E501
    127, 125, 122, 120, 118, 116, 114, 112, 110, 108, 106, 104, 102, 100, 98, 96, 94, 92, 91, 89, 87, 85, 83, 82, 80, 78, 77, 75, 74, 72, 70, 69,  # noqa: E501
    67, 66, 64, 63, 62, 60, 59, 57, 56, 55, 53, 52, 51, 49, 48, 47, 46, 45, 43, 42, 41, 40, 39, 38, 37, 36, 35, 34, 33, 32, 31, 30,  # noqa: E501
    29, 28, 27, 26, 25, 24, 23, 23, 22, 21, 20, 20, 19, 18, 17, 17, 16, 15, 15, 14, 13, 13, 12, 12, 11, 10, 10, 9, 9, 8, 8, 7,  # noqa: E501
    7, 7, 6, 6, 5, 5, 5, 4, 4, 4, 3, 3, 3, 2, 2, 2, 2, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0,  # noqa: E501
)

# Fractional part of 2**x scaled to 1024, 32 entries per row.
SIN_EXP_TABLE: tuple[int, ...] = (
    0, 3, 6, 8, 11, 14, 17, 20, 22, 25, 28, 31, 34, 37, 40, 42, 45, 48, 51, 54, 57, 60, 63, 66, 69, 72, 75, 78, 81, 84, 87, 90,  # noqa: E501
    93, 96, 99, 102, 105, 108, 111, 114, 117, 120, 123, 126, 130, 133, 136, 139, 142, 145, 148, 152, 155, 158, 161, 164, 168, 171, 174, 177, 181, 184, 187, 190,  # noqa: E501
    194, 197, 200, 204, 207, 210, 214, 217, 220, 224, 227, 231, 234, 237, 241, 244, 248, 251, 255, 258, 262, 265, 268, 272, 276, 279, 283, 286, 290, 293, 297, 300,  # noqa: E501
    304, 308, 311, 315, 318, 322, 326, 329, 333, 337, 340, 344, 348, 352, 355, 359, 363, 367, 370, 374, 378, 382, 385, 389, 393, 397, 401, 405, 409, 412, 416, 420,  # noqa: E501
    424, 428, 432, 436, 440, 444, 448, 452, 456, 460, 464, 468, 472, 476, 480, 484, 488, 492, 496, 501, 505, 509, 513, 517, 521, 526, 530, 534, 538, 542, 547, 551,  # noqa: E501
    555, 560, 564, 568, 572, 577, 581, 585, 590, 594, 599, 603, 607, 612, 616, 621, 625, 630, 634, 639, 643, 648, 652, 657, 661, 666, 670, 675, 680, 684, 689, 693,  # noqa: E501
    698, 703, 708, 712, 717, 722, 726, 731, 736, 741, 745, 750, 755, 760, 765, 770, 774, 779, 784, 789, 794, 799, 804, 809, 814, 819, 824, 829, 834, 839, 844, 849,  # noqa: E501
    854, 859, 864, 869, 874, 880, 885, 890, 895, 900, 906, 911, 916, 921, 927, 932, 937, 942, 948, 953, 959, 964, 969, 975, 980, 986, 991, 996, 1002, 1007, 1013, 1018,  # noqa: E501
)

_PHASE_SHIFT = 14


def _i32(value: int) -> int:
    """Wrap an integer to the signed 32-bit range."""
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def _i16(value: int) -> int:
    """Wrap an integer to the signed 16-bit range."""
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def sin_log(phi: int) -> int:
    """Return the attenuation of a sine at 10-bit phase ``phi``, with the sign in bit 15."""
    index = phi & 0xFF
    quadrant = (phi >> 8) & 3
    falling = quadrant in (1, 3)
    value = SIN_LOG_TABLE[index ^ 0xFF if falling else index]
    return value | SIGN_BIT if quadrant >= 2 else value


def opl_sin(phase: int, env: int) -> int:
    """Return one signed 16-bit sample for a wave phase and an envelope attenuation.

    Sixteen envelope units are about 3 dB and halve the output.
    """
    attenuation = (sin_log(phase & 0xFFFF) + ((env & 0xFFFF) << 3)) & 0xFFFF
    negative = bool(attenuation & SIGN_BIT)
    attenuation &= 0x7FFF
    magnitude = (0x0400 + SIN_EXP_TABLE[(attenuation & 0xFF) ^ 0xFF]) << 1
    magnitude >>= attenuation >> 8
    return _i16(-magnitude - 1 if negative else magnitude)


class EngineOpl:
    """Renders blocks of operator output with OPL-style log-sine synthesis."""

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
            sample = _i32(opl_sin(_i32(phase + mod) >> _PHASE_SHIFT, gain) << _PHASE_SHIFT)
            rendered.append(_i32(sample + previous) if add else sample)
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
        older, latest = fb_buf[0], fb_buf[1]
        rendered = []
        for previous in output[:n]:
            gain = _i32(gain + dgain)
            scaled_fb = _i32(older + latest) >> (fb_shift + 1)
            older = latest
            wave = opl_sin(_i32(phase + scaled_fb) >> _PHASE_SHIFT, gain)
            latest = _i32(wave << _PHASE_SHIFT)
            rendered.append(_i32(latest + previous) if add else latest)
            phase = _i32(phase + freq)
        output[:n] = rendered
        fb_buf[0], fb_buf[1] = older, latest