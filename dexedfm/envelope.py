"""Geometry and state behind the small display widgets of the editor.

Covers the operator envelope graph, the output level meter, the program
selector with its arrow and wheel handling, and the LCD message line. The
functions here compute what is drawn; painting is left to the toolkit.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

DEXED_ID = "DEVBUILD"
DEXED_VERSION = DEXED_ID

PROGRAM_COUNT = 32
VU_TOTAL_BLOCKS = 46
ENVELOPE_BASELINE = 32
ENVELOPE_RIGHT_EDGE = 96
KEYOFF_GAP = 10.0


def _f32(value: float) -> float:
    """Round a float to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _table(values: tuple[float, ...]) -> tuple[float, ...]:
    return tuple(_f32(v) for v in values)


# Seconds for a full rise at each rate, ten entries per row.
_RISE_DURATION = _table((
    38.00000, 34.96000, 31.92000, 28.88000, 25.84000, 22.80000, 20.64000, 18.48000, 16.32000, 14.16000,  # noqa: E501
    12.00000, 11.10000, 10.20000, 9.30000, 8.40000, 7.50000, 6.96000, 6.42000, 5.88000, 5.34000,
    4.80000, 4.38000, 3.96000, 3.54000, 3.12000, 2.70000, 2.52000, 2.34000, 2.16000, 1.98000,
    1.80000, 1.70000, 1.60000, 1.50000, 1.40000, 1.30000, 1.22962, 1.15925, 1.08887, 1.01850,
    0.94813, 0.87775, 0.80737, 0.73700, 0.69633, 0.65567, 0.61500, 0.57833, 0.54167, 0.50500,
    0.47300, 0.44100, 0.40900, 0.37967, 0.35033, 0.32100, 0.28083, 0.24067, 0.20050, 0.16033,
    0.12017, 0.08000, 0.07583, 0.07167, 0.06750, 0.06333, 0.05917, 0.05500, 0.04350, 0.03200,
    0.02933, 0.02667, 0.02400, 0.02200, 0.02000, 0.01800, 0.01667, 0.01533, 0.01400, 0.01300,
    0.01200, 0.01100, 0.01000, 0.00900, 0.00800, 0.00800, 0.00800, 0.00800, 0.00767, 0.00733,
    0.00700, 0.00633, 0.00567, 0.00500, 0.00433, 0.00367,
) + (0.00300,) * 32)

# Seconds for a full decay at each rate, ten entries per row.
_DECAY_DURATION = _table((
    318.00000, 283.75000, 249.50000, 215.25000, 181.00000, 167.80000, 154.60001, 141.39999, 128.20000, 115.00000,  # noqa: E501
    104.60000, 94.20000, 83.80000, 73.40000, 63.00000, 58.34000, 53.68000, 49.02000, 44.36000, 39.70000,  # noqa: E501
    35.76000, 31.82000, 27.88000, 23.94000, 20.00000, 18.24000, 16.48000, 14.72000, 12.96000, 11.20000,  # noqa: E501
    10.36000, 9.52000, 8.68000, 7.84000, 7.00000, 6.83250, 6.66500, 6.49750, 6.33000, 6.16250,
    5.99500, 5.82750, 5.66000, 5.10000, 4.54000, 3.98000, 3.64833, 3.31667, 2.98500, 2.65333,
    2.32167, 1.99000, 1.77333, 1.55667, 1.34000, 1.22333, 1.10667, 0.99000, 0.89667, 0.80333,
    0.71000, 0.65000, 0.59000, 0.53000, 0.47000, 0.41000, 0.32333, 0.23667, 0.15000, 0.12700,
    0.10400, 0.08100, 0.07667, 0.07233, 0.06800, 0.06100, 0.05400, 0.04700, 0.04367, 0.04033,
    0.03700, 0.03300, 0.02900, 0.02500, 0.02333, 0.02167, 0.02000, 0.01767, 0.01533, 0.01300,
    0.01133, 0.00967,
) + (0.00800,) * 36)

# Rising and falling segments share the same level-to-percent curve.
_LEVEL_PERCENT = _table((0.00001,) * 32 + (
    0.00501, 0.01001, 0.01500, 0.02000, 0.02800, 0.03600, 0.04400, 0.05200,
    0.06000, 0.06800, 0.07600, 0.08400, 0.09200, 0.10000, 0.10800, 0.11600, 0.12400, 0.13200,
    0.14000, 0.15000, 0.16000, 0.17000, 0.18000, 0.19000, 0.20000, 0.21000, 0.22000, 0.23000,
    0.24000, 0.25100, 0.26200, 0.27300, 0.28400, 0.29500, 0.30600, 0.31700, 0.32800, 0.33900,
    0.35000, 0.36500, 0.38000, 0.39500, 0.41000, 0.42500, 0.44000, 0.45500, 0.47000, 0.48500,
    0.50000, 0.52000, 0.54000, 0.56000, 0.58000, 0.60000, 0.62000, 0.64000, 0.66000, 0.68000,
    0.70000, 0.73200, 0.76400, 0.79600, 0.82800, 0.86000, 0.89500, 0.93000, 0.96500,
) + (1.00000,) * 29)

_TABLE_SIZE = len(_LEVEL_PERCENT)


def _check_index(value: int, name: str) -> None:
    if not 0 <= value < _TABLE_SIZE:
        raise ValueError(f"{name} must be 0..{_TABLE_SIZE - 1}, got {value}")


def envelope_duration(rate: int, level_l: int, level_r: int) -> float:
    """Return the time in seconds an envelope stage takes to go from one level to another."""
    _check_index(rate, "rate")
    _check_index(level_l, "level_l")
    _check_index(level_r, "level_r")
    durations = _RISE_DURATION if level_r > level_l else _DECAY_DURATION
    span = _f32(abs(_f32(_LEVEL_PERCENT[level_r] - _LEVEL_PERCENT[level_l])))
    return durations[rate] * span


@dataclass(frozen=True)
class EnvelopeShape:
    """The outline of an operator envelope graph.

    ``vertices`` are the start, the ends of stages 1 to 3 and the key-off
    point; ``outline`` is the closed polygon to fill; the region from
    ``keyoff_x`` rightwards is the release part of the graph.
    """

    vertices: tuple[tuple[int, int], ...]
    outline: tuple[tuple[float, float], ...]
    keyoff_x: float

    def markers(self, position: int) -> tuple[tuple[int, int], ...]:
        """Return the vertices highlighted while the envelope is at stage ``position``."""
        picked = [
            vertex for stage, vertex in enumerate(self.vertices[:4]) if position in (stage, stage + 1)
        ]
        if position == 4:
            picked.append(self.vertices[4])
        return tuple(picked)


def envelope_shape(rates, levels, width: int, height: int) -> EnvelopeShape:
    """Lay out the four-stage envelope with the given rates and levels in a widget."""
    if len(rates) < 4 or len(levels) < 4:
        raise ValueError("an envelope needs four rates and four levels")
    if width <= 0 or height <= 0:
        raise ValueError(f"widget size must be positive, got {width}x{height}")

    attack = envelope_duration(rates[0], levels[3], levels[0])
    decay1 = envelope_duration(rates[1], levels[0], levels[1])
    decay2 = envelope_duration(rates[2], levels[1], levels[2])
    release_time = envelope_duration(rates[3], levels[2], levels[3])

    keyoff = max(0.0, attack + decay1 + decay2) + KEYOFF_GAP
    release = max(0.0, release_time)
    scale = width / (keyoff + release)

    def level_y(level: int) -> float:
        return height - height / 99.0 * level

    vertices = (
        (0, int(level_y(levels[3]))),
        (int(attack * scale), int(level_y(levels[0]))),
        (int((attack + decay1) * scale), int(level_y(levels[1]))),
        (int((attack + decay1 + decay2) * scale), int(level_y(levels[2]))),
        (int(keyoff * scale), int(level_y(levels[2]))),
    )
    end = ((attack + decay1 + decay2 + keyoff + release_time) * scale, level_y(levels[3]))
    outline = (
        (0, ENVELOPE_BASELINE),
        *vertices,
        end,
        (ENVELOPE_RIGHT_EDGE, ENVELOPE_BASELINE),
        (0, ENVELOPE_BASELINE),
    )
    return EnvelopeShape(vertices=vertices, outline=outline, keyoff_x=keyoff * scale)


def vu_meter_width(v: float) -> int:
    """Return how many pixels of the level meter strip are lit for level ``v``."""
    if v <= 0:
        return 0
    blocks = min(round(VU_TOTAL_BLOCKS * _f32(v)), VU_TOTAL_BLOCKS)
    return blocks * 3 + 2


class ProgramSelector:
    """Selection state of the program list, with wrap-around arrows and wheel."""

    def __init__(
        self, index: int = 0, wheel_factor: float = 0.2, natural_scroll: bool = False
    ) -> None:
        if not 0 <= index < PROGRAM_COUNT:
            raise ValueError(f"program index must be 0..{PROGRAM_COUNT - 1}, got {index}")
        self.index = index
        self.wheel_factor = wheel_factor
        self.natural_scroll = natural_scroll
        self.accumulated = 0.0

    def select_previous(self) -> int:
        """Step to the previous program, wrapping from the first to the last."""
        self.index = (self.index - 1) % PROGRAM_COUNT
        return self.index

    def select_next(self) -> int:
        """Step to the next program, wrapping from the last to the first."""
        self.index = (self.index + 1) % PROGRAM_COUNT
        return self.index

    def mouse_down(self, x: int, y: int, width: int, height: int) -> bool:
        """Handle a click on the arrow strip; return False if the click lies elsewhere."""
        if x < width - 8:
            return False
        if y < height // 2:
            self.select_previous()
        else:
            self.select_next()
        return True

    def wheel(self, delta_y: float) -> bool:
        """Accumulate wheel movement and step once past the threshold; return whether it stepped."""
        self.accumulated += delta_y
        factor = self.wheel_factor
        forward = self.accumulated > factor
        backward = self.accumulated < -factor
        direction = 1
        if not self.natural_scroll:
            forward, backward = backward, forward
            direction = -1
        if forward:
            self.accumulated -= direction * factor
            self.select_next()
            return True
        if backward:
            self.accumulated += direction * factor
            self.select_previous()
            return True
        return False

    def reset_wheel(self) -> None:
        """Forget any partial wheel movement, as when the pointer enters the widget."""
        self.accumulated = 0.0


class LcdDisplay:
    """The one-line message display of the editor."""

    def __init__(self) -> None:
        self.message = f"DEXED {DEXED_VERSION}"

    def set_system_message(self, msg: str) -> None:
        """Replace the displayed message."""
        self.message = msg