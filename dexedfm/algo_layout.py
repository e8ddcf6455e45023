"""Schematic layout of the 32 six-operator FM algorithms.

Each algorithm is drawn as six numbered operators on a small grid. Lines
below an operator show where its output goes, and loops show feedback.
This module works out the grid positions and the line segments in pixel
coordinates, leaving the actual drawing to whatever toolkit is in use.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ALGORITHM_COUNT = 32
OPERATOR_COUNT = 6
LINE_THICKNESS = 3

CELL_WIDTH = 25
CELL_HEIGHT = 21
ORIGIN_X = 3
ORIGIN_Y = 5
LABEL_WIDTH = 16
LABEL_HEIGHT = 12


class Link(IntEnum):
    """How an operator's output line is drawn."""

    DOWN = 0
    RIGHT = 1
    RIGHT_JOIN = 2
    RIGHT_AND_DOWN = 3
    BOTH_AND_DOWN = 4
    RIGHT_WIDE = 6
    LEFT = 7


class Feedback(IntEnum):
    """Which feedback loop, if any, is drawn around an operator."""

    NONE = 0
    SELF = 1
    THREE_OPERATORS = 2
    TWO_OPERATORS = 3
    SELF_LEFT = 4


@dataclass(frozen=True)
class OperatorPlacement:
    """An operator's grid cell together with its output line and feedback loop."""

    op: int
    column: int
    row: int
    link: Link = Link.DOWN
    feedback: Feedback = Feedback.NONE

    def __post_init__(self) -> None:
        if not 1 <= self.op <= OPERATOR_COUNT:
            raise ValueError(f"operator number must be 1..{OPERATOR_COUNT}, got {self.op}")
        object.__setattr__(self, "link", Link(self.link))
        object.__setattr__(self, "feedback", Feedback(self.feedback))


@dataclass(frozen=True)
class Segment:
    """A straight line from (x1, y1) to (x2, y2) in pixels."""

    x1: int
    y1: int
    x2: int
    y2: int
    thickness: int = LINE_THICKNESS


@dataclass(frozen=True)
class DrawnOperator:
    """Everything needed to draw one operator of an algorithm."""

    placement: OperatorPlacement
    x: int
    y: int
    label: str
    enabled: bool
    segments: tuple[Segment, ...]


# (operator, column, row, link, feedback) for each algorithm, operator 6 first.
_LAYOUTS: tuple[tuple[tuple[int, int, int, int, int], ...], ...] = (
    ((6, 3, 0, 0, 1), (5, 3, 1, 0, 0), (4, 3, 2, 0, 0), (3, 3, 3, 2, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 3, 0, 0, 0), (5, 3, 1, 0, 0), (4, 3, 2, 0, 0), (3, 3, 3, 2, 0), (2, 2, 2, 0, 1), (1, 2, 3, 1, 0)),
    ((6, 3, 1, 0, 1), (5, 3, 2, 0, 0), (4, 3, 3, 2, 0), (3, 2, 1, 0, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 3, 1, 0, 2), (5, 3, 2, 0, 0), (4, 3, 3, 2, 0), (3, 2, 1, 0, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 2, 0, 1), (5, 4, 3, 2, 0), (4, 3, 2, 0, 0), (3, 3, 3, 1, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 2, 0, 3), (5, 4, 3, 2, 0), (4, 3, 2, 0, 0), (3, 3, 3, 1, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 1, 0, 1), (5, 4, 2, 7, 0), (4, 3, 2, 0, 0), (3, 3, 3, 2, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 1, 0, 0), (5, 4, 2, 7, 0), (4, 3, 2, 0, 4), (3, 3, 3, 2, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 1, 0, 0), (5, 4, 2, 7, 0), (4, 3, 2, 0, 0), (3, 3, 3, 2, 0), (2, 2, 2, 0, 1), (1, 2, 3, 1, 0)),
    ((6, 2, 2, 0, 0), (5, 1, 2, 1, 0), (4, 2, 3, 1, 0), (3, 3, 1, 0, 1), (2, 3, 2, 0, 0), (1, 3, 3, 2, 0)),
    ((6, 2, 2, 0, 1), (5, 1, 2, 1, 0), (4, 2, 3, 1, 0), (3, 3, 1, 0, 0), (2, 3, 2, 0, 0), (1, 3, 3, 2, 0)),
    ((6, 3, 2, 7, 0), (5, 2, 2, 0, 0), (4, 1, 2, 1, 0), (3, 2, 3, 6, 0), (2, 4, 2, 0, 1), (1, 4, 3, 2, 0)),
    ((6, 3, 2, 7, 1), (5, 2, 2, 0, 0), (4, 1, 2, 1, 0), (3, 2, 3, 6, 0), (2, 4, 2, 0, 0), (1, 4, 3, 2, 0)),
    ((6, 3, 1, 0, 1), (5, 2, 1, 1, 0), (4, 3, 2, 0, 0), (3, 3, 3, 2, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 3, 1, 0, 0), (5, 2, 1, 1, 0), (4, 3, 2, 0, 0), (3, 3, 3, 2, 0), (2, 2, 2, 0, 4), (1, 2, 3, 1, 0)),
    ((6, 4, 1, 0, 1), (5, 4, 2, 7, 0), (4, 3, 1, 0, 0), (3, 3, 2, 0, 0), (2, 2, 2, 1, 0), (1, 3, 3, 0, 0)),
    ((6, 4, 1, 0, 0), (5, 4, 2, 7, 0), (4, 3, 1, 0, 0), (3, 3, 2, 0, 0), (2, 2, 2, 1, 4), (1, 3, 3, 0, 0)),
    ((6, 4, 0, 0, 0), (5, 4, 1, 0, 0), (4, 4, 2, 7, 0), (3, 3, 2, 0, 4), (2, 2, 2, 1, 0), (1, 3, 3, 0, 0)),
    ((6, 3, 2, 3, 1), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 2, 1, 0, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 2, 0, 0), (5, 3, 2, 1, 0), (4, 4, 3, 2, 0), (3, 1, 2, 3, 1), (2, 2, 3, 6, 0), (1, 1, 3, 1, 0)),
    ((6, 3, 2, 3, 0), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 1, 2, 3, 1), (2, 2, 3, 1, 0), (1, 1, 3, 1, 0)),
    ((6, 3, 2, 4, 1), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 2, 3, 1, 0), (2, 1, 2, 0, 0), (1, 1, 3, 1, 0)),
    ((6, 3, 2, 3, 1), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 2, 2, 0, 0), (2, 2, 3, 1, 0), (1, 1, 3, 1, 0)),
    ((6, 3, 2, 4, 1), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 2, 3, 1, 0), (2, 1, 3, 1, 0), (1, 0, 3, 1, 0)),
    ((6, 3, 2, 3, 1), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 2, 3, 1, 0), (2, 1, 3, 1, 0), (1, 0, 3, 1, 0)),
    ((6, 4, 2, 0, 1), (5, 3, 2, 1, 0), (4, 4, 3, 2, 0), (3, 2, 2, 0, 0), (2, 2, 3, 6, 0), (1, 1, 3, 1, 0)),
    ((6, 4, 2, 0, 0), (5, 3, 2, 1, 0), (4, 4, 3, 2, 0), (3, 2, 2, 0, 1), (2, 2, 3, 6, 0), (1, 1, 3, 1, 0)),
    ((6, 4, 3, 2, 0), (5, 3, 1, 0, 1), (4, 3, 2, 0, 0), (3, 3, 3, 1, 0), (2, 2, 2, 0, 0), (1, 2, 3, 1, 0)),
    ((6, 4, 2, 0, 1), (5, 4, 3, 2, 0), (4, 3, 2, 0, 0), (3, 3, 3, 1, 0), (2, 2, 3, 1, 0), (1, 1, 3, 1, 0)),
    ((6, 4, 3, 2, 0), (5, 3, 1, 0, 1), (4, 3, 2, 0, 0), (3, 3, 3, 1, 0), (2, 2, 3, 1, 0), (1, 1, 3, 1, 0)),
    ((6, 4, 2, 0, 1), (5, 4, 3, 2, 0), (4, 3, 3, 1, 0), (3, 2, 3, 1, 0), (2, 1, 3, 1, 0), (1, 0, 3, 1, 0)),
    ((6, 5, 3, 2, 1), (5, 4, 3, 1, 0), (4, 3, 3, 1, 0), (3, 2, 3, 1, 0), (2, 1, 3, 1, 0), (1, 0, 3, 1, 0)),
)

# Segment offsets relative to an operator's origin, as (x1, y1, x2, y2).
_LINK_OFFSETS: dict[Link, tuple[tuple[int, int, int, int], ...]] = {
    Link.DOWN: ((8, 12, 8, 21),),
    Link.RIGHT: ((8, 12, 8, 18), (7, 18, 34, 18)),
    Link.RIGHT_JOIN: ((8, 12, 8, 19),),
    Link.RIGHT_AND_DOWN: ((8, 12, 8, 21), (7, 18, 34, 18), (34, 17, 34, 21)),
    Link.BOTH_AND_DOWN: (
        (8, 12, 8, 21),
        (7, 18, 34, 18),
        (34, 17, 34, 21),
        (-17, 18, 8, 18),
        (-17, 17, -17, 21),
    ),
    Link.RIGHT_WIDE: ((8, 12, 8, 18), (7, 18, 58, 18)),
    Link.LEFT: ((8, 12, 8, 19), (-17, 18, 9, 18)),
}

_FEEDBACK_OFFSETS: dict[Feedback, tuple[tuple[int, int, int, int], ...]] = {
    Feedback.NONE: (),
    Feedback.SELF: (
        (7, 0, 8, -5),
        (8, -4, 21, -4),
        (20, -4, 20, 15),
        (19, 15, 20, 16),
        (8, 15, 20, 15),
    ),
    Feedback.THREE_OPERATORS: (
        (7, 0, 8, -5),
        (8, -4, 20, -4),
        (19, -4, 19, 59),
        (8, 58, 19, 58),
    ),
    Feedback.TWO_OPERATORS: (
        (7, 0, 8, -5),
        (8, -4, 20, -4),
        (19, -4, 19, 37),
        (8, 36, 19, 36),
    ),
    Feedback.SELF_LEFT: (
        (7, 0, 8, -5),
        (8, -4, -4, -4),
        (-3, -4, -3, 15),
        (-3, 15, 8, 15),
        (8, 15, 8, 12),
    ),
}


def algorithm_layout(algorithm: int) -> tuple[OperatorPlacement, ...]:
    """Return the six operator placements of a zero-based algorithm index.

    An index outside 0..31 has nothing to draw and gives an empty tuple.
    """
    if not 0 <= algorithm < ALGORITHM_COUNT:
        return ()
    return tuple(
        OperatorPlacement(op, column, row, Link(link), Feedback(feedback))
        for op, column, row, link, feedback in _LAYOUTS[algorithm]
    )


def operator_origin(column: int, row: int) -> tuple[int, int]:
    """Return the pixel position of the top-left corner of a grid cell."""
    return column * CELL_WIDTH + ORIGIN_X, row * CELL_HEIGHT + ORIGIN_Y


def operator_segments(placement: OperatorPlacement) -> tuple[Segment, ...]:
    """Return the output line and feedback loop of an operator, in pixels."""
    x, y = operator_origin(placement.column, placement.row)
    offsets = _LINK_OFFSETS[placement.link] + _FEEDBACK_OFFSETS[placement.feedback]
    return tuple(Segment(x + x1, y + y1, x + x2, y + y2) for x1, y1, x2, y2 in offsets)


def render_algorithm(algorithm: int, op_status: str) -> tuple[DrawnOperator, ...]:
    """Lay out an algorithm for drawing.

    ``op_status`` holds one character per operator, operator 6 first; an
    operator is enabled when its character is ``"1"``.
    """
    if len(op_status) < OPERATOR_COUNT:
        raise ValueError(
            f"operator status needs {OPERATOR_COUNT} characters, got {len(op_status)}"
        )
    drawn = []
    for placement in algorithm_layout(algorithm):
        x, y = operator_origin(placement.column, placement.row)
        drawn.append(
            DrawnOperator(
                placement=placement,
                x=x,
                y=y,
                label=str(placement.op),
                enabled=op_status[OPERATOR_COUNT - placement.op] == "1",
                segments=operator_segments(placement),
            )
        )
    return tuple(drawn)