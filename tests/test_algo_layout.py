import pytest

from dexedfm.algo_layout import (
    ALGORITHM_COUNT,
    LINE_THICKNESS,
    DrawnOperator,
    Feedback,
    Link,
    OperatorPlacement,
    Segment,
    algorithm_layout,
    operator_origin,
    operator_segments,
    render_algorithm,
)


def test_origin_of_first_cell():
    assert operator_origin(0, 0) == (3, 5)


def test_origin_steps_by_cell_size():
    x0, y0 = operator_origin(2, 1)
    x1, y1 = operator_origin(3, 2)
    assert x1 - x0 == 25
    assert y1 - y0 == 21


@pytest.mark.parametrize("algorithm", range(ALGORITHM_COUNT))
def test_every_algorithm_places_all_six_operators(algorithm):
    layout = algorithm_layout(algorithm)
    assert [p.op for p in layout] == [6, 5, 4, 3, 2, 1]


@pytest.mark.parametrize("algorithm", range(ALGORITHM_COUNT))
def test_operators_do_not_overlap(algorithm):
    layout = algorithm_layout(algorithm)
    cells = {(p.column, p.row) for p in layout}
    assert len(cells) == len(layout)


def test_first_algorithm_matches_source_table():
    layout = algorithm_layout(0)
    assert layout[0] == OperatorPlacement(6, 3, 0, Link.DOWN, Feedback.SELF)
    assert layout[-1] == OperatorPlacement(1, 2, 3, Link.RIGHT, Feedback.NONE)


def test_last_algorithm_puts_every_operator_on_bottom_row():
    layout = algorithm_layout(31)
    assert {p.row for p in layout} == {3}
    assert layout[0].feedback is Feedback.SELF


def test_feedback_loops_of_algorithms_four_and_six():
    assert algorithm_layout(3)[0].feedback is Feedback.THREE_OPERATORS
    assert algorithm_layout(5)[0].feedback is Feedback.TWO_OPERATORS


@pytest.mark.parametrize("algorithm", [-1, ALGORITHM_COUNT, 100])
def test_unknown_algorithm_has_nothing_to_draw(algorithm):
    assert algorithm_layout(algorithm) == ()
    assert render_algorithm(algorithm, "111111") == ()


def test_down_link_without_feedback_is_one_segment():
    placement = OperatorPlacement(4, 3, 2, Link.DOWN, Feedback.NONE)
    x, y = operator_origin(3, 2)
    assert operator_segments(placement) == (Segment(x + 8, y + 12, x + 8, y + 21),)


def test_self_feedback_adds_loop_after_link():
    plain = operator_segments(OperatorPlacement(6, 3, 0, Link.DOWN, Feedback.NONE))
    looped = operator_segments(OperatorPlacement(6, 3, 0, Link.DOWN, Feedback.SELF))
    assert looped[: len(plain)] == plain
    assert len(looped) == len(plain) + 5


def test_all_segments_share_line_thickness():
    for algorithm in range(ALGORITHM_COUNT):
        for drawn in render_algorithm(algorithm, "111111"):
            assert all(s.thickness == LINE_THICKNESS for s in drawn.segments)


def test_invalid_link_is_rejected():
    with pytest.raises(ValueError):
        OperatorPlacement(1, 0, 0, 5, 0)


def test_invalid_operator_number_is_rejected():
    with pytest.raises(ValueError):
        OperatorPlacement(7, 0, 0)


def test_render_all_enabled():
    drawn = render_algorithm(0, "111111")
    assert all(d.enabled for d in drawn)
    assert [d.label for d in drawn] == ["6", "5", "4", "3", "2", "1"]


def test_render_all_disabled():
    assert not any(d.enabled for d in render_algorithm(0, "000000"))


def test_status_string_starts_with_operator_six():
    drawn = render_algorithm(0, "100000")
    enabled = [d.placement.op for d in drawn if d.enabled]
    assert enabled == [6]


def test_render_uses_origin_and_segments():
    for drawn in render_algorithm(12, "111111"):
        assert isinstance(drawn, DrawnOperator)
        assert (drawn.x, drawn.y) == operator_origin(
            drawn.placement.column, drawn.placement.row
        )
        assert drawn.segments == operator_segments(drawn.placement)


def test_short_status_is_rejected():
    with pytest.raises(ValueError):
        render_algorithm(0, "111")