import pytest

from dexedfm.envelope import (
    EnvelopeShape,
    LcdDisplay,
    ProgramSelector,
    envelope_duration,
    envelope_shape,
    vu_meter_width,
)


def test_duration_zero_when_level_unchanged():
    assert envelope_duration(50, 70, 70) == 0.0


def test_duration_full_decay_at_slowest_rate():
    assert envelope_duration(0, 99, 0) == pytest.approx(318.0, rel=1e-4)


def test_duration_full_rise_at_slowest_rate():
    assert envelope_duration(0, 0, 99) == pytest.approx(38.0, rel=1e-4)


def test_duration_rise_shorter_than_decay():
    for rate in (0, 20, 50, 90):
        assert envelope_duration(rate, 0, 99) < envelope_duration(rate, 99, 0)


def test_duration_nonincreasing_with_rate():
    values = [envelope_duration(rate, 0, 99) for rate in range(128)]
    assert all(a >= b for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("args", [(128, 0, 99), (-1, 0, 99), (10, 0, 128), (10, -1, 5)])
def test_duration_rejects_out_of_range(args):
    with pytest.raises(ValueError):
        envelope_duration(*args)


@pytest.fixture
def shape():
    return envelope_shape([50, 60, 70, 40], [99, 80, 60, 0], 96, 32)


def test_shape_outline_closed_on_baseline(shape):
    assert shape.outline[0] == (0, 32)
    assert shape.outline[-2] == (96, 32)
    assert shape.outline[-1] == (0, 32)
    assert shape.outline[1:6] == shape.vertices


def test_shape_vertices_ordered_in_time(shape):
    xs = [x for x, _ in shape.vertices]
    assert xs[0] == 0
    assert xs == sorted(xs)
    assert xs[4] == int(shape.keyoff_x)


def test_shape_levels_map_to_height(shape):
    assert shape.vertices[0][1] == 32
    assert shape.vertices[1][1] in (0, -0)
    assert shape.vertices[3][1] == shape.vertices[4][1]


def test_shape_release_fills_remaining_width():
    rates, levels = [50, 60, 70, 40], [99, 80, 60, 0]
    shape = envelope_shape(rates, levels, 120, 32)
    release = envelope_duration(rates[3], levels[2], levels[3])
    keyoff = sum(envelope_duration(r, a, b) for r, a, b in
                 [(rates[0], levels[3], levels[0]), (rates[1], levels[0], levels[1]),
                  (rates[2], levels[1], levels[2])]) + 10.0
    assert shape.keyoff_x + release * 120 / (keyoff + release) == pytest.approx(120)


def test_shape_markers(shape):
    v = shape.vertices
    assert shape.markers(0) == (v[0],)
    assert shape.markers(2) == (v[1], v[2])
    assert shape.markers(4) == (v[3], v[4])
    assert shape.markers(5) == ()


def test_shape_rejects_short_input():
    with pytest.raises(ValueError):
        envelope_shape([1, 2, 3], [1, 2, 3, 4], 96, 32)


def test_shape_is_dataclass_value(shape):
    again = envelope_shape([50, 60, 70, 40], [99, 80, 60, 0], 96, 32)
    assert isinstance(again, EnvelopeShape)
    assert again == shape


def test_vu_meter_silent():
    assert vu_meter_width(0) == 0
    assert vu_meter_width(-0.5) == 0


def test_vu_meter_full_and_clamped():
    assert vu_meter_width(1.0) == 140
    assert vu_meter_width(3.0) == 140


def test_vu_meter_monotonic():
    widths = [vu_meter_width(i / 100) for i in range(1, 101)]
    assert widths == sorted(widths)
    assert all((w - 2) % 3 == 0 for w in widths)


def test_selector_wraps():
    sel = ProgramSelector(0)
    assert sel.select_previous() == 31
    assert sel.select_next() == 0


def test_selector_rejects_bad_index():
    with pytest.raises(ValueError):
        ProgramSelector(32)


def test_selector_click_outside_arrows():
    sel = ProgramSelector(5)
    assert sel.mouse_down(10, 2, 112, 18) is False
    assert sel.index == 5


def test_selector_click_arrows():
    sel = ProgramSelector(5)
    assert sel.mouse_down(108, 2, 112, 18) is True
    assert sel.index == 4
    assert sel.mouse_down(108, 15, 112, 18) is True
    assert sel.index == 5


def test_selector_wheel_below_threshold():
    sel = ProgramSelector(5)
    assert sel.wheel(0.1) is False
    assert sel.index == 5


def test_selector_wheel_reversed_by_default():
    sel = ProgramSelector(5)
    assert sel.wheel(-0.3) is True
    assert sel.index == 6
    assert sel.accumulated == pytest.approx(-0.1)


def test_selector_wheel_natural():
    sel = ProgramSelector(5, natural_scroll=True)
    assert sel.wheel(0.3) is True
    assert sel.index == 6
    assert sel.wheel(-0.5) is True
    assert sel.index == 5


def test_selector_reset_wheel():
    sel = ProgramSelector(5)
    sel.wheel(0.15)
    sel.reset_wheel()
    assert sel.wheel(0.15) is False
    assert sel.index == 5


def test_lcd_display_messages():
    lcd = LcdDisplay()
    assert lcd.message == "DEXED DEVBUILD"
    lcd.set_system_message("hello")
    assert lcd.message == "hello"