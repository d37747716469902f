"""Unit tests for staff geometry helpers."""

import pytest

from bignote.errors import DegenerateConfig
from bignote.pitch_model import Alteration
from bignote.staff_geometry import (
    ClefKind,
    Rect,
    StaffConfig,
    line_height,
    line_rect,
    reference_line,
    staff_index,
    staff_lines_rect,
    stroke_width,
)

CONTAINER = Rect(0, 0, 400, 300)


def test_default_config() -> None:
    config = StaffConfig()
    assert config.max_visible_lines == 11
    assert config.clef_kind is ClefKind.TREBLE
    assert config.alteration_preference is Alteration.SHARP


@pytest.mark.parametrize("lines", [3, 4, 6, 10, 0, -7])
def test_degenerate_line_counts_rejected(lines: int) -> None:
    with pytest.raises(DegenerateConfig):
        StaffConfig(max_visible_lines=lines)


def test_natural_preference_rejected() -> None:
    with pytest.raises(DegenerateConfig):
        StaffConfig(alteration_preference=Alteration.NATURAL)


def test_line_height() -> None:
    assert line_height(300, StaffConfig()) == 30.0
    assert line_height(300, StaffConfig(max_visible_lines=5)) == 75.0


def test_stroke_width_has_floor() -> None:
    assert stroke_width(100) == 2.0
    assert stroke_width(1000) == 5.0


@pytest.mark.parametrize("lines", [5, 7, 9, 11, 15, 21])
@pytest.mark.parametrize("height", [50.0, 300.0, 1234.5])
def test_staff_rect_spans_four_line_heights(lines: int, height: float) -> None:
    config = StaffConfig(max_visible_lines=lines)
    container = Rect(10, 20, 410, 20 + height)
    staff = staff_lines_rect(container, config)
    assert staff.height == pytest.approx(4 * line_height(height, config))
    assert staff.center_y == pytest.approx(container.center_y)


def test_staff_rect_keeps_full_width() -> None:
    staff = staff_lines_rect(CONTAINER, StaffConfig())
    assert staff == Rect(0, 90, 400, 210)


def test_line_rect_bottom_and_top_staff_lines() -> None:
    config = StaffConfig()
    bottom = line_rect(CONTAINER, config, 0)
    top = line_rect(CONTAINER, config, 4)
    assert bottom.y == 210
    assert top.y == 90
    assert (bottom.x0, bottom.x1) == (0, 400)


def test_line_rect_ledger_positions() -> None:
    config = StaffConfig()
    assert line_rect(CONTAINER, config, -1).y == 240
    assert line_rect(CONTAINER, config, 5).y == 60
    assert line_rect(CONTAINER, config, 0.5).y == 195


def test_line_rect_custom_width_and_center() -> None:
    segment = line_rect(CONTAINER, StaffConfig(), 2, width=40, center_x=100)
    assert (segment.x0, segment.x1) == (80, 120)
    assert segment.width == 40


def test_line_rect_is_deterministic() -> None:
    config = StaffConfig()
    assert line_rect(CONTAINER, config, -2.5) == line_rect(CONTAINER, config, -2.5)


def test_reference_line_is_e_flat_spelling() -> None:
    assert reference_line() == 18.5
    assert staff_index(18.5) == 0.0
    assert staff_index(17.5) == -1.0
