from __future__ import annotations

import math

import pytest

from plotmap.domain.viewport import (
    INITIAL_SCALE,
    MAX_SCALE,
    MIN_SCALE,
    RotationGesture,
    Viewport,
)


def test_initial_state():
    viewport = Viewport()
    assert viewport.scale == INITIAL_SCALE
    assert viewport.css_transform() == "translate(0px, 0px) scale(0.5) rotate(0deg)"


def test_zoom_is_clamped():
    viewport = Viewport()
    for _ in range(100):
        viewport.zoom_in()
    assert viewport.scale == MAX_SCALE
    for _ in range(100):
        viewport.zoom_out()
    assert viewport.scale == MIN_SCALE


def test_zoom_in_then_out_returns_to_start():
    viewport = Viewport()
    viewport.zoom_in()
    viewport.zoom_out()
    assert viewport.scale == pytest.approx(INITIAL_SCALE)


def test_rotate_quarter_wraps():
    viewport = Viewport()
    for expected in (90, 180, 270, 0):
        assert viewport.rotate_quarter() == expected


def test_reset_clears_pan_and_rotation():
    viewport = Viewport()
    viewport.pan(10, -5)
    viewport.rotate(45)
    viewport.zoom_in()
    viewport.reset()
    assert (viewport.translate_x, viewport.translate_y, viewport.rotation) == (0, 0, 0)
    assert viewport.scale == INITIAL_SCALE


def test_css_transform_after_pan_and_rotate():
    viewport = Viewport()
    viewport.pan(12.5, -3)
    viewport.rotate(-90)
    assert viewport.css_transform() == "translate(12.5px, -3px) scale(0.5) rotate(270deg)"


def test_two_finger_rotation_follows_touch_angle():
    viewport = Viewport(rotation=90)
    gesture = RotationGesture(viewport)
    gesture.begin((0, 0), (10, 0))
    assert gesture.active
    rotation = gesture.move((0, 0), (0, 10))
    assert rotation == pytest.approx(180)
    gesture.end()
    assert not gesture.active
    assert gesture.move((0, 0), (10, 10)) == pytest.approx(180)


def test_gesture_angle_uses_atan2():
    viewport = Viewport()
    gesture = RotationGesture(viewport)
    gesture.begin((0, 0), (1, 0))
    expected = math.degrees(math.atan2(1, 1))
    assert gesture.move((0, 0), (1, 1)) == pytest.approx(expected)
