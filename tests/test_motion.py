"""
Motion model: loop closure, determinism, pulse and movement scale
"""

import math
from dataclasses import replace

import pytest

from animations.motion import PULSE_DEPTH, blob_position
from models.scene import AnimationConfig

HD_DRAFT = AnimationConfig(width=960, height=540)


def assert_same_position(a, b, tol=1e-9):
    assert a.x == pytest.approx(b.x, abs=tol)
    assert a.y == pytest.approx(b.y, abs=tol)
    assert a.r == pytest.approx(b.r, abs=tol)


def test_scenario_blob_closes_loop(scenario_blob):
    start = blob_position(scenario_blob, 0.0, HD_DRAFT)
    end = blob_position(scenario_blob, 1.0, HD_DRAFT)
    assert_same_position(start, end)


def test_scenario_blob_start_values(scenario_blob):
    pos = blob_position(scenario_blob, 0.0, HD_DRAFT)

    # x: 0.5 + 0.2 + 0.2 * 0.3 of the width, y: center, r: 0.3 of 540
    assert pos.x == pytest.approx(0.76 * 960)
    assert pos.y == pytest.approx(270.0)
    assert pos.r == pytest.approx(162.0)


def test_generated_blobs_close_loop_approaching_one(generator, palette):
    for blob in generator.generate(palette, count=20):
        start = blob_position(blob, 0.0, HD_DRAFT)
        almost_end = blob_position(blob, 1.0 - 1e-9, HD_DRAFT)
        assert_same_position(start, almost_end, tol=1e-3)


def test_position_is_deterministic(scenario_blob):
    a = blob_position(scenario_blob, 0.37, HD_DRAFT)
    b = blob_position(scenario_blob, 0.37, HD_DRAFT)
    assert a == b


def test_zero_movement_scale_pins_blob_to_center(scenario_blob):
    still = replace(HD_DRAFT, movement_scale=0.0)
    for t in (0.0, 0.2, 0.55, 0.9):
        pos = blob_position(scenario_blob, t, still)
        assert pos.x == pytest.approx(480.0)
        assert pos.y == pytest.approx(270.0)


def test_movement_scale_multiplies_orbit(scenario_blob):
    double = replace(HD_DRAFT, movement_scale=2.0)
    base = blob_position(scenario_blob, 0.0, HD_DRAFT)
    scaled = blob_position(scenario_blob, 0.0, double)
    assert scaled.x - 480.0 == pytest.approx(2 * (base.x - 480.0))


def test_pulse_peaks_at_quarter_cycle(scenario_blob):
    pos = blob_position(scenario_blob, 0.25, HD_DRAFT)
    assert pos.r == pytest.approx(0.3 * 540 * (1 + PULSE_DEPTH))


def test_radius_uses_minor_dimension(scenario_blob):
    portrait = AnimationConfig(width=540, height=960)
    pos = blob_position(scenario_blob, 0.0, portrait)
    assert pos.r == pytest.approx(0.3 * 540)


def test_harmonic_adds_to_primary_orbit(scenario_blob):
    no_harmonic = replace(scenario_blob, harmonic_amount=0.0)
    t = 0.1
    with_h = blob_position(scenario_blob, t, HD_DRAFT)
    without = blob_position(no_harmonic, t, HD_DRAFT)

    angle = 2 * math.pi * t * scenario_blob.x_harmonic_speed
    expected = 0.2 * 0.3 * math.cos(angle) * 960
    assert with_h.x - without.x == pytest.approx(expected)
