import random
import string

from animations.generator import BlobGenerator, ID_LENGTH, new_blob_id
from managers.settings import GeneratorSettings
from models.blob import SPEED_FIELDS
from models.color import Color


def test_generate_default_count(generator, palette):
    assert len(generator.generate(palette)) == 6


def test_speed_fields_are_positive_integers(generator, palette):
    for blob in generator.generate(palette, count=200):
        for name in SPEED_FIELDS:
            value = getattr(blob, name)
            assert type(value) is int
            assert value >= 1


def test_parameters_stay_in_configured_ranges(generator, palette):
    s = GeneratorSettings()
    for blob in generator.generate(palette, count=200):
        assert s.radius_range[0] <= blob.radius <= s.radius_range[1]
        assert s.center_range[0] <= blob.center_x <= s.center_range[1]
        assert s.center_range[0] <= blob.center_y <= s.center_range[1]
        assert s.orbit_range[0] <= blob.orbit_x <= s.orbit_range[1]
        assert s.harmonic_amount_range[0] <= blob.harmonic_amount <= s.harmonic_amount_range[1]
        assert blob.x_speed in s.speed_choices
        assert blob.pulse_speed in s.pulse_speed_choices
        assert blob.x_harmonic_speed in s.harmonic_speed_choices


def test_colors_cycle_through_palette(generator, palette):
    blobs = generator.generate(palette[:2], count=5)
    assert [b.color for b in blobs] == [palette[0], palette[1], palette[0], palette[1], palette[0]]


def test_empty_palette_paints_white(generator):
    assert {b.color for b in generator.generate([], count=3)} == {Color.white()}


def test_same_seed_same_scene(palette):
    a = BlobGenerator(rng=random.Random(99)).generate(palette)
    b = BlobGenerator(rng=random.Random(99)).generate(palette)
    assert a == b


def test_ids_are_base36_and_unique(generator, palette):
    blobs = generator.generate(palette, count=50)
    alphabet = set(string.digits + string.ascii_lowercase)
    for blob in blobs:
        assert len(blob.id) == ID_LENGTH
        assert set(blob.id) <= alphabet
    assert len({b.id for b in blobs}) == 50
    assert len(new_blob_id()) == ID_LENGTH


def test_recolor_keeps_motion(generator, palette):
    blobs = generator.generate(palette)
    ocean = [Color.from_hex(h) for h in ("#2193b0", "#6dd5ed")]

    recolored = BlobGenerator.recolor(blobs, ocean)

    for i, (before, after) in enumerate(zip(blobs, recolored)):
        assert after.color == ocean[i % 2]
        assert after.with_color(before.color) == before


def test_recolor_with_empty_palette_is_noop(generator, palette):
    blobs = generator.generate(palette)
    assert BlobGenerator.recolor(blobs, []) == blobs


def test_custom_speed_choices_are_respected(palette):
    settings = GeneratorSettings(speed_choices=[3], harmonic_speed_choices=[5], pulse_speed_choices=[2])
    for blob in BlobGenerator(settings, rng=random.Random(1)).generate(palette, count=10):
        assert (blob.x_speed, blob.y_speed) == (3, 3)
        assert (blob.x_harmonic_speed, blob.y_harmonic_speed) == (5, 5)
        assert blob.pulse_speed == 2
