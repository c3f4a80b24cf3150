import pytest
from PIL import Image

from managers.settings import ExtractionSettings
from services.palette_extractor import (
    PaletteExtractor,
    quantize_channel,
    rank_colors,
    select_distinct,
)
from utils.colors import parse_hex, rgb_distance


@pytest.fixture
def extractor():
    return PaletteExtractor(ExtractionSettings())


def split_image(left, right, left_width, size=100, mode="RGB"):
    image = Image.new(mode, (size, size), right)
    image.paste(left, (0, 0, left_width, size))
    return image


@pytest.mark.parametrize("value, expected", [
    (255, 255),
    (5, 10),
    (4, 0),
    (15, 20),
    (0, 0),
    (249, 250),
])
def test_quantize_channel(value, expected):
    assert quantize_channel(value, 10) == expected


def test_fully_transparent_image_has_no_colors(extractor):
    assert extractor.extract(Image.new("RGBA", (10, 10), (255, 0, 0, 0))) == []


def test_single_color_is_quantized(extractor):
    assert extractor.extract(Image.new("RGB", (10, 10), (203, 101, 52))) == ["#c86432"]


def test_most_frequent_color_first(extractor):
    image = split_image((255, 0, 0), (0, 0, 255), left_width=70)
    assert extractor.extract(image) == ["#ff0000", "#0000ff"]


def test_similar_colors_are_backfilled(extractor):
    image = Image.new("RGB", (100, 100), (100, 100, 100))
    image.paste((120, 100, 100), (50, 0, 80, 100))
    image.paste((100, 120, 100), (80, 0, 100, 100))

    assert extractor.extract(image) == ["#646464", "#786464", "#647864"]


def test_distinct_colors_respect_min_distance(extractor):
    image = Image.new("RGB", (100, 100), (250, 250, 250))
    stripes = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (240, 250, 250), (0, 0, 0), (250, 250, 0)]
    for i, color in enumerate(stripes):
        image.paste(color, (i * 10, 0, i * 10 + 10, 100))

    colors = extractor.extract(image)

    assert len(colors) == 5
    assert colors[0] == "#fafafa"
    assert "#f0fafa" not in colors
    rgb = [parse_hex(c) for c in colors]
    for i, first in enumerate(rgb):
        for second in rgb[i + 1:]:
            assert rgb_distance(first, second) > 50


def test_alpha_threshold_is_inclusive(extractor):
    image = split_image((255, 0, 0, 127), (0, 0, 255, 128), left_width=60, mode="RGBA")
    assert extractor.extract(image) == ["#0000ff"]


def test_extraction_is_deterministic(extractor):
    image = Image.linear_gradient("L").convert("RGB").resize((64, 64))
    assert extractor.extract(image) == extractor.extract(image)


def test_ties_keep_first_seen_order():
    counts = {(10, 0, 0): 5, (0, 10, 0): 7, (0, 0, 10): 5, (20, 0, 0): 5}
    assert rank_colors(counts) == [(0, 10, 0), (10, 0, 0), (0, 0, 10), (20, 0, 0)]


def test_select_distinct_caps_at_max_colors():
    ranked = [(i * 60, 0, 0) for i in range(5)]
    assert select_distinct(ranked, max_colors=3, min_distance=50, min_distinct=3) == ranked[:3]


def test_select_distinct_without_backfill():
    ranked = [(0, 0, 0), (10, 0, 0), (200, 0, 0)]
    assert select_distinct(ranked, max_colors=5, min_distance=50, min_distinct=0) == [(0, 0, 0), (200, 0, 0)]


def test_extract_from_file(tmp_path, extractor):
    path = tmp_path / "logo.png"
    split_image((255, 0, 0), (0, 0, 255), left_width=70).save(path)

    assert extractor.extract_from_file(path) == ["#ff0000", "#0000ff"]
