"""
Palette Extractor - Representative colors from an arbitrary image

Steps:
1. Downsample to a small square working image (speed only)
2. Quantize visible pixels to channel buckets and count them
3. Rank buckets by frequency (ties keep first-seen order)
4. Greedily keep colors far enough from every color already kept
5. Too few distinct colors: backfill from the ranking, skipping duplicates
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image

from managers.settings import ExtractionSettings
from models.enums import LogCategory
from utils.colors import rgb_distance, to_hex
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.PALETTE)

RGB = Tuple[int, int, int]


def quantize_channel(value: int, bucket: int) -> int:
    """Nearest multiple of bucket (halves round up), capped at 255"""
    return min(255, int(math.floor(value / bucket + 0.5)) * bucket)


def tally_colors(image: Image.Image, bucket: int, alpha_threshold: int) -> Dict[RGB, int]:
    """Count quantized colors of pixels with alpha >= alpha_threshold"""
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    data = rgba.tobytes()
    counts: Dict[RGB, int] = {}

    for offset in range(0, len(data), 4):
        if data[offset + 3] < alpha_threshold:
            continue
        key = (
            quantize_channel(data[offset], bucket),
            quantize_channel(data[offset + 1], bucket),
            quantize_channel(data[offset + 2], bucket),
        )
        counts[key] = counts.get(key, 0) + 1

    return counts


def rank_colors(counts: Dict[RGB, int]) -> List[RGB]:
    """Most frequent first; sort is stable so ties keep insertion order"""
    return [color for color, _ in sorted(counts.items(), key=lambda kv: kv[1], reverse=True)]


def select_distinct(
    ranked: Sequence[RGB],
    max_colors: int,
    min_distance: float,
    min_distinct: int,
) -> List[RGB]:
    """
    Pick up to max_colors colors in ranking order

    A candidate is kept only if it is farther than min_distance from every
    color already kept. When that yields fewer than min_distinct colors,
    the rest of the ranking fills the list without the distance rule.
    """
    picked: List[RGB] = []
    for color in ranked:
        if len(picked) >= max_colors:
            break
        if all(rgb_distance(color, other) > min_distance for other in picked):
            picked.append(color)

    if len(picked) < min_distinct:
        for color in ranked:
            if len(picked) >= max_colors:
                break
            if color not in picked:
                picked.append(color)

    return picked


class PaletteExtractor:
    """
    Extracts up to `max_colors` hex colors, most prominent first

    Example:
        extractor = PaletteExtractor(config.extraction_settings())
        colors = extractor.extract_from_file("photo.jpg")   # ['#f0a0c0', ...]
        if not colors:
            ...  # keep the current palette
    """

    def __init__(self, settings: Optional[ExtractionSettings] = None):
        self.settings = settings or ExtractionSettings()

    def extract(self, image: Image.Image) -> List[str]:
        s = self.settings
        working = image.convert("RGBA")
        size = (s.sample_size, s.sample_size)
        if working.size != size:
            working = working.resize(size, Image.Resampling.BILINEAR)

        counts = tally_colors(working, s.bucket_size, s.alpha_threshold)
        ranked = rank_colors(counts)
        picked = select_distinct(ranked, s.max_colors, s.min_distance, s.min_distinct)
        colors = [to_hex(c) for c in picked]

        log.info("Palette extracted", buckets=len(counts), colors=", ".join(colors) or "none")
        return colors

    def extract_from_file(self, path: Union[str, Path]) -> List[str]:
        with Image.open(path) as image:
            image.load()
            return self.extract(image)
