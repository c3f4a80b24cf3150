"""
Rendering surface - 2D raster the frame renderer paints on

The renderer only talks to the RenderSurface protocol (fill-rect, blur,
fill-circle, pixel readback). PillowSurface backs it with a PIL image so
the same frames feed the preview and the GIF encoder.
"""

from __future__ import annotations

import math
from typing import Optional, Protocol

from PIL import Image, ImageDraw, ImageFilter

from models.color import Color
from models.errors import SurfaceUnavailableError


class RenderSurface(Protocol):
    """
    Protocol for anything the frame renderer can draw on.

    Blur is filter state: set once, it applies to every following
    fill_circle until changed.
    """

    @property
    def width(self) -> int:
        ...

    @property
    def height(self) -> int:
        ...

    def resize(self, width: int, height: int) -> None:
        ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        ...

    def set_blur(self, radius: float) -> None:
        ...

    def fill_circle(self, cx: float, cy: float, r: float, color: Color) -> None:
        ...

    def snapshot(self) -> Image.Image:
        """Independent copy of the current pixels"""
        ...


class PillowSurface:
    """
    RenderSurface on top of an RGB PIL image

    Blurred circles are drawn into a grayscale coverage mask that extends
    3 sigma past the circle, blurred, cropped to the canvas and used to
    paste the solid color. Unblurred circles are drawn directly.

    Example:
        surface = PillowSurface(960, 540)
        surface.fill_rect(0, 0, 960, 540, Color.white())
        surface.set_blur(80)
        surface.fill_circle(480, 270, 160, Color.from_hex("#957DAD"))
        frame = surface.snapshot()
    """

    def __init__(self, width: int, height: int, background: Optional[Color] = None):
        self._image: Optional[Image.Image] = None
        self._draw: Optional[ImageDraw.ImageDraw] = None
        self._blur: float = 0.0
        self._background = background or Color.white()
        self.resize(width, height)

    # === Lifecycle ===

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise SurfaceUnavailableError()
        return self._image

    @property
    def is_open(self) -> bool:
        return self._image is not None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def resize(self, width: int, height: int) -> None:
        """Replace the backing image; previous pixels are discarded"""
        if width < 1 or height < 1:
            raise SurfaceUnavailableError(f"Invalid surface size {width}x{height}")
        self._image = Image.new("RGB", (int(width), int(height)), self._background.to_rgb())
        self._draw = ImageDraw.Draw(self._image)

    def close(self) -> None:
        self._image = None
        self._draw = None

    def _canvas(self):
        if self._image is None or self._draw is None:
            raise SurfaceUnavailableError()
        return self._image, self._draw

    # === Primitives ===

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        if w <= 0 or h <= 0:
            return
        _, draw = self._canvas()
        # Pillow rectangles are inclusive of the far edge
        draw.rectangle([x, y, x + w - 1, y + h - 1], fill=color.to_rgb())

    def set_blur(self, radius: float) -> None:
        self._blur = max(0.0, float(radius))

    @property
    def blur(self) -> float:
        return self._blur

    def fill_circle(self, cx: float, cy: float, r: float, color: Color) -> None:
        image, draw = self._canvas()
        if r <= 0:
            return

        if self._blur <= 0:
            draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=color.to_rgb())
            return

        margin = math.ceil(3 * self._blur)
        left = math.floor(cx - r) - margin
        top = math.floor(cy - r) - margin
        right = math.ceil(cx + r) + margin
        bottom = math.ceil(cy + r) + margin

        # Visible part of the blurred footprint
        vis_left = max(0, left)
        vis_top = max(0, top)
        vis_right = min(image.width, right)
        vis_bottom = min(image.height, bottom)
        if vis_left >= vis_right or vis_top >= vis_bottom:
            return

        mask = Image.new("L", (right - left, bottom - top), 0)
        ImageDraw.Draw(mask).ellipse(
            [cx - r - left, cy - r - top, cx + r - left, cy + r - top],
            fill=255,
        )
        mask = mask.filter(ImageFilter.GaussianBlur(self._blur))
        mask = mask.crop((vis_left - left, vis_top - top, vis_right - left, vis_bottom - top))

        image.paste(color.to_rgb(), (vis_left, vis_top, vis_right, vis_bottom), mask)

    # === Readback ===

    def snapshot(self) -> Image.Image:
        return self.image.copy()

    def get_pixel(self, x: int, y: int):
        return self.image.getpixel((x, y))
