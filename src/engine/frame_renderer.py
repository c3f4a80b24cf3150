"""
FrameRenderer - Paints one scene frame for a given loop time

Pure with respect to t: the surface contents after draw_frame depend only
on (scene, t), never on previous calls. Preview and export both render
through here.
"""

from __future__ import annotations

from animations.motion import blob_position
from engine.surface import RenderSurface
from models.scene import Scene


class FrameRenderer:
    """
    Draws background + blobs onto a RenderSurface

    Order:
    1. Resize surface to scene dimensions if needed
    2. Fill background
    3. Set blur once (applies uniformly to every blob)
    4. Paint blobs in list order (later blobs occlude earlier ones)
    5. Reset blur
    """

    def __init__(self):
        self.frames_drawn = 0

    def draw_frame(self, surface: RenderSurface, scene: Scene, t: float) -> None:
        config = scene.config

        if surface.width != config.width or surface.height != config.height:
            surface.resize(config.width, config.height)

        surface.fill_rect(0, 0, config.width, config.height, config.background_color)
        surface.set_blur(config.blur)

        for blob in scene.blobs:
            pos = blob_position(blob, t, config)
            surface.fill_circle(pos.x, pos.y, pos.r, blob.color)

        surface.set_blur(0)
        self.frames_drawn += 1
