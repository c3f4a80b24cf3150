"""
Rendering engine

- surface: RenderSurface protocol + Pillow-backed surface
- frame_renderer: paints one frame for a loop time
- preview_loop: live preview scheduler
"""
