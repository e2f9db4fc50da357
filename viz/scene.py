# viz/scene.py
"""
Single entry point for rendering a plant in either display mode.
"""

from viz.ascii_render import render_ascii
from viz.pixel_render import render_pixels

PIXEL = 'pixel'
TEXT = 'text'
MODES = (PIXEL, TEXT)


def render(stage_idx, state, mode=PIXEL):
    """Returns a PixelScene or TextScene. Same inputs always give the same scene."""
    if mode == PIXEL:
        return render_pixels(stage_idx, state)
    if mode == TEXT:
        return render_ascii(stage_idx, state)
    raise ValueError(f"Unknown render mode: {mode!r} (expected one of {MODES})")
