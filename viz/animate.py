# viz/animate.py
"""
Image output for the plant.

Provides functions to:
- turn a PixelScene into a PIL image (one square block per cell)
- save a single frame as PNG
- render a growth timelapse into an animated GIF

Requires Pillow, and imageio (v3 API) for the GIF.
"""

import os
import logging

import imageio.v3 as iio
import numpy as np
from PIL import Image

from sim.plant import DEFAULT_MODEL, MS_PER_HOUR
from viz.pixel_render import render_pixels

logger = logging.getLogger(__name__)

BACKGROUND = (18, 22, 28, 255)


def scene_to_image(scene, cell_px=10, background=BACKGROUND):
    """Scale the scene up by `cell_px` and flatten it onto `background`."""
    arr = scene.to_array()
    big = np.kron(arr, np.ones((cell_px, cell_px, 1), dtype=np.uint8))
    img = Image.fromarray(big)
    base = Image.new('RGBA', img.size, background)
    return Image.alpha_composite(base, img)


def save_png(scene, out_path='plant.png', cell_px=10):
    folder = os.path.dirname(out_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    scene_to_image(scene, cell_px=cell_px).save(out_path)
    logger.info("Saved plant image to %s", out_path)
    return out_path


def render_timelapse_frames(state, hours=48, step_hours=1.0, water_every=3, model=None, cell_px=10):
    """Simulate forward from `state` and render one frame per step."""
    model = model or DEFAULT_MODEL
    frames = []
    step_ms = int(step_hours * MS_PER_HOUR)
    steps = int(hours / step_hours) if step_hours > 0 else 0
    for i in range(steps + 1):
        frames.append(scene_to_image(render_pixels(model.stage(state), state), cell_px=cell_px))
        now = state.last_tick_at + step_ms
        state = model.advance(state, step_ms, 1.0, now=now)
        if water_every and (i + 1) % water_every == 0:
            state = model.water(state, now)
    return frames


def frames_to_gif(frames, out_path='timelapse.gif', fps=6):
    """Stitch PIL frames into an animated GIF using imageio."""
    folder = os.path.dirname(out_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    images = [np.asarray(f.convert('RGB')) for f in frames]
    iio.imwrite(out_path, np.stack(images), duration=int(1000 / fps), loop=0)
    logger.info("Wrote timelapse (%d frames) to %s", len(images), out_path)
    return out_path
