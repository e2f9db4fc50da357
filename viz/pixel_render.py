# viz/pixel_render.py
"""
Pixel-art plant renderer.

Draws the plant onto a 22 x 20 grid of cells. The result keeps both the
ordered draw list (useful for drawing with any backend) and an RGBA numpy
array of the final canvas. Later cells overwrite earlier ones.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from sim.plant import clamp
from sim.rng import XorShift32
from sim.stages import MAX_STAGE

WIDTH = 22
HEIGHT = 20

POT = '#c56b3c'
POT_DARK = '#9f4d24'
FLOWER = '#ff7ad9'
SPARKLE = '#ffffff'
SPARKLE_BLUE = '#6bd7ff'

# (leaf, stem) colour per health band
LUSH = ('#68e36b', '#2ea84a')
STRESSED = ('#b6df5a', '#7aa63b')
WILTING = ('#d6c56b', '#9a8e39')

STEM_X = 11
STEM_BASE = 14
STEM_CAP = 10


def hex_to_rgba(color):
    c = color.lstrip('#')
    return (int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16), 255)


def health_palette(health):
    health = clamp(health, 0, 100)
    if health > 60:
        return LUSH
    if health > 35:
        return STRESSED
    return WILTING


@dataclass
class PixelScene:
    width: int = WIDTH
    height: int = HEIGHT
    cells: List[Tuple[int, int, str]] = field(default_factory=list)

    def put(self, x, y, color):
        x = int(clamp(x, 0, self.width - 1))
        y = int(clamp(y, 0, self.height - 1))
        self.cells.append((x, y, color))

    def to_array(self):
        """RGBA uint8 array of shape (height, width, 4); empty cells are transparent."""
        arr = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        for x, y, color in self.cells:
            arr[y, x] = hex_to_rgba(color)
        return arr

    def color_at(self, x, y):
        found = None
        for cx, cy, color in self.cells:
            if cx == x and cy == y:
                found = color
        return found


def _draw_pot(scene):
    for x in range(7, 15):
        for y in (15, 16):
            scene.put(x, y, POT)
    for x in range(6, 16):
        scene.put(x, 17, POT_DARK)
    for x in range(7, 15):
        scene.put(x, 18, POT_DARK)


def _draw_leaf(scene, cx, cy, direction, color):
    scene.put(cx, cy, color)
    scene.put(cx + direction, cy, color)
    scene.put(cx + 2 * direction, cy + 1, color)
    scene.put(cx + direction, cy + 1, color)


def _draw_vine(scene, rng, side, stage_idx, vine_color, leaf_color):
    """One vine curling outward from mid-stem. The rng draw order is fixed."""
    x = STEM_X + side
    y = 12
    length = 10 + int(rng.random() * 6) + (4 if stage_idx >= MAX_STAGE else 0)

    for _ in range(length):
        drift = side if rng.chance(0.55) else 0
        x = int(clamp(x + drift, 0, WIDTH - 1))
        y = int(clamp(y - (1 if rng.chance(0.75) else 0), 0, HEIGHT - 2))
        scene.put(x, y, vine_color)

        if rng.chance(0.33):
            dy = 0 if rng.chance(0.5) else 1
            scene.put(x + side, y + dy, leaf_color)

        if stage_idx >= MAX_STAGE and rng.chance(0.10):
            scene.put(x, y - 1, FLOWER)


def render_pixels(stage_idx, state):
    """Pixel scene for the plant at `stage_idx`."""
    scene = PixelScene()
    green, dark = health_palette(state.health)

    _draw_pot(scene)

    stem_top = STEM_BASE - min(stage_idx * 2, STEM_CAP)
    for y in range(STEM_BASE, stem_top - 1, -1):
        scene.put(STEM_X, y, dark)

    # (min stage, y, side)
    leaves = [(2, 12, -1), (2, 11, 1), (3, 10, -1), (3, 9, 1), (4, 8, -1), (4, 7, 1)]
    for min_stage, y, side in leaves:
        if stage_idx >= min_stage:
            _draw_leaf(scene, STEM_X, y, side, green)

    if stage_idx >= 4:
        rng = XorShift32.from_created_at(state.created_at)
        _draw_vine(scene, rng, -1, stage_idx, dark, green)
        _draw_vine(scene, rng, 1, stage_idx, dark, green)

    if stage_idx >= MAX_STAGE:
        scene.put(STEM_X, stem_top - 1, FLOWER)
        scene.put(STEM_X - 1, stem_top, FLOWER)
        scene.put(STEM_X + 1, stem_top, FLOWER)
        scene.put(STEM_X, stem_top + 1, FLOWER)

    if state.health > 90 and state.hydration > 70:
        scene.put(3, 3, SPARKLE)
        scene.put(4, 3, SPARKLE_BLUE)
        scene.put(3, 4, SPARKLE_BLUE)

    return scene
