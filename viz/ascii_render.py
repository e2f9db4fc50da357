# viz/ascii_render.py
"""
ASCII plant renderer. Draws into a 32 x 18 character grid with a title line.
"""

from dataclasses import dataclass, field
from typing import List

from sim.stages import STAGES, MAX_STAGE

WIDTH = 32
HEIGHT = 18

STEM_X = 16
POT_TOP = 13


@dataclass
class TextScene:
    width: int = WIDTH
    height: int = HEIGHT
    grid: List[List[str]] = field(default_factory=list)

    def __post_init__(self):
        if not self.grid:
            self.grid = [[' '] * self.width for _ in range(self.height)]

    def put(self, x, y, ch):
        # writes outside the canvas are dropped
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return
        self.grid[y][x] = ch

    @property
    def rows(self):
        return [''.join(r) for r in self.grid]

    @property
    def text(self):
        return '\n'.join(self.rows)


def _draw_pot(scene):
    y = POT_TOP
    for x in range(12, 20):
        scene.put(x, y, '_')
    scene.put(11, y + 1, '/')
    for x in range(12, 20):
        scene.put(x, y + 1, ' ')
    scene.put(20, y + 1, '\\')
    scene.put(11, y + 2, '|')
    for x in range(12, 20):
        scene.put(x, y + 2, '#')
    scene.put(20, y + 2, '|')
    scene.put(12, y + 3, '\\')
    for x in range(13, 19):
        scene.put(x, y + 3, '_')
    scene.put(19, y + 3, '/')


def _draw_leaf(scene, y, direction):
    scene.put(STEM_X + direction, y, '<' if direction < 0 else '>')
    scene.put(STEM_X + 2 * direction, y, '-')


def _draw_curl(scene, side, length):
    x = STEM_X + side
    y = 10
    for i in range(length):
        if i % 2 == 0:
            x += side
        if i % 3 != 0:
            y -= 1
        scene.put(x, y, '/' if side < 0 else '\\')
        if i % 4 == 0:
            scene.put(x + side, y, '*')


def render_ascii(stage_idx, state, stages=STAGES):
    scene = TextScene()
    _draw_pot(scene)

    stem_top = 11 - min(stage_idx * 2, 8)
    for y in range(12, stem_top - 1, -1):
        scene.put(STEM_X, y, '|')

    # (min stage, y, side)
    leaves = [(1, 11, -1), (1, 10, 1), (2, 9, -1), (2, 8, 1), (3, 7, -1), (3, 6, 1)]
    for min_stage, y, side in leaves:
        if stage_idx >= min_stage:
            _draw_leaf(scene, y, side)

    if stage_idx >= 4:
        seeded = int((state.created_at or 0) // 1000)
        length = 8 + 6 + seeded % 4
        _draw_curl(scene, -1, length)
        _draw_curl(scene, 1, length)

    if stage_idx >= MAX_STAGE:
        scene.put(STEM_X, stem_top - 1, '@')
        scene.put(STEM_X - 1, stem_top, '(')
        scene.put(STEM_X + 1, stem_top, ')')

    title = f"VIRTUAL PLANT  stage:{stage_idx + 1}/{len(stages)}"
    for i, ch in enumerate(title[:scene.width]):
        scene.grid[0][i] = ch

    return scene
