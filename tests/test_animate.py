from PIL import Image

from sim.plant import PlantState, MS_PER_HOUR
from viz.animate import scene_to_image, save_png, render_timelapse_frames, frames_to_gif, BACKGROUND
from viz.pixel_render import render_pixels, WIDTH, HEIGHT

T0 = 1_700_000_000_000


def test_scene_to_image_scales_cells():
    scene = render_pixels(0, PlantState(T0, T0))
    img = scene_to_image(scene, cell_px=4)
    assert img.size == (WIDTH * 4, HEIGHT * 4)
    assert img.getpixel((0, 0)) == BACKGROUND
    # pot cell (7, 15)
    assert img.getpixel((7 * 4 + 1, 15 * 4 + 1)) == (0xc5, 0x6b, 0x3c, 255)


def test_save_png(tmp_path):
    out = save_png(render_pixels(5, PlantState(T0, T0, growth=300)), str(tmp_path / 'out' / 'p.png'))
    with Image.open(out) as img:
        assert img.size == (WIDTH * 10, HEIGHT * 10)


def test_timelapse_with_zero_step_renders_one_frame():
    frames = render_timelapse_frames(PlantState(T0, T0), hours=6, step_hours=0, cell_px=2)
    assert len(frames) == 1


def test_timelapse_frames_and_gif(tmp_path):
    frames = render_timelapse_frames(PlantState(T0, T0), hours=6, step_hours=2.0, cell_px=2)
    assert len(frames) == 4
    out = frames_to_gif(frames, str(tmp_path / 'grow.gif'), fps=4)
    with Image.open(out) as img:
        assert img.n_frames >= 1
