#!/usr/bin/env python3
"""
main.py - Command line front end for the virtual plant

Usage examples:
    python main.py status
    python main.py water
    python main.py sun
    python main.py show --mode text
    python main.py run --fast --ticks 30
    python main.py export_png --out plant.png
    python main.py timelapse --out timelapse.gif --hours 72
    python main.py plot --out plots/trace.png --hours 96 --water_every 4

Every command loads the saved plant (or plants a new seed), advances it to
the current time, and saves it again.
"""
import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from config import load_config, storage_config, render_config
from sim.clock import ManualClock
from sim.plant import PlantModel
from sim.session import PlantSession
from sim.storage import JsonFileStore, PlantStore
from viz.animate import save_png, render_timelapse_frames, frames_to_gif
from viz.plot_utils import plot_time_series, summarize
from viz.scene import PIXEL, TEXT

logger = logging.getLogger("main")


def setup_logging(verbose=False, log_file=None):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )


def make_session(args, cfg):
    path = args.state or storage_config(cfg).get('path')
    logger.debug("Using state file %s", path)
    store = PlantStore(JsonFileStore(path))
    session = PlantSession(store, cfg=cfg)
    if getattr(args, 'fast', False):
        session.set_fast_mode(True)
    return session


def print_status(session):
    s = session.status()
    print(f"Stage:     {s['stage']}")
    print(f"Age:       {s['age']}")
    print(f"Hydration: {s['hydration']}")
    print(f"Health:    {s['health']}")
    print(f"Next:      {s['next']}")
    if s['message']:
        print(s['message'])


def print_text_scene(session):
    print(session.scene(TEXT).text)


def cmd_status(args, cfg):
    session = make_session(args, cfg)
    session.tick()
    print_status(session)


def cmd_action(args, cfg):
    session = make_session(args, cfg)
    session.tick()
    session.dispatch(args.cmd)
    print_status(session)


def cmd_show(args, cfg):
    session = make_session(args, cfg)
    session.tick()
    mode = args.mode or (TEXT if session.ascii_mode else PIXEL)
    if mode == TEXT:
        print_text_scene(session)
    else:
        scene = session.scene(PIXEL)
        out = args.out or "plant.png"
        save_png(scene, out, cell_px=render_config(cfg).get('cell_px', 10))
        print(f"[main] Pixel scene saved to {out}")
    print_status(session)


def cmd_toggle_ascii(args, cfg):
    session = make_session(args, cfg)
    enabled = session.toggle_ascii_mode()
    print(f"[main] ASCII mode {'on' if enabled else 'off'}")


def cmd_run(args, cfg):
    session = make_session(args, cfg)
    if args.interval:
        session.tick_interval_s = args.interval

    def show(s):
        print("\n" * 2)
        if s.ascii_mode:
            print_text_scene(s)
        print_status(s)

    print(f"[main] Running (x{session.time_scale}, tick every {session.tick_interval_s}s). Ctrl+C to stop.")
    try:
        session.run(max_ticks=args.ticks, on_tick=show)
    except KeyboardInterrupt:
        print("\n[main] Stopped.")


def cmd_export_png(args, cfg):
    session = make_session(args, cfg)
    session.tick()
    out = args.out or "plant.png"
    save_png(session.scene(PIXEL), out, cell_px=args.cell_px or render_config(cfg).get('cell_px', 10))
    print(f"[main] Saved {out}")


def cmd_timelapse(args, cfg):
    session = make_session(args, cfg)
    session.tick()
    frames = render_timelapse_frames(
        session.state,
        hours=args.hours,
        step_hours=args.step,
        water_every=args.water_every,
        model=session.model,
        cell_px=render_config(cfg).get('cell_px', 10),
    )
    out = frames_to_gif(frames, out_path=args.out or "timelapse.gif", fps=args.fps)
    print(f"[main] Timelapse with {len(frames)} frames written to {out}")


def cmd_plot(args, cfg):
    model = PlantModel(cfg.get('plant', {}))
    clock = ManualClock(0)
    state = model.new_plant(clock.now())
    final, log = model.trace(state, hours=args.hours, step_hours=args.step,
                             water_every=args.water_every, sun_every=args.sun_every)
    out = plot_time_series(log, out_path=args.out or "plant_trace.png",
                           title=f"{args.hours}h run, water every {args.water_every or '-'} steps")
    summary = summarize(log)
    print(f"[main] Plot saved to {out}")
    print(f"[main] Final growth {summary['final_growth']:.1f}, "
          f"hydration {summary['final_hydration']:.1f}, health {summary['final_health']:.1f}")
    for name, t in summary['stage_reached_at'].items():
        print(f"  {name:<8} at {t:.1f}h")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Virtual plant")
    p.add_argument("--config", type=str, default=None, help="YAML config file")
    p.add_argument("--state", type=str, default=None, help="state file (overrides config storage.path)")
    p.add_argument("--log_file", type=str, default=None, help="also write logs to this file")
    p.add_argument("-v", "--verbose", action='store_true', help="debug logging")
    sub = p.add_subparsers(dest="cmd")

    sub.add_parser("status", help="Show the plant's status")
    sub.add_parser("water", help="Water the plant")
    sub.add_parser("sun", help="Give the plant a sunlight boost")
    sub.add_parser("reset", help="Plant a new seed")
    sub.add_parser("toggle_ascii", help="Toggle the saved ASCII display preference")

    s = sub.add_parser("show", help="Draw the plant")
    s.add_argument("--mode", choices=[PIXEL, TEXT], default=None, help="display mode (default: saved preference)")
    s.add_argument("--out", type=str, help="PNG output for pixel mode")

    r = sub.add_parser("run", help="Keep the plant ticking in the terminal")
    r.add_argument("--interval", type=float, default=None, help="seconds between ticks")
    r.add_argument("--ticks", type=int, default=None, help="stop after this many ticks")
    r.add_argument("--fast", action='store_true', help="1 minute real time = 1 hour plant time")

    e = sub.add_parser("export_png", help="Save the pixel scene as PNG")
    e.add_argument("--out", type=str, help="output filename")
    e.add_argument("--cell_px", type=int, default=None, help="pixels per cell")

    t = sub.add_parser("timelapse", help="Simulate ahead and write an animated GIF")
    t.add_argument("--out", type=str, help="output filename")
    t.add_argument("--hours", type=float, default=48, help="plant hours to simulate")
    t.add_argument("--step", type=float, default=1.0, help="plant hours per frame")
    t.add_argument("--water_every", type=int, default=3, help="water every N frames (0 = never)")
    t.add_argument("--fps", type=int, default=6)

    pl = sub.add_parser("plot", help="Plot an offline run from a fresh seed")
    pl.add_argument("--out", type=str, help="output filename")
    pl.add_argument("--hours", type=float, default=72)
    pl.add_argument("--step", type=float, default=0.5, help="plant hours per step")
    pl.add_argument("--water_every", type=int, default=6, help="water every N steps (0 = never)")
    pl.add_argument("--sun_every", type=int, default=0, help="sunlight every N steps (0 = never)")

    return p.parse_args(argv)


COMMANDS = {
    "status": cmd_status,
    "water": cmd_action,
    "sun": cmd_action,
    "reset": cmd_action,
    "show": cmd_show,
    "toggle_ascii": cmd_toggle_ascii,
    "run": cmd_run,
    "export_png": cmd_export_png,
    "timelapse": cmd_timelapse,
    "plot": cmd_plot,
}


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)
    if not args.cmd:
        print("No command given. Use -h to see options.")
        return 1
    cfg = load_config(args.config)
    handler = COMMANDS.get(args.cmd)
    if handler is None:
        print("Unknown command:", args.cmd)
        return 1
    handler(args, cfg)
    return 0


if __name__ == "__main__":
    sys.exit(main())
