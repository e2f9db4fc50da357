# sim/session.py
"""
PlantSession
------------
Glue between the plant dynamics and whatever displays them.

The session owns the current PlantState, the store it is persisted in, the
clock, and the display preferences (fast mode, ascii mode). Two kinds of
calls change the plant:
  - tick(): the scheduler tick, advances by wall time since the last tick
  - water() / sunlight() / reset(): user actions

Every change is saved straight away. Nothing here draws anything; callers
ask for `scene()` and `status()` and display them.
"""

import time
import logging

from sim.clock import SystemClock
from sim.plant import PlantModel, ETA_MAX, ETA_NEEDS_CARE
from sim.stages import stage_label
from viz.scene import render, PIXEL, TEXT

logger = logging.getLogger(__name__)


def format_duration(ms):
    """Compact human duration: '2d 3h', '4h 12m', '7m' or '42s'."""
    s = int(max(0, ms) // 1000)
    m = s // 60
    h = m // 60
    d = h // 24
    if d > 0:
        return f"{d}d {h % 24}h"
    if h > 0:
        return f"{h}h {m % 60}m"
    if m > 0:
        return f"{m}m"
    return f"{s}s"


class PlantSession:
    def __init__(self, store, clock=None, cfg=None, model=None):
        cfg = cfg or {}
        session_cfg = cfg.get('session', {}) or {}
        render_cfg = cfg.get('render', {}) or {}

        self.store = store
        self.clock = clock or SystemClock()
        self.model = model or PlantModel(cfg.get('plant', {}) or {})

        self.fast_scale = session_cfg.get('fast_scale', 60)
        self.tick_interval_s = session_cfg.get('tick_interval_s', 10)
        self.fast_mode = bool(session_cfg.get('fast_mode', False))
        self.ascii_mode = store.load_ascii_mode(render_cfg.get('default_ascii_mode', True))
        self.message = ''

        state = store.load()
        if state is None:
            logger.info("No usable saved plant, planting a new seed")
            state = self.model.new_plant(self.clock.now())
        self.state = state

    @property
    def time_scale(self):
        return self.fast_scale if self.fast_mode else 1

    @property
    def stage(self):
        return self.model.stage(self.state)

    def _commit(self, state):
        self.state = state
        self.store.save(state)
        return state

    # Scheduler -----------------------------------------------------------
    def tick(self):
        now = self.clock.now()
        before = self.stage
        state = self._commit(self.model.tick(self.state, now, self.time_scale))
        after = self.model.stage(state)
        if after != before:
            logger.info("Plant reached stage %s", stage_label(after))
        logger.debug("tick growth=%.3f hydration=%.2f health=%.2f",
                     state.growth, state.hydration, state.health)
        return state

    # Actions -------------------------------------------------------------
    def water(self):
        self.state = self.model.water(self.state, self.clock.now())
        self.message = 'Watered.'
        return self.tick()

    def sunlight(self):
        self.state = self.model.apply_sunlight(self.state, self.clock.now())
        minutes = int(self.model.sun_boost_ms // 60000)
        self.message = f'Sunlight boost for {minutes} minutes.'
        return self.tick()

    def reset(self):
        self.message = 'New seed planted.'
        logger.info("Plant reset")
        return self._commit(self.model.new_plant(self.clock.now()))

    def dispatch(self, action):
        """Run a named user action ('water', 'sun', 'reset')."""
        handlers = {
            'water': self.water,
            'sun': self.sunlight,
            'sunlight': self.sunlight,
            'reset': self.reset,
        }
        if action not in handlers:
            raise ValueError(f"Unknown action: {action!r}")
        return handlers[action]()

    # Display preferences -------------------------------------------------
    def set_ascii_mode(self, enabled):
        self.ascii_mode = bool(enabled)
        self.store.save_ascii_mode(self.ascii_mode)

    def toggle_ascii_mode(self):
        self.set_ascii_mode(not self.ascii_mode)
        return self.ascii_mode

    def set_fast_mode(self, enabled):
        self.fast_mode = bool(enabled)

    # Output --------------------------------------------------------------
    def scene(self, mode=None):
        mode = mode or (TEXT if self.ascii_mode else PIXEL)
        return render(self.stage, self.state, mode)

    def status(self, now=None):
        now = self.clock.now() if now is None else now
        state = self.state
        est = self.model.eta(state, now)
        if est.kind == ETA_MAX:
            next_text = 'Max stage'
        elif est.kind == ETA_NEEDS_CARE:
            next_text = '— (needs care)'
        else:
            next_text = format_duration(est.ms)
        return {
            'stage': stage_label(self.model.stage(state), self.model.stages),
            'age': format_duration(now - state.created_at),
            'hydration': f"{round(state.hydration)}%",
            'health': f"{round(state.health)}%",
            'next': next_text,
            'message': self.message,
        }

    def run(self, max_ticks=None, on_tick=None, sleep=time.sleep):
        """
        Blocking timer loop: ticks once immediately, then once every
        `tick_interval_s` seconds. `max_ticks` bounds the timer ticks after
        the first one (None runs until interrupted).
        """
        n = 0
        self.tick()
        if on_tick:
            on_tick(self)
        while max_ticks is None or n < max_ticks:
            sleep(self.tick_interval_s)
            self.tick()
            n += 1
            if on_tick:
                on_tick(self)
