# sim/plant.py
"""
PlantModel
-----------
Time-stepped dynamics for the virtual plant.

Two resources drive growth:
  - hydration decays linearly with time and is restored by watering
  - health trends toward a hydration set-point (drier pulls it down,
    wetter pulls it up)

Growth accumulates at a rate scaled by both resources and by a temporary
sunlight boost. Resources are on a 0–100 scale, instants are epoch
milliseconds, and all transitions return a new PlantState.
"""

import math
import logging
from collections import namedtuple
from dataclasses import dataclass, asdict, replace
from typing import Optional

import numpy as np

from sim.stages import STAGES, stage_index, remaining_growth

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000

BASE_GROWTH_PER_HOUR = 6.0
HYDRATION_DECAY_PER_HOUR = 8.0
HEALTH_SETPOINT = 55.0
HEALTH_TREND_PER_HOUR = 10.0
SUN_BOOST = 1.35
SUN_BOOST_MS = 30 * 60 * 1000
STALL_RATE = 0.2

# key in the persisted blob -> dataclass field
_FIELD_KEYS = {
    'createdAt': 'created_at',
    'lastTickAt': 'last_tick_at',
    'growth': 'growth',
    'hydration': 'hydration',
    'health': 'health',
    'lastActionAt': 'last_action_at',
    'sunlightBoostUntil': 'sunlight_boost_until',
}
_REQUIRED_KEYS = ('createdAt', 'lastTickAt', 'growth', 'hydration', 'health')


class InvalidStateError(ValueError):
    """Raised when a persisted blob cannot be turned into a PlantState."""


def clamp(n, lo, hi):
    return float(np.clip(n, lo, hi))


@dataclass
class PlantState:
    created_at: int
    last_tick_at: int
    growth: float = 0.0
    hydration: float = 70.0
    health: float = 85.0
    last_action_at: int = 0
    sunlight_boost_until: int = 0

    def to_dict(self):
        """Serializable form, using the same keys as the stored blob."""
        d = asdict(self)
        return {key: d[attr] for key, attr in _FIELD_KEYS.items()}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise InvalidStateError(f"expected an object, got {type(data).__name__}")
        missing = [k for k in _REQUIRED_KEYS if k not in data]
        if missing:
            raise InvalidStateError(f"missing keys: {', '.join(missing)}")

        values = {}
        for key, attr in _FIELD_KEYS.items():
            raw = data.get(key, 0)
            if raw is None and key not in _REQUIRED_KEYS:
                raw = 0
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise InvalidStateError(f"{key} is not a number: {raw!r}")
            try:
                finite = math.isfinite(raw)
            except OverflowError:
                finite = False
            if not finite:
                raise InvalidStateError(f"{key} is not finite")
            values[attr] = raw

        if values['growth'] < 0:
            raise InvalidStateError("growth must be >= 0")
        for attr in ('hydration', 'health'):
            if not 0 <= values[attr] <= 100:
                raise InvalidStateError(f"{attr} out of range: {values[attr]}")
        if values['last_action_at'] == 0 and 'lastActionAt' not in data:
            values['last_action_at'] = values['created_at']
        return cls(**values)


EtaEstimate = namedtuple('EtaEstimate', ['kind', 'ms', 'rate', 'remaining'])
ETA_MAX = 'max'
ETA_NEEDS_CARE = 'needs_care'
ETA_OK = 'eta'


class PlantModel:
    def __init__(self, cfg=None):
        cfg = cfg or {}

        # Dynamics parameters
        self.base_growth = cfg.get('base_growth_per_hour', BASE_GROWTH_PER_HOUR)
        self.hydration_decay = cfg.get('hydration_decay_per_hour', HYDRATION_DECAY_PER_HOUR)
        self.health_setpoint = cfg.get('health_setpoint', HEALTH_SETPOINT)
        self.health_trend = cfg.get('health_trend_per_hour', HEALTH_TREND_PER_HOUR)
        self.hydration_ref = cfg.get('hydration_ref', 80.0)
        self.health_ref = cfg.get('health_ref', 85.0)
        self.factor_cap = cfg.get('factor_cap', 1.2)
        self.sun_boost = cfg.get('sun_boost', SUN_BOOST)
        self.sun_boost_ms = cfg.get('sun_boost_minutes', SUN_BOOST_MS / 60000) * 60000
        self.stall_rate = cfg.get('stall_rate', STALL_RATE)

        # Action effects
        self.water_hydration = cfg.get('water_hydration', 25.0)
        self.water_health = cfg.get('water_health', 4.0)
        self.sun_health = cfg.get('sun_health', 2.0)

        # Fresh plant
        self.initial_hydration = cfg.get('initial_hydration', 70.0)
        self.initial_health = cfg.get('initial_health', 85.0)

        self.stages = STAGES

    # Lifecycle -----------------------------------------------------------
    def new_plant(self, now):
        t = int(now)
        return PlantState(
            created_at=t,
            last_tick_at=t,
            growth=0.0,
            hydration=self.initial_hydration,
            health=self.initial_health,
            last_action_at=t,
            sunlight_boost_until=0,
        )

    # Rates ---------------------------------------------------------------
    def sun_factor(self, state, now):
        return self.sun_boost if now < state.sunlight_boost_until else 1.0

    def growth_rate(self, state, now):
        """Growth points per hour under the current conditions."""
        hydration_factor = clamp(state.hydration / self.hydration_ref, 0, self.factor_cap)
        health_factor = clamp(state.health / self.health_ref, 0, self.factor_cap)
        return self.base_growth * hydration_factor * health_factor * self.sun_factor(state, now)

    # Step update ---------------------------------------------------------
    def advance(self, state, elapsed_ms, time_scale=1.0, now=None):
        """
        Integrates the dynamics over `elapsed_ms` of wall time.

        elapsed_ms: wall-clock milliseconds since last_tick_at, negatives
            (clock skew) count as zero
        time_scale: simulated hours per real hour (60 for fast mode)
        now: instant the tick happens at; defaults to last_tick_at + elapsed
        """
        elapsed_ms = max(0, elapsed_ms)
        if now is None:
            now = state.last_tick_at + elapsed_ms
        hours = elapsed_ms * time_scale / MS_PER_HOUR

        hydration = clamp(state.hydration - hours * self.hydration_decay, 0, 100)

        # Health follows the hydration value just computed for this tick
        delta = (hydration - self.health_setpoint) / self.health_setpoint
        health = clamp(state.health + hours * delta * self.health_trend, 0, 100)

        stepped = replace(state, hydration=hydration, health=health)
        rate = self.growth_rate(stepped, now)
        growth = max(state.growth, state.growth + hours * rate)

        return replace(stepped, growth=growth, last_tick_at=max(state.last_tick_at, int(now)))

    def tick(self, state, now, time_scale=1.0):
        return self.advance(state, now - state.last_tick_at, time_scale, now=now)

    # Actions -------------------------------------------------------------
    def water(self, state, now):
        return replace(
            state,
            hydration=clamp(state.hydration + self.water_hydration, 0, 100),
            health=clamp(state.health + self.water_health, 0, 100),
            last_action_at=int(now),
        )

    def apply_sunlight(self, state, now):
        return replace(
            state,
            sunlight_boost_until=int(now + self.sun_boost_ms),
            health=clamp(state.health + self.sun_health, 0, 100),
            last_action_at=int(now),
        )

    # Stage ---------------------------------------------------------------
    def stage(self, state):
        return stage_index(state.growth, self.stages)

    def eta(self, state, now):
        """Estimated time to the next stage assuming current conditions hold."""
        idx = self.stage(state)
        remaining = remaining_growth(state.growth, self.stages)
        rate = self.growth_rate(state, now)
        if idx == len(self.stages) - 1:
            return EtaEstimate(ETA_MAX, None, rate, 0.0)
        if rate <= self.stall_rate:
            return EtaEstimate(ETA_NEEDS_CARE, None, rate, remaining)
        return EtaEstimate(ETA_OK, remaining / rate * MS_PER_HOUR, rate, remaining)

    # Offline runs --------------------------------------------------------
    def trace(self, state, hours, step_hours=1.0, water_every=None, sun_every=None):
        """
        Simulates `hours` of plant time from `state` without a clock.

        water_every / sun_every: apply the action every N steps (None = never)
        Returns (final_state, log) where log is a dict of lists keyed by
        'time', 'growth', 'hydration', 'health', 'stage'.
        """
        log = {'time': [], 'growth': [], 'hydration': [], 'health': [], 'stage': []}
        step_ms = int(step_hours * MS_PER_HOUR)
        n_steps = int(math.ceil(hours / step_hours)) if step_hours > 0 else 0

        def record(t, s):
            log['time'].append(t)
            log['growth'].append(s.growth)
            log['hydration'].append(s.hydration)
            log['health'].append(s.health)
            log['stage'].append(self.stage(s))

        record(0.0, state)
        for i in range(1, n_steps + 1):
            now = state.last_tick_at + step_ms
            state = self.advance(state, step_ms, 1.0, now=now)
            if water_every and i % water_every == 0:
                state = self.water(state, now)
            if sun_every and i % sun_every == 0:
                state = self.apply_sunlight(state, now)
            record(i * step_hours, state)
        return state, log


DEFAULT_MODEL = PlantModel()


def new_plant(now):
    return DEFAULT_MODEL.new_plant(now)


def advance(state, elapsed_ms, time_scale=1.0, now=None):
    return DEFAULT_MODEL.advance(state, elapsed_ms, time_scale, now)


def water(state, now):
    return DEFAULT_MODEL.water(state, now)


def apply_sunlight(state, now):
    return DEFAULT_MODEL.apply_sunlight(state, now)


def growth_rate(state, now):
    return DEFAULT_MODEL.growth_rate(state, now)


def eta(state, now) -> EtaEstimate:
    return DEFAULT_MODEL.eta(state, now)


def load_state_dict(data) -> Optional[PlantState]:
    """Like PlantState.from_dict but returns None for anything unusable."""
    try:
        return PlantState.from_dict(data)
    except InvalidStateError as e:
        logger.warning("Discarding stored plant state: %s", e)
        return None
