# config.py
"""
Config loader for the virtual plant.

Provides a single entry `load_config(path=None)` that reads YAML config from
`config/defaults.yaml` by default and returns a nested dict. Values in the
file are merged over the built-in defaults below, so a partial file is fine.
Also exposes `get_default_config()` and per-section helpers.
"""

import os
import copy
import logging
import yaml

logger = logging.getLogger(__name__)

DEFAULT_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'config', 'defaults.yaml'))

DEFAULTS = {
    'plant': {},
    'session': {
        'tick_interval_s': 10,
        'fast_scale': 60,
        'fast_mode': False,
    },
    'storage': {
        'path': '~/.virtual-plant/state.json',
    },
    'render': {
        'cell_px': 10,
        'default_ascii_mode': True,
    },
}


def _merge(base, override):
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path=None):
    """Load YAML config and return a dict merged over DEFAULTS.

    An explicit `path` must exist; the default file is optional.
    """
    p = path or DEFAULT_PATH
    if not os.path.exists(p):
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {p}")
        logger.debug("No config at %s, using built-in defaults", p)
        return copy.deepcopy(DEFAULTS)
    with open(p, 'r') as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file {p} must contain a mapping")
    return _merge(DEFAULTS, cfg)


def get_default_config():
    return load_config(DEFAULT_PATH)


def plant_config(cfg):
    return cfg.get('plant', {}) or {}


def session_config(cfg):
    return cfg.get('session', {}) or {}


def storage_config(cfg):
    return cfg.get('storage', {}) or {}


def render_config(cfg):
    return cfg.get('render', {}) or {}


if __name__ == '__main__':
    print(load_config())
