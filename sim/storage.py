# sim/storage.py
"""
Persistence for the plant.

The plant is stored as one JSON blob under a single key of a small
key -> string store. `JsonFileStore` keeps that store in a JSON file on disk,
`MemoryStore` keeps it in a dict. The display preference lives under its own
key and is independent of the plant record.
"""

import os
import json
import logging
import tempfile

from sim.plant import load_state_dict

logger = logging.getLogger(__name__)

STATE_KEY = 'virtualPlant.v1'
ASCII_MODE_KEY = 'virtualPlant.asciiMode'


class MemoryStore:
    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


class JsonFileStore:
    """Key/value store backed by a single JSON object on disk."""

    def __init__(self, path):
        self.path = os.path.abspath(os.path.expanduser(path))

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("Could not read store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store %s does not hold an object, ignoring it", self.path)
            return {}
        return data

    def _write(self, data):
        folder = os.path.dirname(self.path)
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix='.plant-', suffix='.json', dir=folder)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def get(self, key):
        return self._read().get(key)

    def set(self, key, value):
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key):
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class PlantStore:
    def __init__(self, kv):
        self.kv = kv

    def load(self):
        """Stored PlantState, or None if there is none or it is unusable."""
        raw = self.kv.get(STATE_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning("Stored plant state is not valid JSON: %s", e)
            return None
        return load_state_dict(data)

    def save(self, state):
        try:
            self.kv.set(STATE_KEY, json.dumps(state.to_dict()))
        except OSError as e:
            logger.error("Failed to save plant state: %s", e)
            return False
        return True

    def clear(self):
        self.kv.delete(STATE_KEY)

    def load_ascii_mode(self, default=True):
        pref = self.kv.get(ASCII_MODE_KEY)
        if pref is None:
            return default
        return pref == '1'

    def save_ascii_mode(self, enabled):
        try:
            self.kv.set(ASCII_MODE_KEY, '1' if enabled else '0')
        except OSError as e:
            logger.error("Failed to save display preference: %s", e)
            return False
        return True
