"""Persistent state map and config flag.

Both stores write through to a key-value backend on every mutation, so the
in-memory copy never diverges from storage by more than one call. Any object
exposing ``get_item(key)`` and ``set_item(key, value)`` works as a backend;
see :mod:`app.backend.sql_store` and :mod:`app.backend.mock_store`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from .models import StateMap, TrackerConfig

logger = logging.getLogger(__name__)

STATE_KEY = "shiny_dex_state"
CONFIG_KEY = "shiny_dex_config_grayscale"


def decode_state(raw: Optional[str]) -> StateMap:
    """Turn a persisted state value into a canonical state map.

    Accepts the legacy list form (every listed id counts once) and the
    current ``{id: count}`` mapping. Anything else yields an empty map.
    """

    if raw is None:
        return {}
    try:
        parsed: Any = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error("Failed to load state: %s", e)
        return {}

    if isinstance(parsed, list):
        return {str(item_id): 1 for item_id in parsed}
    if isinstance(parsed, dict):
        state: StateMap = {}
        for item_id, count in parsed.items():
            # bool is an int subclass but never a valid count
            if isinstance(count, int) and not isinstance(count, bool) and count > 0:
                state[str(item_id)] = count
            else:
                logger.warning("Dropping invalid count %r for %s", count, item_id)
        return state

    logger.warning("Ignoring persisted state of type %s", type(parsed).__name__)
    return {}


class StateStore:
    """Mapping of item id to a positive count; a missing id counts as 0."""

    def __init__(self, backend, key: str = STATE_KEY) -> None:
        self.backend = backend
        self.key = key
        self._state: StateMap = {}

    def load(self) -> StateMap:
        try:
            raw = self.backend.get_item(self.key)
        except Exception as e:
            logger.error("Failed to read state from storage: %s", e)
            raw = None
        self._state = decode_state(raw)
        logger.info("Loaded %d obtained items", len(self._state))
        return dict(self._state)

    def save(self) -> None:
        self.backend.set_item(self.key, json.dumps(self._state))

    def get(self, item_id: str) -> int:
        return self._state.get(str(item_id), 0)

    def set(self, item_id: str, count: int) -> int:
        item_id = str(item_id)
        if count <= 0:
            self._state.pop(item_id, None)
            count = 0
        else:
            self._state[item_id] = int(count)
        self.save()
        logger.debug(json.dumps({"event": "set", "id": item_id, "count": count}))
        return count

    def toggle(self, item_id: str) -> int:
        """Flip between absent and a count of exactly 1; returns the new count."""
        return self.set(item_id, 0 if self.get(item_id) > 0 else 1)

    def clear(self) -> None:
        self._state = {}
        self.save()

    def items(self) -> Dict[str, int]:
        return dict(self._state)

    def total(self) -> int:
        return sum(self._state.values())

    def __contains__(self, item_id: object) -> bool:
        return str(item_id) in self._state

    def __len__(self) -> int:
        return len(self._state)


class ConfigStore:
    """The single ``desaturate_on_single_count`` preference."""

    def __init__(self, backend, key: str = CONFIG_KEY) -> None:
        self.backend = backend
        self.key = key
        self.config = TrackerConfig()

    def load(self) -> TrackerConfig:
        try:
            raw = self.backend.get_item(self.key)
        except Exception as e:
            logger.error("Failed to read config from storage: %s", e)
            raw = None
        if raw is None:
            self.config = TrackerConfig()
        else:
            self.config = TrackerConfig(desaturate_on_single_count=str(raw) == "true")
        return self.config

    def set(self, value: bool) -> TrackerConfig:
        self.config = TrackerConfig(desaturate_on_single_count=bool(value))
        self.backend.set_item(self.key, "true" if value else "false")
        return self.config

    @property
    def desaturate(self) -> bool:
        return self.config.desaturate_on_single_count
