from __future__ import annotations

from typing import Dict, Optional

from app.diag.tracer import trace


class MemoryKeyValue:
    """In-process stand-in for :class:`app.backend.sql_store.SqlKeyValue`."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        trace("kv_get", key=key, hit=key in self.data)
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = str(value)
        trace("kv_set", key=key, size=len(self.data[key]))

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)
        trace("kv_remove", key=key)

    def clear(self) -> None:
        self.data.clear()
        trace("kv_clear")
