"""Persistent key/value settings with a per-instance cache.

Values are JSON-encoded into the ``settings`` table. Each ``SettingsStore`` is
constructed for one database session and owns its cache; call
``invalidate()`` to drop cached values.
"""

import json
import logging
from typing import Any

from sqlalchemy.orm import Session

from backend.app.models.setting import Setting

logger = logging.getLogger(__name__)

_MISSING = object()


class SettingsStore:
    def __init__(self, db: Session):
        self.db = db
        self._cache: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        """Return the decoded value for ``key`` or None when it is not set."""
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        row = self.db.get(Setting, key)
        value = json.loads(row.value) if row is not None else None
        self._cache[key] = value
        return value

    def set(self, key: str, value: Any, category: str = "general") -> Setting:
        row = self.db.get(Setting, key)
        encoded = json.dumps(value)
        if row is None:
            row = Setting(key=key, value=encoded, category=category)
            self.db.add(row)
        else:
            row.value = encoded
            row.category = category
        self.db.commit()
        self.db.refresh(row)
        self._cache[key] = value
        logger.debug("Stored setting %s in category %s", key, category)
        return row

    def delete(self, key: str) -> bool:
        row = self.db.get(Setting, key)
        self._cache.pop(key, None)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def get_category(self, category: str) -> dict[str, Any]:
        rows = self.db.query(Setting).filter(Setting.category == category).order_by(Setting.key.asc()).all()
        return {row.key: json.loads(row.value) for row in rows}

    def all(self) -> list[Setting]:
        return self.db.query(Setting).order_by(Setting.category.asc(), Setting.key.asc()).all()

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._cache.clear()
        else:
            self._cache.pop(key, None)
