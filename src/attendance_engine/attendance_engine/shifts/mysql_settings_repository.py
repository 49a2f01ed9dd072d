from __future__ import annotations

import json
from typing import Optional

from ..core.exceptions import ConfigurationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceSettings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    """Settings are stored as one JSON document in a single-row table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def load(self) -> Optional[AttendanceSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT payload FROM attendance_settings WHERE settings_id=1")
            r = fetchone(cur)
            if not r:
                return None
            payload = r["payload"]
            if isinstance(payload, (bytes, bytearray)):
                payload = payload.decode("utf-8")
            try:
                data = json.loads(payload)
            except ValueError as e:
                raise ConfigurationError(f"Stored attendance settings are not valid JSON: {e}") from e
            return AttendanceSettings.from_dict(data)

    def save(self, settings: AttendanceSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_settings(settings_id, payload)
                VALUES(1, %s)
                ON DUPLICATE KEY UPDATE payload=VALUES(payload)
                """,
                (json.dumps(settings.to_dict()),),
            )
