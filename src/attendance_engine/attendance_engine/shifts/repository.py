from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSettings


class SettingsRepository(Protocol):
    def load(self) -> Optional[AttendanceSettings]:
        """Return the persisted settings, or None when nothing was saved yet."""

        raise NotImplementedError

    def save(self, settings: AttendanceSettings) -> None:
        raise NotImplementedError
