from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConfigurationError
from .model import AttendanceSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsStore:
    """Holds the current AttendanceSettings snapshot.

    Readers call ``snapshot()`` once per operation and work with that object;
    writers build and validate a complete replacement first, then swap it in
    under a lock. A reader therefore sees either the old or the new settings,
    never a mix of both.
    """

    def __init__(self, settings: AttendanceSettings, repository: Optional[SettingsRepository] = None):
        self._settings = settings
        self._repository = repository
        self._write_lock = threading.Lock()

    @classmethod
    def load(
        cls,
        repository: Optional[SettingsRepository],
        *,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> "SettingsStore":
        """Build the store at startup. Missing or malformed settings are fatal."""
        settings = repository.load() if repository is not None else None
        if settings is None:
            if not defaults:
                raise ConfigurationError("No attendance settings stored and no defaults configured")
            settings = AttendanceSettings.from_dict(defaults)
            if repository is not None:
                repository.save(settings)
            logger.info("Attendance settings initialised from defaults")
        return cls(settings, repository)

    def snapshot(self) -> AttendanceSettings:
        return self._settings

    def update(self, *, current_role: Role, settings: AttendanceSettings | Mapping[str, Any]) -> AttendanceSettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change attendance settings")

        if not isinstance(settings, AttendanceSettings):
            try:
                settings = AttendanceSettings.from_dict(settings)
            except ConfigurationError:
                logger.warning("Rejected attendance settings update; previous settings stay in effect")
                raise

        with self._write_lock:
            if self._repository is not None:
                self._repository.save(settings)
            self._settings = settings

        logger.info("Attendance settings replaced: %s", settings.to_dict())
        return settings
