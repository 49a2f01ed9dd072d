import os
from typing import Optional

from src.attendance_engine.attendance_engine.core.exceptions import ConfigurationError

SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "production": "config.production",
    "prod": "config.production",
    "testing": "config.testing",
    "test": "config.testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Settings module for ``env``, read from ``APP_ENV`` when not given.

    An unknown name is a startup error rather than a silent fall back to
    development settings and their dev secret key.
    """
    name = (env if env is not None else os.getenv("APP_ENV", "development")).strip().lower() or "development"
    try:
        return SETTINGS_MODULES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown APP_ENV {name!r}; expected one of {', '.join(sorted(SETTINGS_MODULES))}"
        ) from None
