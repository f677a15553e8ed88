from __future__ import annotations

import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, defaulting to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def env_list(name: str) -> list[str]:
    """Comma separated environment variable as a list, blanks dropped."""
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


def env_optional_float(name: str, default: str) -> float | None:
    """Float environment variable; an empty value, "off" or "none" gives None."""
    raw = os.getenv(name, default).strip()
    if raw.lower() in {"", "off", "none"}:
        return None
    return float(raw)
