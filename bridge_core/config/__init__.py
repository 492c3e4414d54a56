"""Runtime configuration (pydantic-settings + optional config.yaml)."""

from bridge_core.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
