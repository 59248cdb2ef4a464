"""Service layer: configuration."""

from .settings import Settings, SettingsStore

__all__ = ["Settings", "SettingsStore"]
