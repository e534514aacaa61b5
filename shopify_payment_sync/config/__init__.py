"""Configuration package for the payment sync."""
from .settings import Settings, SyncConfig, get_settings

__all__ = ["Settings", "SyncConfig", "get_settings"]
