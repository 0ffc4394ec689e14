"""
Configuration package for phtmlmin

Provides application settings via environment variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings, DEFAULT_INLINE_TAGS

__all__ = ["appsettings", "AppSettings", "DEFAULT_INLINE_TAGS"]
