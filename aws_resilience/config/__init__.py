"""
Configuration management for retry and logging behaviour.

This module provides optional configuration management with support for:
- Environment-based configuration
- .env files
- Type-safe settings classes via Pydantic
"""

# Try to import config functionality (requires pydantic)
try:
    from .settings import ResilienceSettings, Settings, get_settings

    HAS_CONFIG = True
    __all__ = [
        "ResilienceSettings",
        "Settings",
        "get_settings",
    ]
except ImportError:
    HAS_CONFIG = False
    __all__ = []
