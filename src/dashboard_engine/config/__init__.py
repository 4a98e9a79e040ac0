"""
Engine configuration.
``settings`` is read once from the environment / .env at import time.
"""
from .settings import Settings, settings

__all__ = ["Settings", "settings"]
