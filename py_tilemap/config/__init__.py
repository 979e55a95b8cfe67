"""
Configuration modules for map generation.
"""

from .settings import Settings, settings

__all__ = ['Settings', 'settings']
