"""
Configuration module for the hospital finance engine.
"""

from .settings import Settings, get_settings

__all__ = [
    'Settings',
    'get_settings'
]
