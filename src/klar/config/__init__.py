"""
Configuration module for Klar.

Provides settings, constants, prompt templates, and logging configuration.
"""

from klar.config.settings import get_settings, reload_settings, Settings
from klar.config.logging_config import setup_structured_logging

__all__ = [
    'get_settings',
    'reload_settings',
    'Settings',
    'setup_structured_logging',
]
