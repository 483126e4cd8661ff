"""
Web API for Klar.
"""

from klar.api.app import create_app

__all__ = ["create_app"]
