"""Utility helpers for Klar."""

from klar.utils.json_extractor import extract_json_from_response

__all__ = [
    'extract_json_from_response',
]
