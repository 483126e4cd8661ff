"""
Storage module for documents and their content.
"""

from klar.storage.repository import DocumentRepository

__all__ = [
    'DocumentRepository',
]
