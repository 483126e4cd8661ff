"""
Klar - German writing practice with AI feedback.

Users write short exercises, get them reviewed by an LLM and export
the corrected texts to PDF.
"""

__version__ = "1.0.0"
