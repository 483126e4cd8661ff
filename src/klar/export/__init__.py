"""
Export module for Klar.

Renders all documents to a single PDF.
"""

from klar.export.pdf_export import PDFExporter, generate_pdf, format_score

__all__ = [
    'PDFExporter',
    'generate_pdf',
    'format_score',
]
