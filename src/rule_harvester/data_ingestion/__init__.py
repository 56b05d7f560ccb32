"""
Data Ingestion Package
Turns document text into paragraphs for extraction.
"""

from .segmenter import segment

__all__ = ['segment']
