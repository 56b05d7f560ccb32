"""
LLM Extraction Package
Extracts policy rules from paragraphs with a language model, one at a time.
"""

from .rule_extractor import RuleExtractor
from .extraction_controller import ExtractionWorkflow, progress_label

__all__ = ['RuleExtractor', 'ExtractionWorkflow', 'progress_label']
