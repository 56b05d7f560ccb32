"""
Utilities for the LLM extraction layer.
"""

from .api_utils import APIManager
from .result_parser import ResultParser

__all__ = ['APIManager', 'ResultParser']
