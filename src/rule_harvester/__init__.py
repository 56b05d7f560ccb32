"""
Rule Harvester
Extracts structured policy rules from a document, one paragraph at a time,
using a language model.
"""

__version__ = "0.1.0"
