"""
Models Package
Data structures for rules, inference outcomes and workflow state.
"""

from .rule_model import (
    Rule,
    RuleFound,
    NoRuleFound,
    ExtractionOutcome,
    ExtractionState,
    generate_rule_id,
)

__all__ = [
    'Rule',
    'RuleFound',
    'NoRuleFound',
    'ExtractionOutcome',
    'ExtractionState',
    'generate_rule_id',
]
