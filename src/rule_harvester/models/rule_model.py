"""
Rule Data Model
Provides the data structures shared by the extraction workflow, the
inference layer and the export step.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, ClassVar, Union


def generate_rule_id() -> str:
    """Return a fresh identifier for an extracted rule."""
    return uuid.uuid4().hex


@dataclass
class Rule:
    """
    A policy rule extracted from a single paragraph.

    The identifier is assigned locally when the model response is parsed;
    it is never sent by the remote side and never exported.
    """
    title: str
    description: str
    id: str = field(default_factory=generate_rule_id)

    EXPORT_FIELDS: ClassVar[List[str]] = ['title', 'description']

    def to_dict(self) -> Dict[str, Any]:
        """Convert the rule to a dictionary, identifier included."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description
        }

    def to_export_dict(self) -> Dict[str, str]:
        """Convert the rule to its exported form (no identifier)."""
        return {name: getattr(self, name) for name in self.EXPORT_FIELDS}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rule":
        """
        Create a Rule from a dictionary.

        Args:
            data: Dictionary with 'title' and 'description', optionally 'id'

        Returns:
            Rule: New instance; a fresh id is generated when none is given
        """
        rule_id = data.get('id')
        if rule_id:
            return cls(title=data['title'], description=data['description'], id=str(rule_id))
        return cls(title=data['title'], description=data['description'])


@dataclass(frozen=True)
class RuleFound:
    """Outcome of an inference call that produced a rule."""
    rule: Rule


@dataclass(frozen=True)
class NoRuleFound:
    """Outcome of an inference call for a paragraph without an extractable rule."""
    description: str = ''


ExtractionOutcome = Union[RuleFound, NoRuleFound]


@dataclass
class ExtractionState:
    """
    Session state of the paragraph-by-paragraph extraction.

    Owned and mutated only by ExtractionWorkflow. The cursor is the index of
    the next paragraph to process; progress is derived from it.
    """
    paragraphs: List[str] = field(default_factory=list)
    cursor: int = 0
    rules: List[Rule] = field(default_factory=list)
    progress: float = 0.0
    is_processing: bool = False

    @property
    def total(self) -> int:
        return len(self.paragraphs)

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.cursor >= self.total

    def current_paragraph(self) -> Optional[str]:
        """Return the paragraph under the cursor, or None past the end."""
        if self.cursor < self.total:
            return self.paragraphs[self.cursor]
        return None

    def recompute_progress(self) -> float:
        """Recompute progress as a percentage of processed paragraphs."""
        if self.total == 0:
            self.progress = 0.0
        else:
            self.progress = self.cursor / self.total * 100
        return self.progress
