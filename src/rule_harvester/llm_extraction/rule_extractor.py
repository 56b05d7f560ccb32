"""
Rule Extractor Module
Extracts a single policy rule from one paragraph using the LLM.
"""

import logging
from typing import Optional

from ..exceptions import MissingCredential, ParseError
from ..models import Rule, RuleFound, NoRuleFound, ExtractionOutcome
from . import prompts
from .utils import APIManager, ResultParser

logger = logging.getLogger(__name__)


class RuleExtractor:
    """Turns a paragraph into a RuleFound or NoRuleFound outcome.

    The "No rule found" sentinel of the prompt contract is converted to
    NoRuleFound here and never leaves this class as a Rule.
    """

    def __init__(self, api_manager: Optional[APIManager] = None):
        self.api_manager = api_manager or APIManager()
        self.result_parser = ResultParser()

    async def extract_rule(self, paragraph: str, credential: str) -> ExtractionOutcome:
        """Extract a rule from a paragraph.

        Args:
            paragraph: Paragraph text sent as user content
            credential: API key for the inference endpoint

        Returns:
            ExtractionOutcome: RuleFound with a freshly identified rule, or NoRuleFound

        Raises:
            MissingCredential: If no credential is configured
            TransportError: If the model call fails
            ParseError: If the response does not contain a title and description
        """
        if not credential:
            raise MissingCredential()

        content = await self.api_manager.call(
            api_key=credential,
            system_prompt=prompts.SYSTEM_PROMPT,
            user_prompt=paragraph,
            temperature=prompts.TEMPERATURE,
            max_tokens=prompts.MAX_TOKENS,
            top_p=prompts.TOP_P
        )
        return self.parse_outcome(content)

    def parse_outcome(self, content: Optional[str]) -> ExtractionOutcome:
        """Convert raw response content into an extraction outcome."""
        parsed = self.result_parser.parse_json_response(content)
        if parsed is None:
            logger.error("Error parsing LLM response: content is not a JSON object")
            raise ParseError()

        if not self.result_parser.validate_extraction_fields(parsed, prompts.REQUIRED_FIELDS):
            logger.error(f"Error parsing LLM response: missing fields in {sorted(parsed)}")
            raise ParseError("Failed to parse rule from LLM response: missing title or description")

        if parsed['title'] == prompts.NO_RULE_TITLE:
            logger.info("No rule found in paragraph")
            return NoRuleFound(description=parsed['description'])

        rule = Rule(title=parsed['title'], description=parsed['description'])
        logger.info(f"Extracted rule {rule.id}: {rule.title}")
        return RuleFound(rule=rule)
