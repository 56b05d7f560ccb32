"""
Result Parser Module
Handles parsing and validation of LLM API responses.
"""

import json
import logging
from typing import Dict, Optional, Any, List

# Configure logging
logger = logging.getLogger(__name__)

FENCE = '```'


class ResultParser:
    """Parses and validates LLM API responses."""

    @staticmethod
    def strip_code_fence(response: str) -> str:
        """Remove a markdown code fence (```json ... ```) around the whole response."""
        clean = response.strip()
        if not clean.startswith(FENCE):
            return clean

        lines = clean.split('\n')
        if len(lines) < 2 or lines[-1].strip() != FENCE:
            return clean
        return '\n'.join(lines[1:-1]).strip()

    @staticmethod
    def parse_json_response(response: Optional[str]) -> Optional[Dict[str, Any]]:
        """Parse a JSON object from an LLM response.

        The whole response (or the whole body of a single code fence) must be
        one JSON object; text around the object is not accepted.

        Args:
            response: Raw text response from LLM

        Returns:
            Optional[Dict[str, Any]]: Parsed JSON object or None if parsing failed
        """
        if not response:
            return None

        clean = ResultParser.strip_code_fence(response)
        try:
            parsed = json.loads(clean)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse JSON from response: {response[:100]}... ({e})")
            return None

        if not isinstance(parsed, dict):
            logger.warning(f"Response is JSON but not an object: {response[:100]}...")
            return None
        return parsed

    @staticmethod
    def validate_extraction_fields(parsed_json: Optional[Dict[str, Any]], required_fields: List[str]) -> bool:
        """Validate that every required field is present and is a string.

        Args:
            parsed_json: Parsed extraction result
            required_fields: List of field names that must be present

        Returns:
            bool: True if all required fields are present strings
        """
        if not parsed_json:
            return False

        return all(isinstance(parsed_json.get(field), str) for field in required_fields)
