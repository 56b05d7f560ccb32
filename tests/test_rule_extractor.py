"""
Unit tests for RuleExtractor and APIManager.
Tests request construction, outcome tagging and error mapping of the inference call.
"""
import unittest
from unittest.mock import patch, MagicMock, AsyncMock

import httpx
import openai

from rule_harvester.exceptions import MissingCredential, TransportError, ParseError
from rule_harvester.llm_extraction import RuleExtractor
from rule_harvester.llm_extraction import prompts
from rule_harvester.llm_extraction.utils import APIManager
from rule_harvester.models import RuleFound, NoRuleFound

ENDPOINT = "https://models.inference.ai.azure.com"


def make_completion(content):
    """Build a chat completion response carrying the given content."""
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


class TestRuleExtractor(unittest.IsolatedAsyncioTestCase):
    """Test cases for RuleExtractor with a mocked OpenAI client."""

    def setUp(self):
        patcher = patch('rule_harvester.llm_extraction.utils.api_utils.AsyncOpenAI')
        self.mock_client_class = patcher.start()
        self.addCleanup(patcher.stop)

        self.mock_client = self.mock_client_class.return_value
        self.mock_create = AsyncMock()
        self.mock_client.chat.completions.create = self.mock_create

        self.extractor = RuleExtractor(APIManager(base_url=ENDPOINT))

    async def test_rule_found(self):
        self.mock_create.return_value = make_completion(
            '{"title": "Rule A", "description": "Desc A"}')

        outcome = await self.extractor.extract_rule("Para one.", "secret-key")

        self.assertIsInstance(outcome, RuleFound)
        self.assertEqual(outcome.rule.title, "Rule A")
        self.assertEqual(outcome.rule.description, "Desc A")
        self.assertTrue(outcome.rule.id)

    async def test_request_uses_fixed_parameters(self):
        """The paragraph goes out as user content with the fixed sampling parameters."""
        self.mock_create.return_value = make_completion('{"title": "T", "description": "D"}')

        await self.extractor.extract_rule("Para one.", "secret-key")

        self.mock_client_class.assert_called_once_with(
            api_key="secret-key", base_url=ENDPOINT, timeout=60.0, max_retries=0)
        self.mock_create.assert_awaited_once_with(
            model="gpt-4o",
            messages=[
                {"role": "system", "content": prompts.SYSTEM_PROMPT},
                {"role": "user", "content": "Para one."}
            ],
            temperature=0.7,
            max_tokens=2048,
            top_p=1.0
        )

    async def test_each_rule_gets_a_fresh_id(self):
        self.mock_create.return_value = make_completion('{"title": "T", "description": "D"}')

        first = await self.extractor.extract_rule("P", "secret-key")
        second = await self.extractor.extract_rule("P", "secret-key")

        self.assertNotEqual(first.rule.id, second.rule.id)

    async def test_sentinel_becomes_no_rule_found(self):
        self.mock_create.return_value = make_completion(
            '{"title": "No rule found", "description": "This paragraph does not contain an extractable policy rule."}')

        outcome = await self.extractor.extract_rule("Intro text.", "secret-key")

        self.assertIsInstance(outcome, NoRuleFound)

    async def test_missing_credential(self):
        with self.assertRaises(MissingCredential):
            await self.extractor.extract_rule("Para one.", "")
        self.mock_create.assert_not_awaited()

    async def test_status_error_maps_to_transport_error(self):
        request = httpx.Request("POST", f"{ENDPOINT}/chat/completions")
        response = httpx.Response(401, request=request)
        self.mock_create.side_effect = openai.APIStatusError("Unauthorized", response=response, body=None)

        with self.assertRaises(TransportError) as ctx:
            await self.extractor.extract_rule("Para one.", "bad-key")

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(self.mock_create.await_count, 1)

    async def test_connection_error_maps_to_transport_error(self):
        request = httpx.Request("POST", f"{ENDPOINT}/chat/completions")
        self.mock_create.side_effect = openai.APIConnectionError(request=request)

        with self.assertRaises(TransportError):
            await self.extractor.extract_rule("Para one.", "secret-key")

    async def test_unparseable_content_raises_parse_error(self):
        self.mock_create.return_value = make_completion("I could not find anything.")

        with self.assertRaises(ParseError):
            await self.extractor.extract_rule("Para one.", "secret-key")

    async def test_json_wrapped_in_prose_raises_parse_error(self):
        self.mock_create.return_value = make_completion(
            'Sure! Here it is: {"title": "T", "description": "D"} hope it helps')

        with self.assertRaises(ParseError):
            await self.extractor.extract_rule("Para one.", "secret-key")

    async def test_missing_fields_raise_parse_error(self):
        self.mock_create.return_value = make_completion('{"title": "Only a title"}')

        with self.assertRaises(ParseError):
            await self.extractor.extract_rule("Para one.", "secret-key")

    async def test_empty_choices_raise_parse_error(self):
        response = MagicMock()
        response.choices = []
        self.mock_create.return_value = response

        with self.assertRaises(ParseError):
            await self.extractor.extract_rule("Para one.", "secret-key")


class TestAPIManagerClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for client lifecycle in APIManager."""

    @patch('rule_harvester.llm_extraction.utils.api_utils.AsyncOpenAI')
    async def test_client_reused_until_key_changes(self, mock_client_class):
        mock_client_class.side_effect = lambda **kwargs: MagicMock(close=AsyncMock())
        manager = APIManager()

        first = await manager.get_client("key-1")
        self.assertIs(await manager.get_client("key-1"), first)
        first.close.assert_not_awaited()

        second = await manager.get_client("key-2")
        self.assertIsNot(second, first)
        self.assertEqual(mock_client_class.call_count, 2)
        first.close.assert_awaited_once()

        await manager.close()
        second.close.assert_awaited_once()

    async def test_get_client_without_key(self):
        with self.assertRaises(MissingCredential):
            await APIManager().get_client("")


if __name__ == '__main__':
    unittest.main()
