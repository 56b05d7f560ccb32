"""
API Utilities Module
Handles chat completion calls against an OpenAI-compatible endpoint.

Each call is made exactly once: there is no retry, backoff or rate limiting
here, and failures are raised to the caller as TransportError.
"""

import logging
from typing import Optional

import openai
from openai import AsyncOpenAI

from ...config import DEFAULT_ENDPOINT, DEFAULT_MODEL
from ...exceptions import MissingCredential, TransportError

# Configure logging
logger = logging.getLogger(__name__)


class APIManager:
    """Manages API interactions with the inference endpoint."""

    def __init__(self, base_url: str = DEFAULT_ENDPOINT, model: str = DEFAULT_MODEL, timeout: float = 60.0):
        """Initialize API manager.

        Args:
            base_url: Base URL of the chat completions endpoint
            model: Model to use for completions
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self._client: Optional[AsyncOpenAI] = None
        self._client_key: Optional[str] = None

    async def get_client(self, api_key: str) -> AsyncOpenAI:
        """Return a client for the given key, replacing it when the key changes.

        The client built for a previous key is closed before it is dropped.
        """
        if not api_key:
            raise MissingCredential()

        if self._client is not None and self._client_key != api_key:
            logger.debug("API key changed, closing previous client")
            await self.close()

        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0
            )
            self._client_key = api_key
        return self._client

    async def call(
        self,
        api_key: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        top_p: float
    ) -> Optional[str]:
        """Send one chat completion request.

        Args:
            api_key: Bearer credential for the endpoint
            system_prompt: System prompt for the model
            user_prompt: User content
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the response
            top_p: Nucleus sampling parameter

        Returns:
            Optional[str]: Content of the first choice, None if the response has none

        Raises:
            MissingCredential: If api_key is empty
            TransportError: If the endpoint fails or cannot be reached
        """
        client = await self.get_client(api_key)

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]
        logger.debug(f"Sending to LLM: model={self.model} user_prompt={user_prompt[:80]!r}")

        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                top_p=top_p
            )
        except openai.APIStatusError as e:
            logger.error(f"LLM API error: {e.status_code} {e.message}")
            raise TransportError(f"LLM API error: {e.status_code}", status_code=e.status_code) from e
        except openai.APIConnectionError as e:
            logger.error(f"Error calling LLM API: {e}")
            raise TransportError(f"Could not reach LLM API: {e}") from e

        logger.debug(f"LLM response: {response}")

        if not response.choices:
            return None
        return response.choices[0].message.content

    async def close(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._client_key = None
