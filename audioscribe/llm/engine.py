"""Chat-completions engine for sending prompts and getting responses."""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..errors import LLMServiceError

logger = logging.getLogger(__name__)


class ChatCompletionEngine:
    """Simple engine for sending prompts to an OpenAI-compatible chat endpoint."""

    def __init__(self,
                 api_key: str,
                 model: str = "gpt-4o-mini",
                 base_url: str = "https://api.openai.com/v1",
                 temperature: float = 0.3,
                 max_tokens: int = 2000,
                 timeout_seconds: float = 120.0):
        """Initialize chat-completions engine.

        Args:
            api_key: API key sent as a bearer token
            model: Model to use
            base_url: API root; "/chat/completions" is appended
            temperature: Default sampling temperature
            max_tokens: Default maximum tokens in a response
            timeout_seconds: Total time allowed for one request
        """
        if not api_key:
            raise ValueError("LLM API key is required - cannot initialize without credentials")
        self.api_key = api_key
        self.model = model
        self.url = base_url.rstrip("/") + "/chat/completions"
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

        logger.info(f"ChatCompletionEngine initialized with model: {model}")

    async def send_prompt(self,
                          prompt: str,
                          system_prompt: Optional[str] = None,
                          temperature: Optional[float] = None,
                          max_tokens: Optional[int] = None) -> str:
        """Send a prompt to the model and get the full response text.

        Args:
            prompt: User message
            system_prompt: Optional system message sent before the prompt
            temperature: Overrides the default temperature
            max_tokens: Overrides the default response limit

        Returns:
            Response text, stripped

        Raises:
            LLMServiceError: non-200 status, network failure, timeout or malformed body
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        data = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
        }

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.url, headers=headers, json=data) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise LLMServiceError(
                            f"LLM API error: {response.status} - {error_text}", status=response.status)

                    result = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise LLMServiceError(f"LLM request timed out after {self.timeout_seconds}s") from e
        except aiohttp.ClientError as e:
            raise LLMServiceError(f"LLM request failed: {e}") from e
        except ValueError as e:
            raise LLMServiceError(f"LLM returned malformed JSON: {e}") from e

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMServiceError(f"LLM response missing message content: {e}") from e
        if not isinstance(content, str):
            raise LLMServiceError("LLM response content is not text")
        return content.strip()
