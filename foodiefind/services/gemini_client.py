from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from foodiefind.services.errors import (
    LLMConfigurationError,
    LLMProviderError,
    NetworkTimeoutError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "gemini-2.5-flash"
DEFAULT_TIMEOUT_SECONDS = 60.0


class CompletionClient(ABC):
    """A language-model endpoint that turns a system + user prompt into text."""

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Raises RateLimitedError, NetworkTimeoutError or LLMProviderError."""


def _is_rate_limited_error(exc: Exception) -> bool:
    status_code = getattr(exc, "code", None)
    if status_code == 429:
        return True
    return "RESOURCE_EXHAUSTED" in str(exc)


class GeminiClient(CompletionClient):
    def __init__(
        self,
        api_key: str | None,
        model_name: str = DEFAULT_MODEL_NAME,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: genai.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = self._configure_api()
        return self._client

    def _configure_api(self) -> genai.Client:
        if not self.api_key:
            raise LLMConfigurationError("Missing Gemini API key.")
        return genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(timeout=int(self.timeout_seconds * 1000)),
        )

    def _build_config(self, system_prompt: str, temperature: float, max_tokens: int) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json",
            thinking_config=types.ThinkingConfig(thinking_budget=0),
        )

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        config = self._build_config(system_prompt, temperature, max_tokens)

        try:
            response = self._get_client().models.generate_content(
                model=self.model_name,
                contents=user_prompt,
                config=config,
            )
        except genai_errors.ClientError as err:
            if _is_rate_limited_error(err):
                raise RateLimitedError("Gemini API rate limit reached. Try again shortly.") from err
            raise LLMProviderError(f"Gemini request rejected: {err}", status_code=getattr(err, "code", None)) from err
        except genai_errors.ServerError as err:
            raise LLMProviderError(f"Gemini server error: {err}", status_code=getattr(err, "code", None)) from err
        except httpx.TimeoutException as err:
            raise NetworkTimeoutError(self.model_name, self.timeout_seconds) from err
        except httpx.HTTPError as err:
            raise LLMProviderError(f"Gemini request failed: {err}") from err

        text = getattr(response, "text", None)
        if not text:
            raise LLMProviderError("Model response did not include text content.")

        logger.debug("Gemini completion received: model=%s, chars=%d", self.model_name, len(text))
        return text
