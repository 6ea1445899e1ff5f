"""Generation service client (OpenAI-compatible chat completions API)."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping

import requests

from keyword_batch.errors import GenerationError, RateLimitError

logger = logging.getLogger(__name__)


class GenerationClient:
    """Client for an OpenAI-compatible chat completions endpoint.

    Two call shapes are offered: free text (:meth:`generate_text`) and a JSON
    object constrained by a JSON schema (:meth:`generate_object`). Both take
    an optional model identifier overriding the default.
    """

    DEFAULT_API_URL = "https://generativelanguage.googleapis.com/v1beta/openai"
    DEFAULT_MODEL = "gemini-2.0-flash"
    DEFAULT_TEMPERATURE = 0.7

    def __init__(
        self,
        *,
        api_key: str | None = None,
        api_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        timeout: int = 120,
    ):
        """Initialize the generation client.

        Args:
            api_key: API key. Defaults to GEMINI_API_KEY, then LLM_API_KEY env vars.
            api_url: Base URL of the OpenAI-compatible API.
            model: Default model identifier.
            temperature: Default sampling temperature.
            timeout: Request timeout in seconds.
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("LLM_API_KEY")
        if not self.api_key:
            raise GenerationError(
                "Generation API key required. Set GEMINI_API_KEY or LLM_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self.api_url = (api_url or os.environ.get("LLM_API_URL") or self.DEFAULT_API_URL).rstrip("/")
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature if temperature is not None else self.DEFAULT_TEMPERATURE
        self.timeout = timeout

    def generate_text(self, prompt: str, *, model: str | None = None) -> str:
        """Generate free text for ``prompt``.

        Raises:
            GenerationError: If the request fails or the reply is empty.
        """
        content = self._complete(prompt, model=model)
        text = content.strip()
        if not text:
            raise GenerationError("Generation service returned empty text")
        return text

    def generate_object(
        self,
        prompt: str,
        schema: Mapping[str, Any],
        *,
        model: str | None = None,
        schema_name: str = "response",
    ) -> dict[str, Any]:
        """Generate a JSON object matching ``schema``.

        Args:
            prompt: User prompt.
            schema: JSON schema the reply must follow.
            model: Model identifier (overrides default).
            schema_name: Name reported to the API for the schema.

        Returns:
            The decoded JSON object.

        Raises:
            GenerationError: If the request fails or the reply is not a JSON object.
        """
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": schema_name, "schema": dict(schema), "strict": True},
        }
        content = self._complete(prompt, model=model, response_format=response_format)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise GenerationError(f"Generation service returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise GenerationError(
                f"Generation service returned {type(data).__name__}, expected an object"
            )
        return data

    def _complete(
        self,
        prompt: str,
        *,
        model: str | None = None,
        response_format: Mapping[str, Any] | None = None,
    ) -> str:
        url = f"{self.api_url}/chat/completions"
        payload: dict[str, Any] = {
            "model": model or self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
        }
        if response_format is not None:
            payload["response_format"] = dict(response_format)

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            error_msg = self._build_error_message(exc)
            response = getattr(exc, "response", None)
            if response is not None and response.status_code == 429:
                raise RateLimitError(error_msg, retry_after=self._parse_retry_after(response)) from exc
            raise GenerationError(error_msg) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise GenerationError(f"Invalid JSON response: {exc}") from exc

        try:
            content = data["choices"][0]["message"].get("content") or ""
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise GenerationError(f"Unexpected completion payload: {data!r}") from exc

        logger.debug("Generation call used model %s (%d chars)", payload["model"], len(content))
        return content

    @staticmethod
    def _parse_retry_after(response: requests.Response) -> float | None:
        """Parse the Retry-After header, in seconds, if present."""
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None
        try:
            return float(retry_after)
        except ValueError:
            return None

    @staticmethod
    def _build_error_message(exc: requests.RequestException) -> str:
        """Build descriptive error message from request exception."""
        error_msg = f"Generation API request failed: {exc}"
        response = getattr(exc, "response", None)
        if response is not None:
            try:
                error_data = response.json()
            except ValueError:
                return error_msg
            if isinstance(error_data, dict) and "error" in error_data:
                error_msg = f"{error_msg} - {error_data['error']}"
        return error_msg
