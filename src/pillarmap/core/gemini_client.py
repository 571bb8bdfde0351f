"""Google AI Gemini client with structured JSON output."""

import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Optional

from google import genai
from google.genai import types

from pillarmap.core.errors import UpstreamFailure
from pillarmap.core.llm_base import extract_json

# Google AI Studio URL for getting API keys
GOOGLE_AI_STUDIO_URL = "https://aistudio.google.com/app/apikey"

DEFAULT_GEMINI_MODEL = "gemini-2.5-pro"


class GeminiClient:
    """Client for interacting with Google AI Gemini API."""

    provider = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key (defaults to API_KEY, then GEMINI_API_KEY env var)
            model: Model name to use (default: gemini-2.5-pro)
            temperature: Temperature for generation (model default when None)
        """
        api_key = api_key or os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY")
        # Clean API key (remove quotes if present)
        api_key = (api_key or "").strip().strip('"').strip("'")
        if not api_key:
            raise ValueError(
                "Gemini is the configured provider, but the API key is missing. "
                "Set API_KEY or GEMINI_API_KEY, or pass --api-key. "
                f"Get a key from: {GOOGLE_AI_STUDIO_URL}"
            )

        self.model = model or os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL
        self.temperature = temperature
        self.client = genai.Client(api_key=api_key)

    def _build_config(
        self,
        system_instruction: Optional[str],
        response_schema: Optional[dict[str, Any]],
    ) -> types.GenerateContentConfig:
        config_params: dict[str, Any] = {}
        if system_instruction:
            config_params["system_instruction"] = system_instruction
        if response_schema is not None:
            config_params["response_mime_type"] = "application/json"
            config_params["response_schema"] = response_schema
        if self.temperature is not None:
            config_params["temperature"] = self.temperature
        return types.GenerateContentConfig(**config_params)

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        """
        Generate response from Gemini API.

        A single attempt is made; any failure is reported as UpstreamFailure.

        Args:
            prompt: Input content
            system_instruction: System instruction for the model
            response_schema: Structured-output schema (enables JSON mode)
            timeout: Request timeout in seconds

        Returns:
            Generated text response

        Raises:
            UpstreamFailure: If the API call fails, times out or returns nothing
        """
        config = self._build_config(system_instruction, response_schema)

        def _make_api_call():
            return self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )

        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(_make_api_call)
            response = future.result(timeout=timeout)
        except FutureTimeoutError as e:
            raise UpstreamFailure(
                f"Gemini API call timed out after {timeout} seconds. "
                "Try increasing the timeout or check your network connection.",
                provider=self.provider,
            ) from e
        except Exception as e:
            raise UpstreamFailure(self._describe_error(e), provider=self.provider) from e
        finally:
            executor.shutdown(wait=False)

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise UpstreamFailure(
                f"Gemini API returned an empty response. Model: {self.model}",
                provider=self.provider,
            )
        return text

    def _describe_error(self, error: Exception) -> str:
        """Turn an SDK exception into an actionable message."""
        error_msg = str(error)
        error_lower = error_msg.lower()

        if "401" in error_msg or "403" in error_msg or "api key" in error_lower:
            return (
                "Gemini API authentication failed.\n\n"
                "Possible causes:\n"
                "1. Invalid API key - Check your API_KEY / GEMINI_API_KEY environment variable\n"
                "2. API key restrictions - Check key restrictions in Google AI Studio\n\n"
                f"Get a new API key from: {GOOGLE_AI_STUDIO_URL}\n"
                f"Original error: {error_msg}"
            )
        if "404" in error_msg or "not found" in error_lower:
            return (
                f"Gemini model '{self.model}' not found (404).\n"
                "Set the model with --model or the GEMINI_MODEL environment variable.\n"
                f"Original error: {error_msg}"
            )
        if "429" in error_msg or "quota" in error_lower or "rate limit" in error_lower:
            return (
                "Gemini API rate limit or quota exceeded. Wait before retrying.\n"
                f"Check usage and quotas: {GOOGLE_AI_STUDIO_URL}\n"
                f"Original error: {error_msg}"
            )
        return f"Failed to generate response from Gemini API.\nModel: {self.model}\nError: {error_msg}"

    def extract_json(self, text: str) -> dict:
        """Extract JSON from a Gemini response."""
        return extract_json(text)
