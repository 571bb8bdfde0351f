"""AI gateway client using the OpenAI-compatible chat completions API."""

import json
import os
from typing import Any, Optional

from openai import OpenAI

from pillarmap.core.errors import UpstreamFailure
from pillarmap.core.llm_base import extract_json

DEFAULT_GATEWAY_MODEL = "gemini-2.5-pro"

SYSTEM_PROMPT_TEMPLATE = """{instruction}

Your response MUST be a single, valid JSON object that strictly adheres to the following JSON schema.
Do not include any explanatory text, markdown formatting, or anything else outside of the JSON object.

JSON Schema:
{schema}"""

USER_PROMPT_TEMPLATE = """Parse the following roadmap markdown into the specified JSON format.

Roadmap Markdown:
{text}"""


def gateway_base_url(gateway_url: str, model: str) -> str:
    """
    Build the per-model base URL.

    The gateway serves each model under ``{gateway_url}/{model}/v1``; the SDK
    appends ``/chat/completions``.
    """
    return f"{gateway_url.rstrip('/')}/{model}/v1"


class GatewayClient:
    """Client for an AI gateway that exposes models behind chat completions."""

    provider = "gateway"

    def __init__(
        self,
        gateway_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        """
        Initialize gateway client.

        Args:
            gateway_url: Gateway root URL (defaults to AI_GATEWAY_URL env var)
            api_key: Gateway API key (defaults to AI_GATEWAY_API_KEY env var)
            model: Model name (defaults to AI_GATEWAY_MODEL, then gemini-2.5-pro)
            temperature: Temperature for generation (model default when None)
        """
        self.gateway_url = gateway_url or os.getenv("AI_GATEWAY_URL")
        api_key = api_key or os.getenv("AI_GATEWAY_API_KEY")
        if not self.gateway_url or not api_key:
            raise ValueError(
                "AI Gateway is the configured provider, but the gateway URL or API key is missing. "
                "Set AI_GATEWAY_URL and AI_GATEWAY_API_KEY, or pass --gateway-url and --gateway-api-key."
            )

        self.model = model or os.getenv("AI_GATEWAY_MODEL") or DEFAULT_GATEWAY_MODEL
        self.temperature = temperature
        self.base_url = gateway_base_url(self.gateway_url, self.model)
        self.client = OpenAI(api_key=api_key.strip(), base_url=self.base_url)

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        """
        Generate response through the gateway.

        The schema is embedded in the system prompt and JSON output is
        requested with ``response_format``. A single attempt is made.

        Args:
            prompt: Roadmap text
            system_instruction: Parsing instructions
            response_schema: JSON schema the response must follow
            timeout: Request timeout in seconds

        Returns:
            Generated text response

        Raises:
            UpstreamFailure: If the request fails or the response has no content
        """
        system_prompt = SYSTEM_PROMPT_TEMPLATE.format(
            instruction=system_instruction or "",
            schema=json.dumps(response_schema or {}, indent=2),
        ).lstrip()

        request: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": USER_PROMPT_TEMPLATE.format(text=prompt)},
            ],
            "response_format": {"type": "json_object"},
            "stream": False,
            "timeout": timeout,
        }
        if self.temperature is not None:
            request["temperature"] = self.temperature

        try:
            response = self.client.chat.completions.create(**request)
        except Exception as e:
            raise UpstreamFailure(
                f"AI Gateway request failed: {e}\n"
                f"  - Endpoint: {self.base_url}\n"
                f"  - Model: {self.model}",
                provider=self.provider,
            ) from e

        if not response.choices or not isinstance(response.choices[0].message.content, str):
            raise UpstreamFailure(
                'The AI Gateway response did not contain the expected content in "choices[0].message.content".',
                provider=self.provider,
            )
        return response.choices[0].message.content

    def extract_json(self, text: str) -> dict:
        """Extract JSON from a gateway response."""
        return extract_json(text)
