"""Interface shared by the model clients."""

import json
import re
from typing import Any, Optional, Protocol


class LLMClientBase(Protocol):
    """
    Protocol/interface for LLM clients.

    All provider implementations must implement these methods.
    """

    provider: str
    model: str

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        """
        Generate a response from the model.

        Args:
            prompt: User content (the roadmap text)
            system_instruction: Instructions sent alongside the content
            response_schema: JSON schema the response must follow
            timeout: Request timeout in seconds

        Returns:
            Generated text response

        Raises:
            UpstreamFailure: If the call fails
        """
        ...

    def extract_json(self, text: str) -> dict:
        """
        Extract JSON from a model response.

        Raises:
            ValueError: If no valid JSON is found
        """
        ...


def extract_json(text: str) -> dict:
    """
    Extract a JSON object from model output, handling markdown code blocks.

    Args:
        text: Raw response text that may contain JSON

    Returns:
        Parsed JSON as dictionary

    Raises:
        ValueError: If no valid JSON object is found
    """
    candidates = []

    match = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", text, re.DOTALL)
    if match:
        candidates.append(match.group(1))

    match = re.search(r"\{.*\}", text, re.DOTALL)
    if match:
        candidates.append(match.group(0))

    candidates.append(text.strip())

    for json_str in candidates:
        try:
            parsed = json.loads(json_str)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise ValueError(f"Could not extract valid JSON from response: {text[:200]}...")
