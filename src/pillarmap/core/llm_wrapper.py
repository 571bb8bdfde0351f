"""Model client wrapper that logs every call."""

import time
from typing import Any, Optional

from pillarmap.core.llm_base import LLMClientBase
from pillarmap.core.logging import get_logger

logger = get_logger("pillarmap.llm_wrapper")


class LoggingLLMClientWrapper:
    """
    Wraps a model client to add structured call logging.

    Logs provider, model, prompt and response sizes and latency for every
    call, and the error type for failed calls. Exceptions pass through.
    """

    def __init__(self, client: LLMClientBase):
        """
        Initialize wrapper.

        Args:
            client: The underlying model client
        """
        self.client = client
        self.provider = getattr(client, "provider", "unknown")
        self.model = getattr(client, "model", "default")

    def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        response_schema: Optional[dict[str, Any]] = None,
        timeout: int = 120,
    ) -> str:
        """Generate a response and log the call."""
        start_time = time.time()
        try:
            response = self.client.generate(
                prompt,
                system_instruction=system_instruction,
                response_schema=response_schema,
                timeout=timeout,
            )
        except Exception as e:
            logger.error(
                f"LLM call failed: {self.provider}/{self.model}",
                context={
                    "provider": self.provider,
                    "model": self.model,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "latency_ms": round((time.time() - start_time) * 1000, 1),
                    "prompt_length": len(prompt),
                },
            )
            raise

        logger.log_llm_call(
            provider=self.provider,
            model=self.model,
            prompt=prompt,
            response=response,
            latency_ms=(time.time() - start_time) * 1000,
        )
        return response

    def extract_json(self, text: str) -> dict:
        """Delegate JSON extraction to the underlying client."""
        return self.client.extract_json(text)


def wrap_client_with_logging(client: LLMClientBase) -> LoggingLLMClientWrapper:
    """Wrap a model client with call logging."""
    return LoggingLLMClientWrapper(client)
