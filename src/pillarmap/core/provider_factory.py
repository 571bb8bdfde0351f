"""Factory for creating model clients with auto-detection."""

import os
from typing import Optional

from pillarmap.core.gateway_client import GatewayClient
from pillarmap.core.gemini_client import GeminiClient
from pillarmap.core.llm_base import LLMClientBase
from pillarmap.core.logging import get_logger

SUPPORTED_PROVIDERS = ("gemini", "gateway", "auto")

logger = get_logger("pillarmap.provider_factory")


def check_gateway_available(gateway_url: Optional[str] = None, gateway_api_key: Optional[str] = None) -> bool:
    """Return True if both a gateway URL and a gateway key are configured."""
    url = gateway_url or os.getenv("AI_GATEWAY_URL")
    key = gateway_api_key or os.getenv("AI_GATEWAY_API_KEY")
    return bool(url and key)


def check_gemini_available(api_key: Optional[str] = None) -> bool:
    """Return True if a Gemini API key is configured."""
    return bool(api_key or os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY"))


def create_client(
    provider: str = "auto",
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    api_key: Optional[str] = None,
    gateway_url: Optional[str] = None,
    gateway_api_key: Optional[str] = None,
) -> LLMClientBase:
    """
    Create a model client for the specified provider.

    Args:
        provider: "gemini", "gateway", or "auto"
        model: Model name (provider default when None)
        temperature: Generation temperature
        api_key: Gemini API key
        gateway_url: Gateway root URL
        gateway_api_key: Gateway API key

    Returns:
        Model client instance

    Raises:
        ValueError: If the provider is unknown or its credentials are missing
    """
    provider = (provider or "auto").lower()

    if provider == "auto":
        # Prefer the gateway when it is fully configured, otherwise Gemini
        if check_gateway_available(gateway_url, gateway_api_key):
            provider = "gateway"
        else:
            provider = "gemini"

    logger.info(
        "AI service configuration loaded",
        provider=provider,
        model=model or "(default)",
        gemini_key_set=check_gemini_available(api_key),
        gateway_configured=check_gateway_available(gateway_url, gateway_api_key),
    )

    if provider == "gateway":
        return GatewayClient(
            gateway_url=gateway_url,
            api_key=gateway_api_key,
            model=model,
            temperature=temperature,
        )

    elif provider == "gemini":
        return GeminiClient(
            api_key=api_key,
            model=model,
            temperature=temperature,
        )

    else:
        raise ValueError(
            f"Unknown provider: {provider}. Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
