"""Tests for model clients and the provider factory."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from pillarmap.core.errors import UpstreamFailure
from pillarmap.core.gateway_client import GatewayClient, gateway_base_url
from pillarmap.core.gemini_client import GeminiClient
from pillarmap.core.llm_wrapper import LoggingLLMClientWrapper, wrap_client_with_logging
from pillarmap.core.provider_factory import create_client
from pillarmap.schemas.roadmap import roadmap_response_schema

PROVIDER_ENV = ("API_KEY", "GEMINI_API_KEY", "GEMINI_MODEL", "AI_GATEWAY_URL", "AI_GATEWAY_API_KEY", "AI_GATEWAY_MODEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without provider env vars."""
    for name in PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestGatewayClient:
    """Tests for GatewayClient."""

    def test_base_url(self):
        """Test per-model URL construction."""
        assert gateway_base_url("https://gw.example.com/acct/", "gpt-4o") == "https://gw.example.com/acct/gpt-4o/v1"

    def test_missing_settings(self):
        """Test that URL and key are both required."""
        with pytest.raises(ValueError, match="AI_GATEWAY_URL"):
            GatewayClient(gateway_url="https://gw.example.com")

    @patch("pillarmap.core.gateway_client.OpenAI")
    def test_env_settings(self, mock_openai, monkeypatch):
        """Test that settings fall back to the environment."""
        monkeypatch.setenv("AI_GATEWAY_URL", "https://gw.example.com")
        monkeypatch.setenv("AI_GATEWAY_API_KEY", "gw-key")
        monkeypatch.setenv("AI_GATEWAY_MODEL", "gpt-4o")

        client = GatewayClient()

        assert client.model == "gpt-4o"
        mock_openai.assert_called_once_with(api_key="gw-key", base_url="https://gw.example.com/gpt-4o/v1")

    @patch("pillarmap.core.gateway_client.OpenAI")
    def test_generate_request(self, mock_openai):
        """Test the chat completion request."""
        mock_openai.return_value.chat.completions.create.return_value = _completion('{"pillars": []}')
        client = GatewayClient(gateway_url="https://gw.example.com", api_key="gw-key")

        result = client.generate(
            "# Roadmap",
            system_instruction="Parse it.",
            response_schema=roadmap_response_schema(),
            timeout=45,
        )

        assert result == '{"pillars": []}'
        kwargs = mock_openai.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["timeout"] == 45
        assert "temperature" not in kwargs
        system, user = kwargs["messages"]
        assert system["role"] == "system"
        assert system["content"].startswith("Parse it.")
        assert '"pillarId"' in system["content"]
        assert user["content"].endswith("# Roadmap")

    @patch("pillarmap.core.gateway_client.OpenAI")
    def test_request_error(self, mock_openai):
        """Test that SDK errors become UpstreamFailure."""
        mock_openai.return_value.chat.completions.create.side_effect = RuntimeError("502 Bad Gateway")
        client = GatewayClient(gateway_url="https://gw.example.com", api_key="gw-key")

        with pytest.raises(UpstreamFailure, match="502 Bad Gateway") as exc_info:
            client.generate("# Roadmap")
        assert exc_info.value.provider == "gateway"

    @patch("pillarmap.core.gateway_client.OpenAI")
    def test_missing_content(self, mock_openai):
        """Test a response without message content."""
        mock_openai.return_value.chat.completions.create.return_value = _completion(None)
        client = GatewayClient(gateway_url="https://gw.example.com", api_key="gw-key")

        with pytest.raises(UpstreamFailure, match=r"choices\[0\]\.message\.content"):
            client.generate("# Roadmap")


class TestGeminiClient:
    """Tests for GeminiClient."""

    def test_missing_key(self):
        """Test that an API key is required."""
        with pytest.raises(ValueError, match="API key is missing"):
            GeminiClient()

    @patch("pillarmap.core.gemini_client.genai")
    def test_key_from_env(self, mock_genai, monkeypatch):
        """Test that API_KEY is preferred and quotes are stripped."""
        monkeypatch.setenv("GEMINI_API_KEY", "other")
        monkeypatch.setenv("API_KEY", '"main-key"')

        client = GeminiClient()

        mock_genai.Client.assert_called_once_with(api_key="main-key")
        assert client.model == "gemini-2.5-pro"

    @patch("pillarmap.core.gemini_client.genai")
    def test_generate(self, mock_genai):
        """Test a structured-output request."""
        models = mock_genai.Client.return_value.models
        models.generate_content.return_value = SimpleNamespace(text=' {"pillars": []} ')
        client = GeminiClient(api_key="key", model="gemini-2.5-flash")

        result = client.generate("# Roadmap", system_instruction="Parse it.", response_schema={"type": "OBJECT"})

        assert result == '{"pillars": []}'
        kwargs = models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "# Roadmap"
        assert kwargs["config"].response_mime_type == "application/json"

    @patch("pillarmap.core.gemini_client.genai")
    def test_empty_response(self, mock_genai):
        """Test that an empty response is an upstream failure."""
        mock_genai.Client.return_value.models.generate_content.return_value = SimpleNamespace(text="")
        client = GeminiClient(api_key="key")

        with pytest.raises(UpstreamFailure, match="empty response"):
            client.generate("# Roadmap")

    @patch("pillarmap.core.gemini_client.genai")
    def test_rate_limit_message(self, mock_genai):
        """Test that quota errors get an actionable message."""
        mock_genai.Client.return_value.models.generate_content.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")
        client = GeminiClient(api_key="key")

        with pytest.raises(UpstreamFailure, match="rate limit or quota exceeded"):
            client.generate("# Roadmap")


class TestProviderFactory:
    """Tests for create_client."""

    @patch("pillarmap.core.provider_factory.GatewayClient")
    def test_auto_prefers_gateway(self, mock_gateway):
        """Test that auto picks the gateway when it is configured."""
        create_client(gateway_url="https://gw.example.com", gateway_api_key="gw-key")
        mock_gateway.assert_called_once()

    @patch("pillarmap.core.provider_factory.GeminiClient")
    def test_auto_falls_back_to_gemini(self, mock_gemini):
        """Test that auto picks Gemini without gateway settings."""
        create_client(api_key="key", gateway_url="https://gw.example.com")
        mock_gemini.assert_called_once_with(api_key="key", model=None, temperature=None)

    @patch("pillarmap.core.provider_factory.GeminiClient")
    def test_provider_case_insensitive(self, mock_gemini):
        """Test that provider names ignore case."""
        create_client(provider="GEMINI", api_key="key")
        mock_gemini.assert_called_once()

    def test_unknown_provider(self):
        """Test that an unknown provider is rejected."""
        with pytest.raises(ValueError, match="Unknown provider: ollama"):
            create_client(provider="ollama")

    def test_missing_credentials(self):
        """Test that credential errors surface as ValueError."""
        with pytest.raises(ValueError, match="gateway URL or API key is missing"):
            create_client(provider="gateway")


class TestLoggingWrapper:
    """Tests for LoggingLLMClientWrapper."""

    def test_delegates(self):
        """Test that calls and attributes pass through."""
        client = MagicMock()
        client.provider = "gemini"
        client.model = "gemini-2.5-pro"
        client.generate.return_value = "{}"
        client.extract_json.return_value = {}

        wrapper = wrap_client_with_logging(client)

        assert isinstance(wrapper, LoggingLLMClientWrapper)
        assert wrapper.generate("text", system_instruction="Parse it.", timeout=10) == "{}"
        client.generate.assert_called_once_with(
            "text", system_instruction="Parse it.", response_schema=None, timeout=10
        )
        assert wrapper.extract_json("{}") == {}
        assert wrapper.provider == "gemini"

    def test_errors_reraised(self):
        """Test that failures propagate unchanged."""
        client = MagicMock()
        client.generate.side_effect = UpstreamFailure("down")

        with pytest.raises(UpstreamFailure, match="down"):
            LoggingLLMClientWrapper(client).generate("text")
