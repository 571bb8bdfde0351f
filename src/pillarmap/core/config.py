"""Configuration management for pillarmap."""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from pillarmap.core.logging import get_logger

logger = get_logger("pillarmap.config")

# Environment variable -> config attribute
ENV_VARS = {
    "AI_PROVIDER": "provider",
    "GEMINI_API_KEY": "api_key",
    "API_KEY": "api_key",
    "GEMINI_MODEL": "model",
    "AI_GATEWAY_URL": "gateway_url",
    "AI_GATEWAY_API_KEY": "gateway_api_key",
    "AI_GATEWAY_MODEL": "gateway_model",
}

SECRET_KEYS = ("api_key", "gateway_api_key")


class Config:
    """Configuration with hierarchy: CLI args > environment > project config > user config > defaults."""

    def __init__(self):
        """Initialize configuration with default values."""
        self.provider: str = "auto"
        self.model: Optional[str] = None
        self.api_key: Optional[str] = None
        self.gateway_url: Optional[str] = None
        self.gateway_api_key: Optional[str] = None
        self.gateway_model: Optional[str] = None
        self.temperature: Optional[float] = None
        self.timeout: int = 120
        self.log_level: str = "WARNING"
        self.json_logging: bool = False
        self.log_file: Optional[str] = None

    @classmethod
    def load(
        cls,
        cli_args: Optional[dict[str, Any]] = None,
        config_file: Optional[Path] = None,
    ) -> "Config":
        """
        Load configuration from every source in priority order.

        Args:
            cli_args: Dictionary of CLI arguments to override config
            config_file: Explicit config file, applied after the project config

        Returns:
            Config instance with loaded values
        """
        config = cls()

        # User config (~/.pillarmap/config.yaml)
        user_config_path = Path.home() / ".pillarmap" / "config.yaml"
        if user_config_path.exists():
            config._load_file(user_config_path)

        # Project config (.pillarmap.yaml in current directory)
        project_config_path = Path.cwd() / ".pillarmap.yaml"
        if project_config_path.exists():
            config._load_file(project_config_path)

        if config_file is not None:
            config._load_file(Path(config_file))

        config._load_env()

        if cli_args:
            for key, value in cli_args.items():
                if value is not None and hasattr(config, key):
                    setattr(config, key, value)

        return config

    def _load_env(self) -> None:
        """Apply environment variables; API_KEY wins over GEMINI_API_KEY."""
        for env_name in ENV_VARS:
            value = os.getenv(env_name)
            if value:
                setattr(self, ENV_VARS[env_name], value)

    def _load_file(self, config_path: Path) -> None:
        """Load configuration from a YAML or JSON file."""
        try:
            content = config_path.read_text(encoding="utf-8")
            if config_path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content)
            elif config_path.suffix == ".json":
                data = json.loads(content)
            else:
                logger.warning("Skipping config file with unknown format", path=str(config_path))
                return
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            logger.warning("Could not read config file", path=str(config_path), error=str(e))
            return

        if not isinstance(data, dict):
            return

        for key, value in data.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)

    def model_for(self, provider: str) -> Optional[str]:
        """Model to use for ``provider`` (the gateway has its own setting)."""
        if provider == "gateway" and self.gateway_model:
            return self.gateway_model
        return self.model

    def resolved_provider(self) -> str:
        """Provider after resolving "auto" the same way the client factory does."""
        provider = (self.provider or "auto").lower()
        if provider != "auto":
            return provider
        return "gateway" if self.gateway_url and self.gateway_api_key else "gemini"

    def to_dict(self, redact: bool = False) -> dict[str, Any]:
        """
        Convert config to dictionary.

        Args:
            redact: If True, replace secrets with a set/unset marker
        """
        data = {
            "provider": self.provider,
            "model": self.model,
            "api_key": self.api_key,
            "gateway_url": self.gateway_url,
            "gateway_api_key": self.gateway_api_key,
            "gateway_model": self.gateway_model,
            "temperature": self.temperature,
            "timeout": self.timeout,
            "log_level": self.log_level,
            "json_logging": self.json_logging,
            "log_file": self.log_file,
        }
        if redact:
            for key in SECRET_KEYS:
                data[key] = "***" if data[key] else None
        return data

    def save(self, path: Path, format: str = "yaml") -> None:
        """
        Save configuration to file.

        Args:
            path: Path to save config file
            format: Format to save as ('yaml' or 'json')
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {k: v for k, v in self.to_dict().items() if v is not None}

        if format == "yaml":
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")
