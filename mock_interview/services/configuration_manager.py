"""Configuration Manager for handling application configuration and settings."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator

from ..utils.exceptions import ConfigurationError
from ..utils.logging import get_logger


class _SectionMixin:
    """``from_dict`` for dataclass config sections, ignoring unknown keys."""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class LoggingConfig(_SectionMixin):
    """Logging configuration settings."""

    level: str = "INFO"
    structured: bool = False
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class StorageConfig(_SectionMixin):
    """Session store configuration settings."""

    base_path: str = "data"
    file_name: str = "sessions.json"
    backup_enabled: bool = True
    max_backup_count: int = 10


@dataclass
class ScoringConfig(_SectionMixin):
    """Client-side settings for reaching the scoring proxy."""

    proxy_url: str = "http://127.0.0.1:8000"
    timeout_seconds: float = 10.0


@dataclass
class ProxyConfig(_SectionMixin):
    """Bind address for the proxy server."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class InterviewConfig(_SectionMixin):
    """Interview flow settings."""

    tick_interval_seconds: float = 1.0
    catalog_path: Optional[str] = "question_catalog.yaml"


class LLMProviderConfig(BaseModel):
    """Upstream language model configuration used by the proxy."""

    name: str = Field(default="openai", description="Provider name")
    api_key: str = Field(default="", description="API key for the provider")
    base_url: str = Field(default="https://api.openai.com/v1", description="Base URL for API calls")
    model: str = Field(default="gpt-4o-mini", description="Model name to use")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    score_max_tokens: int = Field(default=200, description="Maximum tokens for scoring replies")
    generate_max_tokens: int = Field(default=150, description="Maximum tokens for generated questions")

    @validator("timeout")
    def validate_timeout(cls, v):
        if v < 1:
            raise ValueError("Timeout must be at least 1 second")
        return v


class AppConfig(BaseModel):
    """Main application configuration model."""

    app_name: str = Field(default="Mock Interview", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment")

    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Storage settings")
    scoring: ScoringConfig = Field(default_factory=ScoringConfig, description="Scoring client settings")
    proxy: ProxyConfig = Field(default_factory=ProxyConfig, description="Proxy server settings")
    interview: InterviewConfig = Field(default_factory=InterviewConfig, description="Interview settings")
    llm: LLMProviderConfig = Field(default_factory=LLMProviderConfig, description="Upstream LLM settings")

    class Config:
        validate_assignment = True


# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "OPENAI_API_KEY": ("llm", "api_key"),
    "OPENAI_MODEL": ("llm", "model"),
    "OPENAI_BASE_URL": ("llm", "base_url"),
    "MOCK_INTERVIEW_PROXY_URL": ("scoring", "proxy_url"),
    "MOCK_INTERVIEW_DATA_DIR": ("storage", "base_path"),
    "LOG_LEVEL": ("logging", "level"),
}


class ConfigurationManager:
    """Manages application configuration and settings."""

    def __init__(self, config_path: str = "config", env_file: str = ".env"):
        """Initialize the configuration manager.

        Args:
            config_path: Path to configuration directory.
            env_file: Path to environment file.
        """
        self.config_path = Path(config_path)
        self.env_file = Path(env_file)
        self.config: Optional[AppConfig] = None
        self.logger = get_logger("configuration_manager")

    def initialize(self) -> None:
        """Load environment, configuration files and overrides, then validate."""
        try:
            self._load_environment_variables()
            config_data = self._load_configuration_files()
            self._apply_environment_overrides(config_data)
            self.config = AppConfig.model_validate(config_data)
            self._validate_configuration()

            self.logger.info("ConfigurationManager initialized successfully")

        except ConfigurationError:
            raise
        except Exception as e:
            self.logger.error(f"Failed to initialize ConfigurationManager: {str(e)}")
            raise ConfigurationError(f"Configuration initialization failed: {str(e)}")

    def _load_environment_variables(self) -> None:
        """Load environment variables from .env file."""
        if self.env_file.exists():
            load_dotenv(self.env_file)
            self.logger.info(f"Loaded environment variables from {self.env_file}")

    def _load_configuration_files(self) -> Dict[str, Any]:
        """Merge defaults with config.yaml and config.<environment>.yaml."""
        config_data = AppConfig().model_dump()

        main_config_file = self.config_path / "config.yaml"
        if main_config_file.exists():
            self._merge(config_data, self._load_yaml_file(main_config_file))
            self.logger.info(f"Loaded main configuration from {main_config_file}")

        environment = os.getenv("ENVIRONMENT", config_data["environment"])
        config_data["environment"] = environment
        env_config_file = self.config_path / f"config.{environment}.yaml"
        if env_config_file.exists():
            self._merge(config_data, self._load_yaml_file(env_config_file))
            self.logger.info(f"Loaded environment configuration from {env_config_file}")

        return config_data

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge ``override`` into ``base`` in place."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._merge(base[key], value)
            else:
                base[key] = value

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> None:
        """Apply environment variables on top of file configuration."""
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config_data[section][key] = value
                self.logger.debug(f"Applied {env_name} to {section}.{key}")

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML file content.

        Args:
            file_path: Path to YAML file.

        Returns:
            Dictionary containing file content.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}", config_key=str(file_path))

    def _validate_configuration(self) -> None:
        """Validate the loaded configuration."""
        if not self.config:
            raise ConfigurationError("Configuration not loaded")

        if self.config.scoring.timeout_seconds <= 0:
            raise ConfigurationError("scoring.timeout_seconds must be positive", config_key="scoring.timeout_seconds")

        if self.config.interview.tick_interval_seconds <= 0:
            raise ConfigurationError("interview.tick_interval_seconds must be positive",
                                     config_key="interview.tick_interval_seconds")

        if not self.config.llm.api_key:
            self.logger.warning("OPENAI_API_KEY is not set; the proxy will answer 500")

        self.logger.info("Configuration validation completed successfully")

    def get_config(self) -> AppConfig:
        """Get the current configuration.

        Raises:
            ConfigurationError: If configuration is not loaded.
        """
        if not self.config:
            raise ConfigurationError("Configuration not loaded")
        return self.config

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific configuration setting.

        Args:
            key: Configuration key (dot notation supported).
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        if not self.config:
            return default

        value: Any = self.config
        for k in key.split("."):
            if hasattr(value, k):
                value = getattr(value, k)
            elif isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_catalog_path(self) -> Optional[Path]:
        """Question catalog location, relative paths taken from the config directory."""
        catalog_path = self.get_config().interview.catalog_path
        if not catalog_path:
            return None
        path = Path(catalog_path)
        return path if path.is_absolute() else self.config_path / path

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration as keyword arguments for ``setup_logging``."""
        logging_config = self.get_config().logging
        return {
            "level": logging_config.level,
            "structured": logging_config.structured,
            "log_file": logging_config.file_path,
            "enable_file": logging_config.file_path is not None,
            "max_file_size": logging_config.max_file_size,
            "backup_count": logging_config.backup_count,
        }
