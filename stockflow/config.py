"""Configuration management using Pydantic Settings v2."""

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from ruamel.yaml import YAML

from stockflow.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config/settings.yaml"


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(
        default="sqlite:///data/stockflow.db",
        description="peewee database URL (sqlite:/// or postgresql://)",
    )
    create_tables: bool = Field(default=True, description="Create missing tables at startup")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    file: str = Field(default="logs/stockflow.log", description="Log file path")
    rotation: str = Field(default="100 MB", description="Log rotation size")
    retention: str = Field(default="7 days", description="Log retention period")
    json_format: bool = Field(default=False, description="Use JSON log format")


class MonitoringConfig(BaseModel):
    """Announcement polling configuration."""

    enabled: bool = Field(default=True, description="Enable scheduled checks")
    interval_minutes: int = Field(
        default=15, ge=1, le=59, description="Minutes between announcement checks"
    )
    announcements_url: str = Field(
        default="https://www.nseindia.com/api/corporate-announcements?index=equities",
        description="NSE corporate announcements endpoint",
    )
    home_url: str = Field(
        default="https://www.nseindia.com/",
        description="Page fetched to obtain NSE session cookies",
    )
    fetch_timeout: float = Field(default=10.0, gt=0, description="Feed timeout in seconds")
    run_on_startup: bool = Field(default=True, description="Run one check at startup")
    timezone: str = Field(default="Asia/Kolkata", description="Scheduler timezone")


class DocumentConfig(BaseModel):
    """Attachment extraction configuration."""

    timeout: float = Field(default=15.0, gt=0, description="Attachment download timeout")
    max_chars: int = Field(default=6000, ge=1, description="Maximum characters sent to the AI")
    min_chars: int = Field(
        default=200, ge=0, description="Below this many readable characters the text is ignored"
    )


class AIConfig(BaseModel):
    """AI summarization configuration."""

    provider: Literal["groq", "gemini", "none"] = Field(
        default="none", description="Summarization provider"
    )
    timeout: float = Field(default=15.0, gt=0, description="Provider timeout in seconds")
    groq_api_key: str = Field(default="", description="Groq API key")
    groq_model: str = Field(default="llama-3.3-70b-versatile", description="Groq model")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1", description="Groq OpenAI-compatible base URL"
    )
    gemini_api_key: str = Field(default="", description="Gemini API key")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST base URL",
    )


class TelegramConfig(BaseModel):
    """Telegram Bot API configuration."""

    enabled: bool = Field(default=False, description="Enable Telegram delivery")
    bot_token: str = Field(default="", description="Telegram bot token")
    api_base: str = Field(default="https://api.telegram.org", description="Bot API base URL")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class WhatsAppConfig(BaseModel):
    """Twilio WhatsApp configuration."""

    enabled: bool = Field(default=False, description="Enable WhatsApp delivery")
    account_sid: str = Field(default="", description="Twilio account SID")
    auth_token: str = Field(default="", description="Twilio auth token")
    from_number: str = Field(default="", description="Twilio WhatsApp sender, e.g. whatsapp:+1415...")
    country_code: str = Field(default="91", description="Prefix for numbers stored without one")
    api_base: str = Field(default="https://api.twilio.com", description="Twilio API base URL")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")


class NotificationsConfig(BaseModel):
    """Delivery channel configuration."""

    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    whatsapp: WhatsAppConfig = Field(default_factory=WhatsAppConfig)


class HealthCheckConfig(BaseModel):
    """Health check configuration."""

    unhealthy_threshold: int = Field(
        default=3, ge=1, description="Consecutive failed cycles before unhealthy"
    )


class APIConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=5000, ge=1, le=65535, description="Bind port")


class _YamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by an already-parsed YAML mapping."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            name: self._data[name] for name in self.settings_cls.model_fields if name in self._data
        }


class Config(BaseSettings):
    """Main application configuration.

    Precedence: init kwargs, environment, ``.env``, YAML file, defaults.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    documents: DocumentConfig = Field(default_factory=DocumentConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    health: HealthCheckConfig = Field(default_factory=HealthCheckConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_data = getattr(cls, "__yaml_data__", {})
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _YamlSettingsSource(settings_cls, yaml_data),
            file_secret_settings,
        )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "Config":
        """Load configuration from YAML file with environment variable overrides.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            pydantic.ValidationError: If a value is out of range
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        yaml = YAML(typ="safe")
        with open(config_path) as f:
            config_dict = yaml.load(f) or {}

        bound = type(cls.__name__, (cls,), {"__yaml_data__": cls._normalize_keys(config_dict)})
        return bound()

    @staticmethod
    def _normalize_keys(data: dict) -> dict:
        """Convert hyphenated keys to underscored for Python compatibility.

        Args:
            data: Dictionary with possibly hyphenated keys

        Returns:
            Dictionary with normalized keys
        """
        normalized = {}
        for key, value in data.items():
            new_key = str(key).replace("-", "_")
            if isinstance(value, dict):
                normalized[new_key] = Config._normalize_keys(value)
            else:
                normalized[new_key] = value
        return normalized

    def validate_runtime(self) -> None:
        """Check that every enabled integration has its credentials.

        Raises:
            ConfigurationError: If an enabled channel or the AI provider is missing credentials
        """
        problems: list[str] = []

        telegram = self.notifications.telegram
        if telegram.enabled and not telegram.bot_token:
            problems.append("notifications.telegram.bot_token is required when Telegram is enabled")

        whatsapp = self.notifications.whatsapp
        if whatsapp.enabled:
            if not whatsapp.account_sid or not whatsapp.auth_token:
                problems.append(
                    "notifications.whatsapp.account_sid and auth_token are required "
                    "when WhatsApp is enabled"
                )
            elif not whatsapp.account_sid.startswith("AC"):
                problems.append("notifications.whatsapp.account_sid must start with AC")
            if not whatsapp.from_number:
                problems.append("notifications.whatsapp.from_number is required")

        if self.ai.provider == "groq" and not self.ai.groq_api_key:
            problems.append("ai.groq_api_key is required when ai.provider is groq")
        if self.ai.provider == "gemini" and not self.ai.gemini_api_key:
            problems.append("ai.gemini_api_key is required when ai.provider is gemini")

        if problems:
            raise ConfigurationError("; ".join(problems))


def load_config(config_path: str | Path | None = None) -> Config:
    """Load application configuration.

    Args:
        config_path: Path to configuration file, defaults to ``$STOCKFLOW_CONFIG``
            or ``config/settings.yaml``

    Returns:
        Config instance

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    path = config_path or os.environ.get("STOCKFLOW_CONFIG", DEFAULT_CONFIG_PATH)
    try:
        return Config.from_yaml(path)
    except FileNotFoundError:
        return Config()


config: Config = load_config()
