"""Configuration management for RiskAtlas."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


@dataclass
class GeocoderConfig:
    """Nominatim geocoding configuration."""

    base_url: str = "https://nominatim.openstreetmap.org"
    timeout: float = 10.0
    user_agent: str = "riskatlas/0.1 (disaster-risk explorer)"
    language: str = "en"


@dataclass
class ProfileConfig:
    """Risk profile rule table configuration."""

    rules_path: str | None = None  # YAML rule table; built-in table when unset


@dataclass
class AssistantConfig:
    """Rule-based assistant configuration."""

    name: str = "AI VISION"


@dataclass
class Config:
    """Main configuration container."""

    geocoder: GeocoderConfig = field(default_factory=GeocoderConfig)
    profiles: ProfileConfig = field(default_factory=ProfileConfig)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Load configuration from files and environment variables."""
        # Load .env file if present
        env_file = Path(__file__).parent.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        config = cls()

        if config_dir and config_dir.exists():
            for name in ("geocoder.yaml", "profiles.yaml"):
                path = config_dir / name
                if path.exists():
                    config._load_yaml(path)

        # Override with environment variables
        config._load_from_env()

        return config

    def _load_yaml(self, path: Path) -> None:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._apply_yaml_config(data, base_dir=path.parent)

    def _apply_yaml_config(self, data: dict[str, Any], base_dir: Path | None = None) -> None:
        """Apply YAML configuration data."""
        if "geocoder" in data:
            geo = data["geocoder"]
            if "base_url" in geo:
                self.geocoder.base_url = geo["base_url"]
            if "timeout" in geo:
                self.geocoder.timeout = float(geo["timeout"])
            if "user_agent" in geo:
                self.geocoder.user_agent = geo["user_agent"]
            if "language" in geo:
                self.geocoder.language = geo["language"]

        if "profiles" in data:
            profiles = data["profiles"]
            if "rules_path" in profiles:
                rules_path = Path(profiles["rules_path"])
                # Relative paths are relative to the YAML file
                if base_dir is not None and not rules_path.is_absolute():
                    rules_path = base_dir / rules_path
                self.profiles.rules_path = str(rules_path)

        if "assistant" in data:
            assistant = data["assistant"]
            if "name" in assistant:
                self.assistant.name = assistant["name"]

    def _load_from_env(self) -> None:
        """Override configuration from environment variables."""
        # Geocoder
        if url := os.getenv("NOMINATIM_URL"):
            self.geocoder.base_url = url
        if timeout := os.getenv("GEOCODER_TIMEOUT"):
            self.geocoder.timeout = float(timeout)
        if user_agent := os.getenv("GEOCODER_USER_AGENT"):
            self.geocoder.user_agent = user_agent
        if language := os.getenv("GEOCODER_LANGUAGE"):
            self.geocoder.language = language

        # Profiles
        if rules_path := os.getenv("RISK_RULES_PATH"):
            self.profiles.rules_path = rules_path

        # Assistant
        if name := os.getenv("ASSISTANT_NAME"):
            self.assistant.name = name


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        config_dir = Path(__file__).parent.parent / "config"
        _config = Config.load(config_dir)
    return _config


def reload_config(config_dir: Path | None = None) -> Config:
    """Reload configuration (useful for testing)."""
    global _config
    _config = Config.load(config_dir)
    return _config
