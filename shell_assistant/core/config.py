"""
Application configuration.

Loads ~/.shell-assistant/config.yaml (or an explicit path) into dataclasses,
falling back to defaults when the file is missing. A handful of environment
variables override the file so the CLI can be steered from a .env file.
"""
import os
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from ..modules.safety.classifier import PolicyConfig

logger = logging.getLogger(__name__)

DEFAULT_BLOCKED_COMMANDS = ["rm -rf /", "format", "del /s /q C:\\"]
SUPPORTED_BACKENDS = ("ollama", "llm-rs", "openai")


def _data_dir() -> Path:
    return Path(os.getenv("SHELL_ASSISTANT_DATA_DIR", str(Path.home() / ".shell-assistant")))


@dataclass
class LLMConfig:
    backend: str = field(default_factory=lambda: os.getenv("SHELL_ASSISTANT_BACKEND", "ollama"))
    model: str = "codellama"
    model_path: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    max_tokens: int = 256
    temperature: float = 0.7
    timeout: float = 60.0


@dataclass
class SecurityConfig:
    audit_log: bool = True
    audit_log_path: Optional[str] = None


@dataclass
class PrivacyConfig:
    offline_only: bool = True
    save_history: bool = True
    history_path: Optional[str] = None


@dataclass
class EnterpriseSettings:
    organization: Optional[str] = None
    department: Optional[str] = None
    compliance_mode: bool = True
    allowed_commands: List[str] = field(default_factory=list)
    blocked_commands: List[str] = field(default_factory=lambda: list(DEFAULT_BLOCKED_COMMANDS))


@dataclass
class AppConfig:
    version: str = "1.0"
    debug: bool = field(default_factory=lambda: os.getenv("SHELL_ASSISTANT_DEBUG", "").lower() == "true")
    llm: LLMConfig = field(default_factory=LLMConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    privacy: PrivacyConfig = field(default_factory=PrivacyConfig)
    enterprise: EnterpriseSettings = field(default_factory=EnterpriseSettings)

    @staticmethod
    def default_path() -> Path:
        env_path = os.getenv("SHELL_ASSISTANT_CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        return _data_dir() / "config.yaml"

    @classmethod
    def load(cls, path: Optional[str] = None) -> "AppConfig":
        """Load configuration from `path` (or the default location).

        Returns defaults when the file does not exist. Raises ConfigError when
        the file exists but cannot be read or is not a YAML mapping.
        """
        load_dotenv()
        config_path = Path(path).expanduser() if path else cls.default_path()

        if not config_path.exists():
            logger.info("Config file not found at %s, using defaults", config_path)
            return cls()

        try:
            with config_path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except OSError as e:
            raise ConfigError(f"Failed to read config file {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        config = cls.from_dict(data).apply_env_overrides()
        logger.info("Loaded config from %s", config_path)
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        config = cls()
        if "version" in data:
            config.version = str(data["version"])
        if "debug" in data:
            config.debug = bool(data["debug"])
        config.llm = _build_section(LLMConfig, data.get("llm"), "llm")
        config.security = _build_section(SecurityConfig, data.get("security"), "security")
        config.privacy = _build_section(PrivacyConfig, data.get("privacy"), "privacy")
        config.enterprise = _build_section(EnterpriseSettings, data.get("enterprise"), "enterprise")
        return config

    def apply_env_overrides(self) -> "AppConfig":
        """Let SHELL_ASSISTANT_BACKEND / SHELL_ASSISTANT_DEBUG win over the file."""
        backend = os.getenv("SHELL_ASSISTANT_BACKEND")
        if backend:
            self.llm.backend = backend
        debug = os.getenv("SHELL_ASSISTANT_DEBUG")
        if debug:
            self.debug = debug.lower() == "true"
        return self

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: Optional[str] = None) -> Path:
        """Write the configuration as YAML, creating parent directories."""
        config_path = Path(path).expanduser() if path else self.default_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with config_path.open("w", encoding="utf-8") as handle:
                yaml.safe_dump(self.to_dict(), handle, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Failed to write config file {config_path}: {e}") from e
        logger.info("Saved config to %s", config_path)
        return config_path

    def policy(self) -> PolicyConfig:
        """Build the organizational policy handed to the safety classifier."""
        return PolicyConfig(
            allowed_patterns=frozenset(self.enterprise.allowed_commands or ()),
            blocked_patterns=frozenset(self.enterprise.blocked_commands or ()),
            compliance_mode=self.enterprise.compliance_mode,
        )

    def get_model_path(self) -> Optional[Path]:
        if not self.llm.model_path:
            return None
        return Path(self.llm.model_path).expanduser()

    def get_history_path(self) -> Path:
        if self.privacy.history_path:
            return Path(self.privacy.history_path).expanduser()
        return _data_dir() / "history.json"

    def get_audit_log_path(self) -> Path:
        if self.security.audit_log_path:
            return Path(self.security.audit_log_path).expanduser()
        return _data_dir() / "audit.log"


def _build_section(section_cls, raw, section_name: str):
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config section '{section_name}' must be a mapping")

    known = section_cls.__dataclass_fields__
    unknown = sorted(set(raw) - set(known))
    if unknown:
        logger.warning("Ignoring unknown keys in '%s' section: %s", section_name, ", ".join(unknown))

    values = {key: value for key, value in raw.items() if key in known}
    try:
        return section_cls(**values)
    except TypeError as e:
        raise ConfigError(f"Invalid '{section_name}' section: {e}") from e
