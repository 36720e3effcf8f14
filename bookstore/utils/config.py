"""
Configuration management with schema validation.

Settings come from an optional YAML file (``config/settings.yaml`` or the
path in ``BOOKSTORE_CONFIG``) whose string values may reference environment
variables as ``${VAR}`` or ``${VAR:default}``. A handful of environment
variables then override the file, so a bare ``.env`` is enough to run.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigError

DEFAULT_CONFIG_FILE = Path("config") / "settings.yaml"


class AppSettings(BaseModel):
    name: str = "Bookstore API"
    version: str = "1.0.0"
    environment: str = "development"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class StorageSettings(BaseModel):
    data_dir: str = "data"
    backup_dir: Optional[str] = None  # defaults to <data_dir>/backups
    cache_enabled: bool = True

    def data_path(self) -> Path:
        return Path(self.data_dir)

    def backup_path(self) -> Path:
        if self.backup_dir:
            return Path(self.backup_dir)
        return self.data_path() / "backups"


class SecuritySettings(BaseModel):
    secret_key: Optional[str] = None
    token_lifetime_hours: int = 24
    bcrypt_rounds: int = 12

    @field_validator("secret_key")
    @classmethod
    def empty_secret_is_unset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_rounds(cls, v: int) -> int:
        if v < 4 or v > 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "console"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v.lower() not in ("json", "console"):
            raise ValueError("format must be 'json' or 'console'")
        return v.lower()


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# (section, field, env var)
ENV_OVERRIDES = [
    ("app", "environment", "ENVIRONMENT"),
    ("server", "host", "HOST"),
    ("server", "port", "PORT"),
    ("server", "cors_origins", "ALLOWED_ORIGINS"),
    ("storage", "data_dir", "BOOKSTORE_DATA_DIR"),
    ("storage", "backup_dir", "BOOKSTORE_BACKUP_DIR"),
    ("security", "secret_key", "BOOKSTORE_JWT_SECRET"),
    ("logging", "level", "LOG_LEVEL"),
    ("logging", "format", "LOG_FORMAT"),
    ("logging", "file_path", "LOG_FILE"),
]


def _substitute_env_vars(value: Any, context: str = "") -> Any:
    """Recursively substitute ${VAR} / ${VAR:default} in config values"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                return os.getenv(var_name.strip(), default.strip())
            env_value = os.getenv(var_expr)
            if env_value is None:
                error_msg = f"Environment variable {var_expr} not found"
                if context:
                    error_msg += f" (context: {context})"
                raise ConfigError(error_msg)
            return env_value
    elif isinstance(value, dict):
        return {
            k: _substitute_env_vars(v, context=f"{context}.{k}" if context else k)
            for k, v in value.items()
        }
    elif isinstance(value, list):
        return [
            _substitute_env_vars(item, context=f"{context}[{i}]" if context else f"[{i}]")
            for i, item in enumerate(value)
        ]
    return value


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read settings file {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return raw


def load_settings(config_file: Optional[str] = None, use_env: bool = True) -> Settings:
    """
    Load settings from YAML (if present) and the environment.

    Args:
        config_file: Explicit YAML path; falls back to ``BOOKSTORE_CONFIG``
            and then ``config/settings.yaml``. A missing default file is fine,
            a missing explicit file is a ``ConfigError``.
        use_env: Apply ``.env`` and environment variable overrides
    """
    if use_env:
        load_dotenv()

    explicit = config_file or (os.getenv("BOOKSTORE_CONFIG") if use_env else None)
    path = Path(explicit) if explicit else DEFAULT_CONFIG_FILE

    data: Dict[str, Any] = {}
    if path.exists():
        data = _substitute_env_vars(_read_yaml(path))
    elif explicit:
        raise ConfigError(f"Settings file not found: {path}")

    if use_env:
        for section, field, env_var in ENV_OVERRIDES:
            value = os.getenv(env_var)
            if value is None or value == "":
                continue
            if field == "cors_origins":
                value = [o.strip() for o in value.split(",") if o.strip()]
            data.setdefault(section, {})[field] = value

    try:
        return Settings(**data)
    except ValueError as e:
        raise ConfigError(f"Invalid settings: {e}")
