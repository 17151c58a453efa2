"""Configuration management for DexRanger."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import toml

ALLOWED_THEMES = ["textual-dark", "textual-light", "dracula", "nord", "gruvbox", "tokyo-night"]
ALLOWED_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]
CONFIG_FILE_PATH = Path.home() / ".dexranger.config"
DEFAULT_BASE_URL = "https://pokeapi.co/api/v2"


@dataclass
class DexConfig:
    """DexRanger configuration settings."""

    base_url: str = DEFAULT_BASE_URL
    page_size: int = 50
    request_timeout: float = 10.0
    max_retries: int = 3
    retry_backoff: float = 0.5
    theme: str = "textual-dark"
    log_file: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration settings."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid base_url '{self.base_url}'. It must start with http:// or https://")

        if self.page_size < 1:
            raise ValueError(f"Invalid page_size {self.page_size}. It must be a positive integer")

        if self.request_timeout <= 0:
            raise ValueError(f"Invalid request_timeout {self.request_timeout}. It must be greater than zero")

        if self.max_retries < 0:
            raise ValueError(f"Invalid max_retries {self.max_retries}. It cannot be negative")

        if self.retry_backoff < 0:
            raise ValueError(f"Invalid retry_backoff {self.retry_backoff}. It cannot be negative")

        if self.theme not in ALLOWED_THEMES:
            raise ValueError(f"Invalid theme '{self.theme}'. Allowed themes: {', '.join(ALLOWED_THEMES)}")

        self.log_level = self.log_level.upper()
        if self.log_level not in ALLOWED_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. Allowed levels: {', '.join(ALLOWED_LOG_LEVELS)}"
            )


def load_config(config_file_path: Optional[str] = None) -> DexConfig:
    """Load configuration from file."""
    if config_file_path:
        config_path = Path(config_file_path)
    else:
        config_path = CONFIG_FILE_PATH

    if not config_path.exists():
        return DexConfig()

    try:
        with open(config_path, "r") as f:
            config_data = toml.load(f)

        valid_fields = {field.name for field in DexConfig.__dataclass_fields__.values()}

        # Unknown keys are ignored so older config files keep loading
        filtered_config = {key: value for key, value in config_data.items() if key in valid_fields}

        return DexConfig(**filtered_config)

    except Exception as e:
        raise ValueError(f"Error loading config file {config_path}: {e}")


def merge_config_with_cli_args(config: DexConfig, **cli_args) -> DexConfig:
    """Merge configuration with CLI arguments, giving priority to CLI args."""
    merged_config = {}

    for field_name in DexConfig.__dataclass_fields__:
        merged_config[field_name] = getattr(config, field_name)

    # Override with CLI args where provided (not None)
    for key, value in cli_args.items():
        if value is not None:
            merged_config[key] = value

    return DexConfig(**merged_config)
