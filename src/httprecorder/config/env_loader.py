"""Environment variable and configuration file loading."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR_NAME = ".httprecorder"


def global_config_path() -> Path:
    return Path.home() / CONFIG_DIR_NAME / "config.yml"


def project_env_path(project_dir: Path | None = None) -> Path:
    return (project_dir or Path.cwd()) / CONFIG_DIR_NAME / ".env"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.httprecorder/config.yml."""
    config_path = global_config_path()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


def load_project_config(project_dir: Path | None = None) -> dict[str, str]:
    """Load project-specific configuration from .httprecorder/.env."""
    return load_env_file(project_env_path(project_dir))
