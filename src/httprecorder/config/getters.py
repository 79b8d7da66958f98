"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from .env_loader import CONFIG_DIR_NAME, load_global_config, load_project_config

MODE_ENV_VAR = "HTTP_RECORDER_MODE"
ARCHIVE_DIR_ENV_VAR = "HTTP_RECORDER_ARCHIVE_DIR"
LOG_DIR_ENV_VAR = "HTTP_RECORDER_LOG_DIR"
DEBUG_ENV_VAR = "HTTP_RECORDER_DEBUG"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_config(key: str, project_dir: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Project .env file
    3. Global config file
    4. Default value

    Args:
        key: Configuration key
        project_dir: Optional project directory
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check project .env file
    project_config = load_project_config(project_dir)
    if key in project_config:
        return project_config[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    # 4. Return default
    return default


def get_mode_override(key: str = MODE_ENV_VAR, project_dir: Path | None = None) -> str | None:
    """Raw process-wide mode override, stripped, or None when unset."""
    value = get_config(key, project_dir)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def get_archive_dir(project_dir: Path | None = None) -> Path:
    """Root directory for archive files (default: ./.httprecorder/archives)."""
    configured = get_config(ARCHIVE_DIR_ENV_VAR, project_dir)
    if configured:
        return Path(configured).expanduser()
    return (project_dir or Path.cwd()) / CONFIG_DIR_NAME / "archives"


def get_log_dir(project_dir: Path | None = None) -> Path | None:
    """Root directory for trace output, or None when not configured."""
    configured = get_config(LOG_DIR_ENV_VAR, project_dir)
    if configured:
        return Path(configured).expanduser()
    return None


def is_debug_enabled_from_env(project_dir: Path | None = None) -> bool:
    """Whether rich debug output was requested through configuration."""
    value = get_config(DEBUG_ENV_VAR, project_dir, default="")
    return str(value).strip().lower() in _TRUE_VALUES
