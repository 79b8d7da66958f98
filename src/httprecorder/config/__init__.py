"""
Configuration management for httprecorder.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. Project .env file (.httprecorder/.env)
3. Global config file (~/.httprecorder/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    global_config_path,
    load_env_file,
    load_global_config,
    load_project_config,
    project_env_path,
)
from .getters import (
    ARCHIVE_DIR_ENV_VAR,
    DEBUG_ENV_VAR,
    LOG_DIR_ENV_VAR,
    MODE_ENV_VAR,
    get_archive_dir,
    get_config,
    get_log_dir,
    get_mode_override,
    is_debug_enabled_from_env,
)

__all__ = [
    # env_loader
    "global_config_path",
    "load_env_file",
    "load_global_config",
    "load_project_config",
    "project_env_path",
    # getters
    "ARCHIVE_DIR_ENV_VAR",
    "DEBUG_ENV_VAR",
    "LOG_DIR_ENV_VAR",
    "MODE_ENV_VAR",
    "get_archive_dir",
    "get_config",
    "get_log_dir",
    "get_mode_override",
    "is_debug_enabled_from_env",
]
