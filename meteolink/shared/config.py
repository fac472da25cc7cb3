"""Configuration loading utilities."""

from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

# repo_root/config/
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


def get_config_path(
    config_name: str,
    config_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """Get path to a configuration file.

    Args:
        config_name: Name of config file (without path), e.g. bridge.yaml.
        config_dir: Directory containing config files. If None, uses
            the 'config' directory at the repo root.
    """
    return Path(config_dir or DEFAULT_CONFIG_DIR) / config_name


def load_yaml_config(config_path: Union[str, Path], load_env: bool = True) -> dict:
    """Load YAML configuration file.

    Args:
        config_path: Path to config file.
        load_env: Whether to load .env file first.

    Returns:
        Configuration dictionary, empty for an empty file.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if load_env:
        load_dotenv()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_log_level(config: dict) -> str:
    """Extract log level from config, defaulting to INFO."""
    return str(config.get("log_level", "INFO")).upper()
