"""
Persisted user settings.

The server URL chosen on the device is kept in a small YAML file so it
survives restarts. Every client created afterwards targets the stored URL.
"""
import logging
import os

import yaml

from mjscores.client import normalize_base_url
from mjscores.config import AppConfig

logger = logging.getLogger("mjscores.settings")


def load_settings(path=AppConfig.SETTINGS_PATH) -> dict:
    """Read the settings file; a missing or unreadable file gives {}."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read settings from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring malformed settings file {path}")
        return {}
    return data


def save_settings(settings: dict, path=AppConfig.SETTINGS_PATH) -> None:
    settings_dir = os.path.dirname(path)
    if settings_dir:
        os.makedirs(settings_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings, f, default_flow_style=False)


def get_server_url(path=AppConfig.SETTINGS_PATH) -> str:
    """
    Get the server URL to sync with.

    Returns the persisted URL when there is one, else AppConfig.SERVER_URL.
    """
    url = load_settings(path).get("server_url")
    if url:
        logger.debug(f"Loaded server URL from {path}: {url}")
        return url
    return AppConfig.SERVER_URL


def set_server_url(url: str, path=AppConfig.SETTINGS_PATH) -> str:
    """
    Validate and persist a new server URL.

    Returns:
        The normalized URL that was stored

    Raises:
        ValueError: If the URL is not well-formed
    """
    url = normalize_base_url(url)
    settings = load_settings(path)
    settings["server_url"] = url
    save_settings(settings, path)
    logger.info(f"Server URL set to {url}")
    return url
