"""
Configuration management for mjscores applications.

Uses environment variables with sensible defaults.
"""
import os


class AppConfig:
    """Configuration for the sync client (mjscores-sync)."""

    # Remote tournament server
    SERVER_URL = os.getenv("MJ_SERVER_URL", "http://localhost:8080")
    HTTP_TIMEOUT = float(os.getenv("MJ_HTTP_TIMEOUT", "10"))

    # Local tournament database
    DB_PATH = os.getenv("MJ_DB_PATH", "tournaments.db")

    # Persisted user settings (server URL chosen on the device)
    SETTINGS_PATH = os.getenv(
        "MJ_SETTINGS_PATH",
        os.path.join(os.path.expanduser("~"), ".mjscores", "settings.yaml"),
    )


class ServerConfig:
    """Configuration for the reference tournament server (mjscores-server)."""

    # Server
    HOST = os.getenv("MJ_SERVER_HOST", "0.0.0.0")
    PORT = int(os.getenv("MJ_SERVER_PORT", "8080"))

    # Database
    DB_PATH = os.getenv("MJ_SERVER_DB_PATH", "server.db")


def print_config(config_class):
    """Print configuration for debugging."""
    print(f"\n{'='*60}")
    print(f"{config_class.__name__} Configuration:")
    print(f"{'='*60}")
    for attr in dir(config_class):
        if attr.isupper():
            value = getattr(config_class, attr)
            print(f"  {attr:20} = {value}")
    print(f"{'='*60}\n")
