"""Client configuration loaded from environment variables.

All variables use the BOARD_ACCESS_CLIENT_ prefix, e.g.
BOARD_ACCESS_CLIENT_API_BASE_URL=https://api.example.com
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the activation client and guidance gateway."""

    model_config = SettingsConfigDict(
        env_prefix="BOARD_ACCESS_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_base_url: str = "http://localhost:8000"
    activate_path: str = "/activate"
    guidance_path: str = "/ai-guidance"

    # Directory holding credentials.json (session token and client id)
    credentials_dir: Path = Path.home() / ".personal-board"

    request_timeout_seconds: float = 30.0


client_settings = ClientSettings()
