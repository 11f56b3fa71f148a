"""Application configuration loaded from environment variables.

Settings for the code store database, CORS, the signing-secret source, and
session lifetimes. Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "board_access_dev_password"  # nosec B105

# Minimum length for an env-provided JWT_SECRET in production (256 bits)
_MIN_JWT_SECRET_LENGTH = 32

SECONDS_PER_DAY = 24 * 60 * 60


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "personal_board"
    database_user: str = "personal_board_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # Full URL override (e.g. sqlite+aiosqlite:///./codes.db for local runs)
    database_url_override: str = ""

    # CORS
    # Session tokens travel in the Authorization header, never in cookies,
    # so a wildcard origin is allowed (credentials stay disabled).
    allowed_origins: list[str] = ["*"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Signing secret
    # "ssm": SSM Parameter Store (decrypted at fetch time)
    # "env": JWT_SECRET environment variable (local development, tests)
    secret_provider: Literal["ssm", "env"] = "ssm"
    jwt_secret_parameter: str = "/personal-board/jwt-secret"
    aws_region: str = ""
    jwt_secret: SecretStr = SecretStr("")

    # Session tokens
    token_app_tag: str = "personal-board"
    session_ttl_days: int = 7
    # Code records stay in the store this long after their session expires
    record_grace_days: int = 1

    # Rate Limiting (Security)
    # Six-digit codes are guessable; throttle redemption attempts per client IP
    rate_limit_activate: str = "10/minute"
    rate_limit_enabled: bool = True

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def session_ttl_seconds(self) -> int:
        """Lifetime of a session token in seconds (604800 for 7 days)."""
        return self.session_ttl_days * SECONDS_PER_DAY

    @property
    def record_grace_seconds(self) -> int:
        """Grace period between token expiry and record deletion."""
        return self.record_grace_days * SECONDS_PER_DAY

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate configuration invariants.

        Checks:
        - Session lifetime must be positive (all environments)
        - Record grace period cannot be negative (all environments)
        - Database password must not be the default in production
        - JWT_SECRET must be set and >= 32 chars when the env provider is
          used in production
        """
        if self.session_ttl_days <= 0:
            msg = f"SESSION_TTL_DAYS must be positive. Got: {self.session_ttl_days}"
            raise ValueError(msg)
        if self.record_grace_days < 0:
            msg = (
                "RECORD_GRACE_DAYS cannot be negative. "
                f"Got: {self.record_grace_days}"
            )
            raise ValueError(msg)

        if self.environment == "production":
            if (
                not self.database_url_override
                and self.database_password == _INSECURE_DEFAULT_PASSWORD
            ):
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            if self.secret_provider == "env":
                secret_value = self.jwt_secret.get_secret_value()
                if not secret_value:
                    msg = (
                        "JWT_SECRET must be set when SECRET_PROVIDER=env in "
                        "production. Prefer SECRET_PROVIDER=ssm."
                    )
                    raise ValueError(msg)
                if len(secret_value) < _MIN_JWT_SECRET_LENGTH:
                    msg = (
                        f"JWT_SECRET must be at least {_MIN_JWT_SECRET_LENGTH} "
                        "characters for adequate security."
                    )
                    raise ValueError(msg)

        return self


settings = Settings()
