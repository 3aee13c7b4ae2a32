"""Configuration management."""

from functools import cache

from pydantic import ConfigDict, Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings

from ..consts import (
    LOGIN_URL_PATH,
    MIN_LOGIN_RETRY_SECONDS,
    REGISTER_URL_PATH,
)


class Config(BaseSettings):
    """Connection settings and credentials with computed endpoints.

    Instances are frozen: the credentials a client logs in with never change
    for the lifetime of that client.
    """

    model_config = ConfigDict(
        env_prefix="WEKAN_", case_sensitive=False, extra="ignore", frozen=True
    )

    remote_addr: str = Field(
        default="http://localhost",
        description="Address of the Wekan server, e.g. https://board.example.com",
    )
    username: str = Field(default="", description="User to log in as")
    password: SecretStr = Field(default=SecretStr(""), description="Login password")
    login_retry_seconds: float = Field(
        default=MIN_LOGIN_RETRY_SECONDS,
        allow_inf_nan=False,
        description="Pause between failed login attempts, at least one second",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level, applied by passing it to setup_logging()",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )

    @field_validator("remote_addr")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("login_retry_seconds")
    @classmethod
    def _floor_retry_interval(cls, value: float) -> float:
        # Never retry faster than once per second.
        return max(value, MIN_LOGIN_RETRY_SECONDS)

    @computed_field
    @property
    def login_url(self) -> str:
        """URL for logging in."""
        return f"{self.remote_addr}{LOGIN_URL_PATH}"

    @computed_field
    @property
    def register_url(self) -> str:
        """URL for registering new users."""
        return f"{self.remote_addr}{REGISTER_URL_PATH}"

    def __repr__(self) -> str:
        return (
            f"Config(remote_addr='{self.remote_addr}', username='{self.username}', "
            f"log_level='{self.log_level}')"
        )


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return Config()
