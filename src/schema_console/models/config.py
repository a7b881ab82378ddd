"""Database configuration model."""

import logging
import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from sqlalchemy.engine.url import URL

logger = logging.getLogger(__name__)

# Environment variable -> (field name, default)
ENVIRONMENT_VARIABLES: dict[str, tuple[str, str]] = {
    "HOST": ("host", "localhost"),
    "PORT": ("port", "5432"),
    "USERNAME": ("user", "postgres"),
    "PASSWORD": ("password", "example"),
    "DATABASE": ("database", "foundation"),
    "SCHEMA": ("schema_name", "public"),
    "READ_ONLY": ("read_only", "true"),
    "ECHO_SQL": ("echo_sql", "false"),
    "LOG_LEVEL": ("log_level", "WARNING"),
}


class DatabaseConfig(BaseModel):
    """Configuration for the console's database connection."""

    host: str = Field(default="localhost", description="Database server host")
    port: int = Field(default=5432, ge=1, le=65535, description="Database server port")
    user: str = Field(default="postgres", description="Login role")
    password: str = Field(default="example", description="Login password")
    database: str = Field(default="foundation", description="Database name")
    schema_name: str = Field(
        default="public", description="Schema whose tables are reflected"
    )
    read_only: bool = Field(
        default=True,
        description="Enforce read-only connections",
    )
    echo_sql: bool = Field(
        default=False,
        description="Echo SQL statements to stdout",
    )
    log_level: str = Field(default="WARNING", description="Root logging level")

    @field_validator("host", "user", "database", "schema_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated configuration

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        values = {}
        for variable, (field_name, default) in ENVIRONMENT_VARIABLES.items():
            raw = env.get(variable)
            if raw is None:
                raw = default
            else:
                logger.debug(f"Using {variable} from environment")
            values[field_name] = raw
        return cls.model_validate(values)

    @property
    def url(self) -> URL:
        """SQLAlchemy URL for the asyncpg driver."""
        return URL.create(
            "postgresql+asyncpg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @property
    def safe_url(self) -> str:
        """Connection URL with the password masked, for logging."""
        return self.url.render_as_string(hide_password=True)

    @property
    def dialect(self) -> str:
        return self.url.get_backend_name()

    @property
    def driver(self) -> str:
        return self.url.get_driver_name()
