"""Log tail configuration read once from the environment at start-up."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from qstar_agent.const import (
    DEFAULT_LOG_BUF_SIZE,
    DEFAULT_LOG_DATE_FMT,
    DEFAULT_LOG_FILE_PATH,
    ENV_LOG_BUF_SIZE,
    ENV_LOG_DATE_FMT,
    ENV_LOG_FILE_PATH,
)
from qstar_agent.exceptions import ConfigError

# Formatted with the layout to learn the prefix length and self-test it.
_REFERENCE_TIME = datetime(2006, 1, 2, 15, 4, 5, 999999)


class LogConfig(BaseModel):
    """Immutable settings for reading the log tail.

    Attributes:
        date_format: strptime layout of the timestamp that starts each
            log line.
        file_path: Path of the log file.
        window: Number of bytes read from the end of the file.

    """

    model_config = ConfigDict(frozen=True)

    date_format: str = DEFAULT_LOG_DATE_FMT
    file_path: str = DEFAULT_LOG_FILE_PATH
    window: int = DEFAULT_LOG_BUF_SIZE

    @field_validator("date_format")
    @classmethod
    def _check_date_format(cls, value: str) -> str:
        formatted = _REFERENCE_TIME.strftime(value)
        try:
            datetime.strptime(formatted, value)
        except ValueError as err:
            raise ValueError(f"Date format {value!r} cannot parse itself") from err
        return value

    @field_validator("window")
    @classmethod
    def _check_window(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Log window must be a positive number of bytes")
        return value

    @property
    def prefix_length(self) -> int:
        """Return the length of a timestamp formatted with the layout."""
        return len(_REFERENCE_TIME.strftime(self.date_format))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LogConfig:
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Validated configuration; unset or empty variables fall back
            to the defaults.

        Raises:
            ConfigError: If a variable holds an unusable value.

        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for key, env_key in (
            ("date_format", ENV_LOG_DATE_FMT),
            ("file_path", ENV_LOG_FILE_PATH),
            ("window", ENV_LOG_BUF_SIZE),
        ):
            value = env.get(env_key)
            if value:
                values[key] = value

        try:
            return cls.model_validate(values)
        except ValidationError as err:
            raise ConfigError(f"Invalid log configuration: {err}") from err
