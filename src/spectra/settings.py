"""Runtime settings.

Settings are resolved from the environment (variables prefixed with
`SPECTRA_`), e.g. `SPECTRA_DATABASE=/var/lib/spectra.sqlite3`.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from spectra.models import SettingsModel
from spectra.store.database import DEFAULT_BUSY_TIMEOUT, DEFAULT_DATABASE
from spectra.store.maintenance import DEFAULT_REBALANCE_INTERVAL

type LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class Settings(SettingsModel):
    """Settings of the store and the maintenance scheduler."""

    model_config = SettingsConfigDict(
        env_prefix='SPECTRA_',
        frozen=True,
        extra='ignore',
    )

    database: Path = Field(
        default=Path(DEFAULT_DATABASE),
        title='Database',
        description='Path to the SQLite database file.',
    )

    busy_timeout: float = Field(
        default=DEFAULT_BUSY_TIMEOUT,
        gt=0,
        title='Busy timeout',
        description='Time (in seconds) a connection waits for a database lock.',
    )

    rebalance_interval: float = Field(
        default=DEFAULT_REBALANCE_INTERVAL,
        gt=0,
        title='Rebalance interval',
        description='Time (in seconds) between scheduled execution order rebalances.',
    )

    rebalance_on_start: bool = Field(
        default=True,
        title='Rebalance on start',
        description='Whether the scheduler rebalances as soon as it starts.',
    )

    log_level: LogLevel = Field(
        default='INFO',
        title='Log level',
        description='Level of the root logger configured by the command line.',
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, value: object) -> object:
        """Accept level names in any case."""
        if isinstance(value, str):
            return value.strip().upper()

        return value
