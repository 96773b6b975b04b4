"""SQLite backend of the stores.

Each thread gets its own connection to the database file. Connections
run in autocommit mode and every unit of work is wrapped in an explicit
transaction:

- write transactions start with `BEGIN IMMEDIATE`, so writers serialize
  and a read-then-write sequence can not interleave with another writer;
- read transactions start with a deferred `BEGIN`, so everything read
  inside one of them is a consistent snapshot.

The database runs in WAL mode with foreign keys enforced.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from spectra.errors import StorageError

if TYPE_CHECKING:
    from collections.abc import Iterator

#: Default database file name.
DEFAULT_DATABASE = 'spectra.sqlite3'

#: Default time (in seconds) a connection waits for a lock.
DEFAULT_BUSY_TIMEOUT = 30.0

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS sequences (
        name TEXT PRIMARY KEY,
        value INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS shared_steps (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        name_key TEXT NOT NULL UNIQUE,
        description TEXT,
        created_by TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS test_cases (
        id TEXT PRIMARY KEY,
        case_code TEXT NOT NULL UNIQUE,
        title TEXT NOT NULL,
        description TEXT,
        execution_order REAL NOT NULL,
        created_by TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS test_cases_execution_order
        ON test_cases (execution_order)
    """,
    """
    CREATE TABLE IF NOT EXISTS test_steps (
        id TEXT PRIMARY KEY,
        step_type TEXT NOT NULL,
        step_order INTEGER NOT NULL CHECK (step_order >= 1),
        test_case_id TEXT REFERENCES test_cases (id) ON DELETE CASCADE,
        shared_step_id TEXT REFERENCES shared_steps (id),
        action_type TEXT,
        action_params TEXT,
        assertions TEXT,
        custom_expected_result TEXT,
        CHECK (
            (step_type = 'regular'
                AND test_case_id IS NOT NULL
                AND shared_step_id IS NULL
                AND action_type IS NOT NULL)
            OR (step_type = 'shared_reference'
                AND test_case_id IS NOT NULL
                AND shared_step_id IS NOT NULL
                AND action_type IS NULL)
            OR (step_type = 'shared_definition'
                AND test_case_id IS NULL
                AND shared_step_id IS NOT NULL
                AND action_type IS NOT NULL)
        )
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS test_steps_test_case
        ON test_steps (test_case_id, step_order)
    """,
    """
    CREATE INDEX IF NOT EXISTS test_steps_shared_step
        ON test_steps (shared_step_id, step_type)
    """,
)

logger = logging.getLogger(__name__)


def utcnow() -> str:
    """Current UTC time as a sortable ISO 8601 string."""
    return datetime.now(tz=UTC).isoformat(timespec='microseconds')


class Database:
    """SQLite database with thread-local connections.

    Usage:
        database = Database('spectra.sqlite3')
        with database.transaction(write=True) as connection:
            connection.execute('INSERT INTO ...')
    """

    def __init__(self, path: str | Path = DEFAULT_DATABASE, *,
                 busy_timeout: float = DEFAULT_BUSY_TIMEOUT) -> None:
        """Initialize a database.

        The file and its parent directory are created on first connection.

        Args:
            path: Path to the database file.
            busy_timeout: Time (in seconds) a connection waits for a lock.
        """
        self.path = Path(path)
        self.busy_timeout = busy_timeout

        self._local = threading.local()

    def connect(self) -> sqlite3.Connection:
        """Return the connection of the current thread, opening it if needed.

        Raises:
            StorageError: If the database can not be opened.
        """
        connection = getattr(self._local, 'connection', None)
        if connection is not None:
            return connection

        self.path.parent.mkdir(parents=True, exist_ok=True)

        try:
            connection = sqlite3.connect(
                self.path,
                timeout=self.busy_timeout,
                isolation_level=None,
            )
            connection.execute('PRAGMA journal_mode=WAL')
            connection.execute('PRAGMA foreign_keys=ON')
        except sqlite3.Error as base:
            raise StorageError(f'Can not open database {self.path}') from base

        connection.row_factory = sqlite3.Row
        self._local.connection = connection

        logger.debug('Opened database %s', self.path)

        return connection

    def close(self) -> None:
        """Close the connection of the current thread, if any."""
        connection = getattr(self._local, 'connection', None)
        if connection is None:
            return

        self._local.connection = None
        connection.close()

    @contextmanager
    def transaction(self, *, write: bool = False) -> 'Iterator[sqlite3.Connection]':
        """Run a unit of work in a transaction.

        A transaction opened while another one is active on the same
        thread joins the outer one.

        Args:
            write: Whether the unit of work writes. Write transactions
                take the database write lock immediately.

        Yields:
            The connection of the current thread.

        Raises:
            StorageError: If the database fails. The transaction is
                rolled back.
        """
        connection = self.connect()
        if connection.in_transaction:
            yield connection
            return

        try:
            connection.execute('BEGIN IMMEDIATE' if write else 'BEGIN')
            yield connection
            connection.execute('COMMIT')
        except sqlite3.Error as base:
            self._rollback(connection)
            raise StorageError('Storage operation failed') from base
        except BaseException:
            self._rollback(connection)
            raise

    def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        with self.transaction(write=True) as connection:
            for statement in SCHEMA:
                connection.execute(statement)

        logger.info('Initialized database schema in %s', self.path)

    @staticmethod
    def _rollback(connection: sqlite3.Connection) -> None:
        """Roll back the active transaction, if any."""
        if connection.in_transaction:
            connection.rollback()
