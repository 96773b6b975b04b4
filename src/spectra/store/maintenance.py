"""Execution order rebalancing.

Fractional keys lose precision when the same gap is subdivided again
and again. The rebalancer renumbers every test case to `1, 2, 3, ...`
in a single set-based statement, preserving the current order (ties
broken by creation time, then case code).

`RebalanceScheduler` runs the rebalancer in a background thread: once
on start, then periodically. A failed run is logged and the scheduler
keeps going.
"""

import logging
import threading
from typing import TYPE_CHECKING

from .database import utcnow

if TYPE_CHECKING:
    from .database import Database

#: Default interval (in seconds) between scheduled rebalances: 9 hours.
DEFAULT_REBALANCE_INTERVAL = 9 * 60 * 60

_REBALANCE = """
    WITH ordered AS (
        SELECT
            id,
            ROW_NUMBER() OVER (
                ORDER BY execution_order, created_at, case_code
            ) AS position
        FROM test_cases
    )
    UPDATE test_cases
    SET
        execution_order = (
            SELECT CAST(ordered.position AS REAL)
            FROM ordered
            WHERE ordered.id = test_cases.id
        ),
        updated_at = ?
"""

logger = logging.getLogger(__name__)


def rebalance(database: 'Database') -> int:
    """Renumber execution order keys of every test case.

    Idempotent: rebalancing an already dense order rewrites the same keys.

    Args:
        database: Database to rebalance.

    Returns:
        Number of test cases touched.

    Raises:
        StorageError: If the database fails. No key has been changed.
    """
    with database.transaction(write=True) as connection:
        rows = connection.execute(_REBALANCE, (utcnow(),)).rowcount

    return rows


class RebalanceScheduler:
    """Periodic rebalancing in a daemon thread.

    Usage:
        scheduler = RebalanceScheduler(database, interval=3600)
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(self, database: 'Database',
                 interval: float = DEFAULT_REBALANCE_INTERVAL, *,
                 run_on_start: bool = True) -> None:
        """Initialize a scheduler.

        Args:
            database: Database to rebalance.
            interval: Time (in seconds) between runs.
            run_on_start: Whether to run once as soon as the thread starts.

        Raises:
            ValueError: If the interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f'Rebalance interval must be positive, got {interval}')

        self.database = database
        self.interval = interval
        self.run_on_start = run_on_start

        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the background thread. Does nothing if already running."""
        if self.is_running():
            logger.debug('Rebalance scheduler is already running')
            return

        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run,
            name='spectra-rebalance',
            daemon=True,
        )
        self._thread.start()

        logger.info('Scheduled execution order rebalance every %s second(s)', self.interval)

    def stop(self, timeout: float | None = None) -> None:
        """Wake the background thread and wait for it to finish."""
        self._stopped.set()

        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        """Check whether the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the scheduler is stopped.

        Returns:
            Whether the scheduler was stopped before the timeout.
        """
        return self._stopped.wait(timeout)

    def run_once(self, phase: str = 'scheduled') -> int | None:
        """Run one rebalance, logging the outcome.

        Args:
            phase: Label of the run used in log records.

        Returns:
            Number of test cases touched, or `None` if the run failed.
        """
        try:
            rows = rebalance(self.database)
        except Exception:
            logger.exception('Execution order rebalance (%s) failed', phase)
            return None

        logger.info('Execution order rebalance (%s) touched %d test case(s)', phase, rows)

        return rows

    def _run(self) -> None:
        """Thread body."""
        try:
            if self.run_on_start:
                self.run_once('startup')

            while not self._stopped.wait(self.interval):
                self.run_once()
        finally:
            self.database.close()


class MaintenanceMixin:
    """Mixin defining maintenance operations.

    Attributes:
        database: Database the operations run against.
    """

    database: 'Database'

    def rebalance(self) -> int:
        """Renumber execution order keys of every test case.

        Returns:
            Number of test cases touched.
        """
        rows = rebalance(self.database)
        logger.info('Execution order rebalance touched %d test case(s)', rows)

        return rows

    def make_scheduler(self, interval: float = DEFAULT_REBALANCE_INTERVAL, *,
                       run_on_start: bool = True) -> RebalanceScheduler:
        """Create a rebalance scheduler bound to the database."""
        return RebalanceScheduler(self.database, interval, run_on_start=run_on_start)
