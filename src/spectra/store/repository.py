"""Repository facade over the stores."""

from typing import TYPE_CHECKING, Any

from spectra import catalog

from .database import Database
from .maintenance import MaintenanceMixin
from .shared_steps import SharedStepsMixin
from .test_cases import TestCasesMixin

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from spectra.settings import Settings


class Repository(SharedStepsMixin, TestCasesMixin, MaintenanceMixin):
    """Entry point of the stores.

    The repository is stateless apart from the database handle, so one
    instance can serve concurrent requests: each thread works on its own
    connection.
    """

    def __init__(self, database: Database, *, initialize: bool = True) -> None:
        """Initialize a repository.

        Args:
            database: Database the operations run against.
            initialize: Whether to create the schema if it is missing.
        """
        self.database = database

        if initialize:
            database.initialize()

    @classmethod
    def from_settings(cls, settings: 'Settings', *, initialize: bool = True) -> 'Self':
        """Create a repository from runtime settings."""
        database = Database(settings.database, busy_timeout=settings.busy_timeout)

        return cls(database, initialize=initialize)

    def metadata(self) -> dict[str, Any]:
        """Describe the catalog together with the available shared steps.

        Returns:
            The catalog description (see `spectra.catalog.describe`)
            with an extra `sharedSteps` list of shared step summaries.
        """
        return {
            **catalog.describe(),
            'sharedSteps': [shared.dump() for shared in self.list_shared_steps()],
        }

    def close(self) -> None:
        """Close the connection of the current thread."""
        self.database.close()
