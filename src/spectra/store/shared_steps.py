"""Shared step store.

This module defines a mixin with the shared step operations of the
repository. Every mutation runs in a single write transaction, so a
failure leaves the store exactly as it was before the call.

Deleting a shared step is refused while any test case still references
it. The reference count and the delete run in the same write
transaction, and reference rows carry a foreign key to the shared step,
so a reference inserted concurrently can never be left dangling.
"""

import logging
from typing import TYPE_CHECKING

from spectra.core import validate_step
from spectra.errors import (
    DuplicateName,
    ErrorContext,
    InvalidStepType,
    NotFound,
    ReferencedByInUse,
)
from spectra.names import make_record_id
from spectra.schema import SharedDefinitionStep, SharedStep, SharedStepSummary

from .database import utcnow
from .steps import insert_steps, select_definitions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from sqlite3 import Connection, Row

if TYPE_CHECKING:
    from spectra.schema import SharedStepInput, SharedStepUpdate, StepInput

    from .database import Database

SHARED_STEP_KIND = 'Shared step'

_SUMMARY_QUERY = """
    SELECT
        s.id, s.name, s.description, s.created_by, s.created_at, s.updated_at,
        (SELECT COUNT(*) FROM test_steps d
            WHERE d.shared_step_id = s.id
              AND d.step_type = 'shared_definition') AS step_count,
        (SELECT COUNT(*) FROM test_steps r
            WHERE r.shared_step_id = s.id
              AND r.step_type = 'shared_reference') AS reference_count
    FROM shared_steps s
"""

logger = logging.getLogger(__name__)


def _summary_data(row: 'Row') -> dict:
    """Convert a summary row into model data."""
    return {key: row[key] for key in row.keys()}  # noqa: SIM118


class SharedStepsMixin:
    """Mixin defining shared step operations.

    Attributes:
        database: Database the operations run against.
    """

    database: 'Database'

    def create_shared_step(self, payload: 'SharedStepInput',
                           actor: str | None = None) -> SharedStep:
        """Create a shared step with its definitions.

        Args:
            payload: Shared step payload.
            actor: Identity of the caller, stored as the author.

        Returns:
            The created shared step.

        Raises:
            DuplicateName: If a shared step with the same name (ignoring
                case) already exists.
            InputError: If a definition is invalid.
        """
        shared_step_id = make_record_id()
        now = utcnow()

        with self.database.transaction(write=True) as connection:
            self._check_name(connection, payload.name)

            definitions = self._prepare_definitions(shared_step_id, payload.steps)

            connection.execute(
                'INSERT INTO shared_steps '
                '(id, name, name_key, description, created_by, created_at, updated_at) '
                'VALUES (?, ?, ?, ?, ?, ?, ?)',
                (
                    shared_step_id,
                    payload.name,
                    payload.name.casefold(),
                    payload.description,
                    actor,
                    now,
                    now,
                ),
            )
            insert_steps(connection, definitions)

            logger.debug(
                'Created shared step %s with %d definition(s)',
                shared_step_id,
                len(definitions),
            )

            return self._read_shared_step(connection, shared_step_id)

    def update_shared_step(self, shared_step_id: str,
                           payload: 'SharedStepUpdate') -> SharedStep:
        """Update a shared step.

        Omitted fields keep their values. Submitted definitions replace
        the stored ones entirely.

        Args:
            shared_step_id: Identifier of the shared step.
            payload: Update payload.

        Returns:
            The updated shared step.

        Raises:
            NotFound: If the shared step does not exist.
            DuplicateName: If the new name is taken by another shared step.
            InputError: If a definition is invalid.
        """
        with self.database.transaction(write=True) as connection:
            self._ensure_shared_step(connection, shared_step_id)

            name_key = None
            if payload.name is not None:
                self._check_name(connection, payload.name, exclude=shared_step_id)
                name_key = payload.name.casefold()

            connection.execute(
                'UPDATE shared_steps SET '
                'name = COALESCE(?, name), '
                'name_key = COALESCE(?, name_key), '
                'description = COALESCE(?, description), '
                'updated_at = ? '
                'WHERE id = ?',
                (payload.name, name_key, payload.description, utcnow(), shared_step_id),
            )

            if payload.steps is not None:
                definitions = self._prepare_definitions(shared_step_id, payload.steps)
                connection.execute(
                    "DELETE FROM test_steps WHERE shared_step_id = ? "
                    "AND step_type = 'shared_definition'",
                    (shared_step_id,),
                )
                insert_steps(connection, definitions)

            logger.debug('Updated shared step %s', shared_step_id)

            return self._read_shared_step(connection, shared_step_id)

    def delete_shared_step(self, shared_step_id: str) -> None:
        """Delete a shared step and its definitions.

        Args:
            shared_step_id: Identifier of the shared step.

        Raises:
            NotFound: If the shared step does not exist.
            ReferencedByInUse: If test case steps still reference it.
        """
        with self.database.transaction(write=True) as connection:
            self._ensure_shared_step(connection, shared_step_id)

            (count,) = connection.execute(
                "SELECT COUNT(*) FROM test_steps WHERE shared_step_id = ? "
                "AND step_type = 'shared_reference'",
                (shared_step_id,),
            ).fetchone()

            if count > 0:
                raise ReferencedByInUse(count)

            connection.execute(
                "DELETE FROM test_steps WHERE shared_step_id = ? "
                "AND step_type = 'shared_definition'",
                (shared_step_id,),
            )
            connection.execute('DELETE FROM shared_steps WHERE id = ?', (shared_step_id,))

        logger.debug('Deleted shared step %s', shared_step_id)

    def get_shared_step(self, shared_step_id: str) -> SharedStep:
        """Read a shared step with its definitions.

        Raises:
            NotFound: If the shared step does not exist.
        """
        with self.database.transaction() as connection:
            return self._read_shared_step(connection, shared_step_id)

    def find_shared_step(self, shared_step_id: str) -> SharedStep | None:
        """Read a shared step, or `None` if it does not exist."""
        with self.database.transaction() as connection:
            return self._fetch_shared_step(connection, shared_step_id)

    def list_shared_steps(self) -> list[SharedStepSummary]:
        """List shared step summaries, newest first."""
        with self.database.transaction() as connection:
            rows = connection.execute(f'{_SUMMARY_QUERY} ORDER BY s.created_at DESC, s.id')

            return [
                SharedStepSummary.model_validate(_summary_data(row))
                for row in rows
            ]

    def _fetch_shared_step(self, connection: 'Connection',
                           shared_step_id: str) -> SharedStep | None:
        """Read a shared step on an open connection."""
        row = connection.execute(
            f'{_SUMMARY_QUERY} WHERE s.id = ?',
            (shared_step_id,),
        ).fetchone()

        if row is None:
            return None

        return SharedStep.model_validate({
            **_summary_data(row),
            'steps': select_definitions(connection, shared_step_id),
        })

    def _read_shared_step(self, connection: 'Connection',
                          shared_step_id: str) -> SharedStep:
        """Read an existing shared step on an open connection.

        Raises:
            NotFound: If the shared step does not exist.
        """
        shared = self._fetch_shared_step(connection, shared_step_id)
        if shared is None:
            raise NotFound(SHARED_STEP_KIND, shared_step_id)

        return shared

    @staticmethod
    def _ensure_shared_step(connection: 'Connection', shared_step_id: str) -> None:
        """Check that a shared step exists.

        Raises:
            NotFound: If the shared step does not exist.
        """
        row = connection.execute(
            'SELECT 1 FROM shared_steps WHERE id = ?',
            (shared_step_id,),
        ).fetchone()

        if row is None:
            raise NotFound(SHARED_STEP_KIND, shared_step_id)

    @staticmethod
    def _check_name(connection: 'Connection', name: str,
                    exclude: str | None = None) -> None:
        """Check that a name is free, ignoring case.

        Raises:
            DuplicateName: If another shared step already uses the name.
        """
        row = connection.execute(
            'SELECT id FROM shared_steps WHERE name_key = ? AND id IS NOT ?',
            (name.casefold(), exclude),
        ).fetchone()

        if row is not None:
            raise DuplicateName(name)

    @staticmethod
    def _prepare_definitions(shared_step_id: str,
                             steps: 'Sequence[StepInput]') -> list[SharedDefinitionStep]:
        """Validate submitted steps as definitions of a shared step.

        Positions are reassigned from the list order.

        Raises:
            InvalidStepType: If a step is a shared step reference.
            InputError: If a step fails validation.
        """
        definitions = []

        for num, step in enumerate(steps):
            if step.step_type == 'shared_reference':
                raise InvalidStepType(
                    'Shared steps can not reference other shared steps',
                    context=ErrorContext(step_num=num, element=step.dump(exclude_none=True)),
                )

            params, assertions = validate_step(step, step_num=num)
            definitions.append(SharedDefinitionStep(
                id=make_record_id(),
                step_order=num + 1,
                shared_step_id=shared_step_id,
                action_type=step.action_type,
                action_params=params,
                assertions=assertions,
                custom_expected_result=step.custom_expected_result,
            ))

        return definitions
