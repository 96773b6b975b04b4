"""Step rows shared by the test case and shared step stores.

All three step variants live in the `test_steps` table. Action
parameters and assertions are stored as JSON documents.
"""

import json
from typing import TYPE_CHECKING, Any

from spectra.schema import StepAdapter

if TYPE_CHECKING:
    from collections.abc import Iterable
    from sqlite3 import Connection, Row

if TYPE_CHECKING:
    from spectra.schema import Step

STEP_COLUMNS = (
    'id',
    'step_type',
    'step_order',
    'test_case_id',
    'shared_step_id',
    'action_type',
    'action_params',
    'assertions',
    'custom_expected_result',
)

#: Row columns and their wire names.
_ALIASES = {
    'id': 'id',
    'step_type': 'stepType',
    'step_order': 'stepOrder',
    'test_case_id': 'testCaseId',
    'shared_step_id': 'sharedStepId',
    'action_type': 'actionType',
    'custom_expected_result': 'customExpectedResult',
}

_JSON_COLUMNS = {
    'action_params': 'actionParams',
    'assertions': 'assertions',
}

_SELECT = f'SELECT {", ".join(STEP_COLUMNS)} FROM test_steps'  # noqa: S608

_INSERT = (
    f'INSERT INTO test_steps ({", ".join(STEP_COLUMNS)}) '  # noqa: S608
    f'VALUES ({", ".join(f":{column}" for column in STEP_COLUMNS)})'
)


def step_from_row(row: 'Row') -> 'Step':
    """Build a stored step from a `test_steps` row.

    Columns that are `NULL` are left out, so that each variant only
    receives the fields it declares.
    """
    data: dict[str, Any] = {
        alias: row[column]
        for column, alias in _ALIASES.items()
        if row[column] is not None
    }

    for column, alias in _JSON_COLUMNS.items():
        if row[column] is not None:
            data[alias] = json.loads(row[column])

    return StepAdapter.validate_python(data)


def _row_from_step(step: 'Step') -> dict[str, Any]:
    """Build named SQL parameters for a stored step."""
    data = step.model_dump(mode='json')
    row = {column: data.get(column) for column in STEP_COLUMNS}

    for column in _JSON_COLUMNS:
        if column in data:
            row[column] = json.dumps(data[column], ensure_ascii=False)

    return row


def insert_steps(connection: 'Connection', steps: 'Iterable[Step]') -> None:
    """Insert stored steps."""
    connection.executemany(_INSERT, [_row_from_step(step) for step in steps])


def select_case_steps(connection: 'Connection', test_case_id: str) -> list['Step']:
    """Select the steps of a test case in position order."""
    rows = connection.execute(
        f'{_SELECT} WHERE test_case_id = ? ORDER BY step_order, id',
        (test_case_id,),
    )

    return [step_from_row(row) for row in rows]


def select_definitions(connection: 'Connection', shared_step_id: str) -> list['Step']:
    """Select the definitions of a shared step in position order."""
    rows = connection.execute(
        f"{_SELECT} WHERE shared_step_id = ? AND step_type = 'shared_definition' "
        'ORDER BY step_order, id',
        (shared_step_id,),
    )

    return [step_from_row(row) for row in rows]
