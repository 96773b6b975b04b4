"""Identifier types and validation rules.

This module defines the identifier patterns and strongly-typed aliases
used by catalog tables, stored records, and request payloads.

The rules defined here form part of the public contract of the store:
catalog keys are stable camelCase words, test cases are addressed by
human-readable case codes, and every stored record carries an opaque
string identifier.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated
from uuid import uuid4

from pydantic import Field

#: Base pattern for catalog keys (`navigate`, `waitForElement`, `ArrowUp`).
_KEY_PATTERN = r'[a-zA-Z][a-zA-Z0-9]*'

#: Prefix of every human-readable test case code.
CASE_CODE_PREFIX = 'TC-'

#: Minimal number of digits in a case code.
CASE_CODE_WIDTH = 4

#: Compiled pattern for catalog keys.
KEY_PATTERN = regexp(rf'^{_KEY_PATTERN}$', flags=ASCII)

#: Compiled pattern for case codes. Codes grow past four digits once
#: the sequence exceeds 9999.
CASE_CODE_PATTERN = regexp(
    rf'^{CASE_CODE_PREFIX}(?P<number>\d{{{CASE_CODE_WIDTH},}})$',
    flags=ASCII,
)


CatalogKey = Annotated[
    str, Field(
        pattern=KEY_PATTERN.pattern,
        title='Catalog key',
        description=(
            'Identifier of an action, an assertion, or a key option. '
            'Catalog keys are ASCII camelCase words.'
        ),
        examples=[
            'navigate',
            'elementDisplayed',
            'Enter',
        ],
    ),
]

CaseCode = Annotated[
    str, Field(
        pattern=CASE_CODE_PATTERN.pattern,
        title='Case code',
        description=(
            'Human-readable identifier of a test case. '
            'Codes are generated from a monotonic sequence and are never reused.'
        ),
        examples=[
            'TC-0001',
            'TC-10042',
        ],
    ),
]

RecordId = Annotated[
    str, Field(
        min_length=1,
        title='Record identifier',
        description='Opaque identifier of a stored record.',
    ),
]


def make_case_code(number: int) -> str:
    """Format a sequence number as a case code.

    Args:
        number: Positive sequence number.

    Returns:
        Case code such as `TC-0007`.

    Raises:
        ValueError: If the number is not positive.
    """
    if number < 1:
        raise ValueError(f'Case sequence must be positive, got {number}')

    return f'{CASE_CODE_PREFIX}{number:0{CASE_CODE_WIDTH}d}'


def make_record_id() -> str:
    """Generate a new opaque record identifier."""
    return str(uuid4())
