"""JSON-compatible value types for step payloads.

Step parameters and assertions are persisted as JSON documents and handed
back to transport layers unchanged, so every value accepted from a client
must be representable in JSON.

This module defines the value type system used by step models and provides
a utility for recursively normalizing arbitrary payload objects into
strict JSON-compatible values.
"""

from collections.abc import Mapping, Sequence
from typing import Any

#: Scalars are atomic JSON values.
type Scalar = str | int | float | bool

#: A value is anything that survives a JSON round trip unchanged
#: (up to the tuple/list distinction).
type Value = Scalar | Sequence['Value'] | Mapping[str, 'Value'] | None

#: A value received from a client prior to normalization.
type RawValue = Any

MAPPINGS = (dict,)
SCALARS = (str, int, float, bool)
SEQUENCES = (list, tuple)


def _normalize_key(value: RawValue) -> str:
    """Validate a mapping key.

    Args:
        value: Candidate mapping key.

    Returns:
        The validated key as a string.

    Raises:
        TypeError: If the provided key is not a string.
    """
    if not isinstance(value, str):
        raise TypeError(f'Can not use {value!r} as mapping key')

    return value


def normalize(value: RawValue) -> Value:
    """Recursively normalize a payload value into a JSON `Value`.

    Tuples become lists and nested mappings are copied, so the result
    never shares mutable containers with the input.

    Args:
        value: Payload value to normalize.

    Returns:
        A JSON-compatible value.

    Raises:
        TypeError: If the value (or any nested value) has an unsupported type.
    """
    if value is None or isinstance(value, SCALARS):
        return value

    if isinstance(value, MAPPINGS):
        return {
            _normalize_key(key): normalize(item)
            for key, item in value.items()
        }

    if isinstance(value, SEQUENCES):
        return [normalize(item) for item in value]

    raise TypeError(f'{value!r} has unsupported type')
