"""Static catalog of actions, assertions, and key options.

The catalog is pure lookup data compiled into the package: it has no
state, is never mutated, and needs no dispatch. Lookups go through the
helpers below so the case-sensitivity rules live in one place:

- action types are recognized ASCII case-insensitively;
- the parameter whitelist and the compatibility matrix are keyed by the
  exact action type, so a differently-cased action passes its parameters
  through and allows no assertions;
- assertion types and key options match exactly.
"""

from types import MappingProxyType
from typing import Any

from .actions import ACTION_ASSERTIONS, ACTION_PARAMETERS, ACTIONS, ActionDefinition
from .assertions import ASSERTIONS, AssertionDefinition
from .keys import KEY_OPTIONS, KeyOption

__all__ = (
    'ACTIONS',
    'ASSERTIONS',
    'KEY_OPTIONS',
    'PASS_THROUGH',
    'ActionDefinition',
    'AssertionDefinition',
    'KeyOption',
    'allowed_assertions',
    'allowed_parameters',
    'describe',
    'find_action',
    'find_assertion',
    'is_key_option',
)

#: Whitelist row used for action types without an explicit entry:
#: parameters are kept as submitted.
PASS_THROUGH = None

_ACTIONS_BY_FOLDED_VALUE = MappingProxyType({
    action.value.lower(): action
    for action in ACTIONS
})

_ASSERTIONS_BY_VALUE = MappingProxyType({
    assertion.value: assertion
    for assertion in ASSERTIONS
})

_KEY_VALUES = frozenset(option.value for option in KEY_OPTIONS)


def find_action(action_type: str) -> ActionDefinition | None:
    """Look up an action definition, ignoring ASCII case.

    Args:
        action_type: Action type to look up.

    Returns:
        The action definition, or `None` if the catalog has no such action.
    """
    if not action_type.isascii():
        return None

    return _ACTIONS_BY_FOLDED_VALUE.get(action_type.lower())


def find_assertion(assertion_type: str) -> AssertionDefinition | None:
    """Look up an assertion definition by its exact type."""
    return _ASSERTIONS_BY_VALUE.get(assertion_type)


def is_key_option(key: Any) -> bool:  # noqa: ANN401
    """Check whether a value is one of the `pressKey` key options."""
    return isinstance(key, str) and key in _KEY_VALUES


def allowed_parameters(action_type: str) -> frozenset[str] | None:
    """Return the parameter whitelist row for an action type.

    Args:
        action_type: Action type as submitted.

    Returns:
        Parameter keys to retain, or `PASS_THROUGH` when the table has
        no row for the action type.
    """
    return ACTION_PARAMETERS.get(action_type, PASS_THROUGH)


def allowed_assertions(action_type: str) -> tuple[str, ...]:
    """Return the assertion types legal for an action type."""
    return ACTION_ASSERTIONS.get(action_type, ())


def describe() -> dict[str, Any]:
    """Describe the catalog for editors and clients.

    Returns:
        A JSON-compatible mapping with `actions`, `assertions`,
        `assertionsByAction`, and `keyOptions`.
    """
    return {
        'actions': [action.dump() for action in ACTIONS],
        'assertions': [assertion.dump() for assertion in ASSERTIONS],
        'assertionsByAction': {
            action.value: list(allowed_assertions(action.value))
            for action in ACTIONS
        },
        'keyOptions': [option.dump() for option in KEY_OPTIONS],
    }
