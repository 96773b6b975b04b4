"""Step validation against the catalog.

The validator checks a single action step (a regular step or a shared
step definition) and produces the cleaned data that is persisted:

- the action type must exist in the catalog;
- action parameters are projected onto the per-action whitelist;
- every assertion must be known, legal for the action, and carry the
  inputs its kind requires;
- a `pressKey` step must name one of the key options.

Validation is pure: nothing is written, nothing is logged.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from spectra import catalog
from spectra.errors import (
    AssertionNotAllowedForAction,
    ErrorContext,
    InvalidAction,
    InvalidAssertion,
    InvalidKeyOption,
    MissingRequiredField,
    PayloadError,
)
from spectra.schema import Assertion, StepInput
from spectra.values import normalize

if TYPE_CHECKING:
    from spectra.catalog import AssertionDefinition
    from spectra.values import Value

#: Action that requires a key option parameter.
PRESS_KEY_ACTION = 'pressKey'

#: Parameter holding the pressed key.
PRESS_KEY_PARAMETER = 'key'

#: Cleaned step data: action parameters and assertions in wire form.
type CleanStep = tuple[dict[str, 'Value'], list[dict[str, 'Value']]]


def _is_blank(value: str | None) -> bool:
    """Check whether an optional text input is missing or blank."""
    return value is None or not value.strip()


def clean_parameters(action_type: str, params: Any) -> dict[str, 'Value']:  # noqa: ANN401
    """Project action parameters onto the whitelist of an action.

    Args:
        action_type: Action type as submitted.
        params: Submitted parameters.

    Returns:
        A new mapping with the retained parameters. A non-mapping payload
        yields an empty mapping; an action type without a whitelist row
        keeps every parameter.
    """
    if not isinstance(params, Mapping):
        return {}

    allowed = catalog.allowed_parameters(action_type)
    if allowed is catalog.PASS_THROUGH:
        return {key: normalize(value) for key, value in params.items()}

    return {
        key: normalize(value)
        for key, value in params.items()
        if key in allowed
    }


def _check_requirements(assertion: Assertion,
                        definition: 'AssertionDefinition',
                        context: ErrorContext) -> None:
    """Check that an assertion carries every input its kind needs.

    Raises:
        MissingRequiredField: If a required input is missing or blank.
    """
    requirements = (
        (definition.needs_selector, 'selector', assertion.selector),
        (definition.needs_value, 'expectedValue', assertion.expected_value),
        (definition.needs_attribute, 'attributeName', assertion.attribute_name),
    )

    for needed, field, value in requirements:
        if needed and _is_blank(value):
            raise MissingRequiredField(
                field,
                assertion=assertion.assertion_type,
                context=context,
            )


def clean_assertions(action_type: str, assertions: Any, *,  # noqa: ANN401
                     step_num: int | None = None) -> list[dict[str, 'Value']]:
    """Validate the assertions of a step.

    Args:
        action_type: Action type as submitted.
        assertions: Submitted assertions. `None` means no assertions.
        step_num: Position of the step in a submitted list, for errors.

    Returns:
        Parsed assertions in wire form, without unset inputs.

    Raises:
        InvalidAssertion: If the assertions are not a list, an item can
            not be parsed, or an assertion type is unknown.
        AssertionNotAllowedForAction: If an assertion is not legal for
            the action.
        MissingRequiredField: If an assertion lacks a required input.
    """
    if assertions is None:
        return []

    if not isinstance(assertions, list | tuple):
        raise InvalidAssertion('Assertions must be an array', context=ErrorContext(
            step_num=step_num,
            element={'assertions': assertions},
        ))

    allowed = catalog.allowed_assertions(action_type)
    cleaned = []

    for num, item in enumerate(assertions):
        context = ErrorContext(step_num=step_num, assertion_num=num, element=item)

        try:
            assertion = Assertion.model_validate(item)
        except ValidationError as base:
            raise InvalidAssertion('Invalid assertion format', context=ErrorContext({
                **context,
                'error': base,
            })) from base

        definition = catalog.find_assertion(assertion.assertion_type)
        if definition is None:
            raise InvalidAssertion(
                f'Invalid assertion type: {assertion.assertion_type}',
                context=context,
            )

        if assertion.assertion_type not in allowed:
            raise AssertionNotAllowedForAction(
                assertion.assertion_type,
                action_type,
                context=context,
            )

        _check_requirements(assertion, definition, context)
        cleaned.append(assertion.dump(exclude_none=True))

    return cleaned


def _check_key(params: Mapping[str, 'Value'], context: ErrorContext) -> None:
    """Check the key option of a `pressKey` step.

    Raises:
        MissingRequiredField: If no textual key remains after cleanup.
        InvalidKeyOption: If the key is not a known key option.
    """
    key = params.get(PRESS_KEY_PARAMETER)
    if not isinstance(key, str):
        raise MissingRequiredField(
            PRESS_KEY_PARAMETER,
            message=f'{PRESS_KEY_ACTION} action requires a {PRESS_KEY_PARAMETER!r} parameter',
            context=context,
        )

    if not catalog.is_key_option(key):
        raise InvalidKeyOption(key, context=context)


def _as_input(step: StepInput | Mapping[str, Any],
              step_num: int | None) -> StepInput:
    """Parse a raw step payload.

    Raises:
        PayloadError: If the payload does not match the step input schema.
    """
    if isinstance(step, StepInput):
        return step

    try:
        return StepInput.model_validate(step)
    except ValidationError as base:
        raise PayloadError.from_pydantic_error(
            base,
            data=dict(step) if isinstance(step, Mapping) else step,
            step_num=step_num,
        ) from base


def validate_step(step: StepInput | Mapping[str, Any],
                  action_type: str | None = None, *,
                  step_num: int | None = None) -> CleanStep:
    """Validate an action step and prepare it for storage.

    Args:
        step: Submitted step, parsed or raw.
        action_type: Action type overriding the one carried by the step.
        step_num: Zero-based position of the step in a submitted list.
            Only used to locate errors.

    Returns:
        A pair of cleaned action parameters and cleaned assertions.

    Raises:
        PayloadError: If a raw step does not match the step input schema.
        MissingRequiredField: If the step has no action type, or a
            required assertion input or the `pressKey` key is missing.
        InvalidAction: If the action type is not in the catalog.
        InvalidAssertion: If an assertion is malformed or unknown.
        AssertionNotAllowedForAction: If an assertion is not legal for
            the action.
        InvalidKeyOption: If a `pressKey` key is not a key option.
    """
    step = _as_input(step, step_num)
    context = ErrorContext(step_num=step_num, element=step.dump(exclude_none=True))

    if action_type is None:
        action_type = step.action_type

    if action_type is None:
        raise MissingRequiredField('actionType', context=context)

    if catalog.find_action(action_type) is None:
        raise InvalidAction(action_type, context=context)

    params = clean_parameters(action_type, step.action_params)
    assertions = clean_assertions(action_type, step.assertions, step_num=step_num)

    if action_type == PRESS_KEY_ACTION:
        _check_key(params, context)

    return params, assertions
