"""Core exception hierarchy.

This module defines the error and warning types raised by the step
validator, the stores, and the ordering engine. Errors fall into four
families that callers map onto their transport:

- `InputError`: the client payload is invalid; surfaced verbatim, never retried;
- `ConflictError`: the payload is valid but conflicts with stored state;
- `NotFound`: an addressed record does not exist;
- `StorageError`: the store failed; the transaction was rolled back and the
  whole operation is safe to retry.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

#: Marker printed above a payload snippet.
SNIPPET_MARKER = '...'

#: Indentation of nested YAML blocks inside a snippet.
SNIPPET_INDENT = 2

#: Placeholder for snippet values that are not plain data.
OPAQUE_VALUE = '<runtime object>'

#: Indentation of the location line. Snippets are indented twice as deep.
LOCATION_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Where an error happened and what was submitted there.

    All fields are optional. Positions are zero-based and rendered
    one-based.
    """

    #: Position of the step within the submitted list.
    step_num: int | None
    #: Position of the assertion within the step.
    assertion_num: int | None

    #: Underlying exception, if any.
    error: Exception | None

    #: Payload fragment the error is about.
    element: Any


class ErrorFormatter:
    """Renders error messages with their location and payload fragment.

    A formatted message looks like::

        Assertion 'textEquals' requires 'expectedValue'
            on step 3, assertion 2
                 ...
                assertionType: textEquals
                selector: '#title'
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Append the location and the payload fragment to a message.

        Args:
            message: Bare error message.
            context: Optional error context.

        Returns:
            The message, followed by whatever the context can describe.
        """
        if not context:
            return message

        details = (
            cls.describe_location(context, LOCATION_INDENT)
            + cls.describe_element(context, LOCATION_INDENT * 2)
        )
        if not details:
            return message

        return f'{message}{linesep}{details}'

    @staticmethod
    def describe_location(context: ErrorContext, indent: int = 0) -> str:
        """Describe the step and assertion an error points at.

        Returns:
            A single line, or an empty string when no step is known.
        """
        step_num = context.get('step_num')
        if step_num is None:
            return ''

        parts = [f'on step {step_num + 1}']
        if (assertion_num := context.get('assertion_num')) is not None:
            parts.append(f'assertion {assertion_num + 1}')

        return ' ' * indent + ', '.join(parts) + linesep

    @classmethod
    def describe_element(cls, context: ErrorContext, indent: int = 0) -> str:
        """Render the payload fragment of an error as YAML.

        Returns:
            Indented lines, or an empty string when there is no fragment.
        """
        element = context.get('element')
        if element is None:
            return ''

        prefix = ' ' * indent
        text = dump(
            cls.to_plain(element),
            indent=SNIPPET_INDENT,
            sort_keys=False,
            allow_unicode=True,
        )

        lines = [f'{prefix} {SNIPPET_MARKER}']
        lines.extend(f'{prefix}{line}' for line in text.splitlines() if line.strip())

        return linesep.join(lines) + linesep

    @classmethod
    def to_plain(cls, value: Any) -> Any:  # noqa: ANN401
        """Replace everything that is not plain data with a placeholder."""
        match value:
            case None | str() | int() | float() | bool():
                return value
            case dict():
                return {str(key): cls.to_plain(item) for key, item in value.items()}
            case list() | tuple():
                return [cls.to_plain(item) for item in value]

        return OPAQUE_VALUE


def _first_line(text: str | None) -> str | None:
    """Return the first non-blank line of a text."""
    for line in (text or '').splitlines():
        if line := line.strip():
            return line

    return None


def _find_fragment(data: Any, location: 'Sequence[int | str]') -> Any:  # noqa: ANN401
    """Narrow submitted data down to the part a validation error is about.

    Path items missing from the data are skipped.

    Returns:
        The innermost element along the path together with its key
        (`{key: item}` or `[item]`), the whole data for an empty path,
        or `None` when the path goes through a scalar.
    """
    parent, key, node = data, None, data

    for part in location:
        if isinstance(node, dict):
            if part in node:
                parent, key, node = node, part, node[part]
        elif isinstance(node, list | tuple):
            if isinstance(part, int) and 0 <= part < len(node):
                parent, key, node = node, part, node[part]
        else:
            return None

    if key is None:
        return parent

    if isinstance(parent, list | tuple):
        return [node]

    return {key: node}


class OrderingWarning(UserWarning):
    """Warning emitted when fractional keys run out of precision.

    Subdividing an interval too many times makes neighbouring keys
    collapse onto the same float. The allocation is still written, but
    the ordering space needs a rebalance.
    """


class SpectraError(Exception, ErrorFormatter):
    """Base exception for all core errors.

    Callers can catch this class to handle every error of the package.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Bare error message.
            context: Optional location and payload fragment.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """Message with its location and payload fragment."""
        return self.format(self.message, self.context)


class InputError(SpectraError):
    """Base error for invalid client input.

    Input errors are surfaced verbatim to the caller and are never retried.
    """


class PayloadError(InputError):
    """Error raised when a payload does not match its schema."""

    @classmethod
    def from_pydantic_error(cls, error: 'ValidationError', *,
                            data: Any = None,  # noqa: ANN401
                            step_num: int | None = None) -> 'Self':
        """Convert a Pydantic validation failure.

        The first error that can be traced back into the submitted data
        gives the message, and the snippet shows only the failing part.

        Args:
            error: Validation failure.
            data: Submitted payload.
            step_num: Position of the step in a submitted list.

        Returns:
            A payload error.
        """
        context = ErrorContext(step_num=step_num, error=error, element=data)

        if not isinstance(data, dict) or not data:
            return cls('Type validation error', context=context)

        for details in error.errors(include_url=False, include_input=False):
            message = _first_line(details.get('msg'))
            fragment = _find_fragment(data, details['loc'])

            if message and fragment is not None:
                return cls(message, context=ErrorContext({**context, 'element': fragment}))

        return cls('Validation error', context=context)


class InvalidAction(InputError):
    """Error raised for an action type missing from the catalog."""

    def __init__(self, action_type: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            action_type: Rejected action type.
            context: Optional error context.
        """
        self.action_type = action_type

        super().__init__(f'Invalid action type: {action_type}', context=context)


class InvalidAssertion(InputError):
    """Error raised for a malformed or unknown assertion."""


class AssertionNotAllowedForAction(InputError):
    """Error raised when an assertion is not compatible with the step action."""

    def __init__(self, assertion_type: str, action_type: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            assertion_type: Rejected assertion type.
            action_type: Action type of the step.
            context: Optional error context.
        """
        self.assertion_type = assertion_type
        self.action_type = action_type

        super().__init__(
            f'Assertion {assertion_type!r} is not allowed for action {action_type!r}',
            context=context,
        )


class MissingRequiredField(InputError):
    """Error raised when a required field is missing or blank.

    For assertion requirements `assertion` names the assertion type;
    for step-level requirements (such as the `key` of `pressKey`) it is
    `None`.
    """

    def __init__(self, field: str, *, assertion: str | None = None,
                 message: str | None = None,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            field: Name of the missing field.
            assertion: Assertion type that requires the field, if any.
            message: Optional message overriding the generated one.
            context: Optional error context.
        """
        self.field = field
        self.assertion = assertion

        if message is None:
            if assertion is not None:
                message = f'Assertion {assertion!r} requires {field!r}'
            else:
                message = f'Field {field!r} is required'

        super().__init__(message, context=context)


class InvalidKeyOption(InputError):
    """Error raised for a `pressKey` key outside the key options table."""

    def __init__(self, key: Any, *,  # noqa: ANN401
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            key: Rejected key value.
            context: Optional error context.
        """
        self.key = key

        super().__init__(f'Invalid key {key!r} for pressKey action', context=context)


class InvalidStepType(InputError):
    """Error raised when a step variant is written to the wrong owner."""


class ConflictError(SpectraError):
    """Base error for requests conflicting with stored state."""


class DuplicateName(ConflictError):
    """Error raised when a shared step name is already taken."""

    def __init__(self, name: str) -> None:
        """Initialize an error.

        Args:
            name: Conflicting name as submitted.
        """
        self.name = name

        super().__init__(f'Shared step with name {name!r} already exists')


class ReferencedByInUse(ConflictError):
    """Error raised when deleting a shared step that test cases still use."""

    def __init__(self, count: int) -> None:
        """Initialize an error.

        Args:
            count: Number of referencing test case steps.
        """
        self.count = count

        super().__init__(
            'Cannot delete shared step while it is referenced '
            f'by {count} test case step(s)',
        )


class NotFound(SpectraError):
    """Error raised when an addressed record does not exist."""

    def __init__(self, kind: str, key: str) -> None:
        """Initialize an error.

        Args:
            kind: Human-readable record kind (`Test case`, `Shared step`).
            key: Identifier used for the lookup.
        """
        self.kind = kind
        self.key = key

        super().__init__(f'{kind} {key!r} not found')


class StorageError(SpectraError):
    """Error raised when the relational store fails.

    The message is opaque; the underlying database error is
    chained as the cause. The failed transaction has been rolled back.
    """
