"""Shared step payloads and records.

A shared step is a named, reusable, ordered group of definition steps
that test cases reference by id. Names are unique ignoring case.
"""

from datetime import datetime  # noqa: TC003

from pydantic import Field, field_validator

from spectra.models import DescribedMixin, SchemaModel
from spectra.names import RecordId  # noqa: TC001

from .steps import SharedDefinitionStep, StepInput  # noqa: TC001


def _strip_name(value: str | None) -> str | None:
    """Strip surrounding whitespace from a submitted name.

    Raises:
        ValueError: If the name is blank.
    """
    if value is None:
        return None

    value = value.strip()
    if not value:
        raise ValueError('Name must not be blank')

    return value


class SharedStepInput(DescribedMixin, SchemaModel):
    """Payload creating a shared step."""

    name: str = Field(
        title='Name',
        description='Unique (case-insensitive) name of the shared step.',
    )

    steps: list[StepInput] = Field(
        default_factory=list,
        title='Definition steps',
        description='Ordered action steps of the shared step.',
    )

    @field_validator('name')
    @classmethod
    def check_name(cls, value: str | None) -> str | None:
        """Reject blank names and strip surrounding whitespace."""
        return _strip_name(value)


class SharedStepUpdate(DescribedMixin, SchemaModel):
    """Payload updating a shared step.

    Omitted fields keep their stored values. When `steps` is given, the
    whole definition list is replaced.
    """

    name: str | None = Field(
        default=None,
        title='Name',
        description='New name of the shared step.',
    )

    steps: list[StepInput] | None = Field(
        default=None,
        title='Definition steps',
        description='Replacement definition list.',
    )

    @field_validator('name')
    @classmethod
    def check_name(cls, value: str | None) -> str | None:
        """Reject blank names and strip surrounding whitespace."""
        return _strip_name(value)


class SharedStepSummary(DescribedMixin, SchemaModel):
    """Shared step without its definitions."""

    id: RecordId
    name: str
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    step_count: int = Field(
        default=0,
        title='Definition count',
        description='Number of definition steps.',
    )

    reference_count: int = Field(
        default=0,
        title='Reference count',
        description='Number of test case steps referencing the shared step.',
    )


class SharedStep(SharedStepSummary):
    """Shared step with its ordered definitions."""

    steps: list[SharedDefinitionStep] = Field(default_factory=list)
