"""Step payloads and stored step variants.

A step is one of three variants, tagged by `stepType`:

- `regular`: an action step owned by a test case;
- `shared_reference`: a pointer from a test case to a shared step; it
  carries no action data of its own;
- `shared_definition`: an action step owned by a shared step.

Stored steps are modelled as a closed discriminated union. Each variant
declares exactly the owner it may have and forbids the other one, so a
definition owned by a test case (or a reference with action data)
cannot be constructed.

Clients submit steps through a single, looser `StepInput` shape which
the validator and the stores turn into stored variants.
"""

from typing import Annotated, Literal

from pydantic import ConfigDict, Field, TypeAdapter

from spectra.models import SchemaModel
from spectra.names import RecordId  # noqa: TC001
from spectra.values import Value  # noqa: TC001

from .assertions import Assertion

type StepType = Literal['regular', 'shared_reference', 'shared_definition']


class StepInput(SchemaModel):
    """Step as submitted by a client.

    The position of a step is always its index in the submitted list;
    `stepOrder` and `id` are accepted for compatibility with editors that
    echo stored steps back, and are ignored. Other unknown keys (such as
    the expanded shared step of a read tree) are dropped.

    `actionParams` and `assertions` are kept loose here: cleaning the
    parameters and checking the assertions is the validator's job, and
    it reports those problems with catalog-specific errors.
    """

    model_config = ConfigDict(extra='ignore')

    id: str | None = Field(
        default=None,
        title='Client identifier',
        description='Identifier echoed by editors. Ignored on write.',
    )

    step_order: int | None = Field(
        default=None,
        title='Client position',
        description='Position echoed by editors. Ignored on write.',
    )

    step_type: StepType = Field(
        default='regular',
        title='Step type',
        description='Variant of the step.',
    )

    action_type: str | None = Field(
        default=None,
        title='Action type',
        description='Catalog key of the action. Required for action steps.',
    )

    action_params: Value = Field(
        default=None,
        title='Action parameters',
        description='Action parameters. Unknown keys are dropped on write.',
    )

    assertions: Value = Field(
        default=None,
        title='Assertions',
        description='List of assertions checked after the action.',
    )

    custom_expected_result: str | None = Field(
        default=None,
        title='Expected result',
        description='Free-form (rich text) description of the expected result.',
    )

    shared_step_id: str | None = Field(
        default=None,
        title='Shared step',
        description='Referenced shared step. Required for shared references.',
    )


class BaseStep(SchemaModel):
    """Fields common to all stored steps."""

    id: RecordId

    step_order: int = Field(
        ge=1,
        title='Position',
        description='One-based position of the step within its owner.',
    )


class ActionStepMixin(SchemaModel):
    """Action data carried by regular steps and shared definitions."""

    action_type: str
    action_params: dict[str, Value] = Field(default_factory=dict)
    assertions: list[Assertion] = Field(default_factory=list)
    custom_expected_result: str | None = None


class RegularStep(ActionStepMixin, BaseStep):
    """Action step owned by a test case."""

    step_type: Literal['regular'] = 'regular'
    test_case_id: RecordId


class SharedReferenceStep(BaseStep):
    """Pointer from a test case to a shared step."""

    step_type: Literal['shared_reference'] = 'shared_reference'
    test_case_id: RecordId
    shared_step_id: RecordId


class SharedDefinitionStep(ActionStepMixin, BaseStep):
    """Action step owned by a shared step."""

    step_type: Literal['shared_definition'] = 'shared_definition'
    shared_step_id: RecordId


#: Any stored step.
Step = Annotated[
    RegularStep | SharedReferenceStep | SharedDefinitionStep,
    Field(discriminator='step_type'),
]

#: Validator for stored step rows. Rows must use wire (camelCase) names,
#: since the discriminator is looked up by its alias.
StepAdapter = TypeAdapter(Step)
