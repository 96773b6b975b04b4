"""Nested step tree returned by read paths.

The tree has two levels. Top-level nodes are either action leaves or
shared step nodes; a shared step node embeds the leaves built from the
shared step's definitions. Leaves never nest further.
"""

from typing import Annotated, Literal

from pydantic import Field

from spectra.models import SchemaModel
from spectra.names import RecordId  # noqa: TC001
from spectra.values import Value  # noqa: TC001

from .assertions import Assertion  # noqa: TC001


class StepNode(SchemaModel):
    """Action leaf.

    Definitions of a shared step are rendered as regular leaves inside
    their shared step node.
    """

    id: RecordId
    step_type: Literal['regular'] = 'regular'
    step_order: int
    action_type: str
    action_params: dict[str, Value] = Field(default_factory=dict)
    assertions: list[Assertion] = Field(default_factory=list)
    custom_expected_result: str | None = None


class SharedStepNode(SchemaModel):
    """Expanded shared step reference.

    `sharedStepName` and `sharedStepDescription` are `None` and `steps` is
    empty when the referenced shared step no longer exists.
    """

    id: RecordId
    step_type: Literal['shared_reference'] = 'shared_reference'
    step_order: int
    shared_step_id: RecordId
    shared_step_name: str | None = None
    shared_step_description: str | None = None
    steps: list[StepNode] = Field(default_factory=list)


#: Top-level node of a composed tree.
TreeNode = Annotated[
    StepNode | SharedStepNode,
    Field(discriminator='step_type'),
]
