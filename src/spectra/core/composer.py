"""Composition of stored steps into a nested tree.

A test case stores a flat list of regular steps and shared step
references. Read paths expand each reference into a node that embeds
the definitions of the referenced shared step, so that clients see the
full sequence of actions in execution order.
"""

import logging
from typing import TYPE_CHECKING

from spectra.schema import (
    RegularStep,
    SharedDefinitionStep,
    SharedReferenceStep,
    SharedStepNode,
    StepNode,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

if TYPE_CHECKING:
    from spectra.schema import SharedStep, Step, TreeNode

#: Lookup of a shared step by identifier; `None` when it does not exist.
type SharedStepFetcher = Callable[[str], SharedStep | None]

logger = logging.getLogger(__name__)


def _make_leaf(step: RegularStep | SharedDefinitionStep) -> StepNode:
    """Build an action leaf from a regular step or a definition."""
    return StepNode(
        id=step.id,
        step_order=step.step_order,
        action_type=step.action_type,
        action_params=step.action_params,
        assertions=step.assertions,
        custom_expected_result=step.custom_expected_result,
    )


def _make_shared_node(step: SharedReferenceStep,
                      shared: 'SharedStep | None') -> SharedStepNode:
    """Expand a shared step reference.

    A reference to a missing shared step is kept as an empty node.
    """
    if shared is None:
        return SharedStepNode(
            id=step.id,
            step_order=step.step_order,
            shared_step_id=step.shared_step_id,
        )

    definitions = sorted(shared.steps, key=lambda item: item.step_order)

    return SharedStepNode(
        id=step.id,
        step_order=step.step_order,
        shared_step_id=step.shared_step_id,
        shared_step_name=shared.name,
        shared_step_description=shared.description,
        steps=[_make_leaf(definition) for definition in definitions],
    )


def compose(steps: 'Iterable[Step]', fetch: 'SharedStepFetcher') -> list['TreeNode']:
    """Compose the step tree of a test case.

    Args:
        steps: Stored steps of a test case, in any order.
        fetch: Shared step lookup. It is called at most once per distinct
            shared step identifier.

    Returns:
        Top-level nodes ordered by `stepOrder`. Gaps in the positions are
        tolerated. Definitions found among the top-level steps are
        skipped.
    """
    cache: dict[str, SharedStep | None] = {}
    nodes: list[TreeNode] = []

    for step in sorted(steps, key=lambda item: item.step_order):
        match step:
            case RegularStep():
                nodes.append(_make_leaf(step))

            case SharedReferenceStep():
                if step.shared_step_id not in cache:
                    cache[step.shared_step_id] = fetch(step.shared_step_id)

                nodes.append(_make_shared_node(step, cache[step.shared_step_id]))

            case SharedDefinitionStep():
                logger.warning(
                    'Skipping shared definition %s found among test case steps',
                    step.id,
                )

    return nodes
