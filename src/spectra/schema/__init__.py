"""Payload and record schemas of the step composition core.

Defines immutable Pydantic models for the three step variants, the
shared step and test case records, the payloads clients submit to
create or update them, and the nested tree returned by read paths.

All models are serialized with camelCase names; both camelCase and
snake_case names are accepted on input.
"""

from .assertions import Assertion
from .cases import TestCaseDetail, TestCaseInput, TestCaseSummary, TestCaseUpdate
from .shared import SharedStep, SharedStepInput, SharedStepSummary, SharedStepUpdate
from .steps import (
    RegularStep,
    SharedDefinitionStep,
    SharedReferenceStep,
    Step,
    StepAdapter,
    StepInput,
    StepType,
)
from .tree import SharedStepNode, StepNode, TreeNode

__all__ = (
    'Assertion',
    'RegularStep',
    'SharedDefinitionStep',
    'SharedReferenceStep',
    'SharedStep',
    'SharedStepInput',
    'SharedStepNode',
    'SharedStepSummary',
    'SharedStepUpdate',
    'Step',
    'StepAdapter',
    'StepInput',
    'StepNode',
    'StepType',
    'TestCaseDetail',
    'TestCaseInput',
    'TestCaseSummary',
    'TestCaseUpdate',
    'TreeNode',
)
