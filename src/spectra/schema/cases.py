"""Test case payloads and records.

Test cases are addressed by their case code. Their `executionOrder` is a
fractional key owned by the ordering engine: payloads can not set it.
"""

from datetime import datetime  # noqa: TC003

from pydantic import Field

from spectra.models import DescribedMixin, SchemaModel
from spectra.names import CaseCode, RecordId  # noqa: TC001

from .steps import StepInput  # noqa: TC001
from .tree import TreeNode  # noqa: TC001


class TestCaseInput(DescribedMixin, SchemaModel):
    """Payload creating a test case."""

    __test__ = False

    title: str = Field(
        min_length=1,
        title='Title',
        description='Short human-readable title of the test case.',
    )

    steps: list[StepInput] = Field(
        default_factory=list,
        title='Steps',
        description='Ordered regular steps and shared step references.',
    )


class TestCaseUpdate(DescribedMixin, SchemaModel):
    """Payload updating a test case.

    Omitted fields keep their stored values. When `steps` is given, the
    whole step list is replaced.
    """

    __test__ = False

    title: str | None = Field(
        default=None,
        min_length=1,
        title='Title',
        description='New title of the test case.',
    )

    steps: list[StepInput] | None = Field(
        default=None,
        title='Steps',
        description='Replacement step list.',
    )


class TestCaseSummary(DescribedMixin, SchemaModel):
    """Test case without its steps."""

    __test__ = False

    id: RecordId
    case_code: CaseCode
    title: str

    execution_order: float = Field(
        title='Execution order',
        description='Fractional ordering key. Only relative order is meaningful.',
    )

    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class TestCaseDetail(TestCaseSummary):
    """Test case with its composed step tree."""

    steps: list[TreeNode] = Field(default_factory=list)
