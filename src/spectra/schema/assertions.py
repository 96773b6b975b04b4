"""Assertion model attached to action steps."""

from pydantic import ConfigDict, Field

from spectra.models import SchemaModel


class Assertion(SchemaModel):
    """Single expectation checked after a step action.

    Unknown keys in a submitted assertion are dropped rather than
    rejected; all inputs other than the type are optional at the
    schema level and are enforced per assertion kind by the validator.
    """

    model_config = ConfigDict(extra='ignore')

    assertion_type: str = Field(
        title='Assertion type',
        description='Catalog key of the assertion.',
    )

    selector: str | None = Field(
        default=None,
        title='Target selector',
        description='Selector of the element the assertion inspects.',
    )

    expected_value: str | None = Field(
        default=None,
        title='Expected value',
        description='Value compared against the observed state.',
    )

    attribute_name: str | None = Field(
        default=None,
        title='Attribute name',
        description='Name of the element attribute to inspect.',
    )

    attribute_value: str | None = Field(
        default=None,
        title='Attribute value',
        description='Optional expected value of the inspected attribute.',
    )
