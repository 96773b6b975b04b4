"""Built-in assertion definitions.

Each assertion declares which inputs it needs: a target `selector`, an
`expectedValue`, or an `attributeName`. The step validator rejects
assertions whose required inputs are missing or blank.
"""

from pydantic import Field

from spectra.models import SchemaModel
from spectra.names import CatalogKey  # noqa: TC001


class AssertionDefinition(SchemaModel):
    """Catalog entry describing one assertion kind."""

    value: CatalogKey
    label: str

    needs_selector: bool = Field(
        default=False,
        title='Selector requirement',
        description='Whether the assertion targets an element by selector.',
    )

    needs_value: bool = Field(
        default=False,
        title='Expected value requirement',
        description='Whether the assertion compares against an expected value.',
    )

    needs_attribute: bool = Field(
        default=False,
        title='Attribute requirement',
        description='Whether the assertion inspects a named element attribute.',
    )


def _element(value: str, label: str) -> AssertionDefinition:
    """Define an assertion that checks element state only."""
    return AssertionDefinition(value=value, label=label, needs_selector=True)


def _element_value(value: str, label: str) -> AssertionDefinition:
    """Define an assertion that compares element content to a value."""
    return AssertionDefinition(value=value, label=label, needs_selector=True, needs_value=True)


def _page_value(value: str, label: str) -> AssertionDefinition:
    """Define an assertion that compares page state to a value."""
    return AssertionDefinition(value=value, label=label, needs_value=True)


ASSERTIONS: tuple[AssertionDefinition, ...] = (
    _element('elementDisplayed', 'Element is Visible'),
    _element('elementNotDisplayed', 'Element is Hidden'),
    _element('elementExists', 'Element Exists'),
    _element('elementClickable', 'Element is Clickable'),
    _element('elementInViewport', 'Element in Viewport'),
    _element_value('textEquals', 'Text Equals'),
    _element_value('textContains', 'Text Contains'),
    _element_value('valueEquals', 'Value Equals'),
    _element_value('valueContains', 'Value Contains'),
    _page_value('urlEquals', 'URL Equals'),
    _page_value('urlContains', 'URL Contains'),
    _page_value('titleEquals', 'Title Equals'),
    _page_value('titleContains', 'Title Contains'),
    _element_value('hasClass', 'Has CSS Class'),
    AssertionDefinition(
        value='hasAttribute',
        label='Has Attribute',
        needs_selector=True,
        needs_attribute=True,
    ),
    _element('isEnabled', 'Is Enabled'),
    _element('isDisabled', 'Is Disabled'),
    _element('isSelected', 'Is Selected / Checked'),
)
