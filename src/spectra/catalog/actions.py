"""Built-in action definitions and per-action rules.

Besides the action entries themselves, this module declares two static
tables keyed by action type:

- `ACTION_PARAMETERS`: parameter keys retained when a step is cleaned;
- `ACTION_ASSERTIONS`: assertion types legal on a step of that action
  (the compatibility matrix).

Both tables are read-only mappings.
"""

from types import MappingProxyType
from typing import Literal

from pydantic import Field

from spectra.models import SchemaModel
from spectra.names import CatalogKey  # noqa: TC001

type Platform = Literal['both', 'web', 'mobile']


class ActionDefinition(SchemaModel):
    """Catalog entry describing one action kind."""

    value: CatalogKey
    label: str

    platform: Platform = Field(
        default='both',
        title='Platform',
        description='Platforms on which the action can be executed.',
    )

    icon: str = Field(
        default='',
        title='Icon',
        description='Short symbol shown next to the action in editors.',
    )


ACTIONS: tuple[ActionDefinition, ...] = (
    ActionDefinition(value='navigate', label='Navigate to URL', icon='🌐'),
    ActionDefinition(value='click', label='Click / Tap', icon='👆'),
    ActionDefinition(value='type', label='Type Text', icon='⌨️'),
    ActionDefinition(value='clear', label='Clear Input', icon='🧹'),
    ActionDefinition(value='select', label='Select Option', icon='📋'),
    ActionDefinition(value='scroll', label='Scroll', icon='📜'),
    ActionDefinition(value='swipe', label='Swipe', platform='mobile', icon='👉'),
    ActionDefinition(value='wait', label='Wait (Duration)', icon='⏱️'),
    ActionDefinition(value='waitForElement', label='Wait for Element', icon='⏳'),
    ActionDefinition(value='pressKey', label='Press Key', icon='⌨️'),
    ActionDefinition(value='longPress', label='Long Press / Hold', icon='👆⏱️'),
    ActionDefinition(value='doubleClick', label='Double Click / Tap', icon='👆👆'),
    ActionDefinition(value='hover', label='Hover', platform='web', icon='🖱️'),
    ActionDefinition(value='dragDrop', label='Drag and Drop', icon='↔️'),
    ActionDefinition(value='back', label='Go Back', icon='◀️'),
    ActionDefinition(value='refresh', label='Refresh Page', platform='web', icon='🔄'),
)

_POINTER = frozenset({'selector', 'text'})
_INPUT = frozenset({'selector', 'value'})
_TARGET = frozenset({'selector'})
_GESTURE = frozenset({'direction', 'selector'})
_NOTHING: frozenset[str] = frozenset()

#: Parameter whitelist. An action type without a row keeps its
#: parameters unchanged (see `spectra.catalog.allowed_parameters`).
ACTION_PARAMETERS: MappingProxyType[str, frozenset[str]] = MappingProxyType({
    'navigate': frozenset({'url'}),
    'click': _POINTER,
    'doubleClick': _POINTER,
    'longPress': _POINTER,
    'type': _INPUT,
    'select': _INPUT,
    'clear': _TARGET,
    'hover': _TARGET,
    'scroll': _GESTURE,
    'swipe': _GESTURE,
    'wait': frozenset({'timeout'}),
    'waitForElement': frozenset({'selector', 'timeout'}),
    'pressKey': frozenset({'key'}),
    'dragDrop': frozenset({'selector', 'targetSelector'}),
    'back': _NOTHING,
    'refresh': _NOTHING,
})

#: Compatibility matrix. An action type without a row allows no assertions.
ACTION_ASSERTIONS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    'navigate': (
        'urlContains',
        'urlEquals',
        'titleContains',
        'titleEquals',
        'elementDisplayed',
        'elementExists',
    ),
    'click': (
        'elementDisplayed',
        'elementNotDisplayed',
        'elementExists',
        'textContains',
        'textEquals',
        'urlContains',
        'hasClass',
        'isEnabled',
        'isDisabled',
    ),
    'type': (
        'valueEquals',
        'valueContains',
        'elementDisplayed',
        'hasClass',
        'isEnabled',
        'textContains',
    ),
    'clear': ('valueEquals', 'elementDisplayed'),
    'select': (
        'valueEquals',
        'isSelected',
        'textEquals',
        'elementDisplayed',
    ),
    'scroll': ('elementDisplayed', 'elementInViewport', 'elementExists'),
    'swipe': (
        'elementDisplayed',
        'elementNotDisplayed',
        'elementExists',
        'hasAttribute',
    ),
    'wait': (
        'elementDisplayed',
        'elementExists',
        'elementClickable',
        'hasAttribute',
    ),
    'waitForElement': (
        'elementDisplayed',
        'elementExists',
        'elementClickable',
        'hasAttribute',
    ),
    'pressKey': (
        'elementDisplayed',
        'valueContains',
        'textContains',
        'urlContains',
    ),
    'longPress': (
        'elementDisplayed',
        'textContains',
        'hasClass',
        'elementExists',
    ),
    'doubleClick': (
        'elementDisplayed',
        'textContains',
        'hasClass',
        'elementExists',
    ),
    'hover': (
        'elementDisplayed',
        'hasClass',
        'hasAttribute',
        'textContains',
    ),
    'dragDrop': ('elementDisplayed', 'hasClass', 'elementExists'),
    'back': ('urlContains', 'elementDisplayed', 'titleContains'),
    'refresh': ('elementDisplayed', 'elementExists'),
})
