"""Tests for the static catalog tables and lookups."""

import pytest

from spectra import catalog


def test_catalog_sizes() -> None:
    """Catalog tables have the documented sizes."""
    assert len(catalog.ACTIONS) == 16
    assert len(catalog.ASSERTIONS) == 18
    assert len(catalog.KEY_OPTIONS) == 10


def test_catalog_values_are_unique() -> None:
    """Catalog values identify their entries."""
    for table in (catalog.ACTIONS, catalog.ASSERTIONS, catalog.KEY_OPTIONS):
        values = [entry.value for entry in table]
        assert len(values) == len(set(values))


def test_matrix_references_known_entries() -> None:
    """Every matrix row names a known action and known assertions."""
    actions = {action.value for action in catalog.ACTIONS}
    assertions = {assertion.value for assertion in catalog.ASSERTIONS}

    for action in actions:
        assert set(catalog.allowed_assertions(action)) <= assertions


@pytest.mark.parametrize('action_type, platform', (
    pytest.param('swipe', 'mobile', id='mobile only'),
    pytest.param('hover', 'web', id='web only'),
    pytest.param('refresh', 'web', id='web refresh'),
    pytest.param('click', 'both', id='everywhere'),
))
def test_action_platforms(action_type: str, platform: str) -> None:
    """Actions declare the platforms they run on."""
    action = catalog.find_action(action_type)

    assert action is not None
    assert action.platform == platform


@pytest.mark.parametrize('action_type, expected', (
    pytest.param('navigate', 'navigate', id='exact'),
    pytest.param('WAITFORELEMENT', 'waitForElement', id='upper case'),
    pytest.param('Presskey', 'pressKey', id='mixed case'),
    pytest.param('teleport', None, id='unknown'),
    pytest.param('', None, id='empty'),
    pytest.param('clıck', None, id='non ascii lookalike'),
))
def test_find_action(action_type: str, expected: str | None) -> None:
    """Action lookup ignores ASCII case only."""
    action = catalog.find_action(action_type)

    if expected is None:
        assert action is None
        return

    assert action is not None
    assert action.value == expected


@pytest.mark.parametrize('assertion_type, found', (
    pytest.param('textEquals', True, id='exact'),
    pytest.param('TextEquals', False, id='case sensitive'),
    pytest.param('isVisible', False, id='unknown'),
))
def test_find_assertion(assertion_type: str, found: bool) -> None:
    """Assertion lookup is exact."""
    assert (catalog.find_assertion(assertion_type) is not None) is found


@pytest.mark.parametrize('assertion_type, selector, value, attribute', (
    pytest.param('elementDisplayed', True, False, False, id='element'),
    pytest.param('textContains', True, True, False, id='element value'),
    pytest.param('urlEquals', False, True, False, id='page value'),
    pytest.param('hasAttribute', True, False, True, id='attribute'),
    pytest.param('isSelected', True, False, False, id='state'),
))
def test_assertion_requirements(assertion_type: str, selector: bool,
                                value: bool, attribute: bool) -> None:
    """Assertions declare the inputs they need."""
    assertion = catalog.find_assertion(assertion_type)

    assert assertion is not None
    assert assertion.needs_selector is selector
    assert assertion.needs_value is value
    assert assertion.needs_attribute is attribute


@pytest.mark.parametrize('key, expected', (
    pytest.param('Enter', True, id='enter'),
    pytest.param('ArrowLeft', True, id='arrow'),
    pytest.param('enter', False, id='case sensitive'),
    pytest.param('F1', False, id='unknown'),
    pytest.param(13, False, id='not a string'),
))
def test_is_key_option(key: object, expected: bool) -> None:
    """Key options match exactly."""
    assert catalog.is_key_option(key) is expected


@pytest.mark.parametrize('action_type, expected', (
    pytest.param('navigate', {'url'}, id='navigate'),
    pytest.param('dragDrop', {'selector', 'targetSelector'}, id='drag and drop'),
    pytest.param('back', set(), id='no parameters'),
    pytest.param('Navigate', catalog.PASS_THROUGH, id='no row for other case'),
))
def test_allowed_parameters(action_type: str, expected: set[str] | None) -> None:
    """Whitelist rows are keyed by the exact action type."""
    allowed = catalog.allowed_parameters(action_type)

    if expected is catalog.PASS_THROUGH:
        assert allowed is catalog.PASS_THROUGH
        return

    assert allowed == expected


def test_allowed_assertions_without_row() -> None:
    """Action types without a matrix row allow no assertions."""
    assert catalog.allowed_assertions('NAVIGATE') == ()
    assert 'urlContains' in catalog.allowed_assertions('navigate')


def test_describe() -> None:
    """Catalog description is plain data with wire names."""
    description = catalog.describe()

    assert set(description) == {'actions', 'assertions', 'assertionsByAction', 'keyOptions'}
    assert description['actions'][0] == {
        'value': 'navigate',
        'label': 'Navigate to URL',
        'platform': 'both',
        'icon': '🌐',
    }
    assert {
        'value': 'hasAttribute',
        'label': 'Has Attribute',
        'needsSelector': True,
        'needsValue': False,
        'needsAttribute': True,
    } in description['assertions']
    assert description['assertionsByAction']['clear'] == ['valueEquals', 'elementDisplayed']
    assert description['keyOptions'][-1] == {'value': 'Space', 'label': 'Space'}
