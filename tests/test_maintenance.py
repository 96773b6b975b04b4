"""Tests for execution order rebalancing and its scheduler."""

import logging
from typing import TYPE_CHECKING

import pytest

from spectra.errors import StorageError
from spectra.store import RebalanceScheduler, rebalance

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from spectra.schema import TestCaseDetail
    from spectra.store import Database, Repository


def _keys(repository: 'Repository') -> dict[str, float]:
    return {case.case_code: case.execution_order for case in repository.list_test_cases()}


def test_rebalance_renumbers_keys(repository: 'Repository',
                                  make_test_case: 'Callable[..., TestCaseDetail]') -> None:
    """Keys become dense integers in the current order."""
    codes = [make_test_case(f'Case {num}').case_code for num in range(4)]

    repository.reorder_test_cases([codes[3]], codes[0], codes[1])
    repository.reorder_test_cases([codes[2]], codes[0], codes[3])

    before = [case.case_code for case in repository.list_test_cases()]

    assert repository.rebalance() == 4
    assert list(_keys(repository).values()) == [1.0, 2.0, 3.0, 4.0]
    assert list(_keys(repository)) == before == [codes[0], codes[2], codes[3], codes[1]]


def test_rebalance_is_idempotent(repository: 'Repository',
                                 make_test_case: 'Callable[..., TestCaseDetail]') -> None:
    """Rebalancing a dense order keeps every key."""
    for num in range(3):
        make_test_case(f'Case {num}')

    rebalance(repository.database)
    keys = _keys(repository)

    assert rebalance(repository.database) == 3
    assert _keys(repository) == keys


def test_rebalance_breaks_ties(repository: 'Repository',
                               make_test_case: 'Callable[..., TestCaseDetail]') -> None:
    """Equal keys are ordered by creation time."""
    codes = [make_test_case(f'Case {num}').case_code for num in range(3)]

    with repository.database.transaction(write=True) as connection:
        connection.execute('UPDATE test_cases SET execution_order = 7.5')

    repository.rebalance()

    assert _keys(repository) == {codes[0]: 1.0, codes[1]: 2.0, codes[2]: 3.0}


def test_rebalance_breaks_ties_by_code(repository: 'Repository',
                                      make_test_case: 'Callable[..., TestCaseDetail]') -> None:
    """Equal keys created at the same time are ordered by case code."""
    ids = [make_test_case(f'Case {num}').id for num in range(3)]
    codes = ('TC-0300', 'TC-0100', 'TC-0200')

    with repository.database.transaction(write=True) as connection:
        connection.execute(
            'UPDATE test_cases SET execution_order = 7.5, '
            "created_at = '2024-01-01T00:00:00+00:00'",
        )
        connection.executemany(
            'UPDATE test_cases SET case_code = ? WHERE id = ?',
            zip(codes, ids, strict=True),
        )

    assert repository.rebalance() == 3
    assert _keys(repository) == {'TC-0100': 1.0, 'TC-0200': 2.0, 'TC-0300': 3.0}
    assert list(_keys(repository)) == ['TC-0100', 'TC-0200', 'TC-0300']


def test_rebalance_empty(repository: 'Repository') -> None:
    """Rebalancing nothing touches nothing."""
    assert repository.rebalance() == 0


def test_scheduler_rejects_bad_interval(database: 'Database') -> None:
    """Intervals must be positive."""
    with pytest.raises(ValueError, match=r'must be positive'):
        RebalanceScheduler(database, 0)


def test_scheduler_runs_on_start(repository: 'Repository',
                                 make_test_case: 'Callable[..., TestCaseDetail]') -> None:
    """The scheduler rebalances as soon as it starts."""
    codes = [make_test_case(f'Case {num}').case_code for num in range(2)]
    repository.reorder_test_cases([codes[1]], None, codes[0])

    scheduler = repository.make_scheduler(3600)
    scheduler.start()

    try:
        assert scheduler.is_running()
    finally:
        scheduler.stop(timeout=10)

    assert not scheduler.is_running()
    assert _keys(repository) == {codes[1]: 1.0, codes[0]: 2.0}


def test_scheduler_runs_periodically(database: 'Database', mocker: 'MockerFixture') -> None:
    """The scheduler keeps running at its interval."""
    rebalance_mock = mocker.patch('spectra.store.maintenance.rebalance', return_value=0)

    scheduler = RebalanceScheduler(database, 0.01, run_on_start=False)
    scheduler.start()
    scheduler.start()

    try:
        for _ in range(500):
            if rebalance_mock.call_count >= 3:
                break
            scheduler.wait(0.01)
    finally:
        scheduler.stop(timeout=10)

    assert rebalance_mock.call_count >= 3


def test_scheduler_logs_failures(database: 'Database', mocker: 'MockerFixture',
                                 caplog: pytest.LogCaptureFixture) -> None:
    """Failed runs are logged with the traceback and do not stop the scheduler."""
    mocker.patch(
        'spectra.store.maintenance.rebalance',
        side_effect=StorageError('Storage operation failed'),
    )
    scheduler = RebalanceScheduler(database, 3600)

    with caplog.at_level(logging.ERROR, logger='spectra.store.maintenance'):
        assert scheduler.run_once('startup') is None

    (record,) = caplog.records

    assert record.levelno == logging.ERROR
    assert record.getMessage() == 'Execution order rebalance (startup) failed'
    assert record.exc_info is not None
    assert isinstance(record.exc_info[1], StorageError)


def test_scheduler_logs_success(repository: 'Repository',
                                make_test_case: 'Callable[..., TestCaseDetail]',
                                caplog: pytest.LogCaptureFixture) -> None:
    """Successful runs report the number of touched test cases."""
    make_test_case('Only')
    scheduler = repository.make_scheduler(3600)

    with caplog.at_level(logging.INFO, logger='spectra.store.maintenance'):
        assert scheduler.run_once() == 1

    assert 'Execution order rebalance (scheduled) touched 1 test case(s)' in caplog.messages
