"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from spectra.schema import SharedStepInput, TestCaseInput
from spectra.store import Database, Repository

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

if TYPE_CHECKING:
    from spectra.schema import SharedStep, TestCaseDetail


@pytest.fixture
def database(tmp_path: 'Path') -> 'Iterator[Database]':
    """Provide an empty database stored in a temporary directory.

    The connection opened by the test thread is closed on teardown.
    """
    database = Database(tmp_path / 'spectra.sqlite3', busy_timeout=5)

    yield database

    database.close()


@pytest.fixture
def repository(database: Database) -> Repository:
    """Provide a repository over an initialized empty database."""
    return Repository(database)


@pytest.fixture
def make_shared_step(repository: Repository) -> 'Callable[..., SharedStep]':
    """Provide a factory creating shared steps.

    Without explicit steps the shared step gets a single `click`
    definition.
    """
    def make(name: str = 'Login', steps: list[dict] | None = None,
             actor: str | None = None, **kwargs: str) -> 'SharedStep':
        if steps is None:
            steps = [{'actionType': 'click', 'actionParams': {'selector': '#login'}}]

        return repository.create_shared_step(SharedStepInput.model_validate({
            'name': name,
            'steps': steps,
            **kwargs,
        }), actor=actor)

    return make


@pytest.fixture
def make_test_case(repository: Repository) -> 'Callable[..., TestCaseDetail]':
    """Provide a factory creating test cases appended to the order."""
    def make(title: str = 'Smoke', steps: list[dict] | None = None,
             actor: str | None = None, **kwargs: str) -> 'TestCaseDetail':
        return repository.create_test_case(TestCaseInput.model_validate({
            'title': title,
            'steps': steps or [],
            **kwargs,
        }), actor=actor)

    return make
