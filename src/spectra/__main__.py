"""Command-line utilities for the spectra store.

Settings are read from the environment (see `spectra.settings`); the
database path can be overridden per invocation.
"""

import logging
from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING

from click import Path as PathParam
from click import echo, group, option, pass_context
from yaml import dump

from spectra import catalog
from spectra.settings import Settings
from spectra.store import Repository

if TYPE_CHECKING:
    from click import Context

DatabaseFilepath = PathParam(
    dir_okay=False,
    writable=True,
    path_type=Path,
)


def _get_settings(ctx: 'Context') -> Settings:
    """Return the settings resolved by the root group."""
    return ctx.obj


@group(help='Command-line utilities for the spectra test case store.')
@option(
    '-d', '--database',
    type=DatabaseFilepath,
    default=None,
    help='Path to the SQLite database file. Overrides SPECTRA_DATABASE.',
)
@pass_context
def cli(ctx: 'Context', database: Path | None) -> None:
    """Root CLI group: resolve settings and configure logging."""
    overrides = {} if database is None else {'database': database}
    settings = Settings(**overrides)

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    ctx.obj = settings


@cli.command(
    name='init',
    help='Create the database schema if it does not exist.',
)
@pass_context
def init_database(ctx: 'Context') -> None:
    """Create the schema."""
    settings = _get_settings(ctx)

    repository = Repository.from_settings(settings)
    repository.close()

    echo(f'Initialized {settings.database}')


@cli.command(
    name='catalog',
    help='Print the catalog of actions, assertions, and key options.',
)
@option(
    '--yaml', 'as_yaml',
    is_flag=True,
    default=False,
    help='Print YAML instead of JSON.',
)
def print_catalog(as_yaml: bool) -> None:
    """Print the catalog description."""
    description = catalog.describe()

    if as_yaml:
        echo(dump(description, sort_keys=False, allow_unicode=True), nl=False)
        return

    echo(dumps(description, ensure_ascii=False, indent=4))


@cli.command(
    name='rebalance',
    help='Renumber execution order keys of every test case.',
)
@pass_context
def run_rebalance(ctx: 'Context') -> None:
    """Run one rebalance and print the number of touched test cases."""
    repository = Repository.from_settings(_get_settings(ctx))

    try:
        rows = repository.rebalance()
    finally:
        repository.close()

    echo(f'Rebalanced {rows} test case(s)')


@cli.command(
    name='maintain',
    help='Run the rebalance scheduler in the foreground until interrupted.',
)
@pass_context
def run_maintenance(ctx: 'Context') -> None:
    """Run scheduled rebalances until interrupted."""
    settings = _get_settings(ctx)
    repository = Repository.from_settings(settings)
    repository.close()

    scheduler = repository.make_scheduler(
        settings.rebalance_interval,
        run_on_start=settings.rebalance_on_start,
    )
    scheduler.start()

    try:
        scheduler.wait()
    except KeyboardInterrupt:
        echo('Stopping scheduler')
    finally:
        scheduler.stop()


if __name__ == '__main__':
    cli()
