"""Create the `dotenv` CLI with `typer`_.

```sh
dotenv [OPTIONS] COMMAND [ARGS]...
```

Variables are loaded from `./.env` (or the file given with `--file`), optionally on top of a named file in
`~/.dotenv/` (`--environment NAME`), and injected into the environment of `COMMAND`. Options are only recognized
before `COMMAND`; everything after it is passed to the command as-is. The exit code of `COMMAND` is forwarded.

.. note:: `typer`_ does not support `from __future__ import annotations` as of 2023-12-31

.. _typer: https://typer.tiangolo.com/
"""

import copy
import logging
import logging.config
import sys
import typing
from pathlib import Path
from typing import Annotated, TypeAlias

import rich
import typer
from rich.markup import escape

from dotenv_exec import __version__, environment, launcher, loader, settings

# pylint: disable=unused-argument,too-many-arguments

__all__ = ['app', 'configure_logging', 'main', 'version_callback']

LOG_VERBOSITY_MESSAGE = 'logging verbosity set to [green]%s[/green]'

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, rich_markup_mode='rich')
"""The root `typer`_ application.

.. _typer: https://typer.tiangolo.com/
"""


def error(message: str) -> typer.Exit:
    """Print `message` to `stderr` as an error, and return the exception to raise."""
    rich.print(f'[red]ERROR[/]: {escape(message)}', file=sys.stderr)
    return typer.Exit(1)


CommandAnnotation: TypeAlias = Annotated[
    typing.List[str],
    typer.Argument(
        help='The command to run (and its arguments), e.g. [bold]python main.py[/]',
        show_default=False,
        metavar='COMMAND [ARGS]...',
    ),
]
FileAnnotation: TypeAlias = Annotated[
    typing.Optional[Path],
    typer.Option(
        '-f',
        '--file',
        help='Read variables from this file instead of [yellow].env[/] in the current directory. It must exist.',
        show_default=False,
    ),
]
EnvironmentAnnotation: TypeAlias = Annotated[
    typing.Optional[str],
    typer.Option(
        '-e',
        '--environment',
        help='Also read [yellow]~/.dotenv/NAME.env[/]; values from the local file take precedence.',
        metavar='NAME',
        show_default=False,
    ),
]
StrictAnnotation: TypeAlias = Annotated[
    bool,
    typer.Option(
        '--strict',
        help='Only pass a minimal whitelist of the current environment (plus the loaded variables) to the command.'
        ' Also enabled by [purple]DOTENV_STRICT=true[/] in a loaded file.',
        show_default=False,
    ),
]


def configure_logging(ctx: typer.Context, verbose: typing.Optional[bool] = None) -> None:
    """Callback for the `--verbose` option to configure logging verbosity.

    By default, only warnings and errors are logged. When `verbose` is `True`, log messages at the `logging.DEBUG`
    level:

    >>> configure_logging(ctx, True)
    >>> caplog.messages
    ['logging verbosity set to [green]DEBUG[/green]']
    """
    if ctx.resilient_parsing:  # pragma: no cover  # this is for tab completions
        return

    logging_config = copy.deepcopy(settings.DEFAULT_LOGGING_CONFIG)
    verbosity = logging.DEBUG if verbose else logging_config['root']['level']
    logging_config['root']['level'] = verbosity

    logging.config.dictConfig(logging_config)

    logger.debug(LOG_VERBOSITY_MESSAGE, logging.getLevelName(verbosity), extra={'markup': True})


VerbosityAnnotation: TypeAlias = Annotated[
    typing.Optional[bool],
    typer.Option(
        '-v',
        '--verbose',
        callback=configure_logging,
        rich_help_panel='Global',
        help='Log messages at the [black]DEBUG[/] level.',
        is_eager=True,
        show_default=False,
    ),
]


def version_callback(ctx: typer.Context, value: typing.Optional[bool] = None) -> None:
    """Print the version of the package."""
    if ctx.resilient_parsing:  # pragma: no cover  # this is for tab completions
        return

    if value:
        rich.print(__version__)
        raise typer.Exit()


VersionAnnotation: TypeAlias = Annotated[
    typing.Optional[bool],
    typer.Option(
        '-V',
        '--version',
        callback=version_callback,
        rich_help_panel='Global',
        show_default=False,
        is_eager=True,
        help='Print the version and exit.',
    ),
]


@app.command(
    context_settings={
        'allow_interspersed_args': False,
        'help_option_names': ['-h', '--help'],
        'ignore_unknown_options': True,
    },
    no_args_is_help=True,
)
def main(
    command: CommandAnnotation,
    file: FileAnnotation = None,
    environment_name: EnvironmentAnnotation = None,
    strict: StrictAnnotation = False,
    verbose: VerbosityAnnotation = None,
    version: VersionAnnotation = None,
) -> None:
    """Inject the variables from a [yellow].env[/] file into the environment of [bold]COMMAND[/], and run it."""
    try:
        variables = loader.load(file, environment_name)
    except loader.EnvFileError as exc:
        raise error(str(exc)) from exc

    strict = environment.strict_requested(strict, variables)
    snapshot = environment.build(variables, strict)
    logger.debug('Run [bold]%s[/bold] with %r', escape(command[0]), snapshot, extra={'markup': True})

    try:
        exit_code = launcher.run(command, snapshot)
    except launcher.LaunchError as exc:
        raise error(str(exc)) from exc

    raise typer.Exit(exit_code)


logger.debug('successfully imported %s', __name__)
