"""Constants and defaults used by the `dotenv` command.

There is no settings file: behavior is controlled by command-line options, and by the `DOTENV_STRICT` variable
when it's defined in a loaded `.env` file.
"""

from __future__ import annotations

import logging
import typing
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    'DEFAULT_LOGGING_CONFIG',
    'LOCAL_ENV_FILE',
    'NAMED_ENV_DIR',
    'NAMED_ENV_SUFFIX',
    'STRICT_VARIABLE',
    'STRICT_WHITELIST',
    'TRUTHY_VALUES',
    'named_env_dir',
]

logger = logging.getLogger(__name__)

LOCAL_ENV_FILE = '.env'
"""Read this file from the current directory when `--file` isn't given."""

NAMED_ENV_DIR = '.dotenv'
"""Named environment files (`--environment NAME`) are stored in this directory under the user's home."""

NAMED_ENV_SUFFIX = '.env'

STRICT_VARIABLE = 'DOTENV_STRICT'
"""Enable strict mode when a loaded file sets this variable to a truthy value."""

STRICT_WHITELIST: typing.Tuple[str, ...] = (
    'PATH',
    'HOME',
    'SHELL',
    'USER',
    'SHLVL',
    'LANG',
    'TERM',
    'LOGNAME',
    'PWD',
    'OLDPWD',
    'EDITOR',
    'VISUAL',
    'DISPLAY',
    'HOSTNAME',
)
"""In strict mode, only these variables are carried over from the current environment."""

TRUTHY_VALUES = frozenset({'1', 't', 'true', 'y', 'yes'})


def stderr_handler(**kwargs: typing.Any) -> RichHandler:
    """Create a `rich.logging.RichHandler` that writes to `stderr`; the child process owns `stdout`."""
    return RichHandler(console=Console(stderr=True), **kwargs)


DEFAULT_LOGGING_CONFIG: typing.Dict[str, typing.Any] = {
    'version': 1,
    'formatters': {
        'simple': {
            'datefmt': logging.Formatter.default_time_format,
            'format': '%(message)s',
            'style': '%',
            'validate': False,
        },
    },
    'filters': {},
    'handlers': {
        'rich': {
            '()': 'dotenv_exec.settings.stderr_handler',
            'formatter': 'simple',
            'rich_tracebacks': True,
            'show_path': False,
        },
    },
    'loggers': {},
    'root': {
        'handlers': ['rich'],
        'level': logging.WARNING,
    },
    'disable_existing_loggers': False,
    'incremental': False,
}
"""Default logging configuration passed to `logging.config.dictConfig()`."""


def named_env_dir() -> Path:
    """Return the directory containing named environment files (`~/.dotenv`).

    >>> named_env_dir() == Path.home() / '.dotenv'
    True

    Raises `RuntimeError` if the home directory can't be determined.
    """
    return Path.home() / NAMED_ENV_DIR


logger.debug('successfully imported %s', __name__)
