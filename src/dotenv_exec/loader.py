"""Locate and read `.env` files.

Two files may contribute variables:

1. a named (global) file, `~/.dotenv/NAME.env`, selected with `--environment NAME`
2. the local file: either the path given with `--file`, or `./.env` if it exists

The local file is loaded last, so its values take precedence:

>>> load(file=example_env_file)
{'GREETING': 'hello', 'MESSAGE': 'multi\\nline'}
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv_exec import parser, settings

__all__ = ['EnvFileError', 'load', 'local_file', 'named_file', 'parse_file', 'read_text']

logger = logging.getLogger(__name__)


class EnvFileError(OSError):
    """An environment file could not be found or read."""


def read_text(path: str | Path) -> str:
    """Read the file at `path` as UTF-8 text.

    >>> read_text('does_not_exist.env')
    Traceback (most recent call last):
    ...
    dotenv_exec.loader.EnvFileError: could not read environment file 'does_not_exist.env': ...
    """
    try:
        return Path(path).read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvFileError(f"could not read environment file '{path}': {exc}") from exc


def parse_file(path: str | Path) -> dict[str, str]:
    """Read the file at `path` and parse its contents with `dotenv_exec.parser.parse()`.

    >>> parse_file(example_env_file)
    {'GREETING': 'hello', 'MESSAGE': 'multi\\nline'}
    """
    logger.debug("Read file: '%s'", path)
    return parser.parse(read_text(path))


def named_file(name: str) -> Path | None:
    """Resolve the named environment file (`~/.dotenv/NAME.env`).

    A missing file is not an error; a warning is logged and `None` is returned:

    >>> named_file('missing') is None
    True
    """
    try:
        directory = settings.named_env_dir()
    except RuntimeError as exc:
        raise EnvFileError(
            'could not get home directory: the home directory is required to fetch specific environment files'
        ) from exc

    path = directory / f'{name}{settings.NAMED_ENV_SUFFIX}'
    if not path.is_file():
        logger.warning('Environment file does not exist in home directory settings folder: %s', path)
        return None
    return path


def local_file(path: str | Path | None = None) -> Path | None:
    """Resolve the local environment file.

    An explicitly requested file must exist; otherwise `./.env` is used if it's present.
    """
    if path is not None:
        if not Path(path).is_file():
            raise EnvFileError(f'custom environment file does not exist: {path}')
        return Path(path)

    default = Path.cwd() / settings.LOCAL_ENV_FILE
    if default.is_file():
        return default

    logger.debug('no %s file in %s', settings.LOCAL_ENV_FILE, default.parent)
    return None


def load(file: str | Path | None = None, environment: str | None = None) -> dict[str, str]:
    """Load the named file (if any) and then the local file, with local values overriding named ones."""
    variables: dict[str, str] = {}

    if environment and (global_path := named_file(environment)):
        variables.update(parse_file(global_path))

    if local_path := local_file(file):
        variables.update(parse_file(local_path))

    logger.debug('loaded %d variable(s)', len(variables))
    return variables


logger.debug('successfully imported %s', __name__)
