"""Inject the variables from a `.env` file into the environment of a command.

```sh
❯ cat .env
GREETING=hello
❯ dotenv sh -c 'echo $GREETING'
hello
```

# Navigation

## `dotenv_exec.cli`

Commands and CLI documentation.

## `dotenv_exec.environment`

Build the child's environment (including strict mode).

## `dotenv_exec.launcher`

Run the command and forward its exit code.

## `dotenv_exec.loader`

Locate and read `.env` files.

## `dotenv_exec.parser`

Parse the `.env` format.

## `dotenv_exec.settings`

Constants and the default logging configuration.
"""  # noqa: D415

from __future__ import annotations

import sys
from typing import Any

__version__ = '0.0.0'

from dotenv_exec.loader import EnvFileError, parse_file
from dotenv_exec.parser import parse

__all__ = ['EnvFileError', 'main', 'parse', 'parse_file']


def main(*args: Any) -> None:  # pylint: disable=missing-function-docstring
    """Entrypoint for the `dotenv` CLI.

    When arguments are provided, they are used to replace `sys.argv[1:]`.
    """
    if args:
        sys.argv[1:] = list(args)

    from dotenv_exec.cli import app

    app(prog_name='dotenv')
