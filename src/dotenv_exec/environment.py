"""Build the environment for the child process.

The current process environment is read once, combined with the parsed variables into an immutable
`EnvironmentSnapshot`, and then handed to `dotenv_exec.launcher.run()`. The environment of this process is never
modified.

## Strict Mode

In strict mode, only the variables named in `dotenv_exec.settings.STRICT_WHITELIST` survive from the current
environment:

>>> snapshot = build({'CUSTOM_VAR': 'Hello'}, strict=True, base={'PATH': '/usr/bin', 'UNSAFE_VAR': '123'})
>>> dict(snapshot)
{'PATH': '/usr/bin', 'CUSTOM_VAR': 'Hello'}
"""

from __future__ import annotations

import logging
import os
import typing
from collections.abc import Mapping

from dotenv_exec import settings

__all__ = ['EnvironmentSnapshot', 'build', 'is_truthy', 'strict_requested']

logger = logging.getLogger(__name__)


class EnvironmentSnapshot(Mapping[str, str]):
    """An immutable set of environment variables."""

    strict: bool
    """Whether the snapshot was built in strict mode."""

    def __init__(self, variables: typing.Mapping[str, str], strict: bool = False) -> None:
        """Copy `variables` so later changes to the source mapping are not reflected."""
        self._variables = dict(variables)
        self.strict = strict

    def __getitem__(self, key: str) -> str:
        return self._variables[key]

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        """Represent the snapshot by its size, since values may be secret.

        >>> EnvironmentSnapshot({'A': '1', 'B': '2'}, strict=True)
        <EnvironmentSnapshot: 2 variable(s), strict=True>
        """
        return f'<{self.__class__.__name__}: {len(self)} variable(s), strict={self.strict}>'


def is_truthy(value: str) -> bool:
    """Check whether `value` should be interpreted as `True`.

    >>> [is_truthy(v) for v in ('1', 'T', 'true', 'Y', 'YES')]
    [True, True, True, True, True]
    >>> [is_truthy(v) for v in ('0', 'false', 'no', 'random')]
    [False, False, False, False]
    """
    return value.lower() in settings.TRUTHY_VALUES


def strict_requested(flag: bool, variables: typing.Mapping[str, str]) -> bool:
    """Enable strict mode from the command-line flag, or from `DOTENV_STRICT` in the loaded variables.

    >>> strict_requested(False, {'DOTENV_STRICT': 'true'})
    True
    >>> strict_requested(False, {'DOTENV_STRICT': 'false'})
    False
    """
    if flag:
        return True

    value = variables.get(settings.STRICT_VARIABLE)
    if value is not None and is_truthy(value):
        logger.debug('strict mode enabled by %s=%s', settings.STRICT_VARIABLE, value)
        return True
    return False


def build(
    variables: typing.Mapping[str, str], strict: bool = False, base: typing.Mapping[str, str] | None = None
) -> EnvironmentSnapshot:
    """Combine the `base` environment (default: `os.environ`) with the parsed `variables`.

    Parsed variables always override the `base` environment:

    >>> build({'FOO': 'FILE_VALUE'}, base={'FOO': 'SYSTEM_VALUE', 'EXISTING': 'yes'})['FOO']
    'FILE_VALUE'
    """
    if base is None:
        base = os.environ

    if strict:
        merged = {name: base[name] for name in settings.STRICT_WHITELIST if name in base}
        logger.debug('strict mode: kept %d of %d variable(s) from the environment', len(merged), len(base))
    else:
        merged = dict(base)

    merged.update(variables)
    return EnvironmentSnapshot(merged, strict=strict)


logger.debug('successfully imported %s', __name__)
