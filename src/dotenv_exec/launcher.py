"""Run the target command with the prepared environment.

The command inherits `stdin`, `stdout`, and `stderr`, and its exit code is returned so that it can be forwarded:

>>> run([sys.executable, '-c', 'import os, sys; sys.exit(int(os.environ["CODE"]))'], {'CODE': '3'})
3

On Linux, the child asks the kernel to send it `SIGTERM` if this process dies first (`PR_SET_PDEATHSIG`), so
that it is never orphaned.
"""

from __future__ import annotations

import ctypes
import functools
import logging
import os
import signal
import subprocess
import sys
import typing

__all__ = ['LINUX', 'LaunchError', 'run']

logger = logging.getLogger(__name__)

LINUX = sys.platform.startswith('linux')

PR_SET_PDEATHSIG = 1
"""Option number for `prctl(2)`, from `<linux/prctl.h>`."""

SIGNALED_EXIT_CODE = 1
"""Return this exit code when the command is terminated by a signal."""

LIBC = ctypes.CDLL(None, use_errno=True) if LINUX else None
"""The C library already loaded into this process (for `prctl(2)`); `None` on other platforms."""


class LaunchError(RuntimeError):
    """The command could not be started."""


def set_parent_death_signal(libc: ctypes.CDLL, parent_pid: int, sig: int = signal.SIGTERM) -> None:
    """Have the kernel send `sig` to this process when its parent exits.

    This runs in the child between `fork()` and `exec()`. If the parent is already gone (the child has been
    reparented, usually to `init`), the signal would never be delivered, so refuse to continue.
    """
    if libc.prctl(PR_SET_PDEATHSIG, int(sig), 0, 0, 0) != 0:
        errno = ctypes.get_errno()
        raise OSError(errno, os.strerror(errno))

    if os.getppid() != parent_pid:
        raise OSError('Unable to operate on a program whose parent has already exited')


def _preexec_fn() -> typing.Callable[[], None] | None:
    if LIBC is None or not LINUX:
        return None
    return functools.partial(set_parent_death_signal, LIBC, os.getpid())


def run(command: typing.Sequence[str], env: typing.Mapping[str, str]) -> int:
    """Run `command` with exactly the variables in `env`, wait for it to exit, and return its exit code."""
    if not command:
        raise LaunchError('no command provided')

    program, *args = command
    logger.debug('Execute: %s %s', program, ' '.join(args))

    try:
        proc = subprocess.Popen([program, *args], env=dict(env), preexec_fn=_preexec_fn())  # noqa: S603
    except (OSError, subprocess.SubprocessError) as exc:
        raise LaunchError(f'failed to execute command: {program}: {exc}') from exc

    with proc:
        while True:
            try:
                returncode = proc.wait()
                break
            except KeyboardInterrupt:
                # the child received the same SIGINT; let it decide when to exit
                logger.debug('interrupted; waiting for %s to exit', program)

    if returncode < 0:
        logger.debug('%s was terminated by signal %d', program, -returncode)
        return SIGNALED_EXIT_CODE
    return returncode


logger.debug('successfully imported %s', __name__)
