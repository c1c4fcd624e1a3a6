"""Define fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest
import pytest_mock

# pylint: disable=redefined-outer-name

EXAMPLE_ENV = b"""
# an example .env file
GREETING=hello
MESSAGE="multi
line"
""".lstrip()


@pytest.fixture(autouse=True)
def monkeypatch_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Monkeypatch environment variables for all tests."""
    monkeypatch.setenv('TERM', 'dumb')


@pytest.fixture(autouse=True)
def home_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the home directory at an empty temporary directory, so `~/.dotenv/` is never read for real."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.setenv('USERPROFILE', str(home))
    return home


@pytest.fixture(autouse=True)
def workdir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Run each test from an empty temporary directory, so a real `./.env` is never read."""
    path = tmp_path / 'workdir'
    path.mkdir()
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def example_env_file(tmp_path: Path) -> Path:
    """Write an example `.env` file to the temporary directory."""
    path = tmp_path / 'example.env'
    path.write_bytes(EXAMPLE_ENV)
    return path


example_env_file.__doc__ = f"""Write an example `.env` file to the temporary directory.

```sh
{EXAMPLE_ENV.decode('utf-8')}
```
"""


@pytest.fixture
def named_env_file(home_dir: Path) -> Path:
    """Write a named environment file (`~/.dotenv/example.env`)."""
    path = home_dir / '.dotenv' / 'example.env'
    path.parent.mkdir()
    path.write_text('GREETING=from the named file\nNAMED_ONLY=yes\n', encoding='utf-8')
    return path


@pytest.fixture(autouse=True)
def mock_logging_dict_config(mocker: pytest_mock.MockerFixture) -> mock.MagicMock:
    """Mock the `logging.config.dictConfig()` function."""
    return mocker.patch('logging.config.dictConfig')
