"""Register the shared fixtures in `tests.fixtures` for both the test suite and `doctest` tests."""

pytest_plugins = ['tests.fixtures']
