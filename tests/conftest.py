"""
conftest.py — shared fixtures for the setstr test suite.

Provides Go sources used across modules and keeps SETSTR_* environment
variables from leaking between tests.
"""
import os

import pytest

from tests.go_sources import UNTAGGED_SOURCE, WIDGET_SOURCE


@pytest.fixture
def widget_source():
    return WIDGET_SOURCE


@pytest.fixture
def untagged_source():
    return UNTAGGED_SOURCE


@pytest.fixture
def go_file(tmp_path):
    """Writes Go source to a file in tmp_path and returns its path."""
    def write(source, name="source.go"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)
    return write


# ─── Environment Variable Safety ────────────────────────────────────────────

_ENV_KEYS_TO_PROTECT = [
    "SETSTR_SUFFIX",
    "SETSTR_TYPE_SUFFIXES",
    "SETSTR_LOG_LEVEL",
    "SETSTR_PARSE_DEBUG",
]


@pytest.fixture(autouse=True)
def _clean_env_vars():
    """Snapshot and restore setstr environment variables after each test."""
    saved = {}
    for key in _ENV_KEYS_TO_PROTECT:
        if key in os.environ:
            saved[key] = os.environ[key]

    yield

    for key in _ENV_KEYS_TO_PROTECT:
        if key in saved:
            os.environ[key] = saved[key]
        else:
            os.environ.pop(key, None)
