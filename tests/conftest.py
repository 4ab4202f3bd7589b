import importlib.util
import io
import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from blame_logging import LOGGER_NAME

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    """Import tests/fixtures/<name>.py by path."""
    path = str(FIXTURES / f"{name}.py")
    spec = importlib.util.spec_from_file_location(f"blame_fixture_{name}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def console_mock():
    """Console-like object recording every call as (method, args, kwargs)."""
    calls = []

    def log(*args, **kwargs):
        calls.append(("log", args, kwargs))
        return "logged"

    def error(*args, **kwargs):
        calls.append(("error", args, kwargs))

    return SimpleNamespace(log=log, error=error, calls=calls)


@pytest.fixture
def sink():
    return io.StringIO()


@pytest.fixture
def console_log_fixture():
    return load_fixture("console_log")


@pytest.fixture
def ten_lines_fixture():
    return load_fixture("ten_lines")


@pytest.fixture(autouse=True)
def reset_blame_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
