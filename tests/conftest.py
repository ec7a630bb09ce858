"""
Shared pytest fixtures for streamcount tests.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

import pytest


class ScriptedRandom:
    """Random source that replays a fixed list of draws.

    Each draw is checked against the requested range, so a script that
    drifts out of step with the algorithm fails loudly instead of silently
    producing a different run.
    """

    def __init__(self, draws: Iterable[int]):
        self._draws = list(draws)
        self.requests: list[int] = []

    def randrange(self, stop: int) -> int:
        if not self._draws:
            raise AssertionError(f"scripted draws exhausted (randrange({stop}))")
        value = self._draws.pop(0)
        if not 0 <= value < stop:
            raise AssertionError(f"scripted draw {value} outside [0, {stop})")
        self.requests.append(stop)
        return value

    @property
    def remaining(self) -> int:
        return len(self._draws)


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom sources: ``scripted_random([1, 0, 1])``."""
    return ScriptedRandom


@pytest.fixture(scope="session")
def test_output_root() -> Path:
    """
    Returns the root test_output directory. Created once per test session.
    Files here persist after tests complete for easy access.
    """
    output_dir = Path(__file__).parent.parent / "test_output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


@pytest.fixture
def test_output_dir(request, test_output_root) -> Path:
    """
    Returns a directory for the current test to write output files.
    Directory structure: test_output/<module_name>/<test_name>/
    """
    module_name = request.module.__name__.split(".")[-1]
    test_name = request.node.name

    test_dir = test_output_root / module_name / test_name
    test_dir.mkdir(parents=True, exist_ok=True)
    return test_dir


@pytest.fixture
def token_file(tmp_path) -> Path:
    """A small token file: 12 tokens, 5 distinct, spread over lines."""
    path = tmp_path / "tokens.txt"
    path.write_text(
        "10.0.0.1 10.0.0.2\n"
        "10.0.0.3\t10.0.0.1\n"
        "\n"
        "10.0.0.4 10.0.0.5 10.0.0.1\n"
        "10.0.0.2 10.0.0.3 10.0.0.4\n"
        "10.0.0.5 10.0.0.5\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def reset_streamcount_logging():
    """Reset logging state before each test.

    Ensures tests start with a clean logging configuration:
    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)
    """
    logger = logging.getLogger("streamcount")

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()

    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
