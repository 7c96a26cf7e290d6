import io
import logging

import pytest

from maze_race.config import LOG_LEVEL_ENV
from maze_race.log import ROOT_LOGGER_NAME, configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_get_logger_namespacing():
    assert get_logger().name == "maze_race"
    assert get_logger("maze_race").name == "maze_race"
    assert get_logger("maze_race.systems.race").name == "maze_race.systems.race"
    assert get_logger("tools").name == "maze_race.tools"


def test_configure_logging_writes_formatted_lines():
    stream = io.StringIO()
    configure_logging("debug", stream=stream)
    get_logger("maze_race.map.generator").debug("carved %dx%d", 9, 9)

    line = stream.getvalue().strip()
    assert "maze_race.map.generator" in line
    assert "DEBUG" in line
    assert line.endswith("carved 9x9")


def test_configure_logging_is_idempotent():
    configure_logging("INFO", stream=io.StringIO())
    stream = io.StringIO()
    logger = configure_logging("INFO", stream=stream)
    marked = [h for h in logger.handlers if getattr(h, "_maze_race_handler", False)]
    assert len(marked) == 1

    get_logger("x").info("once")
    get_logger("x").debug("hidden")
    assert stream.getvalue().count("once") == 1
    assert "hidden" not in stream.getvalue()


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "WARNING")
    logger = configure_logging(stream=io.StringIO())
    assert logger.level == logging.WARNING


def test_unknown_level():
    with pytest.raises(ValueError):
        configure_logging("chatty", stream=io.StringIO())
