import sys

from loguru import logger
import pytest


@pytest.fixture
def caplog(caplog):
    """Route loguru records into pytest's caplog."""
    handler_id = logger.add(
        caplog.handler,
        format="{message}",
        level=0,
        filter=lambda record: record["level"].no >= caplog.handler.level,
        enqueue=False,
    )
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _stderr_logger():
    """Log to whatever sys.stderr is at write time, so capsys sees it.

    The CLI replaces loguru's handlers, so they are reset around every test.
    """
    logger.remove()
    logger.add(lambda message: sys.stderr.write(message), level="WARNING")
    yield
    logger.remove()
