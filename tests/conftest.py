from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from sqlscript.utils.logging import correlation_id_var


@pytest.fixture(autouse=True)
def reset_sqlscript_logging() -> Generator[None, None, None]:
    """Undo ``configure_logging`` so handlers never outlive the test that installed them."""
    yield
    correlation_id_var.set(None)
    root_logger = logging.getLogger("sqlscript")
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.propagate = True
    root_logger.setLevel(logging.NOTSET)
