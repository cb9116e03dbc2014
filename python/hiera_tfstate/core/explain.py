"""
hiera_tfstate/core/explain.py

The explain sink is how the conversion reports what it did (the backend options
it was called with, the complete flattened mapping in debug mode) without
returning it. It receives a zero-argument producer rather than a string, so
potentially large dumps are only rendered when the sink decides to use them.
"""

import logging
from typing import Callable

Explain = Callable[[Callable[[], str]], None]

explain_logger = logging.getLogger("hiera_tfstate.explain")


def log_explain(message: Callable[[], str]) -> None:
    """Default sink: log to `hiera_tfstate.explain` at DEBUG, rendering lazily."""
    if explain_logger.isEnabledFor(logging.DEBUG):
        explain_logger.debug("%s", message())
