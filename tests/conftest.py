from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_jujushell_logging():
    # configure_logging() detaches the package logger from the root; undo it so
    # caplog keeps seeing records in later tests.
    yield
    root = logging.getLogger("jujushell")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    if hasattr(root, "_jujushell_configured"):
        delattr(root, "_jujushell_configured")
