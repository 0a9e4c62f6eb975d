# CLI entry points call configure_logging(), which changes the root logger level.
# Restore it after every test so log-based assertions elsewhere stay independent.

import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_root_log_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
