"""Shared fixtures for the unit tests"""

import pytest

from logger import Logger, LogLevel


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path):
    """Send every log file of a test to its own temporary folder"""
    Logger.reset_logger()
    Logger(
        logs_path=str(tmp_path / "log"),
        file_log_level=LogLevel.DEBUG,
        print_log_level=LogLevel.NONE,
    )
    yield
    Logger.reset_logger()
