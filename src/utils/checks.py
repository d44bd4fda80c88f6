"""Checks that are performed to configuration options."""

import os
from pathlib import Path

from pydantic import FilePath


class InvalidConfigurationError(Exception):
    """Token Usage Tracker configuration is invalid."""


def file_check(path: FilePath, desc: str) -> None:
    """
    Ensure the given path is an existing regular file and is readable.

    Parameters:
        path (FilePath): Filesystem path to validate.
        desc (str): Short description of the value being checked; used in error
        messages.

    Raises:
        InvalidConfigurationError: If `path` does not point to a file or is not
        readable.
    """
    if not os.path.isfile(path):
        raise InvalidConfigurationError(f"{desc} '{path}' is not a file")
    if not os.access(path, os.R_OK):
        raise InvalidConfigurationError(f"{desc} '{path}' is not readable")


def database_file_check(db_path: str) -> None:
    """Ensure a SQLite database file can be created or opened at given path.

    In-memory database is refused, SQLite gives every pooled connection its
    own empty in-memory database and request handlers run in worker threads.
    """
    if db_path == ":memory:":
        raise InvalidConfigurationError(
            "SQLite in-memory database can not be shared by request handlers, "
            "use a database file instead"
        )
    directory = Path(db_path).parent
    if not directory.is_dir():
        raise InvalidConfigurationError(
            f"SQLite database directory does not exist: {db_path}"
        )
    if not os.access(directory, os.W_OK):
        raise InvalidConfigurationError(
            f"SQLite database directory '{directory}' is not writable"
        )
