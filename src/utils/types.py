"""Common types for the project."""

import threading
from typing import Any


class Singleton(type):
    """Metaclass of classes having one instance per process.

    Request handlers run in several threads, so the first construction is
    guarded by a lock.
    """

    _instances: dict[type, Any] = {}
    _lock = threading.Lock()

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        """Return the shared instance, creating it on first call."""
        if cls not in Singleton._instances:
            with Singleton._lock:
                if cls not in Singleton._instances:
                    Singleton._instances[cls] = super().__call__(*args, **kwargs)
        return Singleton._instances[cls]
