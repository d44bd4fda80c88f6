"""Unit tests for types defined in utils/types.py."""

from utils.types import Singleton


class Registry(metaclass=Singleton):
    """Class with one shared instance."""

    def __init__(self) -> None:
        """Start with empty registry."""
        self.items: list[str] = []


def test_singleton_returns_same_instance() -> None:
    """Test that every construction returns the first instance."""
    first = Registry()
    first.items.append("u1")

    second = Registry()

    assert second is first
    assert second.items == ["u1"]
