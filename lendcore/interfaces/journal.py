"""Journaled protocol: state that can take part in an atomic operation."""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Journaled(Protocol):
    """Anything whose state can be captured and put back."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...
