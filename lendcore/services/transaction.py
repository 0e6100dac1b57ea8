"""All-or-nothing execution of a pool operation."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..interfaces.journal import Journaled

logger = logging.getLogger(__name__)


class Transaction:
    """Snapshot participants on entry, restore them if the block raises.

    Participants that do not implement ``snapshot``/``restore`` are skipped;
    their side effects cannot be undone, which is why the pool performs
    asset transfers last.
    """

    def __init__(self, participants: Iterable[object], name: str = "tx") -> None:
        self.name = name
        self.participants: list[Journaled] = []
        for obj in participants:
            if isinstance(obj, Journaled) and not any(p is obj for p in self.participants):
                self.participants.append(obj)
        self._snapshots: list[Any] = []

    def __enter__(self) -> Transaction:
        self._snapshots = [p.snapshot() for p in self.participants]
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self._rollback()
            logger.warning("%s rolled back: %s", self.name, exc)
        return False

    def _rollback(self) -> None:
        for participant, snapshot in zip(self.participants, self._snapshots):
            participant.restore(snapshot)
