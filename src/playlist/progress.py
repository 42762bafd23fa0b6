from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum


class ProgressStatus(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class Progress:
    """
    Progress of a multi-step operation.

    ``advance`` may be called from several worker threads at once; updates
    are serialized so ``done`` never passes ``total``.
    """

    status: ProgressStatus = ProgressStatus.NOT_STARTED
    total: int = 0
    done: int = 0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def start(self, total: int) -> None:
        with self._lock:
            self.status = ProgressStatus.RUNNING
            self.total = total
            self.done = 0

    def advance(self, step: int = 1) -> None:
        with self._lock:
            self.done = min(self.done + step, self.total)

    def complete(self) -> None:
        with self._lock:
            self.status = ProgressStatus.COMPLETED

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 100.0 if self.status is ProgressStatus.COMPLETED else 0.0
        return 100.0 * self.done / self.total
