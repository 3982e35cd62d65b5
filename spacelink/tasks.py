"""Starting detached background tasks."""

from __future__ import annotations

import threading
from typing import Callable, NoReturn


class TaskError(RuntimeError):
    """Raised when a background task cannot be started."""


def start_task(routine: Callable[[], object], name: str | None = None) -> threading.Thread:
    """Run ``routine`` in a detached daemon thread and return the thread."""
    thread = threading.Thread(target=routine, name=name, daemon=True)
    try:
        thread.start()
    except RuntimeError as exc:
        raise TaskError(f"failed to start task: {exc}") from exc
    return thread


def run_forever(work: Callable[[], object]) -> NoReturn:
    """Call ``work`` repeatedly until it raises."""
    while True:
        work()