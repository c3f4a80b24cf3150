"""
Task Registry
-------------

Centralized tracking of asyncio tasks created across the application
(preview loop, export runs, encoder jobs, proposal requests).

Features:
- Register tasks with metadata (category, description, origin)
- Track creation time, completion state, cancellation, errors
- Introspection API for debugging
- Cancel-all helper for host shutdown
"""

from __future__ import annotations

import asyncio
import traceback
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, List, Any
from datetime import datetime, timezone

from models.enums import LogCategory
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.TASK)


# ---------------------------------------------------------------------------
# TASK CATEGORY ENUM
# ---------------------------------------------------------------------------

class TaskCategory(Enum):
    """Logical grouping of asynchronous tasks."""
    PREVIEW = auto()
    EXPORT = auto()
    ENCODER = auto()
    PROPOSAL = auto()
    SYSTEM = auto()
    GENERAL = auto()


# ---------------------------------------------------------------------------
# TASK METADATA
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaskInfo:
    """Immutable metadata captured at task creation time."""
    id: int
    category: TaskCategory
    description: str
    created_at: str  # ISO UTC string
    created_timestamp: float
    origin_stack: str  # short stack trace where create_tracked_task was called


@dataclass
class TaskRecord:
    """Internal structure tracking task state."""
    task: asyncio.Task
    info: TaskInfo
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_return: Optional[Any] = None
    settled: bool = False  # done callback has run


# ---------------------------------------------------------------------------
# TASK REGISTRY SINGLETON
# ---------------------------------------------------------------------------

class TaskRegistry:
    """
    Global registry for all asyncio tasks in the application.

    Responsibilities:
    - Track tasks and metadata
    - Detect and log task failures
    - Provide debugging API
    - Cancel outstanding work at shutdown
    """

    _instance: Optional["TaskRegistry"] = None

    def __init__(self, history_limit: int = 100) -> None:
        self._records: Dict[int, TaskRecord] = {}
        self._next_id: int = 1
        # Finished records kept for failed()/cancelled() inspection
        self._history_limit = history_limit

    @classmethod
    def instance(cls) -> "TaskRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # -----------------------------
    # Register new task
    # -----------------------------
    def register(
        self,
        task: asyncio.Task,
        category: TaskCategory,
        description: str,
    ) -> int:
        """Register a new task with metadata."""
        task_id = self._next_id
        self._next_id += 1

        # Drop the last frame which will be inside this module
        origin_stack = "".join(traceback.format_stack(limit=8)[:-1])

        now = datetime.now(timezone.utc)
        info = TaskInfo(
            id=task_id,
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
            origin_stack=origin_stack,
        )

        self._records[task_id] = TaskRecord(task=task, info=info)
        log.debug(f"[Task {task_id}] Registered ({category.name}) - {description}")

        task.add_done_callback(self._on_task_done)
        return task_id

    def _on_task_done(self, task: asyncio.Task) -> None:
        """Internal callback whenever a task finishes."""
        record = self._get_record_by_task(task)
        if record is None:
            return
        record.settled = True

        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
            self._prune()
            return

        exc = task.exception()
        if exc:
            record.finished_with_error = exc
            log.error(
                f"[Task {record.info.id}] FAILED: {exc}",
                description=record.info.description,
                error_type=type(exc).__name__,
            )
        else:
            record.finished_return = task.result()
            log.debug(f"[Task {record.info.id}] Completed successfully")

        self._prune()

    def _prune(self) -> None:
        """Drop the oldest finished records beyond the history limit."""
        finished = [task_id for task_id, r in self._records.items() if r.settled]
        for task_id in finished[:max(0, len(finished) - self._history_limit)]:
            del self._records[task_id]

    def _get_record_by_task(self, task: asyncio.Task) -> Optional[TaskRecord]:
        for record in self._records.values():
            if record.task is task:
                return record
        return None

    # -----------------------------
    # Public API
    # -----------------------------

    def list_all(self) -> List[TaskRecord]:
        return list(self._records.values())

    def active(self, category: Optional[TaskCategory] = None) -> List[TaskRecord]:
        """Tasks still running, optionally limited to one category."""
        return [
            r for r in self._records.values()
            if not r.task.done() and (category is None or r.info.category == category)
        ]

    def failed(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TaskRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def summary(self) -> str:
        """Return human-readable summary for logs."""
        return (
            f"Tasks: total={len(self._records)}, running={len(self.active())}, "
            f"failed={len(self.failed())}, cancelled={len(self.cancelled())}"
        )

    # -----------------------------
    # Shutdown helpers
    # -----------------------------

    async def cancel_all(self, exclude: Optional[List[asyncio.Task]] = None) -> int:
        """Cancel every running task and wait for them to settle."""
        exclude = exclude or []
        tasks = [
            r.task for r in self._records.values()
            if not r.task.done() and r.task not in exclude
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        log.debug(f"Shutdown: {len(tasks)} tasks cancelled")
        return len(tasks)


# ---------------------------------------------------------------------------
# Convenience wrapper function
# ---------------------------------------------------------------------------

def create_tracked_task(
    coro,
    *,
    category: TaskCategory,
    description: str,
) -> asyncio.Task:
    """Create and register a task in a single call."""
    task = asyncio.get_running_loop().create_task(coro)
    TaskRegistry.instance().register(task=task, category=category, description=description)
    return task
