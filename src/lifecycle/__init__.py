"""
Lifecycle subsystem
-------------------

Task tracking & introspection for every asyncio task the application
spawns. External code should import from:
    from lifecycle import TaskRegistry, TaskCategory, create_tracked_task
"""

from .task_registry import TaskRegistry, TaskCategory, TaskInfo, create_tracked_task

__all__ = [
    "TaskRegistry",
    "TaskCategory",
    "TaskInfo",
    "create_tracked_task",
]
