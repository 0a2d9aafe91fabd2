"""
Pipeline concurrent de traduction de fichiers.

Architecture:
    discover_files() → TaskQueue → FileWorkers (N threads) → StatsAggregator → RunReport
"""

from .file_worker import FileWorker, call_with_timeout
from .runner import run_translation
from .task_queue import Task, TaskQueue
from .worker_pool import FileWorkerPool

__all__ = [
    "FileWorker",
    "FileWorkerPool",
    "Task",
    "TaskQueue",
    "call_with_timeout",
    "run_translation",
]
