"""
Tests de la TaskQueue et de l'appel borné par un délai.
"""

import threading
import time

import pytest

from md_translator.exceptions import BackendNetworkError, BackendTimeoutError
from md_translator.pipeline import Task, TaskQueue, call_with_timeout


class TestTaskQueue:
    def test_fifo_then_none(self):
        tasks = TaskQueue()
        assert tasks.load(["a.md", "b/c.md"]) == 2

        assert tasks.next_task() == Task("a.md")
        assert tasks.next_task() == Task("b/c.md")
        assert tasks.next_task() is None

    def test_unloaded_queue_is_empty(self):
        tasks = TaskQueue()

        assert tasks.next_task() is None
        assert tasks.qsize() == 0

    def test_empty_load(self):
        tasks = TaskQueue()

        assert tasks.load([]) == 0
        assert tasks.next_task() is None

    def test_load_only_once(self):
        tasks = TaskQueue()
        tasks.load(["a.md"])

        with pytest.raises(RuntimeError):
            tasks.load(["b.md"])

    def test_each_task_delivered_once(self):
        paths = [f"f{i}.md" for i in range(1000)]
        tasks = TaskQueue()
        tasks.load(paths)
        received = []
        lock = threading.Lock()

        def consume():
            while True:
                task = tasks.next_task()
                if task is None:
                    break
                with lock:
                    received.append(task.relative_path)

        threads = [threading.Thread(target=consume) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(received) == sorted(paths)
        assert tasks.loaded == 1000


class TestCallWithTimeout:
    def test_returns_value(self):
        assert call_with_timeout(lambda: "ok", timeout=1.0) == "ok"

    def test_propagates_errors(self):
        def fail():
            raise BackendNetworkError("connexion refusée")

        with pytest.raises(BackendNetworkError):
            call_with_timeout(fail, timeout=1.0)

    def test_abandons_slow_call(self):
        start = time.monotonic()

        with pytest.raises(BackendTimeoutError):
            call_with_timeout(lambda: time.sleep(1.0) or "trop tard", timeout=0.05)

        assert time.monotonic() - start < 1.0
