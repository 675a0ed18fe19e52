"""Concurrent fan-out helpers for per-device jobs"""
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, List, Optional


class TaskOutcome:
    """Result or error of a single fanned-out task"""

    def __init__(self, key: str, result: Any = None, error: Optional[BaseException] = None):
        self.key = key
        self.result = result
        self.error = error

    @property
    def succeeded(self) -> bool:
        return self.error is None


def run_all_settled(tasks: Dict[str, Callable[[], Any]]) -> List[TaskOutcome]:
    """
    Run every task concurrently and wait until all of them have finished.

    One worker thread per task. A failing task never cancels or hides the
    others: its exception is captured in its TaskOutcome.

    Args:
        tasks: Mapping of task key (usually a device id) to a no-arg callable

    Returns:
        One TaskOutcome per task, in the order of `tasks`
    """
    if not tasks:
        return []

    with ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        futures = {key: executor.submit(fn) for key, fn in tasks.items()}
        wait(futures.values())

    outcomes = []
    for key, future in futures.items():
        error = future.exception()
        if error is None:
            outcomes.append(TaskOutcome(key, result=future.result()))
        else:
            outcomes.append(TaskOutcome(key, error=error))
    return outcomes
