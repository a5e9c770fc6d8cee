"""
Task list model.

Positions are never stored: a task's position is its 1-based index in the
list, recomputed every time the list is read.
"""
from datetime import datetime, timezone
from typing import Iterator, Optional

from pydantic import BaseModel, Field


class TodoError(Exception):
    pass


class ValidationError(TodoError):
    """Input that cannot become a task (e.g. empty text)."""


class NotFoundError(TodoError):
    """Position outside [1, len(list)]."""


class StorageError(TodoError):
    """The task file could not be read, parsed, or written."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Task(BaseModel):
    task: str
    done: bool = False
    created_at: datetime = Field(default_factory=_now)
    completed_at: Optional[datetime] = None


class TaskList:
    def __init__(self, tasks: Optional[list[Task]] = None):
        self._tasks = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def _index(self, position: int) -> int:
        if isinstance(position, bool) or not isinstance(position, int):
            raise NotFoundError(f"Item {position!r} does not exist")
        if position < 1 or position > len(self._tasks):
            raise NotFoundError(f"Item {position} does not exist")
        return position - 1

    def add(self, description: str) -> Task:
        if not description or not description.strip():
            raise ValidationError("Task description cannot be empty")
        try:
            description.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValidationError("Task description is not valid UTF-8 text") from e
        item = Task(task=description)
        self._tasks.append(item)
        return item

    def get(self, position: int) -> Task:
        return self._tasks[self._index(position)]

    def complete(self, position: int) -> Task:
        item = self._tasks[self._index(position)]
        if not item.done:
            item.done = True
            item.completed_at = _now()
        return item

    def delete(self, position: int) -> Task:
        return self._tasks.pop(self._index(position))

    def all(self) -> list[Task]:
        return list(self._tasks)

    def entries(self) -> Iterator[tuple[int, Task]]:
        """Yield (position, task) pairs in list order."""
        return enumerate(self._tasks, start=1)
