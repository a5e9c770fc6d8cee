"""
JSON file persistence for the task list.

The file is the only durable state. Every request loads it, optionally
mutates the list, and writes it back while holding the store's lock.
"""
import logging
import os
import stat
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import pydantic
from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from todo import StorageError, Task, TaskList

logger = logging.getLogger(__name__)

_tasks_adapter = TypeAdapter(list[Task])


class Store:
    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> TaskList:
        """
        Read the task list from disk.

        A missing or blank file is a fresh list, not an error. Anything that
        exists but cannot be parsed raises StorageError.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No task file at %s, starting empty", self.path)
            return TaskList()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not raw.strip():
            return TaskList()
        try:
            tasks = _tasks_adapter.validate_json(raw)
        except pydantic.ValidationError as e:
            raise StorageError(f"Corrupt task file {self.path}: {e}") from e
        logger.debug("Loaded %d tasks from %s", len(tasks), self.path)
        return TaskList(tasks)

    def save(self, tasks: TaskList) -> None:
        """Atomically replace the task file with the serialized list."""
        try:
            body = _tasks_adapter.dump_json(tasks.all(), indent=2)
        except PydanticSerializationError as e:
            raise StorageError(f"Cannot serialize tasks for {self.path}: {e}") from e
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(body)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp files are 0600; keep the mode of the file being replaced
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        logger.debug("Saved %d tasks to %s", len(tasks), self.path)

    def read(self) -> TaskList:
        with self._lock:
            return self.load()

    @contextmanager
    def transaction(self) -> Iterator[TaskList]:
        """
        Load, yield for mutation, then save, all under the store lock.

        If the body raises, nothing is written.
        """
        with self._lock:
            tasks = self.load()
            yield tasks
            self.save(tasks)
