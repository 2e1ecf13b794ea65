"""Task file persistence around the binary codec."""

from pathlib import Path

from taskcat import codec
from taskcat.errors import CorruptFormatError, StorageError
from taskcat.logging_utils import log_event
from taskcat.store import TaskStore


def load_tasks(path: str) -> TaskStore:
    """Load and decode the task file.

    A missing file yields an empty store; its parent directory is created
    so a later save succeeds.

    Raises:
        CorruptFormatError: If the file contents are malformed
        StorageError: If the file cannot be read
    """
    task_path = Path(path)

    if not task_path.exists():
        try:
            task_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create task directory: {task_path.parent}: {e}") from e
        log_event("store_load", data_file=str(task_path), exists=False, categories=0, tasks=0)
        return TaskStore()

    try:
        with open(task_path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise StorageError(f"Failed to read tasks file: {task_path}: {e}") from e

    try:
        store = codec.decode(raw)
    except CorruptFormatError as e:
        raise CorruptFormatError(f"Corrupt tasks file: {task_path}: {e}") from e

    log_event(
        "store_load",
        data_file=str(task_path),
        exists=True,
        bytes=len(raw),
        categories=store.category_count(),
        tasks=store.task_count(),
    )
    return store


def save_tasks(path: str, store: TaskStore) -> None:
    """Encode the store and overwrite the task file in one pass."""
    task_path = Path(path)
    payload = codec.encode(store)
    try:
        task_path.parent.mkdir(parents=True, exist_ok=True)

        with open(task_path, "wb") as f:
            f.write(payload)
    except OSError as e:
        raise StorageError(f"Failed to save tasks file: {task_path}: {e}") from e

    log_event(
        "store_save",
        data_file=str(task_path),
        bytes=len(payload),
        categories=store.category_count(),
        tasks=store.task_count(),
    )
