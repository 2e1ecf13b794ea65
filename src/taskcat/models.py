"""Typed domain models and payload DTOs for taskcat."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from taskcat.errors import InvalidStatusError
from taskcat.validation import encode_field


class TaskStatus(int, Enum):
    """Task lifecycle statuses. Values are the on-disk status codes."""

    NOT_STARTED = 0
    IN_PROGRESS = 1
    COMPLETE = 2

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def from_label(cls, value: str) -> "TaskStatus":
        """Resolve a display label such as 'In Progress' (case-insensitive)."""
        if isinstance(value, TaskStatus):
            return value
        normalized = " ".join(str(value).split()).lower()
        for status, label in _STATUS_LABELS.items():
            if label.lower() == normalized:
                return status
        choices = ", ".join(_STATUS_LABELS.values())
        raise InvalidStatusError(f"Invalid status: {value}. Expected one of: {choices}")


_STATUS_LABELS = {
    TaskStatus.NOT_STARTED: "Not Started",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETE: "Complete",
}


@dataclass(frozen=True)
class Task:
    """One task. Identity is its position inside a category."""

    name: str
    status: TaskStatus = TaskStatus.NOT_STARTED
    due_date: str = ""

    @property
    def has_due_date(self) -> bool:
        return bool(self.due_date)


@dataclass
class Category:
    """Named, insertion-ordered group of tasks."""

    name: str
    tasks: list[Task] = field(default_factory=list)

    @property
    def sort_key(self) -> bytes:
        """Byte-wise ordering key."""
        return encode_field(self.name)


@dataclass
class Profile:
    """In-memory profile model."""

    data_path: str
    logs_dir: str | None = None
    auto_save: bool = False
    confirm_delete: bool = True

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Profile":
        """Create profile model from dict payload."""
        logs_dir = payload.get("logs_dir")
        return cls(
            data_path=str(payload["data_path"]),
            logs_dir=None if logs_dir is None else str(logs_dir),
            auto_save=payload.get("auto_save", False),
            confirm_delete=payload.get("confirm_delete", True),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize profile model to dict payload."""
        return {
            "data_path": self.data_path,
            "logs_dir": self.logs_dir,
            "auto_save": self.auto_save,
            "confirm_delete": self.confirm_delete,
        }


@dataclass
class TaskListItem:
    """Display row for one task."""

    display_num: int
    index: int
    task: Task


@dataclass
class CategoryListItem:
    """Display row for one category and its tasks."""

    display_num: int
    index: int
    name: str
    tasks: list[TaskListItem] = field(default_factory=list)


@dataclass
class StoreListPayload:
    """Whole-store listing for presenters."""

    categories: list[CategoryListItem] = field(default_factory=list)


@dataclass
class AddTaskInput:
    """Fields collected for a new task."""

    category: str
    name: str
    due_date: str = ""


@dataclass
class EditInput:
    """Field key and new value collected for an edit."""

    field: str
    value: str


@dataclass
class CommandDocEntry:
    """Metadata for a single command in the help system."""

    command: str
    alias: str
    usage: str
    summary: str
    display_usage: str
