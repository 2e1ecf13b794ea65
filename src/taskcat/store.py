"""Category/task store and its mutation operations.

The store keeps these invariants before and after every public call:

- category names are unique and sorted byte-wise ascending
- a category always holds at least one task
- at most MAX_CATEGORIES categories, MAX_TASKS_PER_CATEGORY tasks each
- every name and due date fits in MAX_FIELD_BYTES encoded bytes

Every operation validates its input fully before mutating anything.
"""

import bisect
from dataclasses import dataclass, field, replace
from typing import Iterable

from taskcat.errors import (
    CategoryFullError,
    DuplicateIndexError,
    IndexOutOfRangeError,
    InvalidFieldError,
    TooManyCategoriesError,
    ValidationError,
)
from taskcat.models import Category, Task, TaskStatus
from taskcat.validation import MAX_FIELD_BYTES, encode_field, validate_field_length

MAX_CATEGORIES = 50
MAX_TASKS_PER_CATEGORY = 255

EDITABLE_FIELDS = ("name", "status", "due_date", "category")
_FIELD_ALIASES = {"due": "due_date"}

__all__ = [
    "EDITABLE_FIELDS",
    "MAX_CATEGORIES",
    "MAX_FIELD_BYTES",
    "MAX_TASKS_PER_CATEGORY",
    "TaskStore",
    "normalize_field_name",
]


def normalize_field_name(field_name: str) -> str:
    """Resolve an editable field key, accepting 'due' for 'due_date'."""
    key = str(field_name).strip().lower()
    key = _FIELD_ALIASES.get(key, key)
    if key not in EDITABLE_FIELDS:
        raise InvalidFieldError(
            f"Invalid field: {field_name}. Expected one of: {', '.join(EDITABLE_FIELDS)}"
        )
    return key


def _validate_category_name(name: str) -> None:
    if not name:
        raise ValidationError("Category name cannot be empty")
    validate_field_length("Category name", name)


@dataclass
class TaskStore:
    """Sorted categories, each owning an insertion-ordered task list."""

    categories: list[Category] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Read-only enumeration
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self.categories

    def category_count(self) -> int:
        return len(self.categories)

    def task_count(self) -> int:
        """Total number of tasks across categories."""
        return sum(len(category.tasks) for category in self.categories)

    def category_names(self) -> list[str]:
        """Return category names in sorted order."""
        return [category.name for category in self.categories]

    def category_name(self, category_index: int) -> str:
        return self._category_at(category_index).name

    def tasks(self, category_index: int) -> list[Task]:
        """Return a copy of a category's tasks in insertion order."""
        return list(self._category_at(category_index).tasks)

    def get_task(self, category_index: int, task_index: int) -> Task:
        category = self._category_at(category_index)
        return category.tasks[self._check_task_index(category, task_index)]

    def select_tasks(self, category_index: int, task_indices: Iterable[int]) -> list[Task]:
        """Return the tasks at task_indices, in selection order.

        Raises:
            DuplicateIndexError: If an index appears more than once
            IndexOutOfRangeError: If any index is invalid
        """
        category = self._category_at(category_index)
        indices = list(task_indices)

        seen: set[int] = set()
        for index in indices:
            if index in seen:
                raise DuplicateIndexError(f"Task index {index} selected more than once", index)
            seen.add(index)
        return [category.tasks[self._check_task_index(category, index)] for index in indices]

    def find_category(self, name: str) -> int | None:
        """Return the index of a category by exact name, or None."""
        key = encode_field(name)
        position = bisect.bisect_left(self.categories, key, key=lambda c: c.sort_key)
        if position < len(self.categories) and self.categories[position].name == name:
            return position
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, category_name: str, name: str, due_date: str = "") -> tuple[int, int]:
        """Add a Not Started task, creating its category when needed.

        Returns:
            (category_index, task_index) of the new task

        Raises:
            FieldTooLongError: If any field exceeds the byte limit
            ValidationError: If the category name is empty
            CategoryFullError: If the existing category is full
            TooManyCategoriesError: If a new category would exceed the limit
        """
        _validate_category_name(category_name)
        validate_field_length("Task name", name)
        validate_field_length("Due date", due_date)

        task = Task(name=name, status=TaskStatus.NOT_STARTED, due_date=due_date)
        category_index = self.find_category(category_name)

        if category_index is not None:
            category = self.categories[category_index]
            if len(category.tasks) >= MAX_TASKS_PER_CATEGORY:
                raise CategoryFullError(
                    f"Category '{category_name}' is full ({MAX_TASKS_PER_CATEGORY} tasks)"
                )
            category.tasks.append(task)
            return category_index, len(category.tasks) - 1

        if len(self.categories) >= MAX_CATEGORIES:
            raise TooManyCategoriesError(
                f"Cannot create category '{category_name}': limit of {MAX_CATEGORIES} reached"
            )
        category_index = self._insert_category(Category(name=category_name, tasks=[task]))
        return category_index, 0

    def set_field(self, category_index: int, task_index: int, field_name: str, value: str) -> bool:
        """Update one field of a task.

        Returns:
            True if the task changed, False if the value was already current

        Raises:
            InvalidFieldError: If field_name is not editable
            InvalidStatusError: If a status value is not recognized
            FieldTooLongError: If the new text exceeds the byte limit
            IndexOutOfRangeError: If either index is invalid
        """
        key = normalize_field_name(field_name)
        category = self._category_at(category_index)
        task_index = self._check_task_index(category, task_index)

        if key == "status":
            return self.set_status(category_index, task_index, TaskStatus.from_label(value))
        if key == "category":
            return self._move_task(category_index, task_index, value)

        label = "Task name" if key == "name" else "Due date"
        validate_field_length(label, value)

        task = category.tasks[task_index]
        if getattr(task, key) == value:
            return False
        category.tasks[task_index] = replace(task, **{key: value})
        return True

    def set_status(self, category_index: int, task_index: int, status: TaskStatus) -> bool:
        """Set a task's status and report whether it changed."""
        category = self._category_at(category_index)
        task_index = self._check_task_index(category, task_index)
        status = TaskStatus(status)

        task = category.tasks[task_index]
        if task.status == status:
            return False
        category.tasks[task_index] = replace(task, status=status)
        return True

    def delete(self, category_index: int, task_index: int) -> Task:
        """Remove one task; an emptied category is removed with it."""
        category = self._category_at(category_index)
        task_index = self._check_task_index(category, task_index)

        removed = category.tasks.pop(task_index)
        if not category.tasks:
            del self.categories[category_index]
        return removed

    def delete_many(self, category_index: int, task_indices: Iterable[int]) -> list[Task]:
        """Remove several tasks from one category, all or nothing.

        Returns:
            Removed tasks in ascending index order

        Raises:
            DuplicateIndexError: If an index appears more than once
            IndexOutOfRangeError: If any index is invalid
        """
        indices = list(task_indices)
        self.select_tasks(category_index, indices)
        category = self.categories[category_index]

        removed = []
        for index in sorted(indices, reverse=True):
            removed.append(category.tasks.pop(index))
        removed.reverse()

        if not category.tasks:
            del self.categories[category_index]
        return removed

    def insert_category(self, category: Category) -> int:
        """Insert a fully built category, e.g. while decoding a file.

        Raises:
            ValidationError: If the category is empty, invalid or a duplicate
            TooManyCategoriesError: If the store is at capacity
        """
        _validate_category_name(category.name)
        if not category.tasks:
            raise ValidationError(f"Category '{category.name}' has no tasks")
        if len(category.tasks) > MAX_TASKS_PER_CATEGORY:
            raise CategoryFullError(
                f"Category '{category.name}' has more than {MAX_TASKS_PER_CATEGORY} tasks"
            )
        for task in category.tasks:
            validate_field_length("Task name", task.name)
            validate_field_length("Due date", task.due_date)
        if self.find_category(category.name) is not None:
            raise ValidationError(f"Duplicate category: {category.name}")
        if len(self.categories) >= MAX_CATEGORIES:
            raise TooManyCategoriesError(f"More than {MAX_CATEGORIES} categories")
        return self._insert_category(category)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert_category(self, category: Category) -> int:
        position = bisect.bisect_left(
            self.categories, category.sort_key, key=lambda c: c.sort_key
        )
        self.categories.insert(position, category)
        return position

    def _category_at(self, category_index: int) -> Category:
        if not isinstance(category_index, int) or not 0 <= category_index < len(self.categories):
            raise IndexOutOfRangeError(
                f"Category index {category_index} out of range "
                f"({len(self.categories)} categories)"
            )
        return self.categories[category_index]

    @staticmethod
    def _check_task_index(category: Category, task_index: int) -> int:
        if not isinstance(task_index, int) or not 0 <= task_index < len(category.tasks):
            raise IndexOutOfRangeError(
                f"Task index {task_index} out of range for '{category.name}' "
                f"({len(category.tasks)} tasks)"
            )
        return task_index

    def _move_task(self, category_index: int, task_index: int, target_name: str) -> bool:
        source = self.categories[category_index]
        if target_name == source.name:
            return False

        _validate_category_name(target_name)
        target_index = self.find_category(target_name)
        source_emptied = len(source.tasks) == 1

        if target_index is None:
            if len(self.categories) >= MAX_CATEGORIES and not source_emptied:
                raise TooManyCategoriesError(
                    f"Cannot create category '{target_name}': limit of {MAX_CATEGORIES} reached"
                )
        elif len(self.categories[target_index].tasks) >= MAX_TASKS_PER_CATEGORY:
            raise CategoryFullError(
                f"Category '{target_name}' is full ({MAX_TASKS_PER_CATEGORY} tasks)"
            )

        task = source.tasks.pop(task_index)
        if source_emptied:
            del self.categories[category_index]

        target_index = self.find_category(target_name)
        if target_index is None:
            self._insert_category(Category(name=target_name, tasks=[task]))
        else:
            self.categories[target_index].tasks.append(task)
        return True
