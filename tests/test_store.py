"""Tests for store module."""

import pytest

from taskcat import codec
from taskcat.errors import (
    CategoryFullError,
    DuplicateIndexError,
    FieldTooLongError,
    IndexOutOfRangeError,
    InvalidFieldError,
    InvalidStatusError,
    TooManyCategoriesError,
    ValidationError,
)
from taskcat.models import Category, Task, TaskStatus
from taskcat.store import MAX_CATEGORIES, MAX_TASKS_PER_CATEGORY, TaskStore


def _full_store(category_count: int = MAX_CATEGORIES) -> TaskStore:
    store = TaskStore()
    for i in range(category_count):
        store.add(f"cat{i:02d}", f"task {i}")
    return store


def _task_names(store: TaskStore, category_index: int) -> list[str]:
    return [task.name for task in store.tasks(category_index)]


class TestAdd:
    """Test TaskStore.add."""

    def test_add_creates_category(self):
        """Test that adding under a new name creates one category with one task."""
        store = TaskStore()

        result = store.add("Work", "Write memo", "2024-01-01")

        assert result == (0, 0)
        assert store.category_names() == ["Work"]
        assert store.tasks(0) == [
            Task(name="Write memo", status=TaskStatus.NOT_STARTED, due_date="2024-01-01")
        ]

    def test_add_appends_to_existing_category(self, sample_store):
        """Test that tasks are appended in insertion order."""
        result = sample_store.add("Work", "Deploy")

        assert result == (1, 3)
        assert _task_names(sample_store, 1) == ["Write memo", "Review PR", "Plan sprint", "Deploy"]
        assert sample_store.category_count() == 2

    def test_add_keeps_categories_sorted(self):
        """Test that new categories are inserted in sorted position."""
        store = TaskStore()
        store.add("b", "one")
        store.add("c", "two")

        result = store.add("a", "three")

        assert result == (0, 0)
        assert store.category_names() == ["a", "b", "c"]

    def test_add_sorts_bytewise(self):
        """Test that ordering compares encoded bytes, not case-folded text."""
        store = TaskStore()
        for name in ("été", "zebra", "Zebra", "apple"):
            store.add(name, "x")

        assert store.category_names() == ["Zebra", "apple", "zebra", "été"]

    def test_add_default_due_date_is_empty(self):
        """Test that due date defaults to empty."""
        store = TaskStore()
        store.add("Work", "No deadline")

        task = store.get_task(0, 0)
        assert task.due_date == ""
        assert not task.has_due_date

    def test_add_allows_empty_task_name(self):
        """Test that a zero-length task name is valid."""
        store = TaskStore()
        store.add("Work", "")

        assert store.get_task(0, 0).name == ""

    def test_add_rejects_empty_category_name(self):
        """Test that categories must have a name."""
        store = TaskStore()

        with pytest.raises(ValidationError, match="Category name cannot be empty"):
            store.add("", "task")

        assert store.is_empty()

    @pytest.mark.parametrize(
        "fields", [("a\ud800", "x"), ("Work", "x\udbff", ""), ("Work", "x", "\ud800")]
    )
    def test_add_rejects_unencodable_text(self, fields):
        """Test that lone surrogates raise ValidationError and leave the store empty."""
        store = TaskStore()

        with pytest.raises(ValidationError):
            store.add(*fields)

        assert store.is_empty()

    def test_find_category_unencodable_name(self, sample_store):
        """Test that lookup with an unencodable name is a validation error."""
        with pytest.raises(ValidationError):
            sample_store.find_category("\ud800")

    @pytest.mark.parametrize("field_index", [0, 1, 2])
    def test_add_rejects_long_fields(self, field_index):
        """Test that any field over 255 bytes is rejected."""
        values = ["Work", "task", "2024-01-01"]
        values[field_index] = "x" * 256
        store = TaskStore()

        with pytest.raises(FieldTooLongError):
            store.add(*values)

        assert store.is_empty()

    def test_add_accepts_255_byte_fields(self):
        """Test that exactly 255 bytes is accepted."""
        store = TaskStore()
        store.add("c" * 255, "n" * 255, "d" * 255)

        assert store.task_count() == 1

    def test_add_measures_bytes_not_characters(self):
        """Test that multi-byte characters count by encoded length."""
        store = TaskStore()

        with pytest.raises(FieldTooLongError, match="256 bytes"):
            store.add("Work", "é" * 128)

    def test_add_rejects_51st_category(self):
        """Test that the category limit leaves the store unchanged."""
        store = _full_store()

        with pytest.raises(TooManyCategoriesError):
            store.add("overflow", "task")

        assert store.category_count() == MAX_CATEGORIES
        assert store.find_category("overflow") is None

    def test_add_to_existing_category_at_category_limit(self):
        """Test that a full category list still accepts tasks in existing categories."""
        store = _full_store()

        store.add("cat00", "another")

        assert _task_names(store, 0) == ["task 0", "another"]

    def test_add_rejects_256th_task(self):
        """Test that a category holds at most 255 tasks."""
        store = TaskStore()
        for i in range(MAX_TASKS_PER_CATEGORY):
            store.add("Work", f"task {i}")

        with pytest.raises(CategoryFullError):
            store.add("Work", "one too many")

        assert len(store.tasks(0)) == MAX_TASKS_PER_CATEGORY


class TestReadOnlyEnumeration:
    """Test enumeration helpers."""

    def test_tasks_returns_copy(self, sample_store):
        """Test that mutating the returned list does not touch the store."""
        tasks = sample_store.tasks(1)
        tasks.clear()

        assert len(sample_store.tasks(1)) == 3

    def test_find_category(self, sample_store):
        """Test exact-name lookup."""
        assert sample_store.find_category("Home") == 0
        assert sample_store.find_category("Work") == 1
        assert sample_store.find_category("work") is None

    def test_counts(self, sample_store):
        """Test category and task counts."""
        assert sample_store.category_count() == 2
        assert sample_store.task_count() == 4
        assert not sample_store.is_empty()

    def test_category_index_out_of_range(self, sample_store):
        """Test that bad category indices raise."""
        with pytest.raises(IndexOutOfRangeError, match="Category index 2"):
            sample_store.tasks(2)

        with pytest.raises(IndexOutOfRangeError):
            sample_store.category_name(-1)


class TestSetField:
    """Test TaskStore.set_field."""

    def test_set_name(self, sample_store):
        """Test renaming a task reports a change."""
        assert sample_store.set_field(1, 0, "name", "Write design doc") is True
        assert sample_store.get_task(1, 0).name == "Write design doc"

    def test_set_name_same_value_is_noop(self, sample_store):
        """Test that setting the current value reports no change."""
        assert sample_store.set_field(1, 0, "name", "Write memo") is False

    def test_set_due_date_and_alias(self, sample_store):
        """Test that 'due' is accepted for 'due_date'."""
        assert sample_store.set_field(1, 1, "due", "2026-04-01") is True
        assert sample_store.get_task(1, 1).due_date == "2026-04-01"

        assert sample_store.set_field(1, 1, "due_date", "") is True
        assert sample_store.get_task(1, 1).due_date == ""

    def test_set_status_by_label(self, sample_store):
        """Test that status labels are matched case-insensitively."""
        assert sample_store.set_field(1, 0, "status", "in progress") is True
        assert sample_store.get_task(1, 0).status == TaskStatus.IN_PROGRESS

    def test_set_status_twice_reports_change_once(self, sample_store):
        """Test no-op detection for repeated status updates."""
        assert sample_store.set_field(1, 0, "status", "Complete") is True
        assert sample_store.set_field(1, 0, "status", "Complete") is False

    def test_set_status_invalid(self, sample_store):
        """Test that unknown statuses are rejected."""
        with pytest.raises(InvalidStatusError, match="Invalid status: Done"):
            sample_store.set_field(1, 0, "status", "Done")

        assert sample_store.get_task(1, 0).status == TaskStatus.NOT_STARTED

    @pytest.mark.parametrize("key", ["name", "due_date", "category"])
    def test_set_unencodable_value(self, sample_store, key):
        """Test that lone surrogates are rejected without changes."""
        before = codec.encode(sample_store)

        with pytest.raises(ValidationError):
            sample_store.set_field(1, 0, key, "\ud800")

        assert codec.encode(sample_store) == before

    def test_invalid_field(self, sample_store):
        """Test that unknown field keys are rejected."""
        with pytest.raises(InvalidFieldError, match="Invalid field: priority"):
            sample_store.set_field(1, 0, "priority", "high")

    def test_long_value_leaves_task_unchanged(self, sample_store):
        """Test that over-long values are rejected before mutation."""
        with pytest.raises(FieldTooLongError):
            sample_store.set_field(1, 0, "name", "x" * 256)

        assert sample_store.get_task(1, 0).name == "Write memo"

    def test_index_out_of_range(self, sample_store):
        """Test that bad indices raise without changes."""
        with pytest.raises(IndexOutOfRangeError, match="Task index 3"):
            sample_store.set_field(1, 3, "name", "x")

        with pytest.raises(IndexOutOfRangeError):
            sample_store.set_field(5, 0, "name", "x")

    def test_move_to_new_category(self, sample_store):
        """Test that moving to an absent category creates it in sorted order."""
        assert sample_store.set_field(1, 1, "category", "Errands") is True

        assert sample_store.category_names() == ["Errands", "Home", "Work"]
        assert _task_names(sample_store, 0) == ["Review PR"]
        assert _task_names(sample_store, 2) == ["Write memo", "Plan sprint"]

    def test_move_appends_to_existing_category(self, sample_store):
        """Test that a moved task goes to the end of the target category."""
        sample_store.set_field(1, 0, "category", "Home")

        assert _task_names(sample_store, 0) == ["Fix sink", "Write memo"]
        assert sample_store.get_task(0, 1).status == TaskStatus.NOT_STARTED

    def test_move_last_task_deletes_source(self, sample_store):
        """Test that an emptied source category is removed."""
        sample_store.set_field(0, 0, "category", "Work")

        assert sample_store.category_names() == ["Work"]
        assert _task_names(sample_store, 0)[-1] == "Fix sink"

    def test_move_to_same_category_is_noop(self, sample_store):
        """Test that moving to the current category changes nothing."""
        assert sample_store.set_field(1, 0, "category", "Work") is False
        assert _task_names(sample_store, 1) == ["Write memo", "Review PR", "Plan sprint"]

    def test_move_to_empty_category_name(self, sample_store):
        """Test that the target category must be named."""
        with pytest.raises(ValidationError, match="Category name cannot be empty"):
            sample_store.set_field(1, 0, "category", "")

    def test_move_to_full_category(self):
        """Test that a full target category rejects the move."""
        store = TaskStore()
        for i in range(MAX_TASKS_PER_CATEGORY):
            store.add("Full", f"task {i}")
        store.add("Other", "mover")

        with pytest.raises(CategoryFullError):
            store.set_field(1, 0, "category", "Full")

        assert store.category_names() == ["Full", "Other"]
        assert _task_names(store, 1) == ["mover"]

    def test_move_to_new_category_at_limit(self):
        """Test that a move cannot push the store past the category limit."""
        store = _full_store()
        store.add("cat00", "second")

        with pytest.raises(TooManyCategoriesError):
            store.set_field(0, 1, "category", "brand new")

        assert store.category_count() == MAX_CATEGORIES
        assert _task_names(store, 0) == ["task 0", "second"]

    def test_move_sole_task_to_new_category_at_limit(self):
        """Test that a move which also removes its source stays within the limit."""
        store = _full_store()

        assert store.set_field(0, 0, "category", "zz new") is True

        assert store.category_count() == MAX_CATEGORIES
        assert store.find_category("cat00") is None
        assert store.category_names()[-1] == "zz new"


class TestSetStatus:
    """Test TaskStore.set_status."""

    def test_set_status_reports_change(self, sample_store):
        """Test that a new status reports a change and a repeat does not."""
        assert sample_store.set_status(1, 0, TaskStatus.IN_PROGRESS) is True
        assert sample_store.set_status(1, 0, TaskStatus.IN_PROGRESS) is False
        assert sample_store.get_task(1, 0).status == TaskStatus.IN_PROGRESS

    def test_set_status_bad_index(self, sample_store):
        """Test index validation."""
        with pytest.raises(IndexOutOfRangeError):
            sample_store.set_status(0, 1, TaskStatus.COMPLETE)


class TestDelete:
    """Test TaskStore.delete."""

    def test_delete_keeps_survivor_order(self, sample_store):
        """Test that deleting never reorders the remaining tasks."""
        removed = sample_store.delete(1, 1)

        assert removed.name == "Review PR"
        assert _task_names(sample_store, 1) == ["Write memo", "Plan sprint"]

    def test_delete_last_task_removes_category(self, sample_store):
        """Test that a category disappears with its last task."""
        sample_store.delete(0, 0)

        assert sample_store.category_names() == ["Work"]

    def test_delete_out_of_range(self, sample_store):
        """Test that bad indices raise without changes."""
        with pytest.raises(IndexOutOfRangeError):
            sample_store.delete(1, 3)
        with pytest.raises(IndexOutOfRangeError):
            sample_store.delete(1, -1)

        assert sample_store.task_count() == 4


class TestSelectTasks:
    """Test TaskStore.select_tasks."""

    def test_select_tasks_in_selection_order(self, sample_store):
        """Test that tasks come back in the order they were selected."""
        tasks = sample_store.select_tasks(1, [2, 0])

        assert [task.name for task in tasks] == ["Plan sprint", "Write memo"]
        assert sample_store.task_count() == 4

    def test_select_tasks_duplicate_carries_index(self, sample_store):
        """Test that the repeated index is reported."""
        with pytest.raises(DuplicateIndexError) as exc_info:
            sample_store.select_tasks(1, [0, 2, 2])

        assert exc_info.value.index == 2

    def test_select_tasks_duplicate_checked_before_range(self, sample_store):
        """Test that repeats are reported even when another index is out of range."""
        with pytest.raises(DuplicateIndexError):
            sample_store.select_tasks(1, [9, 1, 1])

    def test_select_tasks_out_of_range(self, sample_store):
        """Test that a bad index is rejected."""
        with pytest.raises(IndexOutOfRangeError):
            sample_store.select_tasks(1, [0, 3])


class TestDeleteMany:
    """Test TaskStore.delete_many."""

    def test_delete_many_removes_selected(self, sample_store):
        """Test that removing 0 and 2 leaves the former index-1 task."""
        removed = sample_store.delete_many(1, {0, 2})

        assert [task.name for task in removed] == ["Write memo", "Plan sprint"]
        assert _task_names(sample_store, 1) == ["Review PR"]

    def test_delete_many_duplicate_index(self, sample_store):
        """Test that a repeated index removes nothing."""
        with pytest.raises(DuplicateIndexError):
            sample_store.delete_many(1, [1, 1])

        assert len(sample_store.tasks(1)) == 3

    def test_delete_many_out_of_range_removes_nothing(self, sample_store):
        """Test all-or-nothing behavior on a bad index."""
        with pytest.raises(IndexOutOfRangeError):
            sample_store.delete_many(1, [0, 7])

        assert _task_names(sample_store, 1) == ["Write memo", "Review PR", "Plan sprint"]

    def test_delete_many_unsorted_input(self, sample_store):
        """Test that input order does not matter."""
        removed = sample_store.delete_many(1, [2, 0, 1])

        assert [task.name for task in removed] == ["Write memo", "Review PR", "Plan sprint"]
        assert sample_store.category_names() == ["Home"]

    def test_delete_many_empty_selection(self, sample_store):
        """Test that an empty selection is a no-op."""
        assert sample_store.delete_many(1, []) == []
        assert sample_store.task_count() == 4


class TestInsertCategory:
    """Test TaskStore.insert_category."""

    def test_insert_category_sorted(self):
        """Test that categories inserted out of order end up sorted."""
        store = TaskStore()
        store.insert_category(Category(name="b", tasks=[Task(name="x")]))
        store.insert_category(Category(name="a", tasks=[Task(name="y")]))

        assert store.category_names() == ["a", "b"]

    def test_insert_duplicate_category(self, sample_store):
        """Test that duplicate names are rejected."""
        with pytest.raises(ValidationError, match="Duplicate category"):
            sample_store.insert_category(Category(name="Work", tasks=[Task(name="x")]))

    def test_insert_empty_category(self):
        """Test that a category without tasks is rejected."""
        with pytest.raises(ValidationError, match="has no tasks"):
            TaskStore().insert_category(Category(name="Empty"))


class TestInvariants:
    """Test store invariants across operation sequences."""

    def test_scenario_add_move_delete(self):
        """Test add, move away from last task, then delete to empty."""
        store = TaskStore()

        store.add("Work", "Write memo", "2024-01-01")
        assert store.category_names() == ["Work"]
        assert store.tasks(0) == [
            Task(name="Write memo", status=TaskStatus.NOT_STARTED, due_date="2024-01-01")
        ]

        store.set_field(0, 0, "category", "Home")
        assert store.category_names() == ["Home"]

        store.delete(0, 0)
        assert store.is_empty()
        assert codec.encode(store) == b""

    def test_category_names_strictly_ascending(self):
        """Test sort order after a mix of adds and moves."""
        store = TaskStore()
        for category, name in [("m", "1"), ("b", "2"), ("x", "3"), ("m", "4"), ("A", "5")]:
            store.add(category, name)
        store.set_field(store.find_category("m"), 0, "category", "c")
        store.set_field(store.find_category("x"), 0, "category", "a")
        store.set_field(store.find_category("b"), 0, "category", "zz")

        keys = [name.encode("utf-8") for name in store.category_names()]
        assert keys == sorted(set(keys))
        assert all(store.tasks(i) for i in range(store.category_count()))
