"""Business command logic for taskcat."""

from taskcat import data
from taskcat.errors import DuplicateIndexError, UsageError
from taskcat.models import CategoryListItem, StoreListPayload, Task, TaskListItem, TaskStatus
from taskcat.session import Session
from taskcat.store import normalize_field_name


def _save_if_auto(session: Session) -> None:
    """Persist immediately if auto_save is enabled."""
    prof = session.require_profile()
    if prof.auto_save and session.dirty:
        data.save_tasks(prof.data_path, session.require_store())
        session.mark_saved()


def _record(session: Session, changed: bool) -> bool:
    session.record_change(changed)
    _save_if_auto(session)
    return changed


def _category_item(session: Session, category_index: int, display_num: int) -> CategoryListItem:
    store = session.require_store()
    return CategoryListItem(
        display_num=display_num,
        index=category_index,
        name=store.category_name(category_index),
        tasks=[
            TaskListItem(display_num=task_index + 1, index=task_index, task=task)
            for task_index, task in enumerate(store.tasks(category_index))
        ],
    )


def list_store_data(session: Session) -> StoreListPayload:
    """Return every category with its tasks, in display order."""
    store = session.require_store()
    return StoreListPayload(
        categories=[
            _category_item(session, index, index + 1)
            for index in range(store.category_count())
        ]
    )


def list_category_data(session: Session, category_index: int) -> CategoryListItem:
    """Return one category with its tasks."""
    return _category_item(session, category_index, category_index + 1)


def cmd_add(session: Session, category: str, name: str, due_date: str = "") -> str:
    """Add a new Not Started task."""
    store = session.require_store()
    category_index, task_index = store.add(category, name, due_date)
    _record(session, True)
    return f"Task added to '{category}' as #{task_index + 1}."


def cmd_edit(session: Session, category_index: int, task_index: int, field: str, value: str) -> str:
    """Change one field of a task."""
    store = session.require_store()
    key = normalize_field_name(field)
    changed = store.set_field(category_index, task_index, key, value)
    if not _record(session, changed):
        return "No changes."
    if key == "category":
        return f"Task moved to '{value}'."
    return "Task updated."


def _set_status(session: Session, category_index: int, task_index: int, status: TaskStatus) -> str:
    store = session.require_store()
    changed = store.set_status(category_index, task_index, status)
    if not _record(session, changed):
        return f"Task is already {status.label}."
    return f"Task marked as {status.label}."


def cmd_start(session: Session, category_index: int, task_index: int) -> str:
    """Mark a task as In Progress."""
    return _set_status(session, category_index, task_index, TaskStatus.IN_PROGRESS)


def cmd_check(session: Session, category_index: int, task_index: int) -> str:
    """Mark a task as Complete."""
    return _set_status(session, category_index, task_index, TaskStatus.COMPLETE)


def select_tasks(session: Session, category_index: int, task_indices: list[int]) -> list[Task]:
    """Resolve a delete selection, rejecting repeats and bad indices."""
    if not task_indices:
        raise UsageError("No tasks selected")

    try:
        return session.require_store().select_tasks(category_index, task_indices)
    except DuplicateIndexError as e:
        raise DuplicateIndexError(
            f"Task #{e.index + 1} selected more than once", e.index
        ) from None


def cmd_delete(
    session: Session,
    category_index: int,
    task_indices: list[int],
    confirm: bool = False,
) -> str:
    """Delete one or more tasks from a category."""
    store = session.require_store()
    select_tasks(session, category_index, task_indices)

    if not confirm:
        return "Deletion cancelled."

    if len(task_indices) == 1:
        store.delete(category_index, task_indices[0])
        removed_count = 1
    else:
        removed_count = len(store.delete_many(category_index, task_indices))

    _record(session, True)
    return "Task deleted." if removed_count == 1 else f"{removed_count} tasks deleted."


def cmd_save(session: Session) -> str:
    """Write the store to the data file and clear the dirty flag."""
    prof = session.require_profile()
    data.save_tasks(prof.data_path, session.require_store())
    session.mark_saved()
    return "Saved."
