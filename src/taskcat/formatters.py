"""Text formatters for REPL output."""

from taskcat.models import CategoryListItem, StoreListPayload, TaskListItem, TaskStatus

_STATUS_MARKS = {
    TaskStatus.NOT_STARTED: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.COMPLETE: "[x]",
}


def format_task_line(item: TaskListItem, num_width: int) -> str:
    """Render one task row."""
    task = item.task
    padded_num = str(item.display_num).rjust(num_width)
    line = f"{padded_num}. {_STATUS_MARKS[task.status]} {task.name}"
    if task.due_date:
        line += f" (due {task.due_date})"
    return line


def format_category(item: CategoryListItem) -> str:
    """Render a category heading followed by its tasks."""
    lines = [f"{item.display_num}. {item.name}"]
    num_width = len(str(len(item.tasks)))
    for task_item in item.tasks:
        lines.append(f"  {format_task_line(task_item, num_width)}")
    return "\n".join(lines)


def format_store_list(payload: StoreListPayload) -> str:
    """Render every category and task."""
    if not payload.categories:
        return "No tasks."
    return "\n\n".join(format_category(item) for item in payload.categories)


def format_category_choices(names: list[str]) -> str:
    """Render a numbered category list for selection prompts."""
    num_width = len(str(len(names)))
    return "\n".join(
        f"{str(num).rjust(num_width)}. {name}" for num, name in enumerate(names, start=1)
    )


def format_status_legend() -> str:
    return "  ".join(f"{mark} {status.label}" for status, mark in _STATUS_MARKS.items())
