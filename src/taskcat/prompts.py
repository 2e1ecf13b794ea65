"""Interactive prompt collection for taskcat REPL.

Every selection prompt prints the listing it is choosing from, so the
numbers the user types always refer to the current store state.
"""

from taskcat import formatters
from taskcat.errors import UsageError
from taskcat.models import AddTaskInput, CategoryListItem, EditInput, Task, TaskStatus
from taskcat.store import EDITABLE_FIELDS, normalize_field_name
from taskcat.validation import parse_number, parse_number_list

EXIT_SAVE = "save"
EXIT_DISCARD = "discard"
EXIT_CANCEL = "cancel"


def collect_add_fields(category_names: list[str]) -> AddTaskInput:
    """Collect category, name and due date for a new task.

    Raises:
        KeyboardInterrupt: If user presses Ctrl+C (caller should handle)
    """
    if category_names:
        print("Existing categories: " + ", ".join(category_names))
    print("(Press Ctrl+C to cancel)")

    category = input("Category: ").strip()
    if not category:
        raise UsageError("Category name cannot be empty")
    name = input("Task name: ").strip()
    due_date = input("Due date (press Enter to skip): ").strip()
    return AddTaskInput(category=category, name=name, due_date=due_date)


def choose_category(category_names: list[str]) -> int:
    """Show the numbered category list and return the chosen 0-based index."""
    if not category_names:
        raise UsageError("No tasks.")
    print(formatters.format_category_choices(category_names))
    return parse_number(input("Category number: ").strip(), "category")


def choose_task(category: CategoryListItem) -> int:
    """Show a category's tasks and return the chosen 0-based index."""
    print(formatters.format_category(category))
    return parse_number(input("Task number: ").strip(), "task")


def choose_tasks(category: CategoryListItem) -> list[int]:
    """Show a category's tasks and return the chosen 0-based indices."""
    print(formatters.format_category(category))
    return parse_number_list(input("Task numbers (e.g. 1 3): "), "task")


def collect_edit_fields(task: Task) -> EditInput:
    """Collect the field to change and its new value."""
    print(f"Name: {task.name}")
    print(f"Status: {task.status.label}")
    print(f"Due date: {task.due_date or '(none)'}")

    field = normalize_field_name(input(f"Field ({'/'.join(EDITABLE_FIELDS)}): "))
    if field == "status":
        print("Statuses: " + ", ".join(status.label for status in TaskStatus))
    value = input("New value: ").strip()
    return EditInput(field=field, value=value)


def collect_delete_confirmation(tasks: list[Task]) -> bool:
    """Collect confirmation for delete command.

    Returns:
        True if user confirms deletion, False otherwise
    """
    for task in tasks:
        print(f"Task: {task.name} ({task.status.label})")

    confirm = input("Delete permanently? (yes/N): ").strip().lower()
    return confirm == "yes"


def collect_exit_decision() -> str:
    """Ask what to do with unsaved changes when leaving the REPL.

    Returns:
        EXIT_SAVE, EXIT_DISCARD, or EXIT_CANCEL (stay in the REPL)
    """
    answer = input("You have unsaved changes. Save before exiting? (y/n, Enter to go back): ")
    answer = answer.strip().lower()
    if answer in ("y", "yes"):
        return EXIT_SAVE
    if answer in ("n", "no"):
        return EXIT_DISCARD
    return EXIT_CANCEL
