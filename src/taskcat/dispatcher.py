"""Command dispatching for taskcat REPL/CLI."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from taskcat import commands, formatters
from taskcat.errors import AppError, UsageError
from taskcat.logging_utils import log_event, summarize_command_args
from taskcat.models import CommandDocEntry
from taskcat.session import Session
from taskcat.validation import parse_number, parse_number_list

COMMAND_ALIASES = {
    "a": "add",
    "l": "list",
    "e": "edit",
    "s": "start",
    "c": "check",
    "d": "delete",
    "w": "save",
    "h": "help",
}
EXIT_COMMANDS = frozenset(("exit", "quit"))
EXIT = "EXIT"

_HELP_COMMAND_GROUPS = (
    ("add", "list", "edit", "delete"),
    ("start", "check"),
    ("save", "help"),
)


@dataclass
class CommandHandler:
    """Defines how to execute a command."""

    executor: Callable[[list[Any], dict[str, Any], Session], str]
    usage: str = ""
    summary: str = ""


def resolve_command_alias(cmd: str) -> str:
    """Expand shortcut command to full command name."""
    return COMMAND_ALIASES.get(cmd, cmd)


def _category_and_task(args: list[Any]) -> tuple[int, int]:
    return parse_number(args[0], "category"), parse_number(args[1], "task")


def _exec_add(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if len(args) not in (2, 3) or kwargs:
        raise UsageError("Usage: add <category> <name> [<due>]")
    due_date = str(args[2]) if len(args) == 3 else ""
    return commands.cmd_add(session, str(args[0]), str(args[1]), due_date)


def _exec_list(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if len(args) > 1 or kwargs:
        raise UsageError("Usage: list [<cat>]")
    if args:
        category = commands.list_category_data(session, parse_number(args[0], "category"))
        return formatters.format_category(category)
    return formatters.format_store_list(commands.list_store_data(session))


def _exec_edit(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if len(args) < 3 or kwargs:
        raise UsageError("Usage: edit <cat> <task> <field> <value...>")
    category_index, task_index = _category_and_task(args)
    value = " ".join(str(a) for a in args[3:])
    return commands.cmd_edit(session, category_index, task_index, str(args[2]), value)


def _exec_start(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if len(args) != 2 or kwargs:
        raise UsageError("Usage: start <cat> <task>")
    return commands.cmd_start(session, *_category_and_task(args))


def _exec_check(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if len(args) != 2 or kwargs:
        raise UsageError("Usage: check <cat> <task>")
    return commands.cmd_check(session, *_category_and_task(args))


def _exec_delete(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if len(args) < 2:
        raise UsageError("Usage: delete <cat> <task...>")
    category_index = parse_number(args[0], "category")
    task_indices = parse_number_list(" ".join(str(a) for a in args[1:]), "task")
    confirm = bool(kwargs.get("confirm", False) or kwargs.get("yes", False))
    return commands.cmd_delete(session, category_index, task_indices, confirm=confirm)


def _exec_save(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if args or kwargs:
        raise UsageError("Usage: save")
    return commands.cmd_save(session)


def _exec_help(args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    if args or kwargs:
        raise UsageError("Usage: help")
    return render_help_text()


def _alias_for_command(command: str) -> str | None:
    """Return shortcut alias for a command if one exists."""
    for alias, full in COMMAND_ALIASES.items():
        if full == command:
            return alias
    return None


def _display_usage(command: str, usage: str) -> str:
    """Attach alias to usage text for help display."""
    alias = _alias_for_command(command)
    if not alias:
        return usage

    if usage.startswith(command):
        return f"{command} ({alias}){usage[len(command):]}"
    return f"{usage} ({alias})"


def command_doc_entries() -> list[CommandDocEntry]:
    """Return command metadata used for help output."""
    entries = [
        CommandDocEntry(
            command=command,
            alias=_alias_for_command(command) or "",
            usage=handler.usage,
            summary=handler.summary,
            display_usage=_display_usage(command, handler.usage),
        )
        for command, handler in COMMAND_REGISTRY.items()
    ]
    entries.append(
        CommandDocEntry(
            command="exit",
            alias="quit",
            usage="exit / quit",
            summary="Exit, offering to save unsaved changes (Ctrl-D also works)",
            display_usage="exit / quit",
        )
    )
    return entries


def render_help_text() -> str:
    """Render help text directly from command registry metadata."""
    entries_by_command = {entry.command: entry for entry in command_doc_entries()}
    rows = [entries_by_command[cmd] for group in _HELP_COMMAND_GROUPS for cmd in group]
    rows.append(entries_by_command["exit"])
    width = max(len(row.display_usage) for row in rows)

    lines = ["Available commands:"]
    for group in _HELP_COMMAND_GROUPS:
        for command in group:
            entry = entries_by_command[command]
            lines.append(f"  {entry.display_usage.ljust(width)} - {entry.summary}")
        lines.append("")

    exit_entry = entries_by_command["exit"]
    lines.append(f"  {exit_entry.display_usage.ljust(width)} - {exit_entry.summary}")
    lines.append("")
    lines.append("Numbers refer to the latest 'list' output and start at 1.")
    lines.append("Commands given without arguments prompt for each value.")
    lines.append("Statuses: " + formatters.format_status_legend())
    return "\n".join(lines)


# Command registry
COMMAND_REGISTRY = {
    "add": CommandHandler(_exec_add, usage="add <category> <name> [<due>]", summary="Add a task"),
    "list": CommandHandler(_exec_list, usage="list [<cat>]", summary="Show categories and tasks"),
    "edit": CommandHandler(
        _exec_edit,
        usage="edit <cat> <task> <field> <value>",
        summary="Change name, status, due_date or category",
    ),
    "delete": CommandHandler(
        _exec_delete,
        usage="delete <cat> <task...>",
        summary="Delete one or more tasks (requires confirmation)",
    ),
    "start": CommandHandler(_exec_start, usage="start <cat> <task>", summary="Mark as In Progress"),
    "check": CommandHandler(_exec_check, usage="check <cat> <task>", summary="Mark as Complete"),
    "save": CommandHandler(_exec_save, usage="save", summary="Write changes to the data file"),
    "help": CommandHandler(_exec_help, usage="help", summary="Show available commands"),
}


def execute_command(cmd: str, args: list[Any], kwargs: dict[str, Any], session: Session) -> str:
    """Execute one parsed command and return user-facing text."""
    cmd = resolve_command_alias(cmd)

    if cmd in EXIT_COMMANDS:
        return EXIT

    handler = COMMAND_REGISTRY.get(cmd)
    if not handler:
        raise UsageError(f"Unknown command: {cmd}")

    started = time.perf_counter()
    try:
        result = handler.executor(args, kwargs, session)
    except AppError as e:
        log_event(
            "command_error",
            level=logging.WARNING,
            command=cmd,
            args_summary=summarize_command_args(args),
            error_type=type(e).__name__,
            error=str(e),
        )
        raise

    log_event(
        "command_exec",
        command=cmd,
        args_summary=summarize_command_args(args),
        dirty=session.dirty,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return result
