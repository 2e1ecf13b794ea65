"""REPL parsing and loop orchestration for taskcat."""

import os
import shlex
import traceback
from pathlib import Path
from typing import Any, Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory

from taskcat import commands, dispatcher, prompts
from taskcat.constants import DEBUG_ENV_VAR, REPL_HISTORY_FILE
from taskcat.errors import AppError, UsageError
from taskcat.profile import map_path
from taskcat.session import Session
from taskcat.validation import parse_number, parse_number_list

OPERATION_CANCELLED = "[Operation Cancelled]"

_NO_FLAG_COMMANDS = frozenset(("add", "a", "edit", "e"))
_STATUS_COMMANDS = frozenset(("start", "check"))


def _report_unexpected_error(error: Exception) -> None:
    """Print an unexpected exception with optional debug traceback."""
    print(f"ERROR: {error}")
    if os.getenv(DEBUG_ENV_VAR):
        print("Debug traceback:")
        traceback.print_exc()


def create_prompt_session() -> PromptSession:
    """Create prompt-toolkit session with persistent command history."""
    history_file = Path(map_path(REPL_HISTORY_FILE))
    history_file.parent.mkdir(parents=True, exist_ok=True)
    return PromptSession(history=FileHistory(str(history_file)))


def parse_command(line: str) -> tuple[str, list[Any], dict[str, Any]]:
    """Parse command line into (command, args, kwargs)."""
    try:
        lexer = shlex.shlex(line, posix=True)
        lexer.whitespace_split = True
        lexer.commenters = ""
        lexer.quotes = '"'
        parts = list(lexer)
    except ValueError as e:
        raise UsageError(f"Invalid command syntax: {e}") from e

    return parse_parts(parts)


def parse_parts(parts: list[str]) -> tuple[str, list[Any], dict[str, Any]]:
    """Split already-tokenized words into (command, args, kwargs)."""
    if not parts:
        return "", [], {}

    cmd, rest = parts[0], parts[1:]
    if cmd in _NO_FLAG_COMMANDS:
        return cmd, rest, {}

    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    # A flag takes the next plain word as its value, else it is True.
    flag = None
    for word in rest:
        if word.startswith("--"):
            flag = word[2:].replace("-", "_")
            kwargs[flag] = True
        elif flag is not None:
            kwargs[flag] = word
            flag = None
        else:
            args.append(word)

    return cmd, args, kwargs


def _choose_category_and_task(session: Session) -> tuple[int, int]:
    """Prompt for a category then a task, listing current state each time."""
    store = session.require_store()
    category_index = prompts.choose_category(store.category_names())
    category = commands.list_category_data(session, category_index)
    return category_index, prompts.choose_task(category)


def _prepare_delete(
    args: list[Any],
    kwargs: dict[str, Any],
    session: Session,
) -> tuple[str, list[Any], dict[str, Any]]:
    if kwargs or len(args) == 1:
        return "delete", args, kwargs

    if not args:
        store = session.require_store()
        category_index = prompts.choose_category(store.category_names())
        task_indices = prompts.choose_tasks(commands.list_category_data(session, category_index))
    else:
        category_index = parse_number(args[0], "category")
        task_indices = parse_number_list(" ".join(str(a) for a in args[1:]), "task")

    tasks = commands.select_tasks(session, category_index, task_indices)
    if session.require_profile().confirm_delete:
        confirm = prompts.collect_delete_confirmation(tasks)
    else:
        confirm = True

    numbers = [str(index + 1) for index in task_indices]
    return "delete", [category_index + 1, *numbers], {"confirm": confirm}


def _prepare_interactive_command(
    cmd: str,
    args: list[Any],
    kwargs: dict[str, Any],
    session: Session,
) -> tuple[str, list[Any], dict[str, Any]] | str:
    """Collect interactive inputs for commands given without arguments."""
    normalized = dispatcher.resolve_command_alias(cmd)

    try:
        if normalized == "add" and not args:
            fields = prompts.collect_add_fields(session.require_store().category_names())
            return normalized, [fields.category, fields.name, fields.due_date], {}

        if normalized == "edit" and not args:
            category_index, task_index = _choose_category_and_task(session)
            task = session.require_store().get_task(category_index, task_index)
            edit = prompts.collect_edit_fields(task)
            return normalized, [category_index + 1, task_index + 1, edit.field, edit.value], {}

        if normalized in _STATUS_COMMANDS and not args and not kwargs:
            category_index, task_index = _choose_category_and_task(session)
            return normalized, [category_index + 1, task_index + 1], {}

        if normalized == "delete":
            return _prepare_delete(args, kwargs, session)

    except KeyboardInterrupt:
        print()
        return OPERATION_CANCELLED

    return cmd, args, kwargs


def _confirm_exit(session: Session) -> bool:
    """Return True when the REPL may exit, saving first if asked."""
    if not session.dirty:
        return True

    try:
        decision = prompts.collect_exit_decision()
    except KeyboardInterrupt:
        print()
        return False
    except EOFError:
        # Input is closed; there is no way left to ask.
        print()
        decision = prompts.EXIT_DISCARD

    if decision == prompts.EXIT_SAVE:
        print(commands.cmd_save(session))
        return True
    if decision == prompts.EXIT_DISCARD:
        print("Changes discarded.")
        return True
    return False


def repl(session: Session, read_line: Callable[[str], str] | None = None) -> None:
    """Run the REPL loop."""
    read = read_line or input

    print()
    print("Type 'help' for commands, 'exit' or 'quit' to exit, or Ctrl-D")

    while True:
        print()
        try:
            try:
                line = read("> ")
            except EOFError:
                print()
                if _confirm_exit(session):
                    break
                continue

            if not line.strip():
                continue

            cmd, args, kwargs = parse_command(line)
            if not cmd:
                continue

            prepared = _prepare_interactive_command(cmd, args, kwargs, session)
            if isinstance(prepared, str):
                print(prepared)
                continue

            cmd, args, kwargs = prepared
            result = dispatcher.execute_command(cmd, args, kwargs, session)

            if result == dispatcher.EXIT:
                if _confirm_exit(session):
                    print("Exiting.")
                    break
                continue

            print(result)

        except KeyboardInterrupt:
            print()
            continue

        except AppError as e:
            print(f"ERROR: {e}")

        except Exception as e:
            _report_unexpected_error(e)
