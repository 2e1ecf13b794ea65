"""CLI entry point for taskcat."""

import argparse
import sys

from taskcat import data, dispatcher, profile, repl
from taskcat.constants import DEFAULT_PROFILE_PATH
from taskcat.errors import AppError
from taskcat.logging_utils import build_run_log_path, log_event, setup_logging
from taskcat.session import Session
from taskcat.store import TaskStore

_EPILOG = f"""
Examples:
  # Create a new profile (default: {DEFAULT_PROFILE_PATH})
  taskcat init
  taskcat init -p ~/work/tasks-profile.json

  # Start the interactive REPL
  taskcat -p ~/work/tasks-profile.json

  # Run a single command
  taskcat add Work "Write memo" 2024-01-01
  taskcat list
  taskcat check 1 2
  taskcat delete 1 2 3 --yes
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskcat",
        description="taskcat - categorized personal task tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=_EPILOG,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--profile", "-p",
        default=DEFAULT_PROFILE_PATH,
        help=f"Path to profile JSON file (default: {DEFAULT_PROFILE_PATH})",
    )
    parser.add_argument(
        "command",
        nargs="?",
        help="'init', or a command to run once (see 'help'); omit for the REPL",
    )
    return parser


def _init_profile(profile_path: str) -> None:
    """Create a profile and an empty data file."""
    try:
        prof = profile.create_profile(profile_path)
        data.save_tasks(prof.data_path, TaskStore())
    except AppError as e:
        print(f"Error creating profile: {e}")
        sys.exit(1)

    print(f"Profile created: {profile_path}")
    print(f"Data file: {prof.data_path}")
    if prof.logs_dir:
        print(f"Logs directory: {prof.logs_dir}")
    print()
    print(f"Start the app with: taskcat --profile {profile_path}")


def _load_session(profile_path: str, mode: str) -> Session:
    """Load profile, configure logging and decode the data file.

    Any failure here is fatal: there is no way to work without the store.
    """
    try:
        prof = profile.load_profile(profile_path)
    except FileNotFoundError:
        print(f"Profile not found: {profile_path}")
        print(f"Create it with: taskcat init --profile {profile_path}")
        sys.exit(1)
    except AppError as e:
        print(f"Error loading profile: {e}")
        sys.exit(1)

    log_file = build_run_log_path(prof.logs_dir) if prof.logs_dir else None
    setup_logging(log_file)
    log_event(
        "app_start",
        mode=mode,
        profile_file=profile_path,
        data_file=prof.data_path,
        log_file=log_file,
    )

    try:
        store = data.load_tasks(prof.data_path)
    except AppError as e:
        log_event("app_stop", reason="load_error", error_type=type(e).__name__, error=str(e))
        print(f"Error loading tasks: {e}")
        sys.exit(1)

    return Session(profile_path=profile_path, profile=prof, store=store)


def _run_once(session: Session, command: str, raw_args: list[str]) -> None:
    """Run one command and save if it changed the store."""
    cmd, args, kwargs = repl.parse_parts([command, *raw_args])
    try:
        result = dispatcher.execute_command(cmd, args, kwargs, session)
        if result != dispatcher.EXIT:
            print(result)
        if session.dirty:
            data.save_tasks(session.require_profile().data_path, session.require_store())
            session.mark_saved()
    except AppError as e:
        log_event("app_stop", reason="command_error", error_type=type(e).__name__, error=str(e))
        print(f"ERROR: {e}")
        sys.exit(1)

    log_event("app_stop", reason="command_done", dirty=session.dirty)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for taskcat CLI."""
    parser = _build_parser()
    # Command arguments and flags such as --yes are not argparse options;
    # only --profile is taken out, wherever it appears.
    args, command_args = parser.parse_known_args(argv)

    if args.command == "init":
        if command_args:
            parser.error(f"init takes no arguments: {' '.join(command_args)}")
        _init_profile(args.profile)
        return

    if args.command:
        session = _load_session(args.profile, mode="once")
        _run_once(session, args.command, command_args)
        return

    if command_args:
        parser.error(f"unrecognized arguments: {' '.join(command_args)}")

    session = _load_session(args.profile, mode="repl")
    store = session.require_store()
    print(f"Data file: {session.require_profile().data_path}")
    print(f"{store.category_count()} categories, {store.task_count()} tasks")

    repl.repl(session, repl.create_prompt_session().prompt)
    log_event("app_stop", reason="repl_exit", dirty=session.dirty)


if __name__ == "__main__":
    main()
