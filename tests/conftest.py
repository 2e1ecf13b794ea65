"""Pytest configuration and fixtures for taskcat tests."""

import logging

import pytest

from taskcat.models import Category, Profile, Task, TaskStatus
from taskcat.session import Session
from taskcat.store import TaskStore


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging() side effects between tests."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    logging.disable(logging.NOTSET)


@pytest.fixture
def sample_store():
    """Create a store with two categories."""
    return TaskStore(
        categories=[
            Category(
                name="Home",
                tasks=[Task(name="Fix sink", status=TaskStatus.IN_PROGRESS, due_date="2026-03-01")],
            ),
            Category(
                name="Work",
                tasks=[
                    Task(name="Write memo", status=TaskStatus.NOT_STARTED, due_date="2026-02-10"),
                    Task(name="Review PR", status=TaskStatus.COMPLETE),
                    Task(name="Plan sprint", status=TaskStatus.NOT_STARTED),
                ],
            ),
        ]
    )


@pytest.fixture
def sample_profile(tmp_path):
    """Create profile model pointing into a temp directory."""
    return Profile(
        data_path=str(tmp_path / "tasks.bin"),
        logs_dir=None,
        auto_save=False,
        confirm_delete=True,
    )


@pytest.fixture
def sample_session(tmp_path, sample_profile, sample_store):
    """Create initialized Session object."""
    return Session(
        profile_path=str(tmp_path / "profile.json"),
        profile=sample_profile,
        store=sample_store,
    )


@pytest.fixture
def empty_session():
    """Create empty Session for testing error cases."""
    return Session()
