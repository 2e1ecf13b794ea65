"""Profile management: loading, creation, and path mapping."""

import json
import unicodedata
from pathlib import Path
from typing import Any

from taskcat.constants import DEFAULT_DATA_PATH, DEFAULT_LOGS_DIR
from taskcat.errors import ConfigError
from taskcat.models import Profile

_BOOL_OPTIONS = ("auto_save", "confirm_delete")


def map_path(path: str, base_dir: str | None = None) -> str:
    """Return an absolute path string.

    '~' expands to the home directory. Relative paths resolve against
    base_dir, or the current directory when no base is given.
    """
    text = unicodedata.normalize("NFC", path)
    if "\0" in text:
        raise ConfigError(f"Path cannot contain NUL bytes: {path!r}")

    candidate = Path(text).expanduser()
    if not candidate.is_absolute():
        candidate = Path(base_dir or Path.cwd()) / candidate
    return str(candidate.resolve())


def validate_profile(profile: Any) -> None:
    """Check the decoded profile JSON.

    Raises:
        ConfigError: If a field is missing or has the wrong type
    """
    if not isinstance(profile, dict):
        raise ConfigError("Profile must be a JSON object")

    if "data_path" not in profile:
        raise ConfigError("Profile missing required fields: data_path")
    data_path = profile["data_path"]
    if not isinstance(data_path, str) or not data_path:
        raise ConfigError("data_path must be a non-empty string")

    logs_dir = profile.get("logs_dir")
    if logs_dir is not None and (not isinstance(logs_dir, str) or not logs_dir):
        raise ConfigError("logs_dir must be a non-empty string or null")

    for option in _BOOL_OPTIONS:
        if option in profile and not isinstance(profile[option], bool):
            raise ConfigError(f"{option} must be a boolean")


def _resolve_paths(raw: dict[str, Any], profile_dir: Path) -> Profile:
    resolved = dict(raw)
    resolved["data_path"] = map_path(raw["data_path"], str(profile_dir))
    if raw.get("logs_dir") is not None:
        resolved["logs_dir"] = map_path(raw["logs_dir"], str(profile_dir))
    return Profile.from_dict(resolved)


def load_profile(path: str) -> Profile:
    """Load and validate a profile, resolving its paths.

    Raises:
        FileNotFoundError: If the profile file does not exist
        ConfigError: If the file is not valid JSON or fails validation
    """
    profile_path = Path(map_path(path))
    if not profile_path.is_file():
        raise FileNotFoundError(
            f"Profile not found: {profile_path}\n"
            "Use 'init' command to create a profile"
        )

    try:
        raw = json.loads(profile_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in profile: {profile_path}: {e}") from e

    validate_profile(raw)
    return _resolve_paths(raw, profile_path.parent)


def create_profile(path: str) -> Profile:
    """Write a default profile next to which the data file and logs will live.

    Raises:
        ConfigError: If a profile already exists at path
    """
    profile_path = Path(map_path(path))
    if profile_path.exists():
        raise ConfigError(f"Profile already exists: {profile_path}")

    raw = {
        "data_path": DEFAULT_DATA_PATH,
        "logs_dir": DEFAULT_LOGS_DIR,
        "auto_save": False,
        "confirm_delete": True,
    }
    profile_path.parent.mkdir(parents=True, exist_ok=True)
    profile_path.write_text(json.dumps(raw, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    return _resolve_paths(raw, profile_path.parent)
