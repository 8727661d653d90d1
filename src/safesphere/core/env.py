"""
Environment + project-root helpers.

Settings refer to the seed file by a relative path (`data/seed/alerts.json`), and
uvicorn, the CLI and pytest are started from different working directories.
Relative paths are therefore resolved against the project root, not the CWD.
A repo-level `.env` may hold `SAFESPHERE_*` overrides; it is loaded once and never
overrides variables already set in the process.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_FILE_VAR = "SAFESPHERE_ENV_FILE"
PROJECT_ROOT_VAR = "SAFESPHERE_PROJECT_ROOT"


def is_project_root(path: Path) -> bool:
    """A directory holding a `.env`/`.git`, or the `src/safesphere` + `data` pair."""
    if (path / ".env").is_file() or (path / ".git").exists():
        return True
    return (path / "src" / "safesphere").is_dir() and (path / "data").is_dir()


def find_project_root(*starts: Path) -> Path | None:
    """Walk upwards from each start directory in turn; first match wins."""
    for start in starts:
        start = start.resolve()
        for candidate in (start, *start.parents):
            if is_project_root(candidate):
                return candidate
    return None


@lru_cache
def get_project_root() -> Path:
    """Project root (cached): explicit override, env-file parent, then marker search."""
    override = os.getenv(PROJECT_ROOT_VAR)
    if override:
        return Path(override).expanduser().resolve()

    env_file = os.getenv(ENV_FILE_VAR)
    if env_file:
        return Path(env_file).expanduser().resolve().parent

    # Installed console scripts run outside the repo, so also search from this module.
    found = find_project_root(Path.cwd(), Path(__file__).resolve().parent)
    return found or Path.cwd().resolve()


def _env_file() -> Path:
    explicit = os.getenv(ENV_FILE_VAR)
    if explicit:
        return Path(explicit).expanduser().resolve()
    return get_project_root() / ".env"


@lru_cache
def load_dotenv_if_present() -> Path | None:
    """Load the `.env` file once; returns its path, or None when there is none."""
    env_path = _env_file()
    if not env_path.is_file():
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def resolve_project_path(path: str | Path) -> Path:
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return (get_project_root() / p).resolve()
