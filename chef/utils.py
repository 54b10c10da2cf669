"""
Shared utilities for chef components.
"""

from __future__ import annotations

import os
from pathlib import Path

ENV_FILENAMES = (".env.local", ".env")


def _strip_quotes(val: str) -> str:
    if len(val) >= 2 and val[0] == val[-1] and val[0] in {'"', "'"}:
        return val[1:-1]
    return val


def find_env_file(search_dir: Path | None = None) -> Path | None:
    """Return the first of .env.local/.env that exists in search_dir (default: cwd)."""
    base = search_dir or Path.cwd()
    for name in ENV_FILENAMES:
        path = base / name
        if path.is_file():
            return path
    return None


def load_env(env_path: Path | None = None) -> Path | None:
    """Load a .env file into os.environ. Handles quoted values and spaces.

    Variables already set in the process environment are left alone. Returns
    the file that was read, if any.
    """
    if env_path is None:
        env_path = find_env_file()
    if env_path is None or not env_path.exists():
        return None

    for line in env_path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        if not key or os.environ.get(key):
            continue
        os.environ[key] = _strip_quotes(val.strip())
    return env_path
