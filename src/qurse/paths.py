"""Filesystem locations used by Qurse."""

import os
from pathlib import Path

from dotenv import load_dotenv


def get_user_data_dir() -> Path:
    """Return the per-user data directory.

    Defaults to ``~/.qurse``; set ``QURSE_HOME`` to relocate it.
    """
    override = os.environ.get("QURSE_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".qurse"


def get_config_file() -> Path:
    return get_user_data_dir() / "config.yaml"


def load_env_file(path: Path | None = None) -> bool:
    """Load provider API keys from a ``.env`` file.

    Existing environment variables win over values in the file.

    Args:
        path: Explicit ``.env`` path. When omitted the working directory is
            searched first, then the user data directory.

    Returns:
        True if a file was found and loaded.
    """
    if path is not None:
        return load_dotenv(path, override=False)

    for candidate in (Path.cwd() / ".env", get_user_data_dir() / ".env"):
        if candidate.is_file():
            return load_dotenv(candidate, override=False)
    return False
