"""Version and build timestamp reported by the public API."""
import json
import logging
import subprocess
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Iterable

from wonderlake.config import get_settings

logger = logging.getLogger("wonderlake.build_info")

VERSION_PREFIX = "1.1"


def _git(*args: str) -> str:
    return subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        check=True,
        timeout=5,
    ).stdout.strip()


def load_build_info(paths: Iterable[str]) -> dict:
    """Read the first readable build-info.json, else derive from git."""
    for candidate in paths:
        path = Path(candidate)
        if not path.is_file():
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                info = json.load(f)
            logger.info(f"Loaded build info from {path}")
            return info
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load build info from {path}: {e}")

    now = datetime.now(timezone.utc)
    git_commit = "unknown"
    commit_count = 0
    try:
        git_commit = _git("rev-parse", "--short", "HEAD")
        commit_count = int(_git("rev-list", "--count", "HEAD"))
    except (OSError, subprocess.SubprocessError, ValueError):
        logger.info("Git not available, using fallback build info")

    return {
        "version": f"{VERSION_PREFIX}.{commit_count}" if commit_count > 0 else f"{VERSION_PREFIX}.dev",
        "build_date": now.date().isoformat(),
        "build_time": now.isoformat(),
        "git_commit": git_commit,
    }


@lru_cache()
def get_build_info() -> dict:
    return load_build_info(get_settings().BUILD_INFO_PATHS)
