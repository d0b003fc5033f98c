# src/parking_validator/utils/git_info.py

import subprocess
from pathlib import Path
from typing import Dict, Optional

GIT_COMMANDS = {
    "branch": ["git", "branch", "--show-current"],
    "commit": ["git", "rev-parse", "HEAD"],
    "commit_short": ["git", "rev-parse", "--short", "HEAD"],
    "last_commit_message": ["git", "log", "-1", "--pretty=%B"],
}


def _run(cmd, cwd: Optional[Path]) -> str:
    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=5,
        check=True,
    )
    return result.stdout.strip()


def get_git_info(cwd: Optional[Path] = None) -> Dict[str, str]:
    """Branch / commit of the working tree, or an error marker outside a repo."""
    try:
        return {key: _run(cmd, cwd) for key, cmd in GIT_COMMANDS.items()}
    except (OSError, subprocess.SubprocessError):
        return {"error": "Git information unavailable"}
