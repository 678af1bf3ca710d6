"""Gather prompt input from shell commands, files and directories"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from aika.config import InputSettings
from aika.exceptions import InputError

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT = 60


def split_command(command: str) -> list[str]:
    """Split a command line into argv"""
    argv = shlex.split(command)
    if not argv:
        raise InputError("Input command is empty")
    return argv


def command_from_config(settings: InputSettings) -> list[str]:
    return split_command(settings.command)


def get_command_output(cmd: Sequence[str], cwd: Path = Path("."), timeout: int = COMMAND_TIMEOUT) -> str:
    """Run a command and return its stdout"""
    logger.debug(f"Executing command {list(cmd)} in {cwd}")
    try:
        result = subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise InputError(f"Failed to execute command {list(cmd)}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        message = f"Command {list(cmd)} failed with exit code {result.returncode}"
        if stderr:
            message += f": {stderr}"
        raise InputError(message)

    logger.debug(f"Command output: {result.stdout}")
    return result.stdout


def read_file(path: Path) -> str:
    if not path.is_file():
        raise InputError(f"Not a file: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Error reading file {path}: {e}") from e


def read_directory(root: Path) -> str:
    """Concatenate every readable text file under ``root``, each under a header line.

    Hidden files and directories are skipped, as are files that are not UTF-8.
    """
    if not root.is_dir():
        raise InputError(f"Not a directory: {root}")

    parts = []
    for item in sorted(root.rglob("*")):
        rel_path = item.relative_to(root)
        if any(part.startswith(".") for part in rel_path.parts):
            continue
        if not item.is_file():
            continue
        try:
            content = item.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug(f"Skipping unreadable file {item}")
            continue
        parts.append(f"--- {rel_path.as_posix()} ---\n{content}")

    return "\n\n".join(parts)
