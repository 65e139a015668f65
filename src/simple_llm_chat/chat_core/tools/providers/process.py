"""Process execution helpers shared by the shell, script, archive and video tools."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import uuid
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from ...logger import get_logger

logger = get_logger(__name__)


def execute_process(
    command: Union[str, Sequence[str]],
    *,
    shell: bool = False,
    combine_error_output: bool = True,
    timeout: Optional[float] = None,
) -> Tuple[str, int]:
    """Run a process to completion and capture its output.

    Args:
        command: Command line (with ``shell=True``) or argument vector.
        shell: Run through the platform shell.
        combine_error_output: Append stderr to stdout.
        timeout: Seconds to wait before the process is killed.

    Returns:
        Tuple of captured output and the process exit code.

    Raises:
        OSError: If the process cannot be started.
        subprocess.TimeoutExpired: If ``timeout`` elapses.
    """
    logger.debug("Executing process: %s", command)
    completed = subprocess.run(
        command,
        shell=shell,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        stdin=subprocess.DEVNULL,
    )
    output = completed.stdout or ""
    if combine_error_output and completed.stderr:
        output += completed.stderr
    return output, completed.returncode


def run_shell_command(command: str) -> Tuple[str, int]:
    """Run a command line through the host shell."""
    try:
        return execute_process(command, shell=True)
    except OSError as exc:
        return f"Failed to execute shell command: {exc}", -1


def run_python_script(script_content: str) -> Tuple[str, int]:
    """Write the script to a temporary file and run it with the current interpreter."""
    script_path = Path(tempfile.gettempdir()) / f"temp_script_{uuid.uuid4().hex}.py"
    try:
        script_path.write_text(script_content, encoding="utf-8")
        return execute_process([sys.executable, str(script_path)])
    except OSError as exc:
        return f"Error executing Python script: {exc}", -1
    finally:
        try:
            script_path.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove temporary script %s", script_path)


def expand_path(path: str) -> Path:
    """Expand environment variables and ``~`` in a model supplied path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))
