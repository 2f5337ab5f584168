"""Ready-made formatters for the ``formatter`` configuration hook."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from pathlib import Path

__all__ = ["json_formatter", "prettier_formatter"]

logger = logging.getLogger(__name__)

PRETTIER_TIMEOUT_SECONDS = 30.0


def prettier_formatter(content: str, filename: str) -> str:
    """Format ``content`` with the ``prettier`` executable when it is installed.

    Prettier picks the parser and resolves its configuration from
    ``filename``. Any failure leaves the content unchanged.
    """

    executable = shutil.which("prettier")
    if executable is None:
        logger.debug("prettier not found on PATH; leaving %s unformatted", filename)
        return content
    command = [executable, "--stdin-filepath", filename]
    try:
        result = subprocess.run(
            command,
            input=content,
            check=False,
            capture_output=True,
            text=True,
            cwd=str(Path(filename).parent) if Path(filename).parent.is_dir() else None,
            timeout=PRETTIER_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.warning("Failed to format %s with Prettier: %s", filename, exc)
        return content
    if result.returncode != 0:
        logger.warning(
            "Failed to format %s with Prettier: %s", filename, result.stderr.strip()
        )
        return content
    return result.stdout


def json_formatter(content: str, filename: str) -> str:
    """Re-indent ``.json`` files with two spaces and a trailing newline.

    Invalid JSON raises; the runner then keeps the unformatted content.
    """

    if not filename.endswith(".json"):
        return content
    data = json.loads(content)
    return f"{json.dumps(data, indent=2, ensure_ascii=False)}\n"
