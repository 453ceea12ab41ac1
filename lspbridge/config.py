"""Client configuration and workspace preparation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "/app/workspace"
STARTER_FILE = "main.py"
STARTER_SOURCE = "def main():\n\tprint('Hello world')"


@dataclass(frozen=True)
class ClientConfig:
    """Settings shared by every language client."""

    language: str
    root: str
    workspace_mode: bool = False


def make_unique_root(workspace_mode: bool = False, root: str | os.PathLike = DEFAULT_ROOT) -> str:
    """Create the workspace directory and return its path.

    In single-file mode (the default) a starter ``main.py`` is written into it.
    Raises ``OSError`` when the directory or file cannot be created.
    """
    directory = Path(root)
    directory.mkdir(mode=0o755, parents=True, exist_ok=True)
    if not workspace_mode:
        starter = directory / STARTER_FILE
        starter.write_text(STARTER_SOURCE, encoding="utf-8")
        os.chmod(starter, 0o644)
        logger.info("Unique file path made: %s", directory)
    return str(directory)