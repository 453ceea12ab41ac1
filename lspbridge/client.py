"""Language-neutral client interface and factory."""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol, runtime_checkable

from .config import DEFAULT_ROOT, ClientConfig, make_unique_root
from .python_client import PythonClient

logger = logging.getLogger(__name__)


@runtime_checkable
class Client(Protocol):
    """What every language client offers."""

    def hover(self, params: Any) -> Any:
        """Answer a hover request."""
        ...

    def completion(self, params: Any) -> Any:
        """Answer a completion request."""
        ...


class UnsupportedLanguageError(ValueError):
    """Raised when no client exists for the requested language."""

    def __init__(self, language: str) -> None:
        super().__init__(f"unsupported language: {language}")
        self.language = language


def new_client(
    language: str,
    workspace_mode: bool = False,
    root: str | os.PathLike = DEFAULT_ROOT,
) -> Client:
    """Prepare the workspace and start a client for ``language``."""
    try:
        root_path = make_unique_root(workspace_mode, root)
    except OSError:
        logger.error("Error creating a unique root directory")
        raise

    config = ClientConfig(language=language, root=root_path, workspace_mode=workspace_mode)
    if language == "python":
        return PythonClient.start(config)
    raise UnsupportedLanguageError(language)