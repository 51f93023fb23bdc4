from __future__ import annotations

import json
import logging
import os
import shutil
from typing import Any, Optional

from ... import config
from ...errors import DocumentParseError, StorageIOError
from ...project_paths import ensure_parent_dir

logger = logging.getLogger(__name__)


class DocumentRepository:
    """
    Reads and writes whole JSON documents.

    Every write replaces the entire file (temp file + rename); there is no
    append log and no locking, a single in-process writer is assumed.
    """

    def __init__(self, indent: int = config.JSON_INDENT) -> None:
        self._indent = int(indent)

    def read(self, path: str) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise StorageIOError(path, "Failed to read document", e) from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentParseError(path, str(e)) from e

    def write(self, path: str, payload: Any) -> None:
        tmp_path = f"{path}.tmp"
        try:
            text = json.dumps(payload, indent=self._indent, ensure_ascii=False)
            ensure_parent_dir(path)
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp_path, path)
        except OSError as e:
            raise StorageIOError(path, "Failed to write document", e) from e
        logger.debug(f"Wrote document {path} ({len(text)} chars)")

    def set_aside(self, path: str, suffix: str = config.CORRUPT_SUFFIX) -> Optional[str]:
        """Copy an unreadable document next to itself before it gets overwritten."""
        if not os.path.isfile(path):
            return None
        dest = f"{path}{suffix}"
        try:
            shutil.copy2(path, dest)
        except OSError as e:
            logger.error(f"Failed to set aside {path}: {e}")
            return None
        return dest
