from __future__ import annotations

from typing import Optional


class StructDeskError(Exception):
    pass


class StorageIOError(StructDeskError):
    """Open/read/write failure on a document, sidecar or exchange file."""

    def __init__(self, path: str, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{message}: {path}" + (f" ({cause})" if cause else ""))
        self.path = path
        self.message = message
        self.cause = cause


class DocumentParseError(StructDeskError):
    """A persisted document could not be deserialized."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Failed to parse {path}: {message}")
        self.path = path
        self.message = message


class SheetEmptyError(StructDeskError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Workbook has no worksheet: {path}")
        self.path = path


class EditorError(StructDeskError):
    pass
