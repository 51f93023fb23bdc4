from __future__ import annotations

import csv
import logging
import zipfile
from typing import Any, List, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException

from ...errors import SheetEmptyError, StorageIOError
from ...project_paths import ensure_parent_dir

logger = logging.getLogger(__name__)


class TableFileRepository:
    """
    Reads and writes header + data tables as CSV or XLSX.

    Rows are plain positional lists; binding columns to fields is left to the
    caller. Reads return the header row as row 0.
    """

    # --- CSV ---

    def write_csv(self, path: str, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        try:
            ensure_parent_dir(path)
            with open(path, mode="w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(list(header))
                for row in rows:
                    writer.writerow(list(row))
        except (OSError, csv.Error) as e:
            raise StorageIOError(path, "Failed to write CSV", e) from e

    def read_csv(self, path: str) -> List[List[str]]:
        try:
            # utf-8-sig tolerates the BOM spreadsheet tools put in front of the header
            with open(path, mode="r", newline="", encoding="utf-8-sig") as f:
                return [list(row) for row in csv.reader(f)]
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise StorageIOError(path, "Failed to read CSV", e) from e

    # --- XLSX ---

    def write_xlsx(self, path: str, header: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        """Write sheet 0 only. None leaves a cell empty; str/float/bool become typed cells."""
        wb = Workbook()
        ws = wb.active
        try:
            for col, name in enumerate(header, start=1):
                self._set_cell(ws, 1, col, name)
            for row_idx, row in enumerate(rows, start=2):
                for col, value in enumerate(row, start=1):
                    if value is None:
                        continue
                    self._set_cell(ws, row_idx, col, value)
        except IllegalCharacterError as e:
            raise StorageIOError(path, "Value cannot be stored in a workbook", e) from e
        try:
            ensure_parent_dir(path)
            wb.save(path)
        except OSError as e:
            raise StorageIOError(path, "Failed to write workbook", e) from e

    @staticmethod
    def _set_cell(ws, row: int, col: int, value: Any) -> None:
        cell = ws.cell(row=row, column=col, value=value)
        # A leading '=' would otherwise be stored as a formula
        if isinstance(value, str) and value.startswith("="):
            cell.data_type = "s"

    def read_xlsx(self, path: str) -> List[List[Any]]:
        """Return the native cell values of the first worksheet, header row included."""
        try:
            wb = load_workbook(path, data_only=True)
        except FileNotFoundError:
            raise
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as e:
            raise StorageIOError(path, "Failed to open workbook", e) from e
        try:
            if not wb.worksheets:
                raise SheetEmptyError(path)
            ws = wb.worksheets[0]
            return [list(row) for row in ws.iter_rows(values_only=True)]
        finally:
            wb.close()
