import os
from dataclasses import dataclass
from typing import List, Tuple


# Storage location: both documents and every <structure>.csv sidecar live here.
# Empty means the process working directory, matching where the documents were
# always read from.
DATA_DIR: str = os.environ.get("STRUCTDESK_DATA_DIR", "").strip()
CATALOG_FILE: str = os.environ.get("STRUCTDESK_CATALOG_FILE", "custom_structures.json")
RECORDS_FILE: str = os.environ.get("STRUCTDESK_RECORDS_FILE", "erp_data.json")
SIDECAR_SUFFIX: str = ".csv"
CORRUPT_SUFFIX: str = ".corrupt"

# Pretty-print indentation for both JSON documents
JSON_INDENT: int = int(os.environ.get("STRUCTDESK_JSON_INDENT", "2"))

LOG_LEVEL: str = os.environ.get("STRUCTDESK_LOG_LEVEL", "INFO").strip().upper() or "INFO"


# Window defaults
WINDOW_TITLE: str = "StructDesk"
WINDOW_WIDTH: int = int(os.environ.get("STRUCTDESK_WINDOW_WIDTH", "980"))
WINDOW_HEIGHT: int = int(os.environ.get("STRUCTDESK_WINDOW_HEIGHT", "900"))
SIDEBAR_MAX_WIDTH: int = 200

# Names given to freshly added catalog nodes (renamed in place afterwards)
NEW_CATEGORY_NAME: str = "New Category"
NEW_SUBCATEGORY_NAME: str = "New SubCategory"


# File-picker filters: (label, [extensions without dot])
FileFilter = Tuple[str, List[str]]

EXCEL_FILTER: FileFilter = ("Excel Files", ["xlsx"])
CSV_FILTER: FileFilter = ("CSV Files", ["csv"])
EXCHANGE_FILTERS: List[FileFilter] = [EXCEL_FILTER, CSV_FILTER]


# Number editor range in the records table
NUMBER_EDITOR_MIN: float = -1e15
NUMBER_EDITOR_MAX: float = 1e15
NUMBER_EDITOR_DECIMALS: int = 6


@dataclass
class UiFlags:
    show_settings_panel: bool = False
    show_structure_editor: bool = False
