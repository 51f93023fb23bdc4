from __future__ import annotations

import os
from typing import Optional

from . import config


def data_dir(override: Optional[str] = None) -> str:
    """
    Return the absolute folder that holds the catalog, the records document and
    the CSV sidecars (does not create it).

    An explicit override wins; otherwise STRUCTDESK_DATA_DIR, otherwise the
    process working directory.
    """
    base = str(override or config.DATA_DIR or "").strip()
    if not base:
        return os.getcwd()
    return os.path.abspath(os.path.expanduser(base))


def catalog_path(base_dir: Optional[str] = None) -> str:
    return os.path.join(data_dir(base_dir), config.CATALOG_FILE)


def records_path(base_dir: Optional[str] = None) -> str:
    return os.path.join(data_dir(base_dir), config.RECORDS_FILE)


def sidecar_path(structure_name: str, base_dir: Optional[str] = None) -> str:
    """Return the <structure-name>.csv backup path for a structure."""
    return os.path.join(data_dir(base_dir), f"{structure_name}{config.SIDECAR_SUFFIX}")


def ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent and not os.path.isdir(parent):
        os.makedirs(parent, exist_ok=True)
