"""Repository layer for file-system backed data access.

These modules are intentionally UI-free; they provide whole-document JSON
persistence and CSV/XLSX table reads and writes for the services above them.
"""
