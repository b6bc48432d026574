"""Imports module for bulk JSON import and export of lists and cards."""

from taskboard.imports.collector import WarningCollector
from taskboard.imports.exporter import export_board, export_board_json
from taskboard.imports.locks import BoardLockRegistry, board_locks
from taskboard.imports.parsers import (
    JSON_IMPORT_TEMPLATE,
    collect_label_names,
    generate_json_template,
    load_import_document,
    parse_json_payload,
    preprocess_payload,
    validate_payload,
)
from taskboard.imports.router import router
from taskboard.imports.schemas import (
    CardData,
    ChecklistData,
    ChecklistItemData,
    ImportBatchResponse,
    ImportJsonPreview,
    ImportJsonRequest,
    ImportJsonResult,
    ListData,
)
from taskboard.imports.service import JsonImportService

__all__ = [
    "router",
    "JsonImportService",
    "parse_json_payload",
    "preprocess_payload",
    "validate_payload",
    "load_import_document",
    "collect_label_names",
    "generate_json_template",
    "JSON_IMPORT_TEMPLATE",
    "export_board",
    "export_board_json",
    "WarningCollector",
    "BoardLockRegistry",
    "board_locks",
    # Schemas
    "ListData",
    "CardData",
    "ChecklistData",
    "ChecklistItemData",
    "ImportJsonRequest",
    "ImportJsonResult",
    "ImportJsonPreview",
    "ImportBatchResponse",
]
