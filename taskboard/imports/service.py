"""JSON import/export service."""

import logging
from contextlib import nullcontext

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.boards.service import BoardService
from taskboard.config import Settings, get_settings
from taskboard.db.models import Board, ImportBatch, ImportStatus, User
from taskboard.exceptions import ImportNotFound, ImportWriteFailed, ValidationFailed
from taskboard.imports import repository
from taskboard.imports.collector import WarningCollector
from taskboard.imports.exporter import export_board_json
from taskboard.imports.locks import BoardLockRegistry, board_locks
from taskboard.imports.parsers import collect_label_names, load_import_document
from taskboard.imports.reconcile import ListResolver, resolve_labels
from taskboard.imports.schemas import (
    ImportBatchResponse,
    ImportJsonPreview,
    ImportJsonResult,
    ListData,
)
from taskboard.imports.writer import BulkWriter

logger = logging.getLogger(__name__)


class JsonImportService:
    """Service class for importing and exporting boards as JSON."""

    def __init__(
        self,
        db: Session,
        settings: Settings | None = None,
        locks: BoardLockRegistry | None = None,
    ):
        """Initialize JSON import service.

        Args:
            db: Database session.
            settings: Application settings (defaults to the cached settings).
            locks: Per-board lock registry (defaults to the process-wide one).
        """
        self.db = db
        self.settings = settings or get_settings()
        self.locks = locks if locks is not None else board_locks
        self.boards = BoardService(db)

    # --- Import ---

    def import_json(self, board_public_id: str, data: str, user: User) -> ImportJsonResult:
        """Import lists of cards from a JSON document into a board.

        The document is parsed, preprocessed and validated before anything is
        written; those failures leave no trace. Once the import record exists,
        any failure marks it failed. With the "partial" failure policy the
        lists written before the failure stay in place; with "rollback" they
        are discarded.

        Args:
            board_public_id: Public ID of the target board.
            data: JSON-encoded import document.
            user: User running the import.

        Returns:
            ImportJsonResult: Counts and warnings.

        Raises:
            ValidationFailed: If the document is rejected.
            BoardNotFound: If the board does not exist.
            WorkspaceNotFound: If the board's workspace does not exist.
            NotWorkspaceMember: If the user cannot access the board.
            ImportWriteFailed: If a write fails.
        """
        lists = load_import_document(data, self.settings.import_max_payload_bytes)
        logger.info(
            "Importing %d list(s) with %d card(s) into board %s",
            len(lists),
            sum(len(list_data.cards) for list_data in lists),
            board_public_id,
        )

        board = self.boards.get_accessible_board(board_public_id, user.id)

        with self._serialized(board.id):
            return self._run_import(board, lists, user)

    def _serialized(self, board_id: str):
        if self.settings.import_serialize_per_board:
            return self.locks.hold(board_id)
        return nullcontext()

    def _checkpoint(self) -> None:
        if self.settings.import_failure_policy == "partial":
            self.db.commit()
        else:
            self.db.flush()

    def _run_import(self, board: Board, lists: list[ListData], user: User) -> ImportJsonResult:
        try:
            batch = repository.create_import_batch(self.db, board.id, user.id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ImportWriteFailed("Failed to create import record") from e

        import_id = batch.id
        warnings = WarningCollector()
        cards_created = 0

        try:
            label_map = resolve_labels(
                self.db, board.id, collect_label_names(lists), import_id, user.id
            )
            self._checkpoint()

            resolver = ListResolver(self.db, board.id, import_id, user.id)
            writer = BulkWriter(self.db, import_id, user.id, label_map, warnings)
            for list_data in lists:
                if not list_data.cards:
                    logger.info('Skipping empty list "%s"', list_data.list_name)
                    continue
                list_id = resolver.resolve(list_data.list_name)
                cards_created += writer.write_list(list_data, list_id)
                self._checkpoint()

            self.db.commit()
        except Exception as e:
            logger.exception("Import %s into board %s failed", import_id, board.id)
            self.db.rollback()
            repository.finish_import_batch(self.db, import_id, ImportStatus.FAILED, str(e))
            raise ImportWriteFailed(f"Import failed: {e}", import_id=import_id) from e

        repository.finish_import_batch(self.db, import_id, ImportStatus.SUCCESS)

        logger.info(
            "Import %s finished: %d cards, %d lists, %d warnings",
            import_id,
            cards_created,
            len(lists),
            len(warnings),
        )
        return ImportJsonResult(
            cards_created=cards_created,
            lists_processed=len(lists),
            warnings=warnings.to_list(),
        )

    # --- Dry run ---

    def validate_json(self, data: str) -> ImportJsonPreview:
        """Check a JSON document without touching any board.

        Args:
            data: JSON-encoded import document.

        Returns:
            ImportJsonPreview: Counts when valid, errors otherwise.
        """
        try:
            lists = load_import_document(data, self.settings.import_max_payload_bytes)
        except ValidationFailed as e:
            return ImportJsonPreview(valid=False, errors=e.errors or [str(e)])

        return ImportJsonPreview(
            valid=True,
            lists_count=len(lists),
            cards_count=sum(len(list_data.cards) for list_data in lists),
            labels=collect_label_names(lists),
        )

    # --- Export ---

    def export_json(self, board_public_id: str, user: User) -> str:
        """Export a board as a JSON import document.

        Args:
            board_public_id: Public ID of the board.
            user: User requesting the export.

        Returns:
            str: JSON document.
        """
        board = self.boards.get_accessible_board(board_public_id, user.id)
        return export_board_json(self.db, board.id)

    # --- Ledger ---

    def get_import(self, import_id: str, user: User) -> ImportBatchResponse:
        """Get an import record the user can see.

        Args:
            import_id: Import record ID.
            user: Current user.

        Returns:
            ImportBatchResponse: Record with counts of what it created.

        Raises:
            ImportNotFound: If the record or its board does not exist.
            NotWorkspaceMember: If the user cannot access the board.
        """
        batch = self.db.get(ImportBatch, import_id)
        board = self.db.get(Board, batch.board_id) if batch and batch.board_id else None
        if batch is None or board is None:
            raise ImportNotFound(import_id)

        self.boards.assert_user_in_workspace(user.id, board.workspace_id)

        counts = repository.count_import_entities(self.db, import_id)
        return ImportBatchResponse(
            id=batch.id,
            source=batch.source.value,
            status=batch.status.value,
            board_public_id=board.public_id,
            created_at=batch.created_at,
            finished_at=batch.finished_at,
            error_message=batch.error_message,
            lists_created=counts["lists"],
            labels_created=counts["labels"],
            cards_created=counts["cards"],
        )
