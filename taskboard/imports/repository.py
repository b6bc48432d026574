"""Data access for the JSON import pipeline.

Bulk functions take fully built row dicts (IDs generated by the caller) and
issue one INSERT per call. They return the IDs that were written; the caller
decides when to flush or commit.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, insert
from sqlalchemy.orm import Session

from taskboard.db.models import (
    BoardList,
    Card,
    CardActivity,
    CardLabel,
    Checklist,
    ChecklistItem,
    ImportBatch,
    ImportSource,
    ImportStatus,
    Label,
    normalize_name,
)

# --- Import ledger ---


def create_import_batch(db: Session, board_id: str, user_id: str) -> ImportBatch:
    """Create and commit a pending import record.

    Args:
        db: Database session.
        board_id: Target board ID.
        user_id: User running the import.

    Returns:
        ImportBatch: The committed record.
    """
    batch = ImportBatch(
        source=ImportSource.JSON,
        status=ImportStatus.PENDING,
        board_id=board_id,
        created_by_id=user_id,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


def finish_import_batch(
    db: Session,
    import_id: str,
    status: ImportStatus,
    error_message: str | None = None,
) -> None:
    """Record the terminal status of an import and commit."""
    batch = db.get(ImportBatch, import_id)
    if batch is None:
        return
    batch.status = status
    batch.error_message = error_message
    batch.finished_at = datetime.now(UTC)
    db.commit()


def count_import_entities(db: Session, import_id: str) -> dict[str, int]:
    """Count lists, labels and cards tagged with an import ID."""
    return {
        model.__tablename__: db.query(func.count(model.id))
        .filter(model.import_id == import_id)
        .scalar()
        for model in (BoardList, Label, Card)
    }


# --- Reads ---


def get_board_lists(db: Session, board_id: str) -> list[BoardList]:
    return (
        db.query(BoardList)
        .filter(BoardList.board_id == board_id, BoardList.deleted_at.is_(None))
        .order_by(BoardList.index)
        .all()
    )


def get_board_labels(db: Session, board_id: str) -> list[Label]:
    return (
        db.query(Label)
        .filter(Label.board_id == board_id, Label.deleted_at.is_(None))
        .order_by(Label.created_at)
        .all()
    )


# --- Writes ---


def create_list(
    db: Session,
    board_id: str,
    name: str,
    index: int,
    user_id: str,
    import_id: str,
) -> BoardList:
    board_list = BoardList(
        board_id=board_id,
        name=name,
        normalized_name=normalize_name(name),
        index=index,
        created_by_id=user_id,
        import_id=import_id,
    )
    db.add(board_list)
    db.flush()
    return board_list


def _bulk_insert(db: Session, model: type, rows: list[dict[str, Any]]) -> list[str]:
    """Insert ``rows`` and return the IDs the database reports as written.

    Uses RETURNING where the dialect supports it with executemany; otherwise
    all IDs are returned once the statement's row count matches.
    """
    if not rows:
        return []
    if db.get_bind().dialect.insert_executemany_returning:
        return list(db.scalars(insert(model).returning(model.id), rows))

    result = db.execute(insert(model), rows)
    if result.rowcount not in (-1, len(rows)):
        return []
    return [row["id"] for row in rows]


def bulk_create_labels(db: Session, rows: list[dict[str, Any]]) -> list[str]:
    return _bulk_insert(db, Label, rows)


def bulk_create_cards(db: Session, rows: list[dict[str, Any]]) -> list[str]:
    return _bulk_insert(db, Card, rows)


def bulk_create_card_activities(db: Session, rows: list[dict[str, Any]]) -> list[str]:
    return _bulk_insert(db, CardActivity, rows)


def bulk_create_card_labels(db: Session, rows: list[dict[str, str]]) -> int:
    """Insert card-label associations.

    Returns:
        int: Number of associations written.
    """
    if not rows:
        return 0
    db.execute(insert(CardLabel), rows)
    return len(rows)


def bulk_create_checklists(db: Session, rows: list[dict[str, Any]]) -> list[str]:
    return _bulk_insert(db, Checklist, rows)


def bulk_create_checklist_items(db: Session, rows: list[dict[str, Any]]) -> list[str]:
    return _bulk_insert(db, ChecklistItem, rows)
