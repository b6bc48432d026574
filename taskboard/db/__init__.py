"""Database module."""

from taskboard.db.database import SessionLocal, engine, init_db
from taskboard.db.models import (
    Base,
    Board,
    BoardList,
    Card,
    CardActivity,
    CardLabel,
    Checklist,
    ChecklistItem,
    ImportBatch,
    Label,
    User,
    Workspace,
    WorkspaceMember,
)

__all__ = [
    "SessionLocal",
    "engine",
    "init_db",
    "Base",
    "Workspace",
    "WorkspaceMember",
    "User",
    "Board",
    "BoardList",
    "Label",
    "Card",
    "CardLabel",
    "CardActivity",
    "Checklist",
    "ChecklistItem",
    "ImportBatch",
]
