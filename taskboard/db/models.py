"""SQLAlchemy database models."""

import enum
import secrets
import string
from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.mysql import CHAR
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

PUBLIC_ID_ALPHABET = string.ascii_lowercase + string.digits
PUBLIC_ID_LENGTH = 12


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys.

    Returns:
        str: UUID as 36-character string.
    """
    return str(uuid4())


def generate_public_id() -> str:
    """Generate the short identifier exposed in URLs and API payloads.

    Returns:
        str: 12-character lowercase alphanumeric string.
    """
    return "".join(secrets.choice(PUBLIC_ID_ALPHABET) for _ in range(PUBLIC_ID_LENGTH))


def normalize_name(name: str) -> str:
    """Key used for case-insensitive name matching of lists and labels."""
    return name.strip().lower()


class ImportSource(str, enum.Enum):
    """Import source enumeration."""

    JSON = "json"


class ImportStatus(str, enum.Enum):
    """Import batch status enumeration."""

    PENDING = "pending"  # Import call in progress
    SUCCESS = "success"  # Every list written
    FAILED = "failed"  # Aborted; earlier lists may remain depending on policy


class ActivityType(str, enum.Enum):
    """Card activity type enumeration."""

    CARD_CREATED = "card.created"


class Workspace(Base):
    """Workspace model owning boards and members.

    Attributes:
        id: Primary key UUID.
        public_id: Short public identifier.
        name: Workspace name.
        created_at: Creation timestamp.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "workspaces"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    public_id: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False, default=generate_public_id
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    members: Mapped[list["WorkspaceMember"]] = relationship(
        "WorkspaceMember", back_populates="workspace", cascade="all, delete-orphan"
    )
    boards: Mapped[list["Board"]] = relationship(
        "Board", back_populates="workspace", cascade="all, delete-orphan"
    )


class User(Base):
    """User model.

    Attributes:
        id: Primary key UUID.
        email: User email.
        full_name: User's full name.
        is_active: Whether the user is active.
        created_at: Creation timestamp.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    memberships: Mapped[list["WorkspaceMember"]] = relationship(
        "WorkspaceMember", back_populates="user"
    )


class WorkspaceMember(Base):
    """Membership of a user in a workspace."""

    __tablename__ = "workspace_members"
    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member"),
        Index("ix_workspace_members_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    workspace_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    workspace: Mapped["Workspace"] = relationship("Workspace", back_populates="members")
    user: Mapped["User"] = relationship("User", back_populates="memberships")


class Board(Base):
    """Board model.

    Attributes:
        id: Primary key UUID.
        public_id: Short public identifier used by API clients.
        workspace_id: FK to the owning workspace.
        name: Board name.
        created_at: Creation timestamp.
        deleted_at: Soft-delete timestamp.
    """

    __tablename__ = "boards"
    __table_args__ = (Index("ix_boards_workspace_id", "workspace_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    public_id: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False, default=generate_public_id
    )
    workspace_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    workspace: Mapped["Workspace"] = relationship("Workspace", back_populates="boards")
    lists: Mapped[list["BoardList"]] = relationship(
        "BoardList", back_populates="board", cascade="all, delete-orphan"
    )
    labels: Mapped[list["Label"]] = relationship(
        "Label", back_populates="board", cascade="all, delete-orphan"
    )


class ImportBatch(Base):
    """Provenance record for one import call.

    Attributes:
        id: Primary key UUID.
        source: Where the imported data came from.
        status: pending until the call ends, then success or failed.
        board_id: Target board.
        created_by_id: User who ran the import.
        error_message: Failure reason for failed imports.
        created_at: Creation timestamp.
        finished_at: When the terminal status was recorded.
    """

    __tablename__ = "imports"
    __table_args__ = (Index("ix_imports_board_id", "board_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    source: Mapped[ImportSource] = mapped_column(
        Enum(ImportSource, values_callable=lambda x: [e.value for e in x]),
        default=ImportSource.JSON,
    )
    status: Mapped[ImportStatus] = mapped_column(
        Enum(ImportStatus, values_callable=lambda x: [e.value for e in x]),
        default=ImportStatus.PENDING,
    )
    board_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("boards.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    finished_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_by: Mapped[Optional["User"]] = relationship("User")


class BoardList(Base):
    """List (column) of cards on a board.

    Attributes:
        id: Primary key UUID.
        public_id: Short public identifier.
        board_id: FK to board.
        name: List name.
        normalized_name: Lowercase, stripped name for case-insensitive matching.
        index: Ordering index within the board.
        import_id: FK to the import that created the list, if any.
    """

    __tablename__ = "lists"
    __table_args__ = (
        Index("ix_lists_board_id", "board_id"),
        Index("ix_lists_board_normalized_name", "board_id", "normalized_name"),
    )

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    public_id: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False, default=generate_public_id
    )
    board_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(255), nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    import_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("imports.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    board: Mapped["Board"] = relationship("Board", back_populates="lists")
    cards: Mapped[list["Card"]] = relationship(
        "Card", back_populates="board_list", cascade="all, delete-orphan"
    )


class Label(Base):
    """Label model, unique per board ignoring case.

    Attributes:
        id: Primary key UUID.
        public_id: Short public identifier.
        board_id: FK to board.
        name: Label name.
        normalized_name: Lowercase, stripped name for duplicate detection.
        colour_code: Hex colour code (e.g., "#0d9488").
        import_id: FK to the import that created the label, if any.
    """

    __tablename__ = "labels"
    __table_args__ = (
        Index("ix_labels_board_id", "board_id"),
        Index("ix_labels_board_normalized_name", "board_id", "normalized_name"),
    )

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    public_id: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False, default=generate_public_id
    )
    board_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("boards.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    normalized_name: Mapped[str] = mapped_column(String(50), nullable=False)
    colour_code: Mapped[str] = mapped_column(String(7), nullable=False)
    import_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("imports.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    board: Mapped["Board"] = relationship("Board", back_populates="labels")


class Card(Base):
    """Card model.

    Attributes:
        id: Primary key UUID.
        public_id: Short public identifier.
        list_id: FK to the list holding the card.
        title: Card title.
        description: Card description.
        index: Position within the list.
        import_id: FK to the import that created the card, if any.
    """

    __tablename__ = "cards"
    __table_args__ = (
        Index("ix_cards_list_id", "list_id"),
        Index("ix_cards_import_id", "import_id"),
    )

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    public_id: Mapped[str] = mapped_column(
        String(12), unique=True, nullable=False, default=generate_public_id
    )
    list_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("lists.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    index: Mapped[int] = mapped_column(Integer, nullable=False)
    import_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("imports.id", ondelete="SET NULL"), nullable=True
    )
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    board_list: Mapped["BoardList"] = relationship("BoardList", back_populates="cards")
    labels: Mapped[list["Label"]] = relationship(
        "Label", secondary="cards_to_labels", viewonly=True
    )
    checklists: Mapped[list["Checklist"]] = relationship(
        "Checklist", back_populates="card", cascade="all, delete-orphan"
    )
    activities: Mapped[list["CardActivity"]] = relationship(
        "CardActivity", back_populates="card", cascade="all, delete-orphan"
    )


class CardLabel(Base):
    """Association table for Card-Label many-to-many relationship."""

    __tablename__ = "cards_to_labels"

    card_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("cards.id", ondelete="CASCADE"), primary_key=True
    )
    label_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True
    )


class Checklist(Base):
    """Checklist attached to a card."""

    __tablename__ = "checklists"
    __table_args__ = (Index("ix_checklists_card_id", "card_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    card_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("cards.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    card: Mapped["Card"] = relationship("Card", back_populates="checklists")
    items: Mapped[list["ChecklistItem"]] = relationship(
        "ChecklistItem", back_populates="checklist", cascade="all, delete-orphan"
    )


class ChecklistItem(Base):
    """Checklist item."""

    __tablename__ = "checklist_items"
    __table_args__ = (Index("ix_checklist_items_checklist_id", "checklist_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    checklist_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("checklists.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    checklist: Mapped["Checklist"] = relationship("Checklist", back_populates="items")


class CardActivity(Base):
    """Append-only activity event for a card.

    Attributes:
        id: Primary key UUID.
        type: Activity type.
        card_id: FK to card.
        created_by_id: User who performed the action.
        created_at: When the event happened.
    """

    __tablename__ = "card_activities"
    __table_args__ = (Index("ix_card_activities_card_id", "card_id"),)

    id: Mapped[str] = mapped_column(CHAR(36), primary_key=True, default=generate_uuid)
    type: Mapped[ActivityType] = mapped_column(
        Enum(ActivityType, values_callable=lambda x: [e.value for e in x]), nullable=False
    )
    card_id: Mapped[str] = mapped_column(
        CHAR(36), ForeignKey("cards.id", ondelete="CASCADE"), nullable=False
    )
    created_by_id: Mapped[str | None] = mapped_column(
        CHAR(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    card: Mapped["Card"] = relationship("Card", back_populates="activities")
