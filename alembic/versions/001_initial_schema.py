"""Initial database schema.

Revision ID: 001
Revises:
Create Date: 2026-10-17

Schema for the board application including:
- Workspaces, users and workspace membership
- Boards with their lists and labels
- Cards, card-label associations and card activity
- Checklists and checklist items
- Import records stamped on the lists, labels and cards they create
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Workspaces table
    op.create_table(
        "workspaces",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("public_id", sa.String(12), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id"),
    )

    # Users table
    op.create_table(
        "users",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), default=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "workspace_members",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("workspace_id", mysql.CHAR(36), nullable=False),
        sa.Column("user_id", mysql.CHAR(36), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member"),
    )
    op.create_index("ix_workspace_members_user_id", "workspace_members", ["user_id"])

    # Boards table
    op.create_table(
        "boards",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("public_id", sa.String(12), nullable=False),
        sa.Column("workspace_id", mysql.CHAR(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id"),
    )
    op.create_index("ix_boards_workspace_id", "boards", ["workspace_id"])

    # Import records
    op.create_table(
        "imports",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("source", sa.Enum("json", name="importsource"), nullable=True),
        sa.Column(
            "status",
            sa.Enum("pending", "success", "failed", name="importstatus"),
            nullable=True,
        ),
        sa.Column("board_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("finished_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["board_id"], ["boards.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_imports_board_id", "imports", ["board_id"])

    # Lists table
    op.create_table(
        "lists",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("public_id", sa.String(12), nullable=False),
        sa.Column("board_id", mysql.CHAR(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("normalized_name", sa.String(255), nullable=False),
        sa.Column("index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("import_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["board_id"], ["boards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["import_id"], ["imports.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id"),
    )
    op.create_index("ix_lists_board_id", "lists", ["board_id"])
    op.create_index(
        "ix_lists_board_normalized_name", "lists", ["board_id", "normalized_name"]
    )

    # Labels table
    op.create_table(
        "labels",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("public_id", sa.String(12), nullable=False),
        sa.Column("board_id", mysql.CHAR(36), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("normalized_name", sa.String(50), nullable=False),
        sa.Column("colour_code", sa.String(7), nullable=False),
        sa.Column("import_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["board_id"], ["boards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["import_id"], ["imports.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id"),
    )
    op.create_index("ix_labels_board_id", "labels", ["board_id"])
    op.create_index(
        "ix_labels_board_normalized_name", "labels", ["board_id", "normalized_name"]
    )

    # Cards table
    op.create_table(
        "cards",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("public_id", sa.String(12), nullable=False),
        sa.Column("list_id", mysql.CHAR(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("index", sa.Integer(), nullable=False),
        sa.Column("import_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["list_id"], ["lists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["import_id"], ["imports.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id"),
    )
    op.create_index("ix_cards_list_id", "cards", ["list_id"])
    op.create_index("ix_cards_import_id", "cards", ["import_id"])

    # Card-label associations
    op.create_table(
        "cards_to_labels",
        sa.Column("card_id", mysql.CHAR(36), nullable=False),
        sa.Column("label_id", mysql.CHAR(36), nullable=False),
        sa.ForeignKeyConstraint(["card_id"], ["cards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["label_id"], ["labels.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("card_id", "label_id"),
    )

    # Checklists and items
    op.create_table(
        "checklists",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("card_id", mysql.CHAR(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["card_id"], ["cards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_checklists_card_id", "checklists", ["card_id"])

    op.create_table(
        "checklist_items",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("checklist_id", mysql.CHAR(36), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("completed", sa.Boolean(), default=False),
        sa.Column("index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["checklist_id"], ["checklists.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_checklist_items_checklist_id", "checklist_items", ["checklist_id"])

    # Card activity
    op.create_table(
        "card_activities",
        sa.Column("id", mysql.CHAR(36), nullable=False),
        sa.Column("type", sa.Enum("card.created", name="activitytype"), nullable=False),
        sa.Column("card_id", mysql.CHAR(36), nullable=False),
        sa.Column("created_by_id", mysql.CHAR(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["card_id"], ["cards.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_card_activities_card_id", "card_activities", ["card_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("card_activities")
    op.drop_table("checklist_items")
    op.drop_table("checklists")
    op.drop_table("cards_to_labels")
    op.drop_table("cards")
    op.drop_table("labels")
    op.drop_table("lists")
    op.drop_table("imports")
    op.drop_table("boards")
    op.drop_table("workspace_members")
    op.drop_table("users")
    op.drop_table("workspaces")
