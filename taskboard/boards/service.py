"""Board lookup and workspace access checks."""

from sqlalchemy.orm import Session

from taskboard.db.models import Board, Workspace, WorkspaceMember
from taskboard.exceptions import BoardNotFound, NotWorkspaceMember, WorkspaceNotFound


class BoardService:
    """Service class for board access."""

    def __init__(self, db: Session):
        """Initialize board service.

        Args:
            db: Database session.
        """
        self.db = db

    def get_board(self, board_public_id: str) -> Board:
        """Get a non-deleted board by its public ID.

        Args:
            board_public_id: Board public identifier.

        Returns:
            Board: The board.

        Raises:
            BoardNotFound: If no such board exists.
        """
        board = (
            self.db.query(Board)
            .filter(Board.public_id == board_public_id, Board.deleted_at.is_(None))
            .first()
        )
        if board is None:
            raise BoardNotFound(board_public_id)
        return board

    def get_workspace(self, workspace_id: str) -> Workspace:
        workspace = (
            self.db.query(Workspace)
            .filter(Workspace.id == workspace_id, Workspace.deleted_at.is_(None))
            .first()
        )
        if workspace is None:
            raise WorkspaceNotFound(workspace_id)
        return workspace

    def assert_user_in_workspace(self, user_id: str, workspace_id: str) -> None:
        """Raise NotWorkspaceMember unless the user belongs to the workspace."""
        member = (
            self.db.query(WorkspaceMember.id)
            .filter(
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.user_id == user_id,
                WorkspaceMember.deleted_at.is_(None),
            )
            .first()
        )
        if member is None:
            raise NotWorkspaceMember(user_id, workspace_id)

    def get_accessible_board(self, board_public_id: str, user_id: str) -> Board:
        """Get a board the user may read and write.

        Args:
            board_public_id: Board public identifier.
            user_id: Current user ID.

        Returns:
            Board: The board.

        Raises:
            BoardNotFound: If the board does not exist.
            WorkspaceNotFound: If the owning workspace does not exist.
            NotWorkspaceMember: If the user is not a member of the workspace.
        """
        board = self.get_board(board_public_id)
        workspace = self.get_workspace(board.workspace_id)
        self.assert_user_in_workspace(user_id, workspace.id)
        return board
