"""
taskboard exception hierarchy.

All custom exceptions live here to avoid circular imports. Routers map each
kind to an HTTP status through ``status_code``.
"""


class TaskboardError(Exception):
    """Base class for domain errors surfaced to API clients."""

    status_code = 500


class NotFoundError(TaskboardError):
    """Board, workspace or import record does not exist."""

    status_code = 404


class BoardNotFound(NotFoundError):
    def __init__(self, board_public_id: str):
        super().__init__("Board not found")
        self.board_public_id = board_public_id


class WorkspaceNotFound(NotFoundError):
    def __init__(self, workspace_id: str):
        super().__init__("Workspace not found")
        self.workspace_id = workspace_id


class ImportNotFound(NotFoundError):
    def __init__(self, import_id: str):
        super().__init__("Import not found")
        self.import_id = import_id


class NotWorkspaceMember(TaskboardError):
    """Caller is not a member of the workspace owning the board."""

    status_code = 403

    def __init__(self, user_id: str, workspace_id: str):
        super().__init__("You do not have access to this workspace")
        self.user_id = user_id
        self.workspace_id = workspace_id


class ValidationFailed(TaskboardError):
    """Payload could not be parsed, preprocessed or validated. Nothing was written.

    Attributes:
        errors: One "path: reason" entry per violation.
    """

    status_code = 400

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ImportWriteFailed(TaskboardError):
    """A write step failed after the import record was created.

    The original exception is available as ``__cause__``.
    """

    status_code = 500

    def __init__(self, message: str, import_id: str | None = None):
        super().__init__(message)
        self.import_id = import_id
