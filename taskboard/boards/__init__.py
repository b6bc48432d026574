"""Boards module: lookup and access control for board-scoped operations."""

from taskboard.boards.service import BoardService

__all__ = ["BoardService"]
