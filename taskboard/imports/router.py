"""JSON import/export API routes."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Path
from fastapi.responses import Response

from taskboard.dependencies import CurrentUser, DbSession
from taskboard.exceptions import TaskboardError
from taskboard.imports.parsers import generate_json_template
from taskboard.imports.schemas import (
    ImportBatchResponse,
    ImportJsonPreview,
    ImportJsonRequest,
    ImportJsonResult,
    ValidateJsonRequest,
)
from taskboard.imports.service import JsonImportService

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(exc: TaskboardError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


@router.get("/json/template")
async def download_template() -> Response:
    """Get an example import document.

    Returns:
        JSON document with two lists, the second one empty.
    """
    return Response(content=generate_json_template(), media_type="application/json")


@router.post("/json", response_model=ImportJsonResult)
async def import_json(
    request: ImportJsonRequest,
    db: DbSession,
    current_user: CurrentUser,
) -> ImportJsonResult:
    """Import cards from a JSON document into a board.

    Lists and labels are matched to the board's existing ones by name,
    ignoring case; anything missing is created. Over-long text is truncated
    and reported in ``warnings``.

    Args:
        request: Target board and JSON document.
        db: Database session.
        current_user: Current user.

    Returns:
        ImportJsonResult: Number of cards created, lists processed and warnings.

    Raises:
        HTTPException: 400 for invalid documents, 403 without workspace access,
            404 for unknown boards, 500 if a write fails.
    """
    service = JsonImportService(db)
    try:
        return service.import_json(request.board_public_id, request.data, current_user)
    except TaskboardError as e:
        raise _http_error(e) from e


@router.post("/json/validate", response_model=ImportJsonPreview)
async def validate_json(
    request: ValidateJsonRequest,
    db: DbSession,
    current_user: CurrentUser,
) -> ImportJsonPreview:
    """Validate a JSON document without importing it.

    Args:
        request: JSON document.
        db: Database session.
        current_user: Current user.

    Returns:
        ImportJsonPreview: Counts when valid, errors otherwise.
    """
    return JsonImportService(db).validate_json(request.data)


@router.get("/json/export/{board_public_id}")
async def export_json(
    db: DbSession,
    current_user: CurrentUser,
    board_public_id: str = Path(min_length=12),
) -> Response:
    """Export a board's lists and cards as a JSON file download.

    The file can be imported again with the import endpoint.

    Args:
        db: Database session.
        current_user: Current user.
        board_public_id: Public ID of the board.

    Returns:
        JSON file download.
    """
    service = JsonImportService(db)
    try:
        content = service.export_json(board_public_id, current_user)
    except TaskboardError as e:
        raise _http_error(e) from e

    filename = f"board-export-{board_public_id}-{datetime.now(UTC):%Y-%m-%d}.json"
    logger.info("User %s exported board %s", current_user.id, board_public_id)

    return Response(
        content=content,
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


@router.get("/{import_id}", response_model=ImportBatchResponse)
async def get_import(
    import_id: str,
    db: DbSession,
    current_user: CurrentUser,
) -> ImportBatchResponse:
    """Get an import record and what it created.

    Args:
        import_id: Import record ID.
        db: Database session.
        current_user: Current user.

    Returns:
        ImportBatchResponse: Import status and counts.
    """
    try:
        return JsonImportService(db).get_import(import_id, current_user)
    except TaskboardError as e:
        raise _http_error(e) from e
