"""Match names in an import document to existing board lists and labels.

Matching is case-insensitive through ``normalize_name`` keys; only names
with no match are created.
"""

import logging

from sqlalchemy.orm import Session

from taskboard.db.models import generate_public_id, generate_uuid, normalize_name
from taskboard.exceptions import ImportWriteFailed
from taskboard.imports import repository

logger = logging.getLogger(__name__)

# Colours assigned to new labels, in rotation
LABEL_PALETTE: list[tuple[str, str]] = [
    ("Teal", "#0d9488"),
    ("Green", "#65a30d"),
    ("Blue", "#0284c7"),
    ("Purple", "#4f46e5"),
    ("Yellow", "#ca8a04"),
    ("Orange", "#ea580c"),
    ("Red", "#dc2626"),
    ("Pink", "#db2777"),
]


def label_colour(position: int) -> str:
    """Palette colour for the label at ``position`` among the board's labels."""
    return LABEL_PALETTE[position % len(LABEL_PALETTE)][1]


def resolve_labels(
    db: Session,
    board_id: str,
    label_names: list[str],
    import_id: str,
    user_id: str,
) -> dict[str, str]:
    """Find or create every label referenced by an import.

    Existing labels are reused unchanged. Missing labels are created in a
    single insert, coloured by rotating through ``LABEL_PALETTE`` starting
    after the board's existing labels.

    Args:
        db: Database session.
        board_id: Target board ID.
        label_names: Distinct label names (see ``collect_label_names``).
        import_id: Import record ID for provenance.
        user_id: User running the import.

    Returns:
        dict[str, str]: Normalized label name -> label ID.
    """
    existing = repository.get_board_labels(db, board_id)
    label_map: dict[str, str] = {}
    for label in existing:
        label_map.setdefault(normalize_name(label.name), label.id)

    rows = []
    for name in label_names:
        key = normalize_name(name)
        if not key or key in label_map:
            continue
        rows.append(
            {
                "id": generate_uuid(),
                "public_id": generate_public_id(),
                "board_id": board_id,
                "name": name,
                "normalized_name": key,
                "colour_code": label_colour(len(existing) + len(rows)),
                "created_by_id": user_id,
                "import_id": import_id,
            }
        )
        label_map[key] = rows[-1]["id"]

    if rows:
        created = repository.bulk_create_labels(db, rows)
        if len(created) != len(rows):
            raise ImportWriteFailed(f"Created {len(created)} of {len(rows)} labels")
        logger.info("Created %d labels on board %s", len(rows), board_id)

    return label_map


class ListResolver:
    """Find-or-create lists by name for one import call.

    Board lists are loaded on first use, so an import whose lists are all
    empty never reads them. Lists created by this resolver are matched by
    later entries of the same document.
    """

    def __init__(self, db: Session, board_id: str, import_id: str, user_id: str):
        self.db = db
        self.board_id = board_id
        self.import_id = import_id
        self.user_id = user_id
        self.created: list[str] = []
        self._by_name: dict[str, str] | None = None
        self._next_index = 0

    def _load(self) -> dict[str, str]:
        if self._by_name is None:
            lists = repository.get_board_lists(self.db, self.board_id)
            self._by_name = {}
            for board_list in lists:
                self._by_name.setdefault(normalize_name(board_list.name), board_list.id)
            self._next_index = max((bl.index for bl in lists), default=-1) + 1
        return self._by_name

    def resolve(self, name: str) -> str:
        """Get the ID of the list called ``name``, creating it if needed.

        Args:
            name: List name from the import document.

        Returns:
            str: List ID.
        """
        by_name = self._load()
        key = normalize_name(name)
        if key in by_name:
            return by_name[key]

        board_list = repository.create_list(
            self.db,
            board_id=self.board_id,
            name=name,
            index=self._next_index,
            user_id=self.user_id,
            import_id=self.import_id,
        )

        self._next_index += 1
        by_name[key] = board_list.id
        self.created.append(board_list.id)
        logger.info('Created list "%s" on board %s', name, self.board_id)
        return board_list.id
