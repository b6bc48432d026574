"""Bulk creation of cards and their nested entities for one list at a time."""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from taskboard.db.models import ActivityType, generate_public_id, generate_uuid, normalize_name
from taskboard.exceptions import ImportWriteFailed
from taskboard.imports import repository
from taskboard.imports.collector import WarningCollector
from taskboard.imports.schemas import (
    MAX_CHECKLIST_NAME_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_ITEM_TITLE_LENGTH,
    MAX_TITLE_LENGTH,
    CardData,
    ListData,
)

logger = logging.getLogger(__name__)


@dataclass
class PendingChecklist:
    """A checklist row with its item rows, keyed by pre-generated IDs.

    Attributes:
        row: Checklist row to insert.
        card_title: Title of the owning card, for warnings.
        position: 1-based position of the checklist on its card.
        original_name_length: Length of the name before truncation.
        items: Item rows to insert once the checklist exists.
        item_title_lengths: Item ID -> title length before truncation.
    """

    row: dict[str, Any]
    card_title: str
    position: int
    original_name_length: int
    items: list[dict[str, Any]] = field(default_factory=list)
    item_title_lengths: dict[str, int] = field(default_factory=dict)


def card_label_keys(card: CardData) -> tuple[list[str], bool]:
    """Distinct normalized label names on a card.

    Returns:
        tuple: (keys in first-seen order, whether duplicates were dropped)
    """
    names = [label.strip() for label in card.labels if label.strip()]
    keys = list(dict.fromkeys(normalize_name(name) for name in names))
    return keys, len(keys) < len(names)


class BulkWriter:
    """Writes the cards of each imported list.

    One writer serves a whole import call. Cards, activities and label
    associations are inserted once per list; checklists and their items are
    inserted in two further statements per list.
    """

    def __init__(
        self,
        db: Session,
        import_id: str,
        user_id: str,
        label_map: dict[str, str],
        warnings: WarningCollector,
    ):
        """Initialize the writer.

        Args:
            db: Database session.
            import_id: Import record ID stamped on created cards.
            user_id: User running the import.
            label_map: Normalized label name -> label ID for the board.
            warnings: Collector for truncation and deduplication notices.
        """
        self.db = db
        self.import_id = import_id
        self.user_id = user_id
        self.label_map = label_map
        self.warnings = warnings

    def write_list(self, list_data: ListData, list_id: str) -> int:
        """Create every card of ``list_data`` in the list ``list_id``.

        Args:
            list_data: Validated list with at least one card.
            list_id: Target list ID.

        Returns:
            int: Number of cards created.

        Raises:
            ImportWriteFailed: If the cards could not be created.
        """
        list_name = list_data.list_name
        card_rows = self._build_card_rows(list_data, list_id)

        created = repository.bulk_create_cards(self.db, card_rows)
        if len(created) != len(card_rows):
            raise ImportWriteFailed(
                f'Created {len(created)} of {len(card_rows)} cards for list "{list_name}"'
            )

        repository.bulk_create_card_activities(
            self.db,
            [
                {
                    "id": generate_uuid(),
                    "type": ActivityType.CARD_CREATED,
                    "card_id": row["id"],
                    "created_by_id": self.user_id,
                }
                for row in card_rows
            ],
        )

        self._write_card_labels(list_data, card_rows)
        self._write_checklists(list_data, card_rows)

        logger.info('Imported %d cards into list "%s"', len(created), list_name)
        return len(created)

    def _build_card_rows(self, list_data: ListData, list_id: str) -> list[dict[str, Any]]:
        rows = []
        for index, card in enumerate(list_data.cards):
            if len(card.title) > MAX_TITLE_LENGTH:
                self.warnings.title_truncated(
                    list_data.list_name, index + 1, card.title, MAX_TITLE_LENGTH
                )
            if len(card.description) > MAX_DESCRIPTION_LENGTH:
                self.warnings.description_truncated(
                    list_data.list_name,
                    index + 1,
                    card.title,
                    len(card.description),
                    MAX_DESCRIPTION_LENGTH,
                )
            rows.append(
                {
                    "id": generate_uuid(),
                    "public_id": generate_public_id(),
                    "list_id": list_id,
                    "title": card.title[:MAX_TITLE_LENGTH],
                    "description": card.description[:MAX_DESCRIPTION_LENGTH],
                    "index": index,
                    "created_by_id": self.user_id,
                    "import_id": self.import_id,
                }
            )
        return rows

    def _write_card_labels(self, list_data: ListData, card_rows: list[dict[str, Any]]) -> None:
        relations = []
        for card, row in zip(list_data.cards, card_rows):
            keys, had_duplicates = card_label_keys(card)
            for key in keys:
                label_id = self.label_map.get(key)
                if label_id:
                    relations.append({"card_id": row["id"], "label_id": label_id})
            if had_duplicates:
                self.warnings.duplicate_labels(list_data.list_name, card.title)

        repository.bulk_create_card_labels(self.db, relations)

    def _write_checklists(self, list_data: ListData, card_rows: list[dict[str, Any]]) -> None:
        pending: list[PendingChecklist] = []
        for card, card_row in zip(list_data.cards, card_rows):
            for j, checklist in enumerate(card.checklists):
                entry = PendingChecklist(
                    row={
                        "id": generate_uuid(),
                        "card_id": card_row["id"],
                        "name": checklist.name[:MAX_CHECKLIST_NAME_LENGTH],
                        "index": j,
                        "created_by_id": self.user_id,
                    },
                    card_title=card.title,
                    position=j + 1,
                    original_name_length=len(checklist.name),
                )
                for k, item in enumerate(checklist.items):
                    item_id = generate_uuid()
                    entry.items.append(
                        {
                            "id": item_id,
                            "checklist_id": entry.row["id"],
                            "title": item.title[:MAX_ITEM_TITLE_LENGTH],
                            "completed": item.completed,
                            "index": k,
                            "created_by_id": self.user_id,
                        }
                    )
                    entry.item_title_lengths[item_id] = len(item.title)
                pending.append(entry)

        if not pending:
            return

        created = set(repository.bulk_create_checklists(self.db, [p.row for p in pending]))
        written = [p for p in pending if p.row["id"] in created]
        for p in pending:
            if p.row["id"] not in created:
                logger.warning(
                    'Checklist %d on card "%s" was not created; skipping its %d items',
                    p.position,
                    p.card_title,
                    len(p.items),
                )

        item_rows = [item for p in written for item in p.items]
        created_items = set(repository.bulk_create_checklist_items(self.db, item_rows))

        list_name = list_data.list_name
        for p in written:
            if p.original_name_length > MAX_CHECKLIST_NAME_LENGTH:
                self.warnings.checklist_name_truncated(
                    list_name,
                    p.card_title,
                    p.position,
                    p.original_name_length,
                    MAX_CHECKLIST_NAME_LENGTH,
                )
            for k, item in enumerate(p.items, start=1):
                if item["id"] not in created_items:
                    logger.warning(
                        'Item %d of checklist %d on card "%s" was not created',
                        k,
                        p.position,
                        p.card_title,
                    )
                    continue
                original_length = p.item_title_lengths[item["id"]]
                if original_length > MAX_ITEM_TITLE_LENGTH:
                    self.warnings.item_title_truncated(
                        list_name,
                        p.card_title,
                        p.position,
                        k,
                        original_length,
                        MAX_ITEM_TITLE_LENGTH,
                    )
