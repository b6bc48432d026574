"""Rebuild the JSON import document from a board's current state.

Read-only. Every query after the list query is keyed by set membership over
the previous result, so the number of queries does not grow with the number
of cards. Rows sharing an index and a creation second are ordered by ID.
"""

import json
from collections import defaultdict
from typing import Any

from sqlalchemy.orm import Session

from taskboard.db.models import BoardList, Card, CardLabel, Checklist, ChecklistItem, Label


def export_board(db: Session, board_id: str) -> list[dict[str, Any]]:
    """Export a board's lists, cards, labels and checklists.

    The result has the shape the JSON importer accepts, so it can be imported
    again. Identifiers and label colours are not included.

    Args:
        db: Database session.
        board_id: Board ID.

    Returns:
        list[dict]: One entry per non-deleted list, in board order.
    """
    lists = (
        db.query(BoardList.id, BoardList.name)
        .filter(BoardList.board_id == board_id, BoardList.deleted_at.is_(None))
        .order_by(BoardList.index, BoardList.created_at, BoardList.id)
        .all()
    )
    list_ids = [bl.id for bl in lists]

    cards = []
    if list_ids:
        cards = (
            db.query(Card.id, Card.list_id, Card.title, Card.description)
            .filter(Card.list_id.in_(list_ids), Card.deleted_at.is_(None))
            .order_by(Card.index, Card.created_at, Card.id)
            .all()
        )
    card_ids = [c.id for c in cards]

    labels_by_card: dict[str, list[str]] = defaultdict(list)
    checklists = []
    if card_ids:
        label_rows = (
            db.query(CardLabel.card_id, Label.name)
            .join(Label, Label.id == CardLabel.label_id)
            .filter(CardLabel.card_id.in_(card_ids), Label.deleted_at.is_(None))
            .order_by(Label.name, Label.id)
            .all()
        )
        for card_id, name in label_rows:
            labels_by_card[card_id].append(name)

        checklists = (
            db.query(Checklist.id, Checklist.card_id, Checklist.name)
            .filter(Checklist.card_id.in_(card_ids), Checklist.deleted_at.is_(None))
            .order_by(Checklist.index, Checklist.created_at, Checklist.id)
            .all()
        )

    items_by_checklist: dict[str, list[dict[str, Any]]] = defaultdict(list)
    checklist_ids = [cl.id for cl in checklists]
    if checklist_ids:
        items = (
            db.query(ChecklistItem.checklist_id, ChecklistItem.title, ChecklistItem.completed)
            .filter(
                ChecklistItem.checklist_id.in_(checklist_ids),
                ChecklistItem.deleted_at.is_(None),
            )
            .order_by(ChecklistItem.index, ChecklistItem.created_at, ChecklistItem.id)
            .all()
        )
        for item in items:
            items_by_checklist[item.checklist_id].append(
                {"title": item.title, "completed": bool(item.completed)}
            )

    checklists_by_card: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for checklist in checklists:
        checklists_by_card[checklist.card_id].append(
            {"name": checklist.name, "items": items_by_checklist[checklist.id]}
        )

    cards_by_list: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for card in cards:
        cards_by_list[card.list_id].append(
            {
                "title": card.title,
                "description": card.description or "",
                "labels": labels_by_card[card.id],
                "checklists": checklists_by_card[card.id],
            }
        )

    return [{"listName": bl.name, "cards": cards_by_list[bl.id]} for bl in lists]


def export_board_json(db: Session, board_id: str) -> str:
    """Export a board as a JSON string with two-space indentation."""
    return json.dumps(export_board(db, board_id), indent=2, ensure_ascii=False)
