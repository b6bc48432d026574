"""Tests for exporting a board as a JSON import document."""

import copy
import json
from datetime import datetime

from taskboard.config import Settings
from taskboard.db.models import BoardList, Card
from taskboard.imports.exporter import export_board, export_board_json
from taskboard.imports.locks import BoardLockRegistry
from taskboard.imports.parsers import JSON_IMPORT_TEMPLATE
from taskboard.imports.service import JsonImportService


def import_document(db, board, user, document):
    service = JsonImportService(db, settings=Settings(), locks=BoardLockRegistry())
    return service.import_json(board.public_id, json.dumps(document), user)


def with_sorted_labels(document):
    """Expected export of a document: labels come back sorted by name."""
    expected = copy.deepcopy(document)
    for list_data in expected:
        for card in list_data["cards"]:
            card["labels"] = sorted(card["labels"])
    return expected


class TestExportBoard:
    """Tests for export_board."""

    def test_empty_board(self, db, test_board):
        """Test a board without lists exports an empty document."""
        assert export_board(db, test_board.id) == []

    def test_list_without_cards(self, db, test_board):
        """Test lists without cards are exported with an empty card array."""
        db.add(BoardList(board_id=test_board.id, name="Later", normalized_name="later", index=0))
        db.commit()
        assert export_board(db, test_board.id) == [{"listName": "Later", "cards": []}]

    def test_exports_imported_template(self, db, test_board, test_user):
        """Test the imported template comes back minus its empty list."""
        import_document(db, test_board, test_user, JSON_IMPORT_TEMPLATE)

        exported = export_board(db, test_board.id)
        assert exported == with_sorted_labels(JSON_IMPORT_TEMPLATE[:1])

    def test_preserves_order(self, db, test_board, test_user):
        """Test lists, cards, checklists and items keep their order."""
        document = [
            {
                "listName": "B",
                "cards": [
                    {
                        "title": "second",
                        "description": "",
                        "labels": [],
                        "checklists": [
                            {"name": "z", "items": [{"title": "3", "completed": True}]},
                            {
                                "name": "a",
                                "items": [
                                    {"title": "2", "completed": False},
                                    {"title": "1", "completed": True},
                                ],
                            },
                        ],
                    },
                    {"title": "first", "description": "x", "labels": [], "checklists": []},
                ],
            },
            {
                "listName": "A",
                "cards": [{"title": "only", "description": "", "labels": [], "checklists": []}],
            },
        ]
        import_document(db, test_board, test_user, document)
        assert export_board(db, test_board.id) == document

    def test_skips_deleted_cards_and_lists(self, db, test_board, test_user):
        """Test soft-deleted lists and cards are left out."""
        import_document(
            db,
            test_board,
            test_user,
            [
                {"listName": "Keep", "cards": [{"title": "alive"}, {"title": "gone"}]},
                {"listName": "Drop", "cards": [{"title": "hidden"}]},
            ],
        )
        db.query(Card).filter(Card.title == "gone").one().deleted_at = datetime.now()
        db.query(BoardList).filter(BoardList.name == "Drop").one().deleted_at = datetime.now()
        db.commit()

        exported = export_board(db, test_board.id)
        assert [list_data["listName"] for list_data in exported] == ["Keep"]
        assert [card["title"] for card in exported[0]["cards"]] == ["alive"]

    def test_ties_ordered_by_id(self, db, test_board):
        """Test cards sharing an index and creation time come back in ID order."""
        board_list = BoardList(
            board_id=test_board.id, name="Same", normalized_name="same", index=0
        )
        db.add(board_list)
        db.flush()
        created = datetime(2026, 1, 1, 12, 0, 0)
        for card_id, title in [("cccc", "third"), ("aaaa", "first"), ("bbbb", "second")]:
            db.add(
                Card(
                    id=card_id,
                    list_id=board_list.id,
                    title=title,
                    description="",
                    index=0,
                    created_at=created,
                )
            )
        db.commit()

        cards = export_board(db, test_board.id)[0]["cards"]
        assert [card["title"] for card in cards] == ["first", "second", "third"]

    def test_only_target_board(self, db, test_board, other_board, test_user):
        """Test another board's lists are not exported."""
        import_document(db, other_board, test_user, JSON_IMPORT_TEMPLATE)
        assert export_board(db, test_board.id) == []


class TestRoundTrip:
    """Tests for importing an exported board."""

    def test_export_import_export(self, db, test_board, other_board, test_user):
        """Test re-importing an export into another board reproduces it."""
        import_document(db, test_board, test_user, JSON_IMPORT_TEMPLATE)
        first = export_board_json(db, test_board.id)

        result = import_document(db, other_board, test_user, json.loads(first))
        assert result.cards_created == 3
        assert result.warnings == []

        assert export_board_json(db, other_board.id) == first

    def test_json_formatting(self, db, test_board, test_user):
        """Test the document is indented with two spaces."""
        import_document(db, test_board, test_user, [{"listName": "A", "cards": [{"title": "T"}]}])
        content = export_board_json(db, test_board.id)
        assert content.startswith('[\n  {\n    "listName": "A"')
        assert json.loads(content) == [
            {
                "listName": "A",
                "cards": [{"title": "T", "description": "", "labels": [], "checklists": []}],
            }
        ]
