"""Tests for the JSON import/export API endpoints."""

import json
from datetime import UTC, datetime

from fastapi import status

from taskboard.db.models import Card, ImportBatch
from taskboard.imports.parsers import JSON_IMPORT_TEMPLATE


def import_body(board, document=JSON_IMPORT_TEMPLATE):
    return {"boardPublicId": board.public_id, "data": json.dumps(document)}


def post_raw_json(client, url, body):
    """POST ``body`` encoded with ASCII escapes, so unpaired surrogates survive."""
    return client.post(
        url, content=json.dumps(body), headers={"Content-Type": "application/json"}
    )


class TestImportEndpoint:
    """Tests for POST /api/imports/json."""

    def test_requires_authentication(self, client, test_board):
        """Test anonymous requests are rejected."""
        response = client.post("/api/imports/json", json=import_body(test_board))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_import_success(self, authenticated_client, test_board, db):
        """Test a successful import returns camelCase counts."""
        response = authenticated_client.post("/api/imports/json", json=import_body(test_board))
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"cardsCreated": 3, "listsProcessed": 2, "warnings": []}
        assert db.query(Card).count() == 3

    def test_import_returns_warnings(self, authenticated_client, test_board):
        """Test truncation warnings are returned."""
        document = [{"listName": "A", "cards": [{"title": "t" * 256}]}]
        response = authenticated_client.post(
            "/api/imports/json", json=import_body(test_board, document)
        )
        assert response.status_code == status.HTTP_200_OK
        warnings = response.json()["warnings"]
        assert len(warnings) == 1
        assert "Title truncated from 256 to 255 characters" in warnings[0]

    def test_non_member_forbidden(self, outsider_client, test_board):
        """Test users outside the workspace get 403."""
        response = outsider_client.post("/api/imports/json", json=import_body(test_board))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_board(self, authenticated_client):
        """Test a missing board gives 404."""
        response = authenticated_client.post(
            "/api/imports/json",
            json={"boardPublicId": "missing00000", "data": json.dumps(JSON_IMPORT_TEMPLATE)},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Board not found"

    def test_invalid_json(self, authenticated_client, test_board, db):
        """Test unparsable data gives 400 and records nothing."""
        response = authenticated_client.post(
            "/api/imports/json",
            json={"boardPublicId": test_board.public_id, "data": "{oops"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid JSON format"
        assert db.query(ImportBatch).count() == 0

    def test_invalid_structure(self, authenticated_client, test_board):
        """Test schema violations give 400 with their paths."""
        document = [{"listName": "A", "cards": [{"title": ""}]}]
        response = authenticated_client.post(
            "/api/imports/json", json=import_body(test_board, document)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "0.cards.0.title" in response.json()["detail"]

    def test_unencodable_text_rejected(self, authenticated_client, test_board, db):
        """Test an unpaired surrogate in the document gives 400 and records nothing."""
        body = {
            "boardPublicId": test_board.public_id,
            "data": '[{"listName": "\ud800", "cards": [{"title": "A"}]}]',
        }
        response = post_raw_json(authenticated_client, "/api/imports/json", body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid text encoding"
        assert db.query(ImportBatch).count() == 0

    def test_deeply_nested_document_rejected(self, authenticated_client, test_board, db):
        """Test a document nested too deeply gives 400 and records nothing."""
        body = {"boardPublicId": test_board.public_id, "data": "[" * 100000 + "]" * 100000}
        response = post_raw_json(authenticated_client, "/api/imports/json", body)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid JSON format"
        assert db.query(ImportBatch).count() == 0

    def test_short_board_id_rejected(self, authenticated_client):
        """Test board IDs shorter than 12 characters fail request validation."""
        response = authenticated_client.post(
            "/api/imports/json", json={"boardPublicId": "short", "data": "[]"}
        )
        assert response.status_code == 422


class TestValidateEndpoint:
    """Tests for POST /api/imports/json/validate."""

    def test_valid(self, authenticated_client):
        """Test a valid document preview."""
        response = authenticated_client.post(
            "/api/imports/json/validate", json={"data": json.dumps(JSON_IMPORT_TEMPLATE)}
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["valid"] is True
        assert data["listsCount"] == 2
        assert data["cardsCount"] == 3
        assert data["errors"] == []

    def test_invalid(self, authenticated_client):
        """Test an invalid document preview."""
        response = authenticated_client.post("/api/imports/json/validate", json={"data": "nope"})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["valid"] is False
        assert len(data["errors"]) == 1

    def test_unencodable_text(self, authenticated_client):
        """Test an unpaired surrogate is reported as invalid, not a server error."""
        body = {"data": '[{"listName": "\ud800", "cards": []}]'}
        response = post_raw_json(authenticated_client, "/api/imports/json/validate", body)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["valid"] is False

    def test_deeply_nested(self, authenticated_client):
        """Test a deeply nested document is reported as invalid."""
        body = {"data": "[" * 100000 + "]" * 100000}
        response = post_raw_json(authenticated_client, "/api/imports/json/validate", body)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "valid": False,
            "listsCount": 0,
            "cardsCount": 0,
            "labels": [],
            "errors": ["document is nested too deeply"],
        }


class TestTemplateEndpoint:
    """Tests for GET /api/imports/json/template."""

    def test_template(self, authenticated_client):
        """Test the template document is returned."""
        response = authenticated_client.get("/api/imports/json/template")
        assert response.status_code == status.HTTP_200_OK
        assert "application/json" in response.headers["content-type"]
        assert response.json() == JSON_IMPORT_TEMPLATE


class TestExportEndpoint:
    """Tests for GET /api/imports/json/export/{board_public_id}."""

    def test_export_download(self, authenticated_client, test_board):
        """Test the export is a JSON file download."""
        authenticated_client.post("/api/imports/json", json=import_body(test_board))

        response = authenticated_client.get(f"/api/imports/json/export/{test_board.public_id}")
        assert response.status_code == status.HTTP_200_OK
        assert "application/json" in response.headers["content-type"]
        today = datetime.now(UTC).strftime("%Y-%m-%d")
        assert response.headers["content-disposition"] == (
            f'attachment; filename="board-export-{test_board.public_id}-{today}.json"'
        )

        data = response.json()
        assert [list_data["listName"] for list_data in data] == ["To Do"]
        assert len(data[0]["cards"]) == 3

    def test_export_requires_authentication(self, client, test_board):
        """Test anonymous export is rejected."""
        response = client.get(f"/api/imports/json/export/{test_board.public_id}")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_export_non_member(self, outsider_client, test_board):
        """Test users outside the workspace cannot export."""
        response = outsider_client.get(f"/api/imports/json/export/{test_board.public_id}")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_export_unknown_board(self, authenticated_client):
        """Test exporting a missing board."""
        response = authenticated_client.get("/api/imports/json/export/missing00000")
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestImportRecordEndpoint:
    """Tests for GET /api/imports/{import_id}."""

    def test_get_import(self, authenticated_client, test_board, db):
        """Test the import record view."""
        authenticated_client.post("/api/imports/json", json=import_body(test_board))
        batch = db.query(ImportBatch).one()

        response = authenticated_client.get(f"/api/imports/{batch.id}")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == batch.id
        assert data["status"] == "success"
        assert data["boardPublicId"] == test_board.public_id
        assert data["listsCreated"] == 1
        assert data["labelsCreated"] == 5
        assert data["cardsCreated"] == 3

    def test_unknown_import(self, authenticated_client):
        """Test a missing record gives 404."""
        response = authenticated_client.get("/api/imports/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Import not found"


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        """Test the service reports healthy."""
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "healthy", "app": "taskboard"}
