"""Parsing, preprocessing and validation of JSON import documents.

Untrusted input goes through two independent stages:

1. ``preprocess_payload`` tolerates missing optional fields and drops
   malformed nested entries, but fails fast on unusable lists and cards.
2. ``validate_payload`` enforces the document shape and its size bounds and
   reports every violation at once.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from taskboard.db.models import normalize_name
from taskboard.exceptions import ValidationFailed
from taskboard.imports.schemas import ListData, ListDataArray

logger = logging.getLogger(__name__)


JSON_IMPORT_TEMPLATE: list[dict[str, Any]] = [
    {
        "listName": "To Do",
        "cards": [
            {
                "title": "Implement user authentication",
                "description": "Add OAuth2 login with Google and GitHub providers",
                "labels": ["Backend", "High Priority"],
                "checklists": [
                    {
                        "name": "Implementation Steps",
                        "items": [
                            {"title": "Set up OAuth providers", "completed": False},
                            {"title": "Create auth endpoints", "completed": False},
                            {"title": "Add session management", "completed": False},
                        ],
                    }
                ],
            },
            {
                "title": "Design landing page",
                "description": "Create responsive landing page with hero section",
                "labels": ["Frontend", "Design"],
                "checklists": [],
            },
            {
                "title": "Write API documentation",
                "description": "",
                "labels": ["Documentation"],
                "checklists": [
                    {
                        "name": "Documentation Tasks",
                        "items": [
                            {"title": "Document authentication endpoints", "completed": False},
                            {"title": "Add code examples", "completed": False},
                        ],
                    }
                ],
            },
        ],
    },
    {
        "listName": "In Progress",
        "cards": [],
    },
]


def generate_json_template() -> str:
    """Generate the example import document.

    Returns:
        JSON string with two-space indentation.
    """
    return json.dumps(JSON_IMPORT_TEMPLATE, indent=2)


def parse_json_payload(raw: str, max_bytes: int | None = None) -> Any:
    """Decode the JSON-encoded import document.

    Args:
        raw: JSON string supplied by the client.
        max_bytes: Reject payloads larger than this many UTF-8 bytes.

    Returns:
        The decoded JSON value.

    Raises:
        ValidationFailed: If the payload is too large, not valid JSON, nested
            too deeply, or holds text that cannot be stored as UTF-8.
    """
    if max_bytes is not None:
        # Lone surrogates count as three bytes here and are rejected below
        size = len(raw.encode("utf-8", errors="surrogatepass"))
        if size > max_bytes:
            raise ValidationFailed(
                f"Payload too large: {size} bytes (maximum {max_bytes})"
            )
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.info("Rejected import payload with invalid JSON: %s", e)
        raise ValidationFailed("Invalid JSON format", errors=[str(e)]) from e
    except RecursionError as e:
        logger.info("Rejected import payload nested too deeply")
        raise ValidationFailed(
            "Invalid JSON format", errors=["document is nested too deeply"]
        ) from e

    # Covers raw lone surrogates and \ud800-style escapes alike
    try:
        json.dumps(data, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as e:
        logger.info("Rejected import payload with invalid text: %s", e)
        raise ValidationFailed(
            "Invalid text encoding", errors=[f"unpaired surrogate at position {e.start}"]
        ) from e
    except RecursionError as e:
        raise ValidationFailed(
            "Invalid JSON format", errors=["document is nested too deeply"]
        ) from e
    return data


def _is_named(entry: Any, key: str) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get(key), str) and bool(entry[key])


def _preprocess_items(items: Any) -> list[dict[str, Any]]:
    if not isinstance(items, list):
        return []

    processed = []
    for item in items:
        if not _is_named(item, "title"):
            logger.debug("Dropping invalid checklist item: %r", item)
            continue
        completed = item.get("completed")
        processed.append(
            {
                "title": item["title"],
                "completed": False if completed is None else completed,
            }
        )
    return processed


def _preprocess_checklists(checklists: Any) -> list[dict[str, Any]]:
    if not isinstance(checklists, list):
        return []

    processed = []
    for checklist in checklists:
        if not _is_named(checklist, "name"):
            logger.debug("Dropping invalid checklist: %r", checklist)
            continue
        processed.append(
            {
                "name": checklist["name"],
                "items": _preprocess_items(checklist.get("items")),
            }
        )
    return processed


def _preprocess_cards(cards: list[Any], path: str) -> list[dict[str, Any]]:
    processed = []
    for index, card in enumerate(cards):
        if not isinstance(card, dict):
            raise ValidationFailed(
                f"Card at index {index} is invalid",
                errors=[f"{path}.{index}: card must be an object"],
            )

        labels = card.get("labels")
        if not isinstance(labels, list):
            labels = []
        title = card.get("title")
        description = card.get("description")
        processed.append(
            {
                "title": "" if title is None else title,
                "description": "" if description is None else description,
                "labels": [label for label in labels if label is not None],
                "checklists": _preprocess_checklists(card.get("checklists")),
            }
        )
    return processed


def preprocess_payload(data: Any) -> Any:
    """Coerce a decoded import document into a shape the validator can check.

    Missing optional fields get their defaults and malformed checklists or
    checklist items are dropped. Never emits warnings.

    Args:
        data: Decoded JSON value (single list object or array of lists).

    Returns:
        The preprocessed document. Values that are neither a list array nor a
        list object are returned unchanged for the validator to reject.

    Raises:
        ValidationFailed: If a list entry has no usable name or a card is not
            an object.
    """
    if isinstance(data, list):
        processed = []
        for index, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise ValidationFailed(
                    f"List at index {index} is invalid",
                    errors=[f"{index}: list must be an object"],
                )
            if not isinstance(entry.get("listName"), str) or not entry["listName"].strip():
                raise ValidationFailed(
                    f"List at index {index} has invalid or missing listName",
                    errors=[f"{index}.listName: must be a non-empty string"],
                )
            cards = entry.get("cards")
            processed.append(
                {
                    "listName": entry["listName"].strip(),
                    "cards": _preprocess_cards(
                        cards if isinstance(cards, list) else [], f"{index}.cards"
                    ),
                }
            )
        return processed

    if isinstance(data, dict) and isinstance(data.get("cards"), list):
        list_name = data.get("listName")
        return {
            "listName": list_name.strip() if isinstance(list_name, str) else list_name,
            "cards": _preprocess_cards(data["cards"], "cards"),
        }

    return data


def format_validation_errors(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into "path: reason" strings."""
    messages = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"])
        messages.append(f"{path}: {error['msg']}" if path else error["msg"])
    return messages


def validate_payload(data: Any) -> list[ListData]:
    """Validate a preprocessed document against the import schema.

    Args:
        data: Output of ``preprocess_payload``.

    Returns:
        The lists to import; a single list object becomes a one-element list.

    Raises:
        ValidationFailed: With every violation found, if the shape is invalid.
    """
    try:
        if isinstance(data, list):
            return ListDataArray.validate_python(data)
        return [ListData.model_validate(data)]
    except ValidationError as e:
        errors = format_validation_errors(e)
        raise ValidationFailed(
            "Invalid data structure:\n" + "\n".join(errors), errors=errors
        ) from e


def load_import_document(raw: str, max_bytes: int | None = None) -> list[ListData]:
    """Parse, preprocess and validate a JSON import document.

    Args:
        raw: JSON string supplied by the client.
        max_bytes: Optional payload size limit.

    Returns:
        Validated lists, in document order.
    """
    return validate_payload(preprocess_payload(parse_json_payload(raw, max_bytes)))


def collect_label_names(lists: list[ListData]) -> list[str]:
    """Collect distinct label names referenced anywhere in the document.

    Names are trimmed, empty names skipped and duplicates detected ignoring
    case; the first spelling seen is kept.

    Args:
        lists: Validated lists.

    Returns:
        Label names in first-seen order.
    """
    seen: dict[str, str] = {}
    for list_data in lists:
        for card in list_data.cards:
            for label in card.labels:
                name = label.strip()
                if name and normalize_name(name) not in seen:
                    seen[normalize_name(name)] = name
    return list(seen.values())
