"""Pydantic schemas for JSON import/export of lists and cards."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, TypeAdapter

# --- Payload bounds ---

MAX_LISTS = 50
MAX_LIST_NAME_LENGTH = 255
MAX_CARDS_PER_LIST = 500
MAX_LABELS_PER_CARD = 20
MAX_LABEL_LENGTH = 50
MAX_CHECKLISTS_PER_CARD = 10
MAX_ITEMS_PER_CHECKLIST = 50

# Longer values are truncated on write, with a warning
MAX_TITLE_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 10000
MAX_CHECKLIST_NAME_LENGTH = 255
MAX_ITEM_TITLE_LENGTH = 500


# --- Import document ---


class ChecklistItemData(BaseModel):
    """A checklist item in an import document."""

    title: str = Field(min_length=1)
    completed: StrictBool = False


class ChecklistData(BaseModel):
    """A checklist in an import document."""

    name: str = Field(min_length=1)
    items: list[ChecklistItemData] = Field(
        default_factory=list, max_length=MAX_ITEMS_PER_CHECKLIST
    )


class CardData(BaseModel):
    """A card in an import document.

    Attributes:
        title: Card title (required).
        description: Card description, empty when absent.
        labels: Label names; matched to board labels ignoring case.
        checklists: Checklists with their items, in display order.
    """

    title: str = Field(min_length=1)
    description: str = ""
    labels: list[Annotated[str, Field(max_length=MAX_LABEL_LENGTH)]] = Field(
        default_factory=list, max_length=MAX_LABELS_PER_CARD
    )
    checklists: list[ChecklistData] = Field(
        default_factory=list, max_length=MAX_CHECKLISTS_PER_CARD
    )


class ListData(BaseModel):
    """A named list of cards in an import document."""

    model_config = ConfigDict(populate_by_name=True)

    list_name: str = Field(
        alias="listName", min_length=1, max_length=MAX_LIST_NAME_LENGTH
    )
    cards: list[CardData] = Field(max_length=MAX_CARDS_PER_LIST)


ListDataArray = TypeAdapter(
    Annotated[list[ListData], Field(min_length=1, max_length=MAX_LISTS)]
)


# --- API request/response schemas ---


class ImportJsonRequest(BaseModel):
    """Request body for the JSON import endpoint.

    Attributes:
        board_public_id: Public ID of the target board.
        data: JSON-encoded import document.
    """

    model_config = ConfigDict(populate_by_name=True)

    board_public_id: str = Field(alias="boardPublicId", min_length=12)
    data: str


class ImportJsonResult(BaseModel):
    """Result of a successful JSON import.

    Attributes:
        cards_created: Number of cards created across all lists.
        lists_processed: Number of list entries in the document.
        warnings: Non-fatal notices about truncated or deduplicated data.
    """

    model_config = ConfigDict(populate_by_name=True)

    cards_created: int = Field(0, alias="cardsCreated")
    lists_processed: int = Field(0, alias="listsProcessed")
    warnings: list[str] = Field(default_factory=list)


class ValidateJsonRequest(BaseModel):
    """Request body for the dry-run validation endpoint."""

    data: str


class ImportJsonPreview(BaseModel):
    """Dry-run validation result; nothing is written.

    Attributes:
        valid: Whether the document would be accepted.
        lists_count: Number of list entries.
        cards_count: Number of cards across all lists.
        labels: Distinct label names referenced, first spelling wins.
        errors: Validation errors when the document is rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    valid: bool = False
    lists_count: int = Field(0, alias="listsCount")
    cards_count: int = Field(0, alias="cardsCount")
    labels: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class ImportBatchResponse(BaseModel):
    """Import record with counts of the entities it created."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str
    status: str
    board_public_id: Optional[str] = Field(None, alias="boardPublicId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    finished_at: Optional[datetime] = Field(None, alias="finishedAt")
    error_message: Optional[str] = Field(None, alias="errorMessage")
    lists_created: int = Field(0, alias="listsCreated")
    labels_created: int = Field(0, alias="labelsCreated")
    cards_created: int = Field(0, alias="cardsCreated")
