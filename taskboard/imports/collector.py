"""Accumulates non-fatal import notices.

Every silent coercion performed while writing (truncation, label
deduplication) is recorded here so the caller can report it. A collector
belongs to a single import call and is passed explicitly to each stage.
"""

from collections.abc import Iterator


def _title_preview(title: str, length: int = 50) -> str:
    return f"{title[:length]}..."


class WarningCollector:
    """Ordered list of human-readable import warnings."""

    def __init__(self) -> None:
        self._messages: list[str] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def add(self, message: str) -> None:
        self._messages.append(message)

    def title_truncated(
        self, list_name: str, card_position: int, title: str, limit: int
    ) -> None:
        """Record a card title cut down to ``limit`` characters.

        Args:
            list_name: Name of the list in the import document.
            card_position: 1-based position of the card in that list.
            title: Original, untruncated title.
            limit: Stored length.
        """
        self.add(
            f'List "{list_name}", Card {card_position} "{_title_preview(title)}": '
            f"Title truncated from {len(title)} to {limit} characters"
        )

    def description_truncated(
        self, list_name: str, card_position: int, title: str, original_length: int, limit: int
    ) -> None:
        self.add(
            f'List "{list_name}", Card {card_position} "{title}": '
            f"Description truncated from {original_length} to {limit:,} characters"
        )

    def duplicate_labels(self, list_name: str, card_title: str) -> None:
        self.add(f'List "{list_name}", Card "{card_title}": Duplicate labels removed')

    def checklist_name_truncated(
        self,
        list_name: str,
        card_title: str,
        checklist_position: int,
        original_length: int,
        limit: int,
    ) -> None:
        self.add(
            f'List "{list_name}", Card "{card_title}", Checklist {checklist_position}: '
            f"Name truncated from {original_length} to {limit} characters"
        )

    def item_title_truncated(
        self,
        list_name: str,
        card_title: str,
        checklist_position: int,
        item_position: int,
        original_length: int,
        limit: int,
    ) -> None:
        self.add(
            f'List "{list_name}", Card "{card_title}", Checklist {checklist_position}, '
            f"Item {item_position}: Title truncated from {original_length} to {limit} characters"
        )

    def to_list(self) -> list[str]:
        return list(self._messages)
