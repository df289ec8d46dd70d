"""Comment thread state for a variant list and the intents it emits."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .models import JobComment, Variant

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "Are you sure you want to delete this comment?"

# Asks the user a yes/no question; the surrounding UI supplies it
ConfirmationPrompt = Callable[[str], Awaitable[bool]]


@dataclass
class CommentAdded:
    variant_key: str
    comment: str


@dataclass
class CommentDeleted:
    variant_key: str
    comment_id: str


def comment_key(record: Variant) -> str:
    return str(record.position)


class CommentPanel:
    """Expanded threads, unsent drafts and add/delete intents.

    Persistence is not handled here: callers act on the returned intents.
    """

    def __init__(
        self,
        confirm: ConfirmationPrompt,
        comments: dict[str, list[JobComment]] | None = None,
    ):
        self.confirm = confirm
        self.comments = comments or {}
        self._expanded: set[str] = set()
        self._drafts: dict[str, str] = {}

    def comments_for(self, variant_key: str) -> list[JobComment]:
        return self.comments.get(variant_key, [])

    def toggle_expanded(self, variant_key: str) -> bool:
        if variant_key in self._expanded:
            self._expanded.remove(variant_key)
            return False
        self._expanded.add(variant_key)
        return True

    def is_expanded(self, variant_key: str) -> bool:
        return variant_key in self._expanded

    def update_draft(self, variant_key: str, text: str) -> None:
        self._drafts[variant_key] = text

    def draft(self, variant_key: str) -> str:
        return self._drafts.get(variant_key, "")

    def submit(self, variant_key: str) -> CommentAdded | None:
        """Emit the trimmed draft and clear it; blank drafts emit nothing."""
        text = self.draft(variant_key).strip()
        if not text:
            return None
        self.update_draft(variant_key, "")
        return CommentAdded(variant_key=variant_key, comment=text)

    async def delete(self, variant_key: str, comment_id: str) -> CommentDeleted | None:
        """Emit a delete intent once the user confirms."""
        if not await self.confirm(DELETE_CONFIRMATION):
            logger.debug("Deletion of comment %s cancelled", comment_id)
            return None
        return CommentDeleted(variant_key=variant_key, comment_id=comment_id)
