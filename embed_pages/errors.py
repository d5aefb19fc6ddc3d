from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from discord import HTTPException, Message


LOGGER = logging.getLogger(__name__)

__all__ = (
    "EmbedPagesError",
    "EmptyPageSetError",
    "InvalidPageError",
    "NotInitializedError",
    "PageIndexOutOfRangeError",
    "PagesAlreadyCreatedError",
    "log_reaction_failure",
)


class EmbedPagesError(Exception):
    """Base exception for every error raised by an embed pages session."""


class EmptyPageSetError(EmbedPagesError, ValueError):
    """Raised when attempting to create embed pages with no pages."""

    def __init__(self) -> None:
        super().__init__("Tried to create embed pages with no pages in the pages list.")


class NotInitializedError(EmbedPagesError, RuntimeError):
    """
    Exception raised when an operation is attempted without a live paginated message.

    This covers both calling before `create_pages` and calling after the session was deleted.

    Attributes:
        `operation` -- name of the operation that was attempted
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation

        super().__init__(f"Tried to {operation} but the embed pages have not been created or were deleted.")


class PagesAlreadyCreatedError(EmbedPagesError, RuntimeError):
    """Raised when `create_pages` is called on a session that was already sent."""


class InvalidPageError(EmbedPagesError, TypeError):
    """
    Raised when a page is not a ``discord.Embed``.

    Attributes:
        `page` -- the offending value
    """

    def __init__(self, page: Any) -> None:
        self.page = page

        super().__init__(f"Expected a discord.Embed page, got {type(page).__name__!r} instead.")


class PageIndexOutOfRangeError(EmbedPagesError, IndexError):
    """
    Raised when deleting a page index that does not exist.

    Attributes:
        `index` -- the requested page index
        `page_count` -- the number of pages at the time of the request
    """

    def __init__(self, index: int, page_count: int) -> None:
        self.index = index
        self.page_count = page_count

        super().__init__(f"Page index {index} does not exist (there are {page_count} pages).")


def log_reaction_failure(error: HTTPException, message: Message, emoji: str) -> None:
    """
    Logs a failed reaction affordance on ``message``.

    Attaching affordances is best-effort, the remaining reactions still work,
    so this never re-raises.

    Args:
        error: The raised ``discord.HTTPException``.
        message: The paginated message the reaction was meant for.
        emoji: The reaction that could not be added.
    """
    if error.code == 90001:
        LOGGER.info(
            "Failed to add reaction %s to message %d-%d since a user has blocked the bot",
            emoji,
            message.channel.id,
            message.id,
        )
        return

    LOGGER.warning(
        "Some emojis failed to react: could not add %s to message %d-%d (%s %s)",
        emoji,
        message.channel.id,
        message.id,
        error.status,
        error.text,
    )
