"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from contextlib import suppress
from typing import TYPE_CHECKING, Any

import discord

from .collector import ReactionCollector
from .errors import (
    EmptyPageSetError,
    InvalidPageError,
    NotInitializedError,
    PageIndexOutOfRangeError,
    PagesAlreadyCreatedError,
    log_reaction_failure,
)
from .restrictions import check_user, resolve_restriction
from .scheduling import create_task

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Self, Unpack

    from discord.ext import commands

    from ._types import PagesOptions, Restricted
    from .restrictions import RestrictionPolicy

LOGGER = logging.getLogger(__name__)

__all__ = (
    "HELP_EMBED",
    "EmbedPages",
    "PageEmojis",
    "PagesState",
    "render_page",
)

DEFAULT_DURATION = 60_000
SKIP_AMOUNT = 10


class PageEmojis(enum.StrEnum):
    skip_back = "⏮️"
    back = "◀️"
    forward = "▶️"
    skip_forward = "⏭️"
    stop = "⏹"
    help = "ℹ️"


# Discord does not always echo the variation selector back on reaction events
_EMOJI_LOOKUP: dict[str, PageEmojis] = {emoji.value.replace("\ufe0f", ""): emoji for emoji in PageEmojis}


def _lookup_emoji(emoji: discord.PartialEmoji | discord.Emoji | str) -> PageEmojis | None:
    return _EMOJI_LOOKUP.get(str(emoji).replace("\ufe0f", ""))


HELP_EMBED = discord.Embed(
    title="Embed Pages Navigation",
    description=(
        "**React:**\n"
        f"{PageEmojis.skip_back} to go 10 pages backwards.\n"
        f"{PageEmojis.back} to go 1 page backward.\n"
        f"{PageEmojis.forward} to go 1 page forward.\n"
        f"{PageEmojis.skip_forward} to go 10 pages forwards.\n"
        f"{PageEmojis.stop} to stop the navigation.\n"
        f"{PageEmojis.help} to display this embed again."
    ),
).set_footer(text=f"You are currently using this help embed. React {PageEmojis.help} again to continue navigating.")


class PagesState(enum.Enum):
    uninitialized = 0
    active = 1
    terminated = 2


def render_page(page: discord.Embed, footer: str | None = None) -> discord.Embed:
    """Returns a copy of ``page`` with ``footer`` as its footer text. ``page`` itself is left untouched."""
    embed = page.copy()
    if footer is not None:
        embed.set_footer(text=footer)
    return embed


class EmbedPages:
    """
    A message made of several embeds that users flip through with reactions.

    The first page is sent by :meth:`create_pages`, which also adds the navigation
    reactions and starts listening for them for ``duration`` milliseconds. Reactions
    are removed again as soon as they are seen so they behave like buttons.

    While the help embed is shown, navigation and page edits are ignored.

    Args:
        pages: The embeds to paginate. They are copied before a footer is applied.
        bot: The bot whose reaction events drive the pages.
        channel: Where the pages are sent.
        duration: How long the reactions are listened to, in milliseconds.
        restricted: Who may use the reactions. ``None`` for anyone, a user id or an
            iterable of them, or a predicate taking the user (may be a coroutine function).
        page_footer: Whether to show ``Page: i/N`` in the footer.
    """

    def __init__(
        self,
        pages: Sequence[discord.Embed],
        *,
        bot: commands.Bot,
        channel: discord.abc.Messageable,
        duration: int = DEFAULT_DURATION,
        restricted: Restricted = None,
        page_footer: bool = True,
    ) -> None:
        if duration <= 0:
            msg = f"duration must be a positive amount of milliseconds. ({duration} <= 0)"
            raise ValueError(msg)

        for page in pages:
            if not isinstance(page, discord.Embed):
                raise InvalidPageError(page)

        self.bot: commands.Bot = bot
        self.channel: discord.abc.Messageable = channel
        self.duration: int = duration
        self.restriction: RestrictionPolicy = resolve_restriction(restricted)
        self.page_footer: bool = page_footer

        self._pages: list[discord.Embed] = list(pages)
        self._current_page: int = 0
        self._using_help: bool = False
        self._state: PagesState = PagesState.uninitialized
        self._message: discord.Message | None = None
        self._collector: ReactionCollector | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_context(
        cls,
        ctx: commands.Context[Any],
        pages: Sequence[discord.Embed],
        **options: Unpack[PagesOptions],
    ) -> Self:
        """Creates embed pages sent to the context's channel, listening on the context's bot."""
        return cls(pages, bot=ctx.bot, channel=ctx.channel, **options)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} state={self._state.name} "
            f"page={self._current_page + 1}/{len(self._pages)} using_help={self._using_help}>"
        )

    @property
    def pages(self) -> tuple[discord.Embed, ...]:
        return tuple(self._pages)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def using_help(self) -> bool:
        return self._using_help

    @property
    def state(self) -> PagesState:
        return self._state

    @property
    def message(self) -> discord.Message | None:
        return self._message

    def _require_message(self, operation: str) -> discord.Message:
        if self._message is None:
            raise NotInitializedError(operation)
        return self._message

    def _blocked_by_help(self, message: discord.Message, action: str) -> bool:
        if not self._using_help:
            return False

        LOGGER.info(
            "%s @ #%s - Attempting to %s when user is currently using help embed.",
            message.id,
            getattr(message.channel, "name", message.channel.id),
            action,
        )
        return True

    def _footer(self) -> str | None:
        if not self.page_footer:
            return None
        return f"Page: {self._current_page + 1}/{len(self._pages)}"

    def _render_current(self) -> discord.Embed:
        return render_page(self._pages[self._current_page], self._footer())

    async def _show_current_page(self, message: discord.Message) -> None:
        LOGGER.debug("Showing page %s/%s on message %s.", self._current_page + 1, len(self._pages), message.id)
        await message.edit(embed=self._render_current())

    async def create_pages(self) -> discord.Message:
        """
        Sends the first page, adds the navigation reactions and starts listening to them.

        Raises:
            EmptyPageSetError: There are no pages.
            PagesAlreadyCreatedError: The pages were already sent.
        """
        async with self._lock:
            if self._state is not PagesState.uninitialized:
                raise PagesAlreadyCreatedError("These embed pages have already been created.")
            if not self._pages:
                raise EmptyPageSetError

            LOGGER.debug("Sending first page to channel...")
            message = await self.channel.send(embed=self._render_current())
            self._message = message
            self._state = PagesState.active

            # listen before adding reactions so nothing users add meanwhile is missed
            self._collector = ReactionCollector(
                self.bot,
                message,
                self.handle_reaction,
                duration=self.duration,
                on_end=self._on_collector_end,
            )
            self._collector.start()

        LOGGER.debug("Adding emoji reactions to message %s...", message.id)
        for emoji in PageEmojis:
            if self._state is PagesState.terminated:
                LOGGER.debug("Message %s was deleted while adding reactions.", message.id)
                break
            try:
                await message.add_reaction(emoji)
            except discord.HTTPException as error:
                log_reaction_failure(error, message, emoji)

        return message

    async def handle_reaction(self, reaction: discord.Reaction, user: discord.abc.User) -> None:
        """
        Handles a reaction added to the paginated message.

        The reaction is always removed first, then the user is checked against the
        restriction and finally the matching navigation action is run.
        """
        message = self._message
        if message is None:
            return

        create_task(
            message.remove_reaction(reaction.emoji, user),
            suppressed_exceptions=(discord.HTTPException,),
            name=f"remove_reaction-{reaction.emoji}-{message.id}-{user.id}",
        )

        if not await check_user(self.restriction, user):
            return

        emoji = _lookup_emoji(reaction.emoji)
        LOGGER.debug("Got reaction %s (%s) by %s on %s.", reaction.emoji, emoji and emoji.name, user, message.id)
        match emoji:
            case PageEmojis.skip_forward:
                await self._skip(SKIP_AMOUNT)
            case PageEmojis.forward:
                await self.next_page()
            case PageEmojis.back:
                await self.previous_page()
            case PageEmojis.skip_back:
                await self._skip(-SKIP_AMOUNT)
            case PageEmojis.stop:
                self.stop()
            case PageEmojis.help:
                await self.toggle_help_embed()
            case _:
                pass

    async def next_page(self) -> None:
        """Goes to the next page, wrapping around to the first one."""
        async with self._lock:
            message = self._require_message("go to the next page")
            if self._blocked_by_help(message, "navigate embed pages"):
                return

            self._current_page += 1
            if self._current_page >= len(self._pages):
                self._current_page = 0
            await self._show_current_page(message)

    async def previous_page(self) -> None:
        """Goes to the previous page, wrapping around to the last one."""
        async with self._lock:
            message = self._require_message("go to the previous page")
            if self._blocked_by_help(message, "navigate embed pages"):
                return

            self._current_page -= 1
            if self._current_page < 0:
                self._current_page = len(self._pages) - 1
            await self._show_current_page(message)

    async def go_to_page(self, page_number: int) -> None:
        """Goes to ``page_number`` (0-indexed), clamped between the first and the last page."""
        async with self._lock:
            message = self._require_message("turn to a page")
            if self._blocked_by_help(message, "navigate embed pages"):
                return

            self._go_to_page(page_number)
            await self._show_current_page(message)

    def _go_to_page(self, page_number: int) -> None:
        self._current_page = min(max(page_number, 0), len(self._pages) - 1)

    async def _skip(self, amount: int) -> None:
        async with self._lock:
            message = self._require_message("turn to a page")
            if self._blocked_by_help(message, "navigate embed pages"):
                return

            self._go_to_page(self._current_page + amount)
            await self._show_current_page(message)

    async def add_page(self, page: discord.Embed) -> None:
        """
        Adds a page at the end. The current page stays the same, only its page counter changes.

        Raises:
            NotInitializedError: The pages have not been created yet.
            InvalidPageError: ``page`` is not an embed.
        """
        async with self._lock:
            message = self._require_message("add a page")
            if self._blocked_by_help(message, "add an embed page"):
                return
            if not isinstance(page, discord.Embed):
                raise InvalidPageError(page)

            self._pages.append(page)
            await self._show_current_page(message)

    async def delete_page(self, page_number: int) -> None:
        """
        Removes the page at ``page_number`` (0-indexed).

        Removing the very last page deletes the whole message.

        Raises:
            NotInitializedError: The pages have not been created yet.
            PageIndexOutOfRangeError: There is no page at ``page_number``.
        """
        async with self._lock:
            message = self._require_message("delete a page")
            if self._blocked_by_help(message, "delete an embed page"):
                return
            if not 0 <= page_number < len(self._pages):
                raise PageIndexOutOfRangeError(page_number, len(self._pages))

            del self._pages[page_number]
            if self._current_page == len(self._pages):
                self._current_page -= 1

            if not self._pages:
                self._current_page = 0
                LOGGER.debug("Deleted the last page of message %s, deleting the message.", message.id)
                await self._delete(message)
                return

            await self._show_current_page(message)

    async def toggle_help_embed(self) -> None:
        """Shows the help embed, or goes back to the current page if it is already shown."""
        async with self._lock:
            message = self._require_message("toggle the help embed")
            self._using_help = not self._using_help

            if self._using_help:
                LOGGER.debug("Showing help embed on message %s.", message.id)
                await message.edit(embed=HELP_EMBED)
            else:
                await self._show_current_page(message)

    async def delete(self) -> None:
        """Stops listening to reactions and deletes the message."""
        async with self._lock:
            message = self._require_message("delete the embed pages")
            await self._delete(message)

    async def _delete(self, message: discord.Message) -> None:
        self._state = PagesState.terminated
        self._message = None
        if self._collector is not None:
            self._collector.stop()

        with suppress(discord.NotFound):
            await message.delete()

    def stop(self) -> None:
        """Stops listening to reactions. The message and its current page stay as they are."""
        if self._collector is not None:
            self._collector.stop()

    async def wait(self) -> None:
        """Waits until reactions are no longer listened to."""
        if self._collector is not None:
            await self._collector.wait()

    async def _on_collector_end(self) -> None:
        message = self._message
        if message is None:
            return

        LOGGER.debug("Ending pagination and clearing reactions on message %s.", message.id)
        try:
            await message.clear_reactions()
        except discord.NotFound:
            LOGGER.debug("Message %s is gone, no reactions to clear.", message.id)
        except discord.HTTPException as error:
            LOGGER.warning("Could not clear reactions on message %s: %s %s", message.id, error.status, error.text)
