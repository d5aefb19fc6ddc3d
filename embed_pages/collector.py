"""
This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at http://mozilla.org/MPL/2.0/.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import discord
    from discord.ext import commands

    ReactionCallback = Callable[[discord.Reaction, discord.abc.User], Awaitable[None]]
    EndCallback = Callable[[], Awaitable[None]]

LOGGER = logging.getLogger(__name__)

__all__ = ("ReactionCollector",)


class ReactionCollector:
    """
    Collects reactions added to a single message for a bounded amount of time.

    Reactions are queued by an ``on_reaction_add`` listener and handed to ``callback``
    one at a time, in the order they arrived. The window closes when ``duration``
    milliseconds have passed since :meth:`start` or when :meth:`stop` is called,
    after which ``on_end`` is awaited once.
    """

    def __init__(
        self,
        bot: commands.Bot,
        message: discord.Message,
        callback: ReactionCallback,
        *,
        duration: float,
        on_end: EndCallback | None = None,
    ) -> None:
        self.bot: commands.Bot = bot
        self.message: discord.Message = message
        self.duration: float = duration
        self._callback = callback
        self._on_end = on_end
        self._queue: asyncio.Queue[tuple[discord.Reaction, discord.abc.User] | None] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._stopped: bool = False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} message_id={self.message.id} stopped={self._stopped}>"

    def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("This collector has already been started.")

        self.bot.add_listener(self._on_reaction_add, "on_reaction_add")
        self._task = asyncio.create_task(self._run(), name=f"reaction-collector-{self.message.id}")

    def stop(self) -> None:
        """Ends the listening window early. Calling this more than once is harmless."""
        if self._stopped:
            return

        LOGGER.debug("Stopping reaction collector on message %s.", self.message.id)
        self._stopped = True
        # wakes up a consumer that is blocked on an empty queue
        self._queue.put_nowait(None)

    def is_finished(self) -> bool:
        return self._task is not None and self._task.done()

    async def wait(self) -> None:
        """Waits until the listening window has ended."""
        if self._task is None:
            return
        await asyncio.shield(self._task)

    async def _on_reaction_add(self, reaction: discord.Reaction, user: discord.abc.User) -> None:
        if self._stopped or reaction.message.id != self.message.id:
            return

        # our own affordances
        if self.bot.user is not None and user.id == self.bot.user.id:
            return

        self._queue.put_nowait((reaction, user))

    async def _run(self) -> None:
        try:
            async with asyncio.timeout(self.duration / 1000):
                while not self._stopped:
                    item = await self._queue.get()
                    if item is None:
                        break

                    reaction, user = item
                    try:
                        await self._callback(reaction, user)
                    except Exception:
                        LOGGER.exception("Error handling reaction %s by %s on message %s.", reaction, user, self.message.id)
        except TimeoutError:
            LOGGER.debug("Reaction collector on message %s timed out.", self.message.id)
        finally:
            self._stopped = True
            self.bot.remove_listener(self._on_reaction_add, "on_reaction_add")

        LOGGER.info("Reaction collector on message %s ended.", self.message.id)
        if self._on_end is not None:
            await self._on_end()
