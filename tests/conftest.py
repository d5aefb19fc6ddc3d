from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

from embed_pages import EmbedPages

BOT_USER_ID = 999
MESSAGE_ID = 1234


def make_user(user_id: int | str = 1, *, bot: bool = False) -> MagicMock:
    user = MagicMock(name=f"user-{user_id}")
    user.id = user_id
    user.bot = bot
    return user


def make_reaction(emoji: str, message_id: int = MESSAGE_ID) -> MagicMock:
    reaction = MagicMock(name=f"reaction-{emoji}")
    reaction.emoji = emoji
    reaction.message.id = message_id
    return reaction


def http_exception(status: int = 403, code: int = 0, message: str = "Missing Permissions") -> discord.HTTPException:
    response = MagicMock(status=status, reason=message)
    return discord.HTTPException(response, {"code": code, "message": message})


def not_found() -> discord.NotFound:
    response = MagicMock(status=404, reason="Not Found")
    return discord.NotFound(response, {"code": 10008, "message": "Unknown Message"})


def last_embed(message: MagicMock) -> discord.Embed:
    return message.edit.call_args.kwargs["embed"]


async def drain(rounds: int = 25) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def message() -> MagicMock:
    msg = MagicMock(name="message")
    msg.id = MESSAGE_ID
    msg.channel.id = 42
    msg.channel.name = "general"
    msg.edit = AsyncMock()
    msg.add_reaction = AsyncMock()
    msg.remove_reaction = AsyncMock()
    msg.clear_reactions = AsyncMock()
    msg.delete = AsyncMock()
    return msg


@pytest.fixture
def channel(message: MagicMock) -> MagicMock:
    chan = MagicMock(name="channel")
    chan.send = AsyncMock(return_value=message)
    return chan


@pytest.fixture
def bot() -> MagicMock:
    client = MagicMock(name="bot")
    client.user.id = BOT_USER_ID
    return client


@pytest.fixture
def embeds() -> list[discord.Embed]:
    return [discord.Embed(title="A"), discord.Embed(title="B"), discord.Embed(title="C")]


@pytest_asyncio.fixture
async def pages(embeds: list[discord.Embed], bot: MagicMock, channel: MagicMock):
    paginated = EmbedPages(embeds, bot=bot, channel=channel)
    await paginated.create_pages()
    yield paginated
    paginated.stop()
    await paginated.wait()
