from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, NotRequired, TypedDict

if TYPE_CHECKING:
    import discord
    from discord.ext import commands

    from .restrictions import RestrictionPolicy

__all__ = (
    "PagesOptions",
    "Restricted",
    "UserPredicate",
)

type UserPredicate = Callable[[discord.abc.User], bool | Awaitable[bool]]
type Restricted = int | str | Iterable[int | str] | UserPredicate | RestrictionPolicy | None


class PagesOptions(TypedDict):
    duration: NotRequired[int]
    restricted: NotRequired[Restricted]
    page_footer: NotRequired[bool]
