"""
Restriction policies deciding whose reactions an embed pages session honours.

The ``restricted`` option accepts a handful of shapes; they are resolved once into
one of four explicit variants and evaluated per reaction with :func:`check_user`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import discord

if TYPE_CHECKING:
    from ._types import Restricted, UserPredicate

LOGGER = logging.getLogger(__name__)

__all__ = (
    "Predicate",
    "RestrictionPolicy",
    "SingleUserId",
    "Unrestricted",
    "UserIdSet",
    "check_user",
    "resolve_restriction",
)


@dataclass(frozen=True, slots=True)
class Unrestricted:
    pass


@dataclass(frozen=True, slots=True)
class UserIdSet:
    ids: frozenset[str]


@dataclass(frozen=True, slots=True)
class SingleUserId:
    id: str


@dataclass(frozen=True, slots=True)
class Predicate:
    func: UserPredicate


type RestrictionPolicy = Unrestricted | UserIdSet | SingleUserId | Predicate

_POLICY_TYPES = (Unrestricted, UserIdSet, SingleUserId, Predicate)


def resolve_restriction(restricted: Restricted) -> RestrictionPolicy:
    """
    Turn a ``restricted`` option into a :data:`RestrictionPolicy`.

    ``None`` or an empty string means anyone may react, a single id (``int`` or ``str``) or an iterable of ids
    restricts to those users, and a callable taking the reacting user is used as a predicate.
    Ids are compared as strings so Discord snowflakes and string ids mix freely.

    Raises:
        TypeError: ``restricted`` is none of the above.
    """
    if restricted is None or restricted == "":
        return Unrestricted()
    if isinstance(restricted, _POLICY_TYPES):
        return restricted
    # bool is an int subclass but never a meaningful user id
    if isinstance(restricted, bool):
        raise TypeError("restricted must be a user id, an iterable of user ids or a predicate, not a bool")
    if isinstance(restricted, (int, str)):
        return SingleUserId(str(restricted))
    if callable(restricted):
        return Predicate(restricted)
    if isinstance(restricted, Iterable):
        return UserIdSet(frozenset(str(user_id) for user_id in restricted))

    msg = f"restricted must be a user id, an iterable of user ids or a predicate, not {type(restricted).__name__!r}"
    raise TypeError(msg)


async def check_user(policy: RestrictionPolicy, user: discord.abc.User) -> bool:
    """Check whether ``user`` may control the pages. Bots are always rejected."""
    if user.bot:
        LOGGER.debug("Rejecting reaction by %s: user is a bot.", user)
        return False

    match policy:
        case Unrestricted():
            allowed = True
        case UserIdSet(ids=ids):
            allowed = str(user.id) in ids
        case SingleUserId(id=user_id):
            allowed = str(user.id) == user_id
        case Predicate(func=func):
            allowed = bool(await discord.utils.maybe_coroutine(func, user))
        case _:
            msg = f"Unknown restriction policy: {policy!r}"
            raise TypeError(msg)

    if not allowed:
        LOGGER.debug("Rejecting reaction by %s: disallowed user.", user)
    return allowed
