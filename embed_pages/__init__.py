"""
Reaction driven embed pages for discord.py bots.

.. code-block:: python3

    pages = EmbedPages.from_context(ctx, [discord.Embed(title=name) for name in names], restricted=ctx.author.id)
    await pages.create_pages()
"""

from .errors import (
    EmbedPagesError as EmbedPagesError,
    EmptyPageSetError as EmptyPageSetError,
    InvalidPageError as InvalidPageError,
    NotInitializedError as NotInitializedError,
    PageIndexOutOfRangeError as PageIndexOutOfRangeError,
    PagesAlreadyCreatedError as PagesAlreadyCreatedError,
)
from .paginator import (
    HELP_EMBED as HELP_EMBED,
    EmbedPages as EmbedPages,
    PageEmojis as PageEmojis,
    PagesState as PagesState,
    render_page as render_page,
)
from .restrictions import (
    Predicate as Predicate,
    RestrictionPolicy as RestrictionPolicy,
    SingleUserId as SingleUserId,
    Unrestricted as Unrestricted,
    UserIdSet as UserIdSet,
    check_user as check_user,
    resolve_restriction as resolve_restriction,
)

__version__ = "1.0.0"
