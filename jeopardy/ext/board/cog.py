"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "Board",
    "HasActiveBoard",
    "no_active_board",
)
# fmt: on


import logging
from typing import TYPE_CHECKING, Callable, Dict, Optional, Set, TypeVar

import discord
from discord.ext import commands

from .view import BoardView

T = TypeVar("T")


if TYPE_CHECKING:
    from jeopardy.bot import JeopardyBot


_LOG: logging.Logger = logging.getLogger(__name__)


class HasActiveBoard(commands.CheckFailure):
    """Exception raised when the invoking channel already hosts a board.

    This inherits from :exc:`commands.CheckFailure`.
    """

    pass


def no_active_board() -> Callable[[T], T]:
    """A :func:`commands.check` that fails if the channel this
    command is invoked in already hosts a board.

    Raises
    ------
    :exc:`HasActiveBoard`
        The invoking channel already hosts a board.
    """

    def predicate(ctx: commands.Context) -> bool:
        # This will only be used within this cog.
        if ctx.cog.get_board(ctx.channel.id) is not None:  # type: ignore
            raise HasActiveBoard("This channel already has a board going.")

        return True

    return commands.check(predicate)


class Board(commands.Cog):
    """Commands having to do with Jeopardy boards."""

    ICON: str = "\N{BLACK QUESTION MARK ORNAMENT}"

    def __init__(self, bot: JeopardyBot) -> None:
        self.bot: JeopardyBot = bot
        self.boards: Dict[int, BoardView] = {}

    async def cog_unload(self) -> None:
        for view in self.boards.values():
            view.stop()

        self.boards.clear()

    def get_board(self, channel_id: int) -> Optional[BoardView]:
        """Returns the channel's board, forgetting it if it has expired."""
        view = self.boards.get(channel_id)

        if view is not None and view.is_finished():
            del self.boards[channel_id]
            _LOG.info("Board in channel %s has expired.", channel_id)
            return None

        return view

    def _player_ids(self, host_id: int) -> Set[int]:
        ids = {host_id, *(self.bot.owner_ids or ())}

        if self.bot.owner_id is not None:
            ids.add(self.bot.owner_id)

        return ids

    @commands.group(invoke_without_command=True)
    @commands.guild_only()
    async def board(self, ctx: commands.Context) -> None:
        """Jeopardy board commands."""
        await ctx.send_help(ctx.command)

    @board.command(name="start")
    @no_active_board()
    @commands.bot_has_permissions(embed_links=True)
    async def board_start(self, ctx: commands.Context) -> None:
        """Starts a new Jeopardy board in this channel.

        Pick a category and a clue, then press **Reveal** to show
        the question. Press **Reveal** again to show the answer.
        **New board** deals a fresh set of categories.

        Only the host can play the board.

        (Bot Needs: Embed Links)
        """
        settings = self.bot.config.get("board") or {}

        view = BoardView(
            self.bot.provider,
            host_id=ctx.author.id,
            owner_ids=self._player_ids(ctx.author.id),
            timeout=settings.get("view_timeout", 900),
            num_categories=settings.get("num_categories", 6),
            clues_per_category=settings.get("clues_per_category", 5),
        )

        view.message = await ctx.send(embed=view.build_embed(), view=view)
        self.boards[ctx.channel.id] = view

        _LOG.info(
            "%s (ID: %s) started a board in %s (ID: %s).",
            ctx.author,
            ctx.author.id,
            ctx.channel,
            ctx.channel.id,
        )

        await view.controller.start()

    @board.command(name="stop")
    async def board_stop(self, ctx: commands.Context) -> None:
        """Stops this channel's board.

        You must either be the host, the bot owner, or a user
        with the `Manage Messages` permission to do this.
        """
        view = self.get_board(ctx.channel.id)

        if view is None:
            await ctx.send("This channel has no board going.")
            return

        author = ctx.author
        can_manage = author.id in self._player_ids(view.host_id)

        if not can_manage and isinstance(author, discord.Member):
            can_manage = ctx.channel.permissions_for(author).manage_messages  # type: ignore

        if not can_manage:
            await ctx.send("You cannot manage this board.")
            return

        view.stop()
        del self.boards[ctx.channel.id]

        if view.message is not None:
            try:
                await view.message.edit(view=None)
            except discord.HTTPException:
                pass

        await ctx.send("Board stopped.")
