"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "BoardView",
    "build_board_embed",
)
# fmt: on


import logging
from typing import TYPE_CHECKING, Collection, Optional, Union

import discord
from discord.ui import Button, Select, View, button, select
from discord.utils import MISSING

from jeopardy.board import CLUES_PER_CATEGORY, NUM_CATEGORIES
from jeopardy.controller import BoardController
from jeopardy.utils import truncate

if TYPE_CHECKING:
    from discord.ui import Item

    from jeopardy.board import BoardSession
    from jeopardy.provider import DataProvider


_LOG: logging.Logger = logging.getLogger(__name__)


# Keeps a full 6x5 board well under the embed size limits.
_CELL_WIDTH: int = 150
_TITLE_WIDTH: int = 100
_ERROR_COLOUR: int = 0xFC284F


def _clue_value(clue_idx: int) -> str:
    return f"${(clue_idx + 1) * 200}"


def build_board_embed(session: BoardSession) -> discord.Embed:
    """Renders a board as an embed with one column per category.

    Hidden clues are drawn as ``?``.
    """
    embed = discord.Embed(title="Jeopardy!", colour=discord.Colour.dark_embed())

    for cat_idx, category in enumerate(session.categories):
        lines = []

        for clue_idx in range(len(category.clues)):
            text = truncate(session.display_text(cat_idx, clue_idx), _CELL_WIDTH)
            lines.append(f"**{_clue_value(clue_idx)}** {text}")

        embed.add_field(
            name=truncate(category.title, _TITLE_WIDTH), value="\n".join(lines)
        )

    if session.is_finished():
        embed.set_footer(text="Every clue is revealed! Press New board to play again.")
    else:
        embed.set_footer(text="Pick a category and a clue, then press Reveal.")

    return embed


class BoardView(View):
    """The Discord side of a board.

    This draws whatever its :class:`~.BoardController` tells it to
    and turns component interactions into controller events.

    Parameters
    ----------
    provider: :class:`~.DataProvider`
        Where the board's categories come from.
    host_id: :class:`int`
        The ID of the user hosting the board.
    owner_ids: Collection[:class:`int`]
        The IDs of the users allowed to play the board.
    timeout: Optional[:class:`float`]
        Seconds of inactivity before the board expires.
        Defaults to ``900``.

    Attributes
    ----------
    controller: :class:`~.BoardController`
        The controller driving this view.
    message: Optional[:class:`discord.Message`]
        The message this view is attached to.
    """

    def __init__(
        self,
        provider: DataProvider,
        *,
        host_id: int,
        owner_ids: Collection[int],
        timeout: Optional[float] = 900,
        num_categories: int = NUM_CATEGORIES,
        clues_per_category: int = CLUES_PER_CATEGORY,
    ) -> None:
        super().__init__(timeout=timeout)

        self.host_id: int = host_id
        self.owner_ids: Collection[int] = owner_ids
        self.message: Optional[discord.Message] = None

        self.controller: BoardController = BoardController(
            provider,
            self,
            num_categories=num_categories,
            clues_per_category=clues_per_category,
        )

        self._session: Optional[BoardSession] = None
        self._loading: bool = False
        self._error: Optional[str] = None
        self._selected_category: Optional[int] = None
        self._selected_clue: Optional[int] = None

        self.clue_select.options = [
            discord.SelectOption(label=_clue_value(i), value=str(i))
            for i in range(clues_per_category)
        ]

        self._update_components()

    def can_use_menu(self, user: Union[discord.User, discord.Member]) -> bool:
        """:class:`bool`: Indicates whether a given user can play this board."""
        return user.id in self.owner_ids

    def build_embed(self) -> discord.Embed:
        """Renders the embed for whatever the board is currently doing."""
        if self._error is not None:
            return discord.Embed(
                title="The board couldn't be set up.",
                description=f"{self._error}\nPress **New board** to try again.",
                colour=_ERROR_COLOUR,
            )

        if self._loading:
            return discord.Embed(
                title="Jeopardy!",
                description="\N{HOURGLASS WITH FLOWING SAND} Fetching categories...",
                colour=discord.Colour.dark_embed(),
            )

        if self._session is not None:
            return build_board_embed(self._session)

        return discord.Embed(
            title="Jeopardy!",
            description="The board is empty. Press **New board** to start.",
            colour=discord.Colour.dark_embed(),
        )

    def _update_components(self) -> None:
        session = self._session
        playable = session is not None and not self._loading and self._error is None

        if session is not None:
            self.category_select.options = [
                discord.SelectOption(
                    label=truncate(title, _TITLE_WIDTH),
                    value=str(i),
                    default=i == self._selected_category,
                )
                for i, title in enumerate(session.titles)
            ]
        else:
            self.category_select.options = [
                discord.SelectOption(label="No categories yet", value="-1")
            ]

        for option in self.clue_select.options:
            option.default = option.value == str(self._selected_clue)

        self.category_select.disabled = not playable
        self.clue_select.disabled = not playable
        self.reveal.disabled = not playable

    async def _refresh(self) -> None:
        self._update_components()

        if self.message is None:
            return

        try:
            self.message = await self.message.edit(embed=self.build_embed(), view=self)
        except discord.NotFound:
            _LOG.info("Board message was deleted, stopping board.")
            self.stop()

    # --- Drawing instructions from the controller. ---

    async def clear_grid(self) -> None:
        self._session = None
        self._error = None
        self._selected_category = None
        self._selected_clue = None
        await self._refresh()

    async def draw_grid(self, session: BoardSession) -> None:
        self._session = session
        self._error = None
        self._selected_category = None
        self._selected_clue = None
        await self._refresh()

    async def update_cell(self, cat_idx: int, clue_idx: int, text: str) -> None:
        # The session is shared with the controller, so it
        # already holds the revealed text.
        await self._refresh()

    async def set_loading(self, loading: bool) -> None:
        self._loading = loading
        await self._refresh()

    async def show_error(self, message: str) -> None:
        self._error = message
        await self._refresh()

    # --- Interaction handling. ---

    async def interaction_check(self, itn: discord.Interaction) -> bool:
        if itn.user is MISSING:
            return False

        if self.can_use_menu(itn.user):
            return True

        await itn.response.send_message("This isn't your board. Sorry.", ephemeral=True)
        return False

    async def on_error(
        self, itn: discord.Interaction, error: Exception, item: Item[BoardView]
    ) -> None:
        _LOG.exception("Unhandled exception in board view item %r:", item, exc_info=error)

        if itn.response.is_done():
            await itn.followup.send("Sorry, but something went wrong.", ephemeral=True)
        else:
            await itn.response.send_message(
                "Sorry, but something went wrong.", ephemeral=True
            )

    async def on_timeout(self) -> None:
        self.controller.close()

        for item in self.children:
            item.disabled = True  # type: ignore

        if self.message is not None:
            try:
                await self.message.edit(view=self)
            except discord.HTTPException:
                pass

    def stop(self) -> None:
        self.controller.close()
        super().stop()

    @select(placeholder="Pick a category...", row=0)
    async def category_select(
        self, itn: discord.Interaction, select: Select[BoardView]
    ) -> None:
        self._selected_category = int(select.values[0])
        self._update_components()
        await itn.response.edit_message(view=self)

    @select(placeholder="Pick a clue...", row=1)
    async def clue_select(self, itn: discord.Interaction, select: Select[BoardView]) -> None:
        self._selected_clue = int(select.values[0])
        self._update_components()
        await itn.response.edit_message(view=self)

    @button(label="Reveal", style=discord.ButtonStyle.blurple, row=2)
    async def reveal(self, itn: discord.Interaction, button: Button[BoardView]) -> None:
        cat_idx = self._selected_category
        clue_idx = self._selected_clue

        if cat_idx is None or clue_idx is None:
            await itn.response.send_message(
                "Pick a category and a clue first.", ephemeral=True
            )
            return

        await itn.response.defer()

        if await self.controller.cell_clicked(cat_idx, clue_idx) is None:
            await itn.followup.send("There's nothing left to reveal there.", ephemeral=True)

    @button(label="New board", style=discord.ButtonStyle.grey, row=2)
    async def new_board(self, itn: discord.Interaction, button: Button[BoardView]) -> None:
        await itn.response.defer()
        await self.controller.start()
