"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "BoardController",
    "ControllerState",
    "RenderGateway",
)
# fmt: on


import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Protocol, Set, Tuple

from .board import CLUES_PER_CATEGORY, NUM_CATEGORIES, BoardSession, Category
from .errors import InvalidBoardShape, JeopardyError

if TYPE_CHECKING:
    from .board import RevealResult
    from .provider import DataProvider


_LOG: logging.Logger = logging.getLogger(__name__)


class ControllerState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class RenderGateway(Protocol):
    """Whatever draws the board.

    The controller only ever tells the gateway what to show.
    In the other direction, the gateway reports user input by
    calling :meth:`BoardController.start` and
    :meth:`BoardController.cell_clicked`.
    """

    async def clear_grid(self) -> None:
        ...

    async def draw_grid(self, session: BoardSession) -> None:
        ...

    async def update_cell(self, cat_idx: int, clue_idx: int, text: str) -> None:
        ...

    async def set_loading(self, loading: bool) -> None:
        ...

    async def show_error(self, message: str) -> None:
        ...


class BoardController:
    """Drives a board from loading through play.

    Every call to :meth:`start` reserves a new session ID up front.
    Fetches that finish under an older ID are dropped on arrival,
    so at most one session is ever current and a slow response
    can never replace a newer board.

    Parameters
    ----------
    provider: :class:`~.DataProvider`
        Where categories and clues come from.
    gateway: :class:`RenderGateway`
        Where drawing instructions go.
    num_categories: :class:`int`
        The number of categories on a board.
        Defaults to ``6``.
    clues_per_category: :class:`int`
        The number of clues in a category.
        Defaults to ``5``.

    Attributes
    ----------
    state: :class:`ControllerState`
        The controller's current state.
    session: Optional[:class:`~.BoardSession`]
        The board being played, if one is ready.
    active_id: Optional[:class:`int`]
        The ID of the session being loaded or played.
        ``None`` if no board was ever requested.
    """

    __slots__: Tuple[str, ...] = (
        "provider",
        "gateway",
        "num_categories",
        "clues_per_category",
        "state",
        "session",
        "active_id",
        "_tasks",
    )

    def __init__(
        self,
        provider: DataProvider,
        gateway: RenderGateway,
        *,
        num_categories: int = NUM_CATEGORIES,
        clues_per_category: int = CLUES_PER_CATEGORY,
    ) -> None:
        self.provider: DataProvider = provider
        self.gateway: RenderGateway = gateway
        self.num_categories: int = num_categories
        self.clues_per_category: int = clues_per_category

        self.state: ControllerState = ControllerState.IDLE
        self.session: Optional[BoardSession] = None
        self.active_id: Optional[int] = None

        self._tasks: Set[asyncio.Task[None]] = set()

    def __repr__(self) -> str:
        return f"<BoardController state={self.state.name} active_id={self.active_id}>"

    def _is_active(self, session_id: int) -> bool:
        return session_id == self.active_id

    def _accepts(self, session_id: int) -> bool:
        if self._is_active(session_id) and self.state is ControllerState.LOADING:
            return True

        _LOG.debug(
            "Dropping stale result for session %s (active: %s, state: %s).",
            session_id,
            self.active_id,
            self.state.name,
        )
        return False

    def _done_callback(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)

        try:
            task.result()
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            _LOG.exception("Unhandled exception while loading a board:", exc_info=exc)

    async def start(self) -> int:
        """|coro|

        Requests a new board, abandoning the current one.

        The new session ID is reserved before anything is awaited.
        Any fetch still in flight keeps running, but its result
        will be ignored.

        Returns
        -------
        :class:`int`
            The ID reserved for the new board.
        """
        session_id = BoardSession.reserve_id()

        self.active_id = session_id
        self.session = None
        self.state = ControllerState.LOADING

        _LOG.info("Loading board for session %s.", session_id)

        try:
            await self.gateway.clear_grid()

            if self._is_active(session_id):
                await self.gateway.set_loading(True)
        finally:
            # The fetch is what leaves LOADING, so it must be
            # scheduled even if drawing failed.
            task = asyncio.create_task(
                self.load_categories(session_id),
                name=f"jeopardy-board-load-{session_id}",
            )
            task.add_done_callback(self._done_callback)
            self._tasks.add(task)

        return session_id

    async def load_categories(self, session_id: int) -> None:
        """|coro|

        Fetches a board's worth of categories and hands the
        outcome to either :meth:`data_arrived` or :meth:`data_failed`.
        """
        try:
            ids = await self.provider.fetch_category_ids(self.num_categories)
            data = await asyncio.gather(*map(self.provider.fetch_category, ids))
        except JeopardyError as exc:
            await self.data_failed(session_id, exc)
        except Exception as exc:
            await self.data_failed(session_id, exc)
            raise
        else:
            await self.data_arrived(session_id, map(Category.from_data, data))

    async def data_arrived(self, session_id: int, categories: Iterable[Category]) -> bool:
        """|coro|

        Builds the board for ``session_id`` if it is still the one
        being loaded.

        Returns
        -------
        :class:`bool`
            Whether the categories were accepted. Stale results
            are dropped and return ``False``.
        """
        if not self._accepts(session_id):
            return False

        try:
            session = BoardSession.create(
                categories,
                session_id=session_id,
                num_categories=self.num_categories,
                clues_per_category=self.clues_per_category,
            )
        except InvalidBoardShape as exc:
            return await self.data_failed(session_id, exc)

        self.session = session
        self.state = ControllerState.READY

        _LOG.info("Session %s is ready.", session_id)

        await self.gateway.draw_grid(session)

        if self._is_active(session_id):
            await self.gateway.set_loading(False)

        return True

    async def data_failed(self, session_id: int, error: Exception) -> bool:
        """|coro|

        Marks the board for ``session_id`` as failed if it is still
        the one being loaded.

        Returns
        -------
        :class:`bool`
            Whether the failure was accepted. Stale failures
            are dropped and return ``False``.
        """
        if not self._accepts(session_id):
            return False

        self.state = ControllerState.ERROR

        _LOG.warning("Session %s failed to load: %s", session_id, error)

        if isinstance(error, JeopardyError):
            message = str(error)
        else:
            message = "Something went wrong while setting up the board."

        await self.gateway.set_loading(False)

        if self._is_active(session_id):
            await self.gateway.show_error(message)

        return True

    async def cell_clicked(self, cat_idx: int, clue_idx: int) -> Optional[RevealResult]:
        """|coro|

        Reveals the next piece of text for a cell.

        Clicks are ignored unless a board is ready.

        Returns
        -------
        Optional[:class:`~.RevealResult`]
            What was revealed, or ``None`` if nothing changed.

        Raises
        ------
        :exc:`~.OutOfRange`
            The position is outside of the board.
        """
        session = self.session

        if self.state is not ControllerState.READY or session is None:
            return None

        result = session.reveal(cat_idx, clue_idx)

        if result is not None:
            await self.gateway.update_cell(cat_idx, clue_idx, result.text)

        return result

    def close(self) -> None:
        """Cancels outstanding fetches and forgets the current board."""
        for task in self._tasks:
            task.cancel()

        self._tasks.clear()

        self.active_id = None
        self.session = None
        self.state = ControllerState.IDLE
