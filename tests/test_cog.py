"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from types import SimpleNamespace

import pytest
from conftest import FakeProvider

from jeopardy.controller import ControllerState
from jeopardy.ext.board import Board, BoardView


def _cog() -> Board:
    bot = SimpleNamespace(owner_id=None, owner_ids={9}, config={}, provider=None)
    return Board(bot)  # type: ignore


def test_player_ids_include_bot_owners() -> None:
    assert _cog()._player_ids(1) == {1, 9}


@pytest.mark.asyncio
async def test_get_board_forgets_expired_views() -> None:
    cog = _cog()
    view = BoardView(FakeProvider(), host_id=1, owner_ids={1}, timeout=None)
    cog.boards[5] = view

    assert cog.get_board(5) is view

    view.stop()

    assert cog.get_board(5) is None
    assert 5 not in cog.boards


@pytest.mark.asyncio
async def test_unload_stops_every_board() -> None:
    cog = _cog()
    provider = FakeProvider(gated=True)
    views = [
        BoardView(provider, host_id=i, owner_ids={i}, timeout=None) for i in range(3)
    ]

    for i, view in enumerate(views):
        cog.boards[i] = view
        await view.controller.start()

    await cog.cog_unload()

    assert cog.boards == {}
    assert all(v.is_finished() for v in views)
    assert all(v.controller.state is ControllerState.IDLE for v in views)
