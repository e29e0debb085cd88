"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations as _annotations

from typing import TYPE_CHECKING as _TYPE_CHECKING

from .cog import *
from .view import *

if _TYPE_CHECKING:
    from jeopardy.bot import JeopardyBot


async def setup(bot: JeopardyBot) -> None:
    await bot.add_cog(Board(bot))
