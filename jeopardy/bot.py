"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "JeopardyBot",
)
# fmt: on


import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from discord.ext import commands
from discord.utils import MISSING

from .http import HTTPRequester
from .provider import JServiceProvider
from .utils import human_join

if TYPE_CHECKING:
    from collections.abc import MutableMapping


_LOG: logging.Logger = logging.getLogger(__name__)


class JeopardyBot(commands.Bot):
    """The Discord bot that hosts Jeopardy boards.

    Subclasses :class:`commands.Bot`.

    Parameters
    ----------
    config: Mapping[:class:`str`, Any]
        The loaded configuration values.
    http_cache: Optional[:class:`MutableMapping`]
        A mapping to store the data received from requests
        made by the HTTP requester.

    Attributes
    ----------
    config: Mapping[:class:`str`, Any]
        The bot's configuration values.
    http_requester: :class:`~.HTTPRequester`
        The bot's HTTP requester client.
    provider: :class:`~.JServiceProvider`
        Where new boards get their categories from.
        Only available once :meth:`setup_hook` has run.
    """

    def __init__(
        self,
        config: Mapping[str, Any],
        *args: Any,
        http_cache: Optional[MutableMapping[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        owner_ids = set(config.get("owner_ids") or ())

        if len(owner_ids) == 1:
            kwargs.setdefault("owner_id", owner_ids.pop())
        elif owner_ids:
            kwargs.setdefault("owner_ids", owner_ids)

        super().__init__(*args, **kwargs)

        self.config: Mapping[str, Any] = config
        self.http_requester: HTTPRequester = HTTPRequester(cache=http_cache)
        self.provider: JServiceProvider = MISSING

    async def _init_extensions(self) -> None:
        to_load = self.config.get("extensions") or ("jeopardy.ext.board",)

        total = 0
        loaded = 0

        for ext in to_load:
            total += 1

            try:
                await self.load_extension(ext)
            except (commands.ExtensionNotFound, ModuleNotFoundError):
                _LOG.warning("Extension '%s' was not found.", ext)
            except (commands.NoEntryPointError, commands.ExtensionAlreadyLoaded) as exc:
                _LOG.warning(exc)
            except commands.ExtensionFailed as exc:
                _LOG.warning("Failed to load extension '%s'.", ext, exc_info=exc.original)
            else:
                _LOG.debug("Loaded extension '%s'.", ext)
                loaded += 1

        failed = total - loaded

        _LOG.info("Extensions: %s total; %s loaded; %s failed.", total, loaded, failed)

    async def setup_hook(self) -> None:
        from sys import version_info as python_version

        from aiohttp import __version__ as aiohttp_version

        from . import __version__

        # --- Set up HTTP requester session. ---
        user_agent = (
            f"Jeopardy-DiscordBot/{__version__}"
            f" Python/{python_version[0]}.{python_version[1]}"
            f" aiohttp/{aiohttp_version}"
        )

        await self.http_requester.start(headers={"User-Agent": user_agent})

        # --- Set up the trivia data provider. ---
        board = self.config.get("board") or {}
        jservice = self.config["jservice"]

        self.provider = JServiceProvider(
            self.http_requester,
            base_url=jservice["base_url"],
            pool_size=jservice.get("category_pool_size", 100),
            clues_per_category=board.get("clues_per_category", 5),
            timeout=jservice.get("request_timeout", 10.0),
        )

        # --- Load configured extensions ---
        await self._init_extensions()

        _LOG.info("Jeopardy %s booted successfully. Awaiting READY event...", __version__)

    async def close(self) -> None:
        # Unloading the extensions stops any open boards, which
        # must happen before their HTTP session goes away.
        await super().close()
        await self.http_requester.close()

    async def on_ready(self) -> None:
        _LOG.info("Received a READY event.")

    async def on_resumed(self) -> None:
        _LOG.info("Received a RESUME event.")

    async def on_error(self, event_method: str, *args: Any, **kwargs: Any) -> None:
        p_args = "\n".join(f"[{i}] {a}" for i, a in enumerate(args)) or "N/A"
        k_args = "\n".join(f"{k}: {v}" for k, v in kwargs.items()) or "N/A"

        fmt = (
            'Unhandled exception in event handler "%s":'
            "\nPositional Arguments: --\n%s"
            "\nKeyword Arguments: --\n%s"
        )

        _LOG.exception(fmt, event_method, p_args, k_args)

    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        if isinstance(error, (commands.CommandNotFound, commands.DisabledCommand)):
            return

        if isinstance(error, commands.NoPrivateMessage):
            await ctx.send("Boards can only be hosted in servers.")
        elif isinstance(error, commands.BotMissingPermissions):
            perms = [
                p.replace('_', ' ').replace('guild', 'server').title()
                for p in error.missing_permissions
            ]

            await ctx.send(
                f"I need the `{human_join(perms)}` permission(s) to execute that command."
            )
        elif isinstance(error, commands.CheckFailure) and str(error):
            await ctx.send(str(error))
        elif isinstance(error, commands.CommandInvokeError):
            original = error.original
            _LOG.error(
                "Unhandled exception in command %s:",
                ctx.command.qualified_name,  # type: ignore
                exc_info=original,
            )
            await ctx.send("Sorry, but something went wrong.")
