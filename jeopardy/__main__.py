"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


import argparse
import asyncio
import logging
import sys
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from typing import Any, Generator, Mapping, Optional, Tuple

import yaml
from cachetools import TTLCache
from discord import AllowedMentions, Game, Intents
from discord.ext import commands

from . import __version__
from .bot import JeopardyBot


@contextmanager
def _setup_logging(*, log_filename: Optional[str] = None) -> Generator[None, None, None]:
    root_logger = logging.getLogger()

    try:
        stream_handler = logging.StreamHandler()

        formatter = logging.Formatter(
            fmt="[{asctime}] [{levelname:<8}] {name}: {message}",
            datefmt="%Y-%m-%d %H:%M:%S",
            style="{",
        )

        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

        root_logger.setLevel(logging.INFO)

        if log_filename is not None:
            from os import makedirs, path

            # The log file's parent directory may not exist yet.
            log_parent = path.dirname(log_filename)
            if log_parent and not path.isdir(log_parent):
                makedirs(log_parent, exist_ok=True)

            file_handler = RotatingFileHandler(
                filename=log_filename,
                mode="w",
                maxBytes=33_554_432,  # 32 MiB
                backupCount=5,
                encoding="utf-8",
            )

            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        yield
    finally:
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)


def _create_bot(config: Mapping[str, Any]) -> JeopardyBot:
    prefixes = config.get("prefixes") or []

    if prefixes:
        prefix = prefixes[0]

        if config.get("mentionable", True):
            prefixes = commands.when_mentioned_or(*prefixes)
    else:
        prefix = "@mention "
        prefixes = commands.when_mentioned

    activity = Game(name=f"{prefix}board start \N{BULLET} Jeopardy v{__version__}")

    intents = Intents(guilds=True, messages=True, message_content=True)

    cache_config = config.get("http_cache") or {}
    http_cache = TTLCache(cache_config.get("maxsize", 64), cache_config.get("ttl", 14400))

    return JeopardyBot(
        config,
        prefixes,
        http_cache=http_cache,
        description=config.get("description"),
        activity=activity,
        allowed_mentions=AllowedMentions(everyone=False, roles=False),
        intents=intents,
        max_messages=None,
    )


def _start_bot(config: Mapping[str, Any]) -> None:
    async def runner() -> None:
        async with _create_bot(config) as bot:
            await bot.start(config["discord_auth_token"])

    try:
        asyncio.run(runner())
    except KeyboardInterrupt:
        pass


def _parse_args() -> Tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = argparse.ArgumentParser(prog="jeopardy")

    parser.add_argument(
        "config_filename",
        default="config.yaml",
        help="the config file to load (default: config.yaml)",
        nargs="?",
    )
    parser.add_argument(
        "--log-filename", "-lfn", help="the file to write logging messages to"
    )
    parser.set_defaults(func=_run)

    return parser, parser.parse_args()


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        with open(args.config_filename) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        parser.error(f'Failed to read config file "{args.config_filename}".')

    if not isinstance(config, Mapping):
        parser.error(f'Config file "{args.config_filename}" is not a mapping.')

    for key in ("discord_auth_token", "jservice"):
        if key not in config:
            parser.error(f'Config file is missing the required "{key}" key.')

    try:
        with _setup_logging(log_filename=args.log_filename):
            # Set discord.py logging level.
            logging.getLogger("discord").setLevel(logging.INFO)

            # uvloop doesn't support Windows.
            if sys.platform not in ("win32", "cygwin", "cli"):
                import uvloop

                uvloop.install()
                logging.info("uvloop installed successfully.")

            _start_bot(config)
    except OSError:
        parser.error(f'Failed to write to log file "{args.log_filename}".')


def main() -> None:
    parser, args = _parse_args()
    args.func(parser, args)


if __name__ == "__main__":
    main()
