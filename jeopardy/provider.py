"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "CategoryData",
    "ClueData",
    "DataProvider",
    "JServiceProvider",
)
# fmt: on


import asyncio
import logging
import random
from typing import TYPE_CHECKING, Any, List, NamedTuple, Protocol, Tuple

import aiohttp

from .board import CLUES_PER_CATEGORY
from .errors import InsufficientClues, ProviderTimeout, ProviderUnavailable

if TYPE_CHECKING:
    from .http import HTTPRequester


_LOG: logging.Logger = logging.getLogger(__name__)


class ClueData(NamedTuple):
    question: str
    answer: str


class CategoryData(NamedTuple):
    title: str
    clues: List[ClueData]


class DataProvider(Protocol):
    """The source of categories and clues for new boards.

    Implementations pick both the categories and each category's
    clues at random, and report failures with
    :exc:`~.ProviderUnavailable`, :exc:`~.ProviderTimeout`
    or :exc:`~.InsufficientClues`.
    """

    async def fetch_category_ids(self, count: int) -> List[int]:
        ...

    async def fetch_category(self, category_id: int) -> CategoryData:
        ...


class JServiceProvider:
    """Data provider backed by a jService-compatible trivia API.

    Parameters
    ----------
    requester: :class:`~.HTTPRequester`
        The HTTP requester to make requests with. It must
        already be started.
    base_url: :class:`str`
        The API root, e.g. ``http://jservice.io/api``.
    pool_size: :class:`int`
        How many categories to sample from.
        Defaults to ``100``.
    clues_per_category: :class:`int`
        How many clues to pick from every category.
        Defaults to ``5``.
    timeout: :class:`float`
        Seconds to wait on any single request.
        Defaults to ``10``.
    """

    __slots__: Tuple[str, ...] = (
        "requester",
        "base_url",
        "pool_size",
        "clues_per_category",
        "timeout",
    )

    def __init__(
        self,
        requester: HTTPRequester,
        *,
        base_url: str,
        pool_size: int = 100,
        clues_per_category: int = CLUES_PER_CATEGORY,
        timeout: float = 10.0,
    ) -> None:
        self.requester: HTTPRequester = requester
        self.base_url: str = base_url.rstrip("/")
        self.pool_size: int = pool_size
        self.clues_per_category: int = clues_per_category
        self.timeout: float = timeout

    async def _get(self, endpoint: str, *, cache: bool = False, **params: Any) -> Any:
        url = f"{self.base_url}/{endpoint}"

        try:
            return await asyncio.wait_for(
                self.requester.request("GET", url, cache__=cache, **params),
                self.timeout,
            )
        except asyncio.TimeoutError:
            _LOG.warning("GET %s timed out after %s seconds.", url, self.timeout)
            msg = "The trivia service took too long to respond."
            raise ProviderTimeout(msg) from None
        except aiohttp.ClientError as exc:
            _LOG.warning("GET %s failed: %s", url, exc)
            msg = "The trivia service could not be reached."
            raise ProviderUnavailable(msg) from exc

    async def fetch_category_ids(self, count: int) -> List[int]:
        data = await self._get("categories", cache=True, count=self.pool_size)

        try:
            ids = [int(c["id"]) for c in data]
        except (TypeError, KeyError, ValueError):
            msg = "The trivia service sent a malformed category list."
            raise ProviderUnavailable(msg) from None

        if len(ids) < count:
            raise ProviderUnavailable(
                f"The trivia service only offered {len(ids)} categories, {count} needed."
            )

        return random.sample(ids, count)

    async def fetch_category(self, category_id: int) -> CategoryData:
        data = await self._get("category", id=category_id)

        try:
            title = str(data["title"])
            stripped = (
                ClueData(
                    str(c.get("question") or "").strip(),
                    str(c.get("answer") or "").strip(),
                )
                for c in data["clues"]
            )
            pool = [clue for clue in stripped if clue.question and clue.answer]
        except (TypeError, KeyError, AttributeError):
            raise ProviderUnavailable(
                f"The trivia service sent malformed data for category {category_id}."
            ) from None

        if len(pool) < self.clues_per_category:
            raise InsufficientClues(category_id, len(pool), self.clues_per_category)

        return CategoryData(title, random.sample(pool, self.clues_per_category))
