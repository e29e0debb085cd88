"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

__all__ = (
    "HTTPRequester",
    "HTTPRequestFailed",
)


import asyncio
import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, Union

import aiohttp
import orjson
from discord.utils import MISSING

if TYPE_CHECKING:
    from multidict import CIMultiDictProxy
    from yarl import URL

    RequestUrl = Union[str, URL]


_LOG: logging.Logger = logging.getLogger(__name__)


def _to_json(obj: Any) -> str:
    return orjson.dumps(obj).decode("utf-8")


class HTTPRequestFailed(aiohttp.ClientError):
    """Exception raised when an HTTP request comes back with
    a non-2xx status.

    This inherits from :exc:`aiohttp.ClientError`, so callers
    that treat every client failure alike need only catch that.

    Attributes
    ----------
    response: :class:`aiohttp.ClientResponse`
        The response of the failed request.
    status: :class:`int`
        The HTTP status code.
    reason: :class:`str`
        The HTTP status reason.
    headers: multidict.CIMultiDictProxy[:class:`str`]
        The response headers.
    data: Any
        The data returned from the failed request.
    """

    def __init__(self, response: aiohttp.ClientResponse, data: Any) -> None:
        self.response: aiohttp.ClientResponse = response
        self.status: int = response.status
        self.reason: str = response.reason  # type: ignore
        self.headers: CIMultiDictProxy[str] = response.headers
        self.data: Any = data

        fmt = "{0.method} {0.url} failed with HTTP status {0.status} {0.reason}."
        super().__init__(fmt.format(response))


class HTTPRequester:
    """Thin wrapper around an :class:`aiohttp.ClientSession` that
    decodes responses and optionally caches them.

    The underlying session is not opened on construction;
    :meth:`start` must be awaited first.

    Parameters
    ----------
    cache: Optional[:class:`MutableMapping`]
        The mapping to use for caching received data.
        ``None`` (the default) disables caching entirely.
    json_loads: Callable[[:class:`str`], Any]
        A callable to use for JSON deserialization.
        Defaults to :func:`orjson.loads`.
    """

    __slots__: Tuple[str, ...] = ("_cache", "_lock", "_json_loads", "__session")

    def __init__(
        self,
        *,
        cache: Optional[MutableMapping[str, Any]] = None,
        json_loads: Callable[[str], Any] = orjson.loads,
    ) -> None:
        if cache is not None and not isinstance(cache, MutableMapping):
            raise TypeError(f"cache must be MutableMapping, not {type(cache)!r}.")

        self._cache: Optional[MutableMapping[str, Any]] = cache
        self._lock: asyncio.Lock = asyncio.Lock()
        self._json_loads: Callable[[str], Any] = json_loads
        self.__session: aiohttp.ClientSession = MISSING

    @property
    def cache(self) -> Optional[MutableMapping[str, Any]]:
        """Optional[:class:`MutableMapping`]: The mapping used for caching received data."""
        return self._cache

    @property
    def session(self) -> aiohttp.ClientSession:
        """:class:`aiohttp.ClientSession`: The client session used for handling requests."""
        return self.__session

    def is_closed(self) -> bool:
        """:class:`bool`: Indicates whether the underlying HTTP client session is closed."""
        return self.__session is MISSING or self.__session.closed

    async def start(self, **session_kwargs: Any) -> None:
        """|coro|

        Opens the underlying client session.

        Parameters
        ----------
        session_kwargs
            The remaining parameters to be passed to the
            :class:`aiohttp.ClientSession` constructor.

        Raises
        ------
        RuntimeError
            The client session is already open.
        """
        if not self.is_closed():
            raise RuntimeError("HTTP requester session is active.")

        session_kwargs.setdefault("json_serialize", _to_json)

        self.__session = aiohttp.ClientSession(**session_kwargs)

        _LOG.info("New HTTP requester session started.")

    async def close(self) -> None:
        """|coro|

        Closes the underlying client session.
        """
        if self.is_closed():
            return

        await self.__session.close()
        self.__session = MISSING

        _LOG.info("Closed HTTP requester session.")

    async def _perform_http_request(
        self, method: str, url: RequestUrl, /, **params: Any
    ) -> Any:
        if self.is_closed():
            raise RuntimeError("HTTP requester session is closed.")

        async with self.__session.request(method, url, params=params) as resp:
            if "application/json" in resp.content_type:
                data = await resp.json(loads=self._json_loads)
            elif "text/" in resp.content_type:
                data = await resp.text("utf-8")
            else:
                data = await resp.read()

            # aiohttp follows redirects on its own, so anything
            # outside of 2xx at this point is a failure.
            if not 200 <= resp.status < 300:
                _LOG.warning(
                    "%s %s failed with HTTP status %s.", method, url, resp.status
                )
                raise HTTPRequestFailed(resp, data)

            _LOG.info("%s %s succeeded with HTTP status %s.", method, url, resp.status)
            return data

    async def request(
        self, method: str, url: RequestUrl, /, *, cache__: bool = False, **params: Any
    ) -> Any:
        """|coro|

        Performs an HTTP request and optionally caches the response.

        Parameters
        ----------
        method: :class:`str`
            The HTTP request method.
        url: Union[:class:`str`, :class:`yarl.URL`]
            The URL to make a request to.
        cache__: :class:`bool`
            Whether or not to cache the response data.
            Ignored if :attr:`cache` is ``None``.
            Defaults to ``False``.
        params:
            The query string parameters.

        Returns
        -------
        Any
            The decoded response data.

        Raises
        ------
        :exc:`.HTTPRequestFailed`
            The request returned a status code of either 4xx or 5xx.
        RuntimeError
            The underlying client session was closed.
        """
        if not cache__ or self._cache is None:
            return await self._perform_http_request(method, url, **params)

        async with self._lock:
            key = f"{method}:{url}:<{' '.join(f'{k}={v}' for k, v in params.items())}>"

            if (cached := self._cache.get(key)) is not None:
                _LOG.debug("%s %s got a response from the cache.", method, url)
                return cached

            data = await self._perform_http_request(method, url, **params)

            self._cache[key] = data
            _LOG.debug("Cached the response of %s %s.", method, url)

            return data
