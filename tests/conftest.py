"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest

from jeopardy.board import Category, ClueCell
from jeopardy.provider import CategoryData, ClueData


def make_category_data(
    num_categories: int = 6, clues_per_category: int = 5
) -> List[CategoryData]:
    return [
        CategoryData(
            f"Category {c}",
            [ClueData(f"Q{c}.{i}", f"A{c}.{i}") for i in range(clues_per_category)],
        )
        for c in range(num_categories)
    ]


def make_categories(
    num_categories: int = 6, clues_per_category: int = 5
) -> List[Category]:
    return [
        Category.from_data(d)
        for d in make_category_data(num_categories, clues_per_category)
    ]


def make_math_board() -> List[Category]:
    categories = make_categories()
    math = categories[0]

    categories[0] = Category("Math", (ClueCell("2+2", "4"), *math.clues[1:]))
    return categories


class FakeProvider:
    """In-memory data provider.

    When ``gated`` is set, every call to :meth:`fetch_category_ids`
    blocks on its own event in :attr:`gates` until the test sets it.
    """

    def __init__(
        self,
        categories: Optional[List[CategoryData]] = None,
        *,
        error: Optional[BaseException] = None,
        gated: bool = False,
    ) -> None:
        self.categories: List[CategoryData] = (
            make_category_data() if categories is None else categories
        )
        self.error: Optional[BaseException] = error
        self.gated: bool = gated
        self.gates: List[asyncio.Event] = []

    async def fetch_category_ids(self, count: int) -> List[int]:
        if self.gated:
            gate = asyncio.Event()
            self.gates.append(gate)
            await gate.wait()

        if self.error is not None:
            raise self.error

        return list(range(min(count, len(self.categories))))

    async def fetch_category(self, category_id: int) -> CategoryData:
        return self.categories[category_id]

    async def wait_for_gates(self, count: int) -> None:
        while len(self.gates) < count:
            await asyncio.sleep(0)


class FakeGateway:
    """Render gateway that records every instruction it receives."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    async def clear_grid(self) -> None:
        self.calls.append(("clear_grid",))

    async def draw_grid(self, session: Any) -> None:
        self.calls.append(("draw_grid", session))

    async def update_cell(self, cat_idx: int, clue_idx: int, text: str) -> None:
        self.calls.append(("update_cell", cat_idx, clue_idx, text))

    async def set_loading(self, loading: bool) -> None:
        self.calls.append(("set_loading", loading))

    async def show_error(self, message: str) -> None:
        self.calls.append(("show_error", message))


class FakeRequester:
    """Stands in for :class:`jeopardy.http.HTTPRequester`.

    ``responses`` maps an endpoint name (the last URL segment) to
    either the data to return or an exception to raise.
    """

    def __init__(self, responses: Dict[str, Any], *, delay: float = 0) -> None:
        self.responses: Dict[str, Any] = responses
        self.delay: float = delay
        self.calls: List[Tuple[str, str, bool, Dict[str, Any]]] = []

    async def request(
        self, method: str, url: str, /, *, cache__: bool = False, **params: Any
    ) -> Any:
        self.calls.append((method, url, cache__, params))

        if self.delay:
            await asyncio.sleep(self.delay)

        response = self.responses[url.rsplit("/", 1)[-1]]

        if isinstance(response, BaseException):
            raise response

        return response


def load_task(session_id: int) -> "asyncio.Task[None]":
    name = f"jeopardy-board-load-{session_id}"
    return next(t for t in asyncio.all_tasks() if t.get_name() == name)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
