"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "CLUES_PER_CATEGORY",
    "NUM_CATEGORIES",
    "BoardSession",
    "Category",
    "ClueCell",
    "RevealResult",
    "RevealState",
    "SessionStatus",
)
# fmt: on


import itertools
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, NamedTuple, Optional, Tuple

from .errors import InvalidBoardShape, OutOfRange

if TYPE_CHECKING:
    from typing_extensions import Self

    from .provider import CategoryData


NUM_CATEGORIES: int = 6
CLUES_PER_CATEGORY: int = 5


# Every session ID comes from here, so IDs are strictly
# increasing for the lifetime of the process.
_SESSION_IDS: Iterator[int] = itertools.count(1)


class RevealState(Enum):
    HIDDEN = "hidden"
    QUESTION = "question"
    ANSWER = "answer"


class SessionStatus(Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class RevealResult(NamedTuple):
    text: str
    state: RevealState


class ClueCell:
    """A single question/answer pair on the board.

    Attributes
    ----------
    question: :class:`str`
        The clue's question text.
    answer: :class:`str`
        The clue's answer text.
    state: :class:`RevealState`
        How much of this clue is currently showing.
    """

    __slots__: Tuple[str, ...] = ("question", "answer", "state")

    def __init__(self, question: str, answer: str) -> None:
        self.question: str = question
        self.answer: str = answer
        self.state: RevealState = RevealState.HIDDEN

    def __repr__(self) -> str:
        return f"<ClueCell question={self.question!r} state={self.state.name}>"

    def advance(self) -> Optional[RevealResult]:
        """Moves this cell one step forward.

        Returns ``None`` if the answer is already showing.
        """
        if self.state is RevealState.HIDDEN:
            self.state = RevealState.QUESTION
            return RevealResult(self.question, self.state)

        if self.state is RevealState.QUESTION:
            self.state = RevealState.ANSWER
            return RevealResult(self.answer, self.state)

        return None

    def display_text(self, mask: str = "?") -> str:
        if self.state is RevealState.QUESTION:
            return self.question

        if self.state is RevealState.ANSWER:
            return self.answer

        return mask


class Category:
    """A titled column of clues."""

    __slots__: Tuple[str, ...] = ("_title", "clues")

    def __init__(self, title: str, clues: Iterable[ClueCell]) -> None:
        self._title: str = title
        self.clues: Tuple[ClueCell, ...] = tuple(clues)

    def __repr__(self) -> str:
        return f"<Category title={self._title!r} clues={len(self.clues)}>"

    @property
    def title(self) -> str:
        """:class:`str`: The category's title."""
        return self._title

    @classmethod
    def from_data(cls, data: CategoryData) -> Self:
        """Builds a category, with every clue hidden, from provider data."""
        return cls(data.title, (ClueCell(c.question, c.answer) for c in data.clues))


class BoardSession:
    """One loaded, playable board.

    Sessions are never half-built; use :meth:`create` to make one
    from a complete set of categories. Starting a new game means
    building a new session rather than resetting this one.

    Attributes
    ----------
    session_id: :class:`int`
        The session's token. Newer sessions always have larger IDs.
    categories: Tuple[:class:`Category`, ...]
        The board's columns.
    status: :class:`SessionStatus`
        Always :attr:`SessionStatus.READY` for sessions built
        through :meth:`create`.
    """

    __slots__: Tuple[str, ...] = ("session_id", "categories", "status", "_shape")

    def __init__(
        self,
        session_id: int,
        categories: Tuple[Category, ...],
        shape: Tuple[int, int],
    ) -> None:
        self.session_id: int = session_id
        self.categories: Tuple[Category, ...] = categories
        self.status: SessionStatus = SessionStatus.READY
        self._shape: Tuple[int, int] = shape

    def __repr__(self) -> str:
        return f"<BoardSession id={self.session_id} status={self.status.name}>"

    @staticmethod
    def reserve_id() -> int:
        """:class:`int`: Hands out a session ID greater than any issued before."""
        return next(_SESSION_IDS)

    @classmethod
    def create(
        cls,
        categories: Iterable[Category],
        *,
        session_id: Optional[int] = None,
        num_categories: int = NUM_CATEGORIES,
        clues_per_category: int = CLUES_PER_CATEGORY,
    ) -> Self:
        """Builds a ready session from the given categories.

        Parameters
        ----------
        categories: Iterable[:class:`Category`]
            The board's columns, in display order.
        session_id: Optional[:class:`int`]
            An ID previously obtained from :meth:`reserve_id`.
            A fresh one is reserved if this is omitted.
        num_categories: :class:`int`
            The required number of categories.
        clues_per_category: :class:`int`
            The required number of clues in every category.

        Raises
        ------
        :exc:`InvalidBoardShape`
            The categories do not form a
            ``num_categories`` by ``clues_per_category`` grid.
        """
        categories = tuple(categories)
        shape = (num_categories, clues_per_category)

        if len(categories) != num_categories:
            raise InvalidBoardShape(
                f"Expected {num_categories} categories, got {len(categories)}.", shape
            )

        for category in categories:
            if len(category.clues) != clues_per_category:
                raise InvalidBoardShape(
                    f"Category {category.title!r} has {len(category.clues)} clue(s),"
                    f" expected {clues_per_category}.",
                    shape,
                )

        # Every session owns fresh, hidden cells so that building one
        # never touches the state of another.
        categories = tuple(
            Category(c.title, (ClueCell(x.question, x.answer) for x in c.clues))
            for c in categories
        )

        if session_id is None:
            session_id = cls.reserve_id()

        return cls(session_id, categories, shape)

    @property
    def shape(self) -> Tuple[int, int]:
        """Tuple[:class:`int`, :class:`int`]: The ``(categories, clues)`` dimensions."""
        return self._shape

    @property
    def titles(self) -> Tuple[str, ...]:
        return tuple(c.title for c in self.categories)

    def is_current(self, session_id: int) -> bool:
        """:class:`bool`: Indicates whether the given ID belongs to this session."""
        return session_id == self.session_id

    def is_finished(self) -> bool:
        """:class:`bool`: Indicates whether every answer on the board is showing."""
        return all(
            clue.state is RevealState.ANSWER
            for category in self.categories
            for clue in category.clues
        )

    def get_cell(self, cat_idx: int, clue_idx: int) -> ClueCell:
        """Returns the cell at the given position.

        Raises
        ------
        :exc:`OutOfRange`
            The position is outside of the board.
        """
        num_categories, clues_per_category = self._shape

        # Negative indices would otherwise wrap around.
        if not (0 <= cat_idx < num_categories and 0 <= clue_idx < clues_per_category):
            raise OutOfRange(cat_idx, clue_idx, self._shape)

        return self.categories[cat_idx].clues[clue_idx]

    def reveal(self, cat_idx: int, clue_idx: int) -> Optional[RevealResult]:
        """Reveals the next piece of text for a cell.

        A hidden cell shows its question, a cell showing its question
        shows its answer. Revealing a cell that already shows its
        answer does nothing and returns ``None``.

        Raises
        ------
        :exc:`OutOfRange`
            The position is outside of the board.
        """
        return self.get_cell(cat_idx, clue_idx).advance()

    def display_text(self, cat_idx: int, clue_idx: int, *, mask: str = "?") -> str:
        return self.get_cell(cat_idx, clue_idx).display_text(mask)
