"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from typing import List, Optional

import pytest
from conftest import make_categories, make_math_board

from jeopardy.board import *
from jeopardy.errors import InvalidBoardShape, OutOfRange
from jeopardy.provider import CategoryData, ClueData


def test_create_accepts_full_board() -> None:
    session = BoardSession.create(make_categories(6, 5))

    assert session.status is SessionStatus.READY
    assert session.shape == (NUM_CATEGORIES, CLUES_PER_CATEGORY)
    assert session.titles == tuple(f"Category {i}" for i in range(6))
    assert all(
        clue.state is RevealState.HIDDEN
        for category in session.categories
        for clue in category.clues
    )


@pytest.mark.parametrize(
    "categories",
    [
        make_categories(5, 5),
        make_categories(7, 5),
        make_categories(0, 5),
        make_categories(6, 4),
        make_categories(6, 6),
    ],
)
def test_create_rejects_wrong_shape(categories: List[Category]) -> None:
    with pytest.raises(InvalidBoardShape) as exc_info:
        BoardSession.create(categories)

    assert exc_info.value.expected == (6, 5)


def test_create_rejects_single_short_category() -> None:
    categories = make_categories()
    categories[3] = Category("Short", categories[3].clues[:4])

    with pytest.raises(InvalidBoardShape):
        BoardSession.create(categories)


def test_create_honours_custom_shape() -> None:
    session = BoardSession.create(
        make_categories(2, 3), num_categories=2, clues_per_category=3
    )

    assert session.shape == (2, 3)

    with pytest.raises(OutOfRange):
        session.reveal(2, 0)


def test_session_ids_strictly_increase() -> None:
    first = BoardSession.create(make_categories())
    reserved = BoardSession.reserve_id()
    second = BoardSession.create(make_categories())

    assert first.session_id < reserved < second.session_id


def test_create_uses_reserved_id() -> None:
    session_id = BoardSession.reserve_id()
    session = BoardSession.create(make_categories(), session_id=session_id)

    assert session.session_id == session_id
    assert session.is_current(session_id)
    assert not session.is_current(session_id + 1)
    assert not session.is_current(session_id - 1)


def test_create_hides_reused_cells() -> None:
    categories = make_categories()
    old = BoardSession.create(categories)
    old.reveal(0, 0)
    old.reveal(0, 0)

    new = BoardSession.create(categories)

    assert new.categories[0].clues[0].state is RevealState.HIDDEN
    assert old.categories[0].clues[0].state is RevealState.ANSWER


def test_create_from_another_session_leaves_it_alone() -> None:
    old = BoardSession.create(make_math_board())
    old.reveal(0, 0)
    old.reveal(0, 0)
    old.reveal(1, 2)

    new = BoardSession.create(old.categories)

    assert old.display_text(0, 0) == "4"
    assert old.categories[1].clues[2].state is RevealState.QUESTION
    assert new.display_text(0, 0) == "?"
    assert new.categories[1].clues[2].state is RevealState.HIDDEN
    assert new.categories[0].clues[0] is not old.categories[0].clues[0]

    new.reveal(0, 0)

    assert old.categories[0].clues[0].state is RevealState.ANSWER


def test_math_end_to_end() -> None:
    session = BoardSession.create(make_math_board())

    assert session.categories[0].title == "Math"
    assert session.reveal(0, 0) == RevealResult("2+2", RevealState.QUESTION)
    assert session.reveal(0, 0) == RevealResult("4", RevealState.ANSWER)
    assert session.reveal(0, 0) is None


def test_answered_cell_is_idempotent() -> None:
    session = BoardSession.create(make_math_board())
    session.reveal(0, 0)
    session.reveal(0, 0)

    for _ in range(5):
        assert session.reveal(0, 0) is None
        assert session.display_text(0, 0) == "4"
        assert session.categories[0].clues[0].state is RevealState.ANSWER


@pytest.mark.parametrize("clicks", range(1, 8))
def test_reveal_state_is_monotonic(clicks: int) -> None:
    session = BoardSession.create(make_categories())
    order = [RevealState.HIDDEN, RevealState.QUESTION, RevealState.ANSWER]
    seen = [session.categories[2].clues[4].state]

    for _ in range(clicks):
        session.reveal(2, 4)
        seen.append(session.categories[2].clues[4].state)

    indices = [order.index(s) for s in seen]

    # Never regresses and never skips a step.
    assert all(0 <= b - a <= 1 for a, b in zip(indices, indices[1:]))
    assert seen[-1] is order[min(clicks, 2)]


def test_reveal_only_touches_one_cell() -> None:
    session = BoardSession.create(make_categories())
    session.reveal(1, 2)

    for cat_idx, category in enumerate(session.categories):
        for clue_idx, clue in enumerate(category.clues):
            if (cat_idx, clue_idx) == (1, 2):
                assert clue.state is RevealState.QUESTION
            else:
                assert clue.state is RevealState.HIDDEN


@pytest.mark.parametrize("reveals", [0, 1, 2])
@pytest.mark.parametrize(
    ("cat_idx", "clue_idx"),
    [(-1, 0), (0, -1), (6, 0), (0, 5), (6, 5), (100, 100)],
)
def test_reveal_out_of_range(reveals: int, cat_idx: int, clue_idx: int) -> None:
    session = BoardSession.create(make_categories())

    # Put every cell into the same state first.
    for c in range(6):
        for i in range(5):
            for _ in range(reveals):
                session.reveal(c, i)

    with pytest.raises(OutOfRange) as exc_info:
        session.reveal(cat_idx, clue_idx)

    assert isinstance(exc_info.value, IndexError)
    assert (exc_info.value.cat_idx, exc_info.value.clue_idx) == (cat_idx, clue_idx)


@pytest.mark.parametrize(
    ("reveals", "expected"),
    [(0, "?"), (1, "2+2"), (2, "4"), (3, "4")],
)
def test_display_text(reveals: int, expected: str) -> None:
    session = BoardSession.create(make_math_board())

    for _ in range(reveals):
        session.reveal(0, 0)

    assert session.display_text(0, 0) == expected


def test_display_text_custom_mask() -> None:
    session = BoardSession.create(make_categories())
    assert session.display_text(0, 0, mask="$200") == "$200"


def test_is_finished() -> None:
    session = BoardSession.create(make_categories())

    for c in range(6):
        for i in range(5):
            assert not session.is_finished()
            session.reveal(c, i)
            session.reveal(c, i)

    assert session.is_finished()


def test_category_from_data() -> None:
    data = CategoryData("Literature", [ClueData("Hamlet Author", "Shakespeare")])
    category = Category.from_data(data)

    assert category.title == "Literature"
    assert [c.question for c in category.clues] == ["Hamlet Author"]
    assert category.clues[0].state is RevealState.HIDDEN

    with pytest.raises(AttributeError):
        category.title = "Film"  # type: ignore


@pytest.mark.parametrize(
    ("state", "expected"),
    [
        (RevealState.HIDDEN, RevealResult("Q", RevealState.QUESTION)),
        (RevealState.QUESTION, RevealResult("A", RevealState.ANSWER)),
        (RevealState.ANSWER, None),
    ],
)
def test_clue_cell_advance(state: RevealState, expected: Optional[RevealResult]) -> None:
    cell = ClueCell("Q", "A")
    cell.state = state

    assert cell.advance() == expected
