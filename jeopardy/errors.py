"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "InsufficientClues",
    "InvalidBoardShape",
    "JeopardyError",
    "OutOfRange",
    "ProviderError",
    "ProviderTimeout",
    "ProviderUnavailable",
)
# fmt: on


from typing import Tuple


class JeopardyError(Exception):
    """Base exception for everything raised by this package."""

    pass


class InvalidBoardShape(JeopardyError):
    """Exception raised when a board is built from categories
    that do not form the expected grid.

    Attributes
    ----------
    expected: Tuple[:class:`int`, :class:`int`]
        The expected ``(categories, clues per category)`` shape.
    """

    def __init__(self, message: str, expected: Tuple[int, int]) -> None:
        self.expected: Tuple[int, int] = expected
        super().__init__(message)


class OutOfRange(JeopardyError, IndexError):
    """Exception raised when a cell outside of the board is addressed.

    This inherits from :exc:`IndexError`.
    """

    def __init__(self, cat_idx: int, clue_idx: int, shape: Tuple[int, int]) -> None:
        self.cat_idx: int = cat_idx
        self.clue_idx: int = clue_idx
        self.shape: Tuple[int, int] = shape

        super().__init__(
            f"Cell ({cat_idx}, {clue_idx}) is outside of a {shape[0]}x{shape[1]} board."
        )


class ProviderError(JeopardyError):
    """Base exception for failures reported by a data provider.

    These are recoverable; starting a new board is the retry.
    """

    pass


class ProviderUnavailable(ProviderError):
    """Exception raised when the trivia service could not be reached
    or returned something unusable."""

    pass


class ProviderTimeout(ProviderError):
    """Exception raised when the trivia service took too long to respond."""

    pass


class InsufficientClues(ProviderError):
    """Exception raised when a category does not have enough clues.

    Attributes
    ----------
    category_id: :class:`int`
        The offending category ID.
    available: :class:`int`
        The number of usable clues the category had.
    required: :class:`int`
        The number of clues that were needed.
    """

    def __init__(self, category_id: int, available: int, required: int) -> None:
        self.category_id: int = category_id
        self.available: int = available
        self.required: int = required

        super().__init__(
            f"Category {category_id} has {available} usable clue(s), {required} required."
        )
