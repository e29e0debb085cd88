"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

__all__ = (
    "human_join",
    "truncate",
)


from typing import Any, Sequence


def human_join(sequence: Sequence[Any], /, *, joiner: str = "and") -> str:
    """Returns a human-readable, comma-separated sequence, with
    the last element joined with a given joiner.

    This uses an Oxford comma.

    Parameters
    ----------
    sequence: Sequence[Any]
        The sequence of items to join.
    joiner: :class:`str`
        The string that joins the last item with the rest
        of the sequence.
        Defaults to ``"and"``.

    Returns
    -------
    :class:`str`
        The human-readable list. Empty if ``sequence`` is empty.
    """
    if not sequence:
        return ""

    sequence_size = len(sequence)

    if sequence_size == 1:
        return str(sequence[0])

    if sequence_size == 2:
        return f"{sequence[0]} {joiner} {sequence[1]}"

    return ", ".join(map(str, sequence[:-1])) + f", {joiner} {sequence[-1]}"


def truncate(text: str, width: int, *, placeholder: str = "...") -> str:
    """Truncates a long string to the given width.

    If the string fits within ``width``, it is returned as-is.
    Otherwise, enough characters are cut off that both the output
    text and ``placeholder`` fit within ``width``.

    Parameters
    ----------
    text: :class:`str`
        The string to truncate.
    width: :class:`int`
        The maximum length of the string.
    placeholder: :class:`str`
        String that will appear at the end of the truncated output text.
        Defaults to ``"..."``.

    Returns
    -------
    :class:`str`
        The truncated string.

    Raises
    ------
    ValueError
        Either an invalid ``width`` value was given, or the given
        placeholder is too long for the given ``width`` value.
    """
    if width <= 0:
        raise ValueError(f"invalid width {width} (must be > 0)")

    if len(placeholder) > width:
        raise ValueError("placeholder is too large for maximum width.")

    if len(text) <= width:
        return text

    return text[: width - len(placeholder)].rstrip() + placeholder
