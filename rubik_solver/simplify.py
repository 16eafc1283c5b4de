"""Adjacent same-face cancellation for move lists."""

from __future__ import annotations

from typing import Iterable, Union

from .notation import Move, MoveLike, parse_moves


def merge(a: Move, b: Move) -> Move | None:
    """Combine two turns of the same face; None when they cancel."""
    if a.face != b.face:
        raise ValueError(f"Cannot merge moves on different faces: {a} {b}")
    total = (a.signed_turns + b.signed_turns) % 4
    return Move(a.face, total) if total else None


def simplify(moves: Union[str, Iterable[MoveLike], None]) -> list[Move]:
    """Merge runs of same-face moves with a single stack scan.

    Only adjacent tokens on the same face (or the same rotation axis) are
    combined, so the result reaches the same state from any start and is never
    longer than the input. Cancellations can expose new neighbours, which the
    stack picks up on the next token.
    """
    stack: list[Move] = []
    for move in parse_moves(moves):
        if stack and stack[-1].face == move.face:
            merged = merge(stack.pop(), move)
            if merged is not None:
                stack.append(merged)
        else:
            stack.append(move)
    return stack


def cancelled_count(moves: Union[str, Iterable[MoveLike], None]) -> int:
    """Number of tokens removed by :func:`simplify`."""
    parsed = parse_moves(moves)
    return len(parsed) - len(simplify(parsed))
