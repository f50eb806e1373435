"""Score table, menu choices file and name entry for the arena game."""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

import pygame

MAX_NAME_LEN = 16
MAX_SCORES = 20
SHOWN_SCORES = 10

_NAME_CHARS = MAX_NAME_LEN - 1
_INTEGER = re.compile(r"[+-]?\d+")
_EXTRA_NAME_CHARS = "_- "


@dataclass(frozen=True)
class ScoreEntry:
    """A player's name and the score they reached."""

    name: str
    score: int


def save_score(path: str | PathLike, name: str, score: int) -> None:
    """Append one "name score" line to the score file."""
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(f"{name} {score}\n")


def load_scores(path: str | PathLike, limit: int = MAX_SCORES) -> list[ScoreEntry]:
    """Read up to `limit` entries, stopping at the first one that does not parse.

    Names are whitespace-delimited words of at most 15 characters; a missing
    file yields no entries.
    """
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return []

    tokens = deque(text.split())
    entries: list[ScoreEntry] = []
    while len(entries) < limit and tokens:
        word = tokens.popleft()
        name, overflow = word[:_NAME_CHARS], word[_NAME_CHARS:]
        if overflow:
            tokens.appendleft(overflow)
        if not tokens:
            break
        match = _INTEGER.match(tokens[0])
        if match is None:
            break
        number = tokens.popleft()
        leftover = number[match.end():]
        if leftover:
            tokens.appendleft(leftover)
        entries.append(ScoreEntry(name, int(match.group())))
    return entries


def best_scores(entries: Iterable[ScoreEntry], count: int = SHOWN_SCORES) -> list[ScoreEntry]:
    """Return the `count` highest entries, best first."""
    return sorted(entries, key=lambda entry: entry.score, reverse=True)[:count]


def format_score_line(rank: int, entry: ScoreEntry) -> str:
    """Text of one row of the best-scores board."""
    return f"{rank}. {entry.name} - {entry.score}"


def save_choices(path: str | PathLike, appearance: int, input_mode: int) -> None:
    """Write the chosen appearance and input mode as key=value lines."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(f"appearance={appearance}\ninput={input_mode}\n")


def edit_name(name: str, key: int, char: str) -> tuple[str, bool]:
    """Apply one key press to a name being typed.

    Returns the new name and whether the player submitted it with Return.
    """
    if key == pygame.K_RETURN and name:
        return name, True
    if key == pygame.K_BACKSPACE and name:
        return name[:-1], False
    if len(name) < _NAME_CHARS and char:
        typed = char[0]
        if (typed.isascii() and typed.isalnum()) or typed in _EXTRA_NAME_CHARS:
            return name + typed, False
    return name, False