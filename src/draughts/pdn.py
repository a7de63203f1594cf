"""
PDN (Portable Draughts Notation) parsing and serialization helpers.

A PDN game is a list of header tags followed by the movetext:

[Event "18th Computer Olympiad, 10x10 Draughts"]
[Result "1-0"]

1. 34-30 19-23 2. 30-25 20-24 3. 33-29 24x33 ... 1-0

Only the syntax is handled here. Whether the moves are legal is up to the Game (src/draughts/game.py).
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from src.core.exceptions import InvalidPDNError
from src.draughts.moves import AcceptedMove, is_valid_move_token
from src.draughts.pieces import Color

RESULT_TOKENS = ("2-0", "0-2", "1-1", "0-0", "*", "1-0", "0-1")

_HEADER_RE = re.compile(r'^\[([A-Za-z][A-Za-z0-9_]*)\s+"((?:[^"\\]|\\.)*)"\]\s*$')
_COMMENT_RE = re.compile(r"\{[^}]*\}")
_LINE_COMMENT_RE = re.compile(r";[^\n]*")
_VARIATION_RE = re.compile(r"\([^()]*\)")
_MOVE_NUMBER_PREFIX_RE = re.compile(r"^\d+\.+")
_ANNOTATION_SUFFIX_RE = re.compile(r"[!?]+$")


@dataclass
class ParsedPDN:
    headers: dict[str, str] = field(default_factory=dict)
    moves: list[str] = field(default_factory=list)
    result: Optional[str] = None


def _split_headers(pdn: str) -> tuple[dict[str, str], str]:
    """Header tags at the top, everything after the first non-tag line is movetext"""
    headers: dict[str, str] = {}
    move_lines: list[str] = []
    in_headers = True

    for raw_line in pdn.splitlines():
        line = raw_line.strip()
        if in_headers and not line:
            continue

        if in_headers and line.startswith("["):
            match = _HEADER_RE.match(line)
            if match is None:
                raise InvalidPDNError(f"Invalid PDN header line: {line}")
            key, raw_value = match.groups()
            headers[key] = raw_value.replace('\\"', '"').replace("\\\\", "\\")
            continue

        in_headers = False
        move_lines.append(line)

    return headers, "\n".join(move_lines)


def _strip_annotations(movetext: str) -> str:
    """Comments and (possibly nested) variations are not part of the main line"""
    movetext = _COMMENT_RE.sub(" ", movetext)
    movetext = _LINE_COMMENT_RE.sub(" ", movetext)
    # remove the innermost variations first, until none are left
    while _VARIATION_RE.search(movetext):
        movetext = _VARIATION_RE.sub(" ", movetext)
    return movetext


def _movetext_tokens(movetext: str) -> list[str]:
    """Move numbers (12. / 12...) and the ... marker for Black to move are dropped, what is left are moves (and maybe a result)"""
    tokens: list[str] = []
    for raw_token in _strip_annotations(movetext).split():
        if raw_token in RESULT_TOKENS:
            tokens.append(raw_token)
            continue
        token = _MOVE_NUMBER_PREFIX_RE.sub("", raw_token).lstrip(".")
        token = _ANNOTATION_SUFFIX_RE.sub("", token)
        if token:
            tokens.append(token)
    return tokens


def parse_pdn(pdn: str) -> ParsedPDN:
    """
    Parse a single PDN game into headers, moves (as written) and result.
    ----

    A result literal at the very end of the movetext is always taken as the result, never as a move
    (so "1-1" at the end is a draw, not a move from square 1 to square 1).
    """
    headers, movetext = _split_headers(pdn)
    tokens = _movetext_tokens(movetext)

    result: Optional[str] = None
    if tokens and tokens[-1] in RESULT_TOKENS:
        result = tokens.pop()

    for token in tokens:
        if not is_valid_move_token(token):
            raise InvalidPDNError(f"Cannot interpret {token!r} as a move")

    return ParsedPDN(headers=headers, moves=tokens, result=result)


def _numbered_moves(history: list[AcceptedMove]) -> list[str]:
    """Move numbers in front of White's moves. A game where Black moves first gets '<n>. ...' in front of the first move."""
    numbered: list[str] = []
    for ply, accepted in enumerate(history):
        if accepted.turn == Color.WHITE:
            numbered.append(f"{accepted.move_number}. {accepted.to_pdn()}")
        elif ply == 0:
            numbered.append(f"{accepted.move_number}. ... {accepted.to_pdn()}")
        else:
            numbered.append(accepted.to_pdn())
    return numbered


def _wrap(units: list[str], max_width: int, newline: str) -> str:
    """Greedy line wrapping on unit boundaries. A unit longer than max_width gets a line of its own."""
    lines: list[str] = []
    current = ""
    for unit in units:
        if current and len(current) + 1 + len(unit) > max_width:
            lines.append(current)
            current = unit
        else:
            current = f"{current} {unit}" if current else unit
    if current:
        lines.append(current)
    return newline.join(lines)


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_pdn(
    headers: dict[str, str],
    history: list[AcceptedMove],
    max_width: int = 0,
    newline: str = "\n",
) -> str:
    """Build a single-game PDN document from the header tags and the moves played."""
    header_lines = [
        f'[{key} "{_escape(value)}"]{newline}' for key, value in headers.items()
    ]
    separator = newline if header_lines and history else ""

    units = _numbered_moves(history)
    if "Result" in headers:
        units.append(headers["Result"])

    movetext = " ".join(units) if max_width <= 0 else _wrap(units, max_width, newline)
    return "".join(header_lines) + separator + movetext
