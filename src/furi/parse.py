from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence, Union

from .logging_utils import debug_log
from .segments import KanaRef, KanjiRef, SegmentRef, Span

__all__ = [
    "FuriganaParseError",
    "UnterminatedBracketError",
    "EmptyKanjiSpanError",
    "EmptyReadingError",
    "AlignmentMismatchError",
    "TextToken",
    "BracketToken",
    "RawToken",
    "scan",
    "align",
    "check_alignment",
    "iter_segment_refs",
    "first_error",
    "check",
]

BLOCK_OPEN = "["
BLOCK_CLOSE = "]"
SEPARATOR = "|"

_EXCERPT_RADIUS = 12


def _excerpt(raw: str, position: int) -> str:
    start = max(0, position - _EXCERPT_RADIUS)
    end = min(len(raw), position + _EXCERPT_RADIUS)
    prefix = "…" if start > 0 else ""
    suffix = "…" if end < len(raw) else ""
    return f"{prefix}{raw[start:end]}{suffix}"


class FuriganaParseError(ValueError):
    """Raised when a string does not follow the ``[漢字|かん|じ]`` notation."""

    reason = "malformed furigana"

    def __init__(self, raw: str, position: int, detail: str | None = None) -> None:
        self.raw = raw
        self.position = position
        message = detail or self.reason
        super().__init__(f"{message} at offset {position}: {_excerpt(raw, position)!r}")


class UnterminatedBracketError(FuriganaParseError):
    """Raised when the input ends inside a bracket group."""

    reason = "unterminated bracket group"


class EmptyKanjiSpanError(FuriganaParseError):
    """Raised for a bracket group whose kanji part is empty, e.g. ``[|かんじ]``."""

    reason = "empty kanji span"


class EmptyReadingError(FuriganaParseError):
    """Raised when a reading between separators is empty or missing."""

    reason = "empty reading"


class AlignmentMismatchError(FuriganaParseError):
    """Raised when the reading count is neither 1 nor the kanji character count."""

    reason = "reading count does not match kanji"

    def __init__(self, raw: str, position: int, kanji_count: int, reading_count: int) -> None:
        self.kanji_count = kanji_count
        self.reading_count = reading_count
        detail = (
            f"{reading_count} readings cannot be aligned to {kanji_count} kanji "
            "(expected 1 or one per character)"
        )
        super().__init__(raw, position, detail)


@dataclass(frozen=True)
class TextToken:
    span: Span


@dataclass(frozen=True)
class BracketToken:
    kanji: Span
    readings: tuple[Span, ...]
    start: int
    end: int


RawToken = Union[TextToken, BracketToken]


class _ScanState(Enum):
    NORMAL = "normal"
    IN_KANJI = "in_kanji"
    IN_READING = "in_reading"


def scan(raw: str) -> Iterator[RawToken]:
    """
    Split ``raw`` into text runs and bracket groups in a single pass.

    Tokens cover the input without gaps or overlaps. A ``]`` or ``|`` outside
    a bracket group is ordinary text; a ``[`` inside the kanji part of a group
    is part of the kanji span.
    """
    state = _ScanState.NORMAL
    text_start = 0
    block_start = 0
    field_start = 0
    kanji = Span(0, 0)
    readings: list[Span] = []

    for pos, char in enumerate(raw):
        if state is _ScanState.NORMAL:
            if char == BLOCK_OPEN:
                if text_start < pos:
                    yield TextToken(Span(text_start, pos))
                block_start = pos
                field_start = pos + 1
                state = _ScanState.IN_KANJI
        elif state is _ScanState.IN_KANJI:
            if char == SEPARATOR or char == BLOCK_CLOSE:
                if field_start == pos:
                    raise EmptyKanjiSpanError(raw, block_start)
                if char == BLOCK_CLOSE:
                    raise EmptyReadingError(raw, pos, "bracket group has no reading")
                kanji = Span(field_start, pos)
                readings = []
                field_start = pos + 1
                state = _ScanState.IN_READING
        elif char == SEPARATOR or char == BLOCK_CLOSE:
            if field_start == pos:
                raise EmptyReadingError(raw, pos)
            readings.append(Span(field_start, pos))
            field_start = pos + 1
            if char == BLOCK_CLOSE:
                yield BracketToken(kanji, tuple(readings), block_start, pos + 1)
                text_start = pos + 1
                state = _ScanState.NORMAL

    if state is not _ScanState.NORMAL:
        raise UnterminatedBracketError(raw, block_start)
    if text_start < len(raw):
        yield TextToken(Span(text_start, len(raw)))


def align(raw: str, token: BracketToken) -> KanjiRef:
    """Attach the readings of a bracket group to its kanji span."""
    kanji_count = token.kanji.end - token.kanji.start
    reading_count = len(token.readings)
    if reading_count != 1 and reading_count != kanji_count:
        raise AlignmentMismatchError(raw, token.start, kanji_count, reading_count)
    return KanjiRef(raw, token.kanji, token.readings)


def check_alignment(kanji: str, readings: Sequence[str]) -> None:
    """Validate a programmatically built kanji segment like the parser would."""
    encoded = BLOCK_OPEN + SEPARATOR.join((kanji, *readings)) + BLOCK_CLOSE
    if not kanji:
        raise EmptyKanjiSpanError(encoded, 0)
    for char in (SEPARATOR, BLOCK_CLOSE):
        if char in kanji:
            raise FuriganaParseError(encoded, 1 + kanji.index(char), f"kanji contains {char!r}")
    if not readings:
        raise EmptyReadingError(encoded, len(kanji) + 1, "kanji segment has no reading")
    offset = len(kanji) + 2
    for reading in readings:
        if not reading:
            raise EmptyReadingError(encoded, offset)
        for char in (SEPARATOR, BLOCK_CLOSE):
            if char in reading:
                raise FuriganaParseError(
                    encoded, offset + reading.index(char), f"reading contains {char!r}"
                )
        offset += len(reading) + 1
    if len(readings) != 1 and len(readings) != len(kanji):
        raise AlignmentMismatchError(encoded, 0, len(kanji), len(readings))


def iter_segment_refs(raw: str) -> Iterator[SegmentRef]:
    try:
        for token in scan(raw):
            if isinstance(token, TextToken):
                yield KanaRef(raw, token.span)
            else:
                yield align(raw, token)
    except FuriganaParseError as exc:
        debug_log(f"parse failed: {exc}")
        raise


def first_error(raw: str) -> FuriganaParseError | None:
    """Return the error that parsing ``raw`` would raise, or None if it is valid."""
    try:
        for token in scan(raw):
            if isinstance(token, BracketToken):
                align(raw, token)
    except FuriganaParseError as exc:
        debug_log(f"invalid furigana: {exc}")
        return exc
    return None


def check(raw: str) -> bool:
    return first_error(raw) is None
