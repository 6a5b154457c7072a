from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, NamedTuple, Union

__all__ = [
    "Span",
    "Kana",
    "Kanji",
    "Segment",
    "KanaRef",
    "KanjiRef",
    "SegmentRef",
    "kanji_text",
    "kana_text",
    "encode_segment",
    "encode_segments",
    "flatten_segment",
    "reading_pairs",
    "serialize_segments",
    "deserialize_segments",
]


class Span(NamedTuple):
    """Half-open character range ``[start, end)`` into a raw furigana string."""

    start: int
    end: int

    def slice(self, source: str) -> str:
        return source[self.start : self.end]


@dataclass(frozen=True)
class Kana:
    """A run of text without a reading annotation, kept verbatim."""

    text: str

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("kana text must not be empty")
        if "[" in self.text:
            from .parse import FuriganaParseError

            raise FuriganaParseError(self.text, self.text.index("["), "kana text contains '['")


@dataclass(frozen=True)
class Kanji:
    """
    A kanji span with its aligned readings.

    ``readings`` holds either a single reading shared by the whole span or one
    reading per character of ``kanji``, in character order.
    """

    kanji: str
    readings: tuple[str, ...]

    def __post_init__(self) -> None:
        # Late import: parse depends on this module for the segment types.
        from .parse import check_alignment

        if isinstance(self.readings, str):
            raise TypeError("readings must be a sequence of str, not a str")
        if not isinstance(self.readings, tuple):
            object.__setattr__(self, "readings", tuple(self.readings))
        check_alignment(self.kanji, self.readings)

    @classmethod
    def single(cls, kanji: str, reading: str) -> "Kanji":
        return cls(kanji, (reading,))

    @classmethod
    def multi(cls, kanji: str, readings: Iterable[str]) -> "Kanji":
        if isinstance(readings, str):
            raise TypeError("readings must be a sequence of str, not a str")
        return cls(kanji, tuple(readings))


Segment = Union[Kana, Kanji]


@dataclass(frozen=True)
class KanaRef:
    """Plain text segment that points into ``source`` instead of copying it."""

    source: str
    span: Span

    @property
    def text(self) -> str:
        return self.span.slice(self.source)

    def to_owned(self) -> Kana:
        return Kana(self.text)


@dataclass(frozen=True)
class KanjiRef:
    """
    Kanji segment that points into ``source``.

    The spans are produced by the scanner, which has already checked the
    alignment, so no validation happens here.
    """

    source: str
    kanji_span: Span
    reading_spans: tuple[Span, ...]

    @property
    def kanji(self) -> str:
        return self.kanji_span.slice(self.source)

    @property
    def readings(self) -> tuple[str, ...]:
        return tuple(span.slice(self.source) for span in self.reading_spans)

    def to_owned(self) -> Kanji:
        return Kanji(self.kanji, self.readings)


SegmentRef = Union[KanaRef, KanjiRef]


def _unsupported(segment: object) -> TypeError:
    return TypeError(f"Expected a furigana segment, got {type(segment).__name__}")


def kanji_text(segment: Segment | SegmentRef) -> str:
    """Surface form of a segment: the kanji for kanji segments, the text otherwise."""
    if isinstance(segment, (Kana, KanaRef)):
        return segment.text
    if isinstance(segment, (Kanji, KanjiRef)):
        return segment.kanji
    raise _unsupported(segment)


def kana_text(segment: Segment | SegmentRef) -> str:
    """Phonetic form of a segment: the joined readings for kanji segments."""
    if isinstance(segment, (Kana, KanaRef)):
        return segment.text
    if isinstance(segment, (Kanji, KanjiRef)):
        return "".join(segment.readings)
    raise _unsupported(segment)


def encode_segment(segment: Segment | SegmentRef) -> str:
    if isinstance(segment, (Kana, KanaRef)):
        return segment.text
    if isinstance(segment, (Kanji, KanjiRef)):
        return "[" + "|".join((segment.kanji, *segment.readings)) + "]"
    raise _unsupported(segment)


def encode_segments(segments: Iterable[Segment | SegmentRef]) -> str:
    return "".join(encode_segment(segment) for segment in segments)


def flatten_segment(segment: Segment | SegmentRef) -> Iterator[Segment]:
    """
    Split a kanji segment into one single-reading segment per character.

    Only segments that carry one reading per character can be split; a shared
    reading yields the segment unchanged. Kana segments are yielded as-is.
    """
    if isinstance(segment, (KanaRef, KanjiRef)):
        segment = segment.to_owned()
    if isinstance(segment, Kana):
        yield segment
        return
    if not isinstance(segment, Kanji):
        raise _unsupported(segment)
    if len(segment.readings) == len(segment.kanji):
        for char, reading in zip(segment.kanji, segment.readings):
            yield Kanji.single(char, reading)
    else:
        yield Kanji.single(segment.kanji, "".join(segment.readings))


def reading_pairs(segment: Segment | SegmentRef) -> list[tuple[str, str | None]]:
    """``(surface, reading)`` pairs of a segment; kana text has no reading."""
    pairs: list[tuple[str, str | None]] = []
    for piece in flatten_segment(segment):
        if isinstance(piece, Kanji):
            pairs.append((piece.kanji, piece.readings[0]))
        else:
            pairs.append((piece.text, None))
    return pairs


def serialize_segments(segments: Iterable[Segment | SegmentRef]) -> list[dict[str, object]]:
    payload: list[dict[str, object]] = []
    for segment in segments:
        if isinstance(segment, (Kana, KanaRef)):
            payload.append({"type": "kana", "text": segment.text})
        elif isinstance(segment, (Kanji, KanjiRef)):
            payload.append(
                {
                    "type": "kanji",
                    "text": segment.kanji,
                    "readings": list(segment.readings),
                }
            )
        else:
            raise _unsupported(segment)
    return payload


def deserialize_segments(data: Iterable[Mapping[str, object]]) -> list[Segment]:
    segments: list[Segment] = []
    for entry in data:
        if not isinstance(entry, Mapping):
            continue
        kind = entry.get("type")
        text = entry.get("text")
        if not isinstance(text, str):
            continue
        if kind == "kana":
            if text:
                segments.append(Kana(text))
            continue
        if kind != "kanji":
            continue
        readings = entry.get("readings")
        if not isinstance(readings, list) or not all(isinstance(r, str) for r in readings):
            continue
        segments.append(Kanji(text, tuple(readings)))
    return segments
