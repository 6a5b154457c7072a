from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .parse import FuriganaParseError, first_error, iter_segment_refs
from .reading import Reading
from .segments import (
    KanjiRef,
    Segment,
    SegmentRef,
    encode_segment,
    encode_segments,
    kana_text,
    kanji_text,
)

__all__ = ["Furigana"]


@dataclass(frozen=True)
class Furigana:
    """
    Read-only view over a string in furigana notation.

    Valid notation looks like ``[拝金主義|はい|きん|しゅ|ぎ]は[問題|もん|だい]です``.
    Nothing is parsed at construction; every accessor re-scans ``raw``, so a
    view can be shared between threads and iterated any number of times.
    Malformed notation raises a ``FuriganaParseError`` subclass from the
    first accessor that needs the bracket structure. Use ``Furigana.parse``
    to validate up front.
    """

    raw: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.raw, str):
            raise TypeError(f"Furigana expects a str, got {type(self.raw).__name__}")

    @classmethod
    def parse(cls, raw: str) -> "Furigana":
        """Create a view after checking that ``raw`` is well-formed."""
        error = first_error(raw)
        if error is not None:
            raise error
        return cls(raw)

    @classmethod
    def from_segments(cls, segments: Iterable[Segment | SegmentRef]) -> "Furigana":
        return cls(encode_segments(segments))

    def __str__(self) -> str:
        return self.raw

    def __add__(self, other: object) -> "Furigana":
        if isinstance(other, Furigana):
            return Furigana(self.raw + other.raw)
        if isinstance(other, str):
            return Furigana(self.raw + other)
        return NotImplemented

    def with_segment(self, segment: Segment | SegmentRef) -> "Furigana":
        return Furigana(self.raw + encode_segment(segment))

    def is_empty(self) -> bool:
        return not self.raw

    def is_valid(self) -> bool:
        return first_error(self.raw) is None

    def error(self) -> FuriganaParseError | None:
        return first_error(self.raw)

    def segment_refs(self) -> Iterator[SegmentRef]:
        """Lazily yield segments that point into ``raw`` without copying."""
        return iter_segment_refs(self.raw)

    def segments(self) -> Iterator[Segment]:
        """Lazily yield owned segments in left-to-right order."""
        for segment in iter_segment_refs(self.raw):
            yield segment.to_owned()

    def as_segments(self) -> list[Segment]:
        return list(self.segments())

    def _checked_refs(self) -> list[SegmentRef]:
        # Scan to the end so a bad group after the answer still raises.
        return list(iter_segment_refs(self.raw))

    def segment_at(self, index: int) -> Segment | None:
        refs = self._checked_refs()
        if 0 <= index < len(refs):
            return refs[index].to_owned()
        return None

    def segment_count(self) -> int:
        return sum(1 for _ in iter_segment_refs(self.raw))

    def has_kanji(self) -> bool:
        return any(isinstance(segment, KanjiRef) for segment in self._checked_refs())

    def kanji_str(self) -> str:
        """The surface text with the bracket notation and readings removed."""
        return "".join(kanji_text(segment) for segment in iter_segment_refs(self.raw))

    def kana_str(self) -> str:
        """The full phonetic reading: plain text verbatim, readings in place of kanji."""
        return "".join(kana_text(segment) for segment in iter_segment_refs(self.raw))

    def to_reading(self) -> Reading:
        kana: list[str] = []
        kanji: list[str] = []
        has_kanji = False
        for segment in iter_segment_refs(self.raw):
            kana.append(kana_text(segment))
            kanji.append(kanji_text(segment))
            if isinstance(segment, KanjiRef):
                has_kanji = True
        return Reading("".join(kana), "".join(kanji) if has_kanji else None)
